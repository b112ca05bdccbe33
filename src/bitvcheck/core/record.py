from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

SNIPPET_LENGTH = 100


@dataclass(frozen=True, slots=True)
class ErrorRecord:
    """A single accessibility violation found by a check.

    Severity and category are never stored here; they belong to the rule
    that produced the record.
    """

    message: str
    selector: str = ""
    element_snippet: str | None = None
    text: str | None = None
    foreground_color: str | None = None
    background_color: str | None = None
    evidence_path: str | None = None
    manual_check_required: str | None = None
    details: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "details", MappingProxyType(dict(self.details)))

    def to_dict(self) -> dict[str, Any]:
        """Serialize with camelCase keys, dropping unset optional fields."""
        data: dict[str, Any] = {"message": self.message, "selector": self.selector}
        optional = {
            "elementSnippet": self.element_snippet,
            "text": self.text,
            "foregroundColor": self.foreground_color,
            "backgroundColor": self.background_color,
            "evidencePath": self.evidence_path,
            "manualCheckRequired": self.manual_check_required,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        if self.details:
            data["details"] = dict(self.details)
        return data


def truncate_snippet(markup: str | None) -> str | None:
    if markup is None:
        return None
    return markup[:SNIPPET_LENGTH]


class RuleRegistrationError(ValueError):
    """Raised when a rule cannot be registered (bad metadata or duplicate ID)."""


class PageLoadError(Exception):
    """Raised when the page under audit cannot be opened or loaded.

    This is the only failure that aborts an audit run.
    """

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Could not load {url}: {reason}")
