from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from bitvcheck.core.config import AuditConfig
from bitvcheck.core.record import ErrorRecord, truncate_snippet

if TYPE_CHECKING:
    from bitvcheck.core.evidence import EvidenceSink
    from bitvcheck.core.page import LivePage
    from bitvcheck.core.rule import Rule


@dataclass
class CheckContext:
    """Everything one check invocation needs besides its own logic.

    A fresh context is created per rule per run, so checks may keep
    scratch state on it without leaking into the next rule.
    """

    page: LivePage
    rule: Rule
    config: AuditConfig = field(default_factory=AuditConfig)
    evidence: EvidenceSink | None = None

    def error(
        self,
        message: str,
        *,
        element: dict[str, Any] | None = None,
        selector: str = "",
        manual_check: str | None = None,
        text: str | None = None,
        foreground: str | None = None,
        background: str | None = None,
        **details: Any,
    ) -> ErrorRecord:
        """Build an :class:`ErrorRecord`.

        Args:
            message: Human-readable description of the violation.
            element: Element description as produced by the in-page
                ``describe()`` helper (``selector`` and ``snippet`` keys).
            selector: Explicit selector, used when *element* is not given.
            manual_check: Note for criteria that need human confirmation.
            text: Offending text (contrast checks).
            foreground: Computed foreground color (contrast checks).
            background: Computed background color (contrast checks).
            **details: Rule-specific extra data kept in ``details``.

        """
        if element is not None:
            selector = selector or str(element.get("selector") or "")
            snippet = truncate_snippet(element.get("snippet"))
        else:
            snippet = None
        return ErrorRecord(
            message=message,
            selector=selector,
            element_snippet=snippet,
            text=text,
            foreground_color=foreground,
            background_color=background,
            manual_check_required=manual_check,
            details=details,
        )
