from __future__ import annotations

import dataclasses
import fnmatch
import functools
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from bitvcheck.core._types import SEVERITY_LEVEL, Category, Severity

if TYPE_CHECKING:
    from bitvcheck.core.rule import Rule


class ConfigError(ValueError):
    """Raised when a config file contains an invalid value."""


def matches_rule(rule_id: str, patterns: frozenset[str]) -> bool:
    """True if *rule_id* is listed in *patterns* or matches one of its globs (``"1.4.*"``)."""
    return rule_id in patterns or any(fnmatch.fnmatchcase(rule_id, p) for p in patterns)


@dataclass(frozen=True)
class AuditConfig:
    """Configuration for a bitvcheck audit.

    Can be loaded from ``.bitvcheck.toml`` or ``pyproject.toml
    [tool.bitvcheck]`` via :func:`load_config`.

    Example ``pyproject.toml``::

        [tool.bitvcheck]
        profile = "recommended"
        exclude_rules = ["3.1.3"]
        categories = ["perceivable", "operable"]
        capture_evidence = false

    """

    # --- Rule filtering ---

    min_severity: Severity = Severity.LOW
    """Minimum severity to run. Rules below this are skipped entirely."""

    include_rules: frozenset[str] = field(default_factory=frozenset)
    """Allowlist: if non-empty, only rules matching these patterns run.
    Applied before ``exclude_rules``.

    Supports both exact IDs (``"1.4.3"``) and glob patterns (``"1.4.*"``).
    """

    exclude_rules: frozenset[str] = field(default_factory=frozenset)
    """Denylist: rule IDs to skip. Applied after ``include_rules``."""

    categories: frozenset[Category] = field(default_factory=frozenset)
    """WCAG principles to include. Empty means all four."""

    # --- Evidence ---

    capture_evidence: bool = True
    """Take screenshots for error records."""

    evidence_dir: str = "screenshots"
    """Directory screenshots are written to."""

    visibility_timeout: float = 5.0
    """Seconds to wait for an element to become visible before capturing it."""

    # --- Page setup ---

    navigation_timeout: float = 60.0
    """Seconds allowed for the initial page load."""

    viewport_width: int = 1920
    viewport_height: int = 1080

    # --- Check thresholds ---

    contrast_tolerance: float = 0.2
    """1.4.3: subtracted from the required ratio before comparing."""

    generic_link_phrases: tuple[str, ...] = ("click here", "more", "hier klicken", "mehr")
    """2.4.4: link texts that carry no purpose on their own (case-insensitive)."""

    skip_link_phrases: tuple[str, ...] = ("skip to", "jump to", "springe zu", "zum inhalt")
    """2.4.1: substrings identifying a skip link (case-insensitive)."""

    @functools.cache  # noqa: B019
    def allows(self, rule: Rule) -> bool:
        """Return ``True`` if *rule* passes the severity, category and ID filters.

        A non-empty ``include_rules`` narrows the set; ``exclude_rules`` always
        wins over it.
        """
        if SEVERITY_LEVEL[rule.severity] < SEVERITY_LEVEL[self.min_severity]:
            return False
        if self.categories and rule.category not in self.categories:
            return False
        if self.include_rules and not matches_rule(rule.id, self.include_rules):
            return False
        return not matches_rule(rule.id, self.exclude_rules)


# Built-in profiles - named AuditConfig instances for common use cases.
BUILTIN_PROFILES: dict[str, AuditConfig] = {
    "strict": AuditConfig(),
    "recommended": AuditConfig(min_severity=Severity.MEDIUM),
    "minimal": AuditConfig(min_severity=Severity.HIGH),
}


def load_config(path: Path | str | None = None) -> AuditConfig:
    """Load :class:`AuditConfig` from a TOML file.

    When ``path`` is ``None``, walks up from the current directory looking for
    ``.bitvcheck.toml`` first, then ``pyproject.toml [tool.bitvcheck]``.  A
    ``pyproject.toml`` without a ``[tool.bitvcheck]`` section acts as a
    project root marker and stops the search.

    Raises:
        :class:`ConfigError`: If the file contains an unrecognised value
            (e.g. ``profile = "typo"`` or ``min_severity = "extreme"``).

    """
    if path is not None:
        resolved = Path(path)
        data = _read_file(resolved) if resolved.exists() else {}
    else:
        data = _discover(Path.cwd())

    return _parse_config(data)


def _discover(start: Path) -> dict[str, Any]:
    """Nearest ``.bitvcheck.toml`` or ``pyproject.toml`` from *start* upward."""
    for directory in (start, *start.parents):
        for name in (".bitvcheck.toml", "pyproject.toml"):
            candidate = directory / name
            if candidate.is_file():
                return _read_file(candidate)
    return {}


def _read_file(path: Path) -> dict[str, Any]:
    try:
        raw = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc
    if path.name != "pyproject.toml":
        return raw
    section: dict[str, Any] = raw.get("tool", {}).get("bitvcheck", {})
    return section


def _parse_config(data: dict[str, Any]) -> AuditConfig:
    """Parse raw key/value dict into :class:`AuditConfig`.

    If ``profile`` is present, the corresponding :data:`BUILTIN_PROFILES`
    entry is used as the base; explicit keys in *data* override it.

    Raises:
        :class:`ConfigError`: On unrecognised enum values or unknown profiles.

    """
    if (profile_name := data.get("profile")) is not None:
        base = BUILTIN_PROFILES.get(str(profile_name))
        if base is None:
            known = ", ".join(f'"{p}"' for p in BUILTIN_PROFILES)
            raise ConfigError(f"Unknown profile {profile_name!r}. Known profiles: {known}")
    else:
        base = AuditConfig()

    kwargs: dict[str, Any] = {}
    try:
        if (v := data.get("min_severity")) is not None:
            kwargs["min_severity"] = Severity(v)
        if isinstance(cats := data.get("categories"), list):
            kwargs["categories"] = frozenset(Category(str(c)) for c in cats)
        if (v := data.get("capture_evidence")) is not None:
            kwargs["capture_evidence"] = bool(v)
        if (v := data.get("evidence_dir")) is not None:
            kwargs["evidence_dir"] = str(v)
        if (v := data.get("visibility_timeout")) is not None:
            kwargs["visibility_timeout"] = float(v)
        if (v := data.get("navigation_timeout")) is not None:
            kwargs["navigation_timeout"] = float(v)
        if (v := data.get("viewport_width")) is not None:
            kwargs["viewport_width"] = int(v)
        if (v := data.get("viewport_height")) is not None:
            kwargs["viewport_height"] = int(v)
        if (v := data.get("contrast_tolerance")) is not None:
            kwargs["contrast_tolerance"] = float(v)
    except (ValueError, TypeError) as exc:
        raise ConfigError(str(exc)) from exc

    if isinstance(rules := data.get("include_rules"), list):
        kwargs["include_rules"] = frozenset(str(r) for r in rules)
    if isinstance(rules := data.get("exclude_rules"), list):
        kwargs["exclude_rules"] = frozenset(str(r) for r in rules)
    if isinstance(phrases := data.get("generic_link_phrases"), list):
        kwargs["generic_link_phrases"] = tuple(str(p).lower() for p in phrases)
    if isinstance(phrases := data.get("skip_link_phrases"), list):
        kwargs["skip_link_phrases"] = tuple(str(p).lower() for p in phrases)

    return dataclasses.replace(base, **kwargs)
