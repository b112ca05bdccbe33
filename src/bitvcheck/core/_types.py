from collections.abc import Mapping
from enum import StrEnum
from typing import Any, TypeAlias

JSON: TypeAlias = dict[str, Any]
Rect: TypeAlias = Mapping[str, float]


class Severity(StrEnum):
    """Error severity levels (ordered lowest → highest)."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


SEVERITY_LEVEL: dict[Severity, int] = {
    Severity.LOW: 1,
    Severity.MEDIUM: 2,
    Severity.HIGH: 3,
    Severity.CRITICAL: 4,
}


class Category(StrEnum):
    """The four WCAG principles."""

    PERCEIVABLE = "perceivable"
    OPERABLE = "operable"
    UNDERSTANDABLE = "understandable"
    ROBUST = "robust"


CATEGORY_TITLES: dict[Category, str] = {
    Category.PERCEIVABLE: "Perceivable",
    Category.OPERABLE: "Operable",
    Category.UNDERSTANDABLE: "Understandable",
    Category.ROBUST: "Robust",
}


class EvidenceMode(StrEnum):
    """How a check captures screenshot evidence for its error records."""

    NONE = "none"
    ELEMENT = "element"
    PAGE = "page"
    FIRST_PAGE = "first_page"
