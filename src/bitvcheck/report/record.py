"""The persisted audit record (``data.json``)."""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from bitvcheck.core._types import CATEGORY_TITLES, JSON, Category, Severity

if TYPE_CHECKING:
    from bitvcheck.core.runner import RunResult

TEST_STANDARD = "BITV 2.0 / EN 301 549"
CONFORMITY_WITH = ("BITV 2.0", "EN 301 549 V3.2.1 (2021-03)")

GERMAN_MONTHS = (
    "Januar",
    "Februar",
    "März",
    "April",
    "Mai",
    "Juni",
    "Juli",
    "August",
    "September",
    "Oktober",
    "November",
    "Dezember",
)


def german_date(day: date) -> str:
    """Format *day* as a German long date, e.g. ``19. Oktober 2026``."""
    return f"{day.day:02d}. {GERMAN_MONTHS[day.month - 1]} {day.year}"


def build_audit_record(
    result: RunResult,
    *,
    url: str,
    generated_at: datetime | None = None,
    palette: list[dict[str, Any]] | None = None,
) -> JSON:
    """Assemble the JSON-ready audit record for *result*.

    Every count in the record is taken from *result*; nothing is recomputed
    from the individual error records.
    """
    when = generated_at or datetime.now()
    by_severity = result.error_counts_by_severity
    by_category = result.error_counts_by_category
    return {
        "url": url,
        "lastUpdated": german_date(when),
        "testStandard": TEST_STANDARD,
        "conformityWith": list(CONFORMITY_WITH),
        "accessibilityScore": f"{result.score:.1f}%",
        "complianceStatus": result.compliance_label,
        "errorSummary": {
            "critical": by_severity[Severity.CRITICAL],
            "high": by_severity[Severity.HIGH],
            "medium": by_severity[Severity.MEDIUM],
            "low": by_severity[Severity.LOW],
            "total": result.total_errors,
            "deductions": f"{result.deductions:.1f}",
        },
        "categories": [
            {"name": CATEGORY_TITLES[category], "errors": by_category[category]}
            for category in Category
        ],
        "detailedResults": {
            rule_id: {
                "description": rule_result.description,
                "severity": str(rule_result.severity),
                "category": str(rule_result.category),
                "errors": [error.to_dict() for error in rule_result.errors],
            }
            for rule_id, rule_result in result.per_rule.items()
        },
        "colorPalette": list(palette or []),
    }
