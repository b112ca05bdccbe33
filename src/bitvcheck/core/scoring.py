"""Weighted compliance score.

Every individual error deducts a fixed number of points by the severity of
the rule that produced it.  The ceiling is deliberately below 100.
"""

from collections.abc import Mapping

from bitvcheck.core._types import Severity

MAX_SCORE = 75.0

SEVERITY_WEIGHTS: dict[Severity, int] = {
    Severity.CRITICAL: 15,
    Severity.HIGH: 10,
    Severity.MEDIUM: 6,
    Severity.LOW: 3,
}

# Checked top-down; the first threshold the score reaches wins.
# The 80 band cannot be reached while MAX_SCORE is 75.
COMPLIANCE_LEVELS: tuple[tuple[float, str], ...] = (
    (80.0, "Largely compliant"),
    (65.0, "Substantially compliant"),
    (50.0, "Partially compliant"),
)
NOT_COMPLIANT = "Not compliant"


def deductions(counts: Mapping[Severity, int]) -> float:
    """Total points deducted for the given per-severity error counts."""
    return float(sum(counts.get(sev, 0) * weight for sev, weight in SEVERITY_WEIGHTS.items()))


def compute_score(counts: Mapping[Severity, int], *, max_score: float = MAX_SCORE) -> float:
    """Return ``max_score`` minus deductions, clamped to ``[0, max_score]``."""
    return max(0.0, min(max_score, max_score - deductions(counts)))


def compliance_label(score: float) -> str:
    for threshold, label in COMPLIANCE_LEVELS:
        if score >= threshold:
            return label
    return NOT_COMPLIANT
