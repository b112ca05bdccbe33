from dataclasses import dataclass

from bitvcheck.core._types import Category, Severity


@dataclass(frozen=True, slots=True)
class Rule:
    """Metadata for a single BITV / WCAG success criterion check.

    Rule instances are pure data - they describe *what* a check verifies,
    not *how*.  The inspection procedure is bound to the rule when it is
    registered in a :class:`~bitvcheck.checks.base.CheckRegistry`.

    Example::

        R_1_1_1 = Rule(
            id="1.1.1",
            description="Non-text Content (Alternative Text)",
            severity=Severity.HIGH,
            category=Category.PERCEIVABLE,
            fix_suggestion="Give every informative image a concise alt text",
        )
    """

    id: str
    description: str
    severity: Severity
    category: Category
    fix_suggestion: str = ""
    fixable_by_automation: bool = False

    def __str__(self) -> str:
        return f"[{self.id}] {self.description}"
