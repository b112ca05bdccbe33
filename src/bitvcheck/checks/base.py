"""Check definitions and the registry that orders them."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeAlias

from bitvcheck.core._types import Category, EvidenceMode, Severity
from bitvcheck.core.record import RuleRegistrationError

if TYPE_CHECKING:
    from bitvcheck.core.context import CheckContext
    from bitvcheck.core.record import ErrorRecord
    from bitvcheck.core.rule import Rule

Inspect: TypeAlias = "Callable[[CheckContext], Awaitable[list[ErrorRecord]]]"


@dataclass(frozen=True, slots=True)
class Check:
    """A rule bound to the procedure that inspects the page for it."""

    rule: Rule
    inspect: Inspect
    evidence: EvidenceMode = EvidenceMode.NONE


class CheckRegistry:
    """Ordered collection of checks, keyed by rule ID.

    Iteration order is registration order, which is also the order in which
    the runner executes the checks.
    """

    def __init__(self) -> None:
        self._checks: dict[str, Check] = {}

    def register(
        self,
        rule: Rule,
        inspect: Inspect,
        *,
        evidence: EvidenceMode = EvidenceMode.NONE,
    ) -> Check:
        """Register *inspect* as the check for *rule*.

        Raises:
            :class:`RuleRegistrationError`: On a duplicate rule ID or a
                severity/category that is not one of the known values.

        """
        if not isinstance(rule.severity, Severity):
            msg = f"Rule {rule.id}: unknown severity {rule.severity!r}"
            raise RuleRegistrationError(msg)
        if not isinstance(rule.category, Category):
            msg = f"Rule {rule.id}: unknown category {rule.category!r}"
            raise RuleRegistrationError(msg)
        if rule.id in self._checks:
            msg = f"Duplicate rule ID: {rule.id}"
            raise RuleRegistrationError(msg)
        check = Check(rule=rule, inspect=inspect, evidence=EvidenceMode(evidence))
        self._checks[rule.id] = check
        return check

    def checks(self) -> list[Check]:
        return list(self._checks.values())

    def get(self, rule_id: str) -> Check | None:
        return self._checks.get(rule_id)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._checks

    def __len__(self) -> int:
        return len(self._checks)


def create_default_registry() -> CheckRegistry:
    """Create a registry with all built-in checks."""
    from bitvcheck.checks import operable, perceivable, robust, understandable

    registry = CheckRegistry()
    for module in (perceivable, operable, understandable, robust):
        module.register(registry)
    return registry
