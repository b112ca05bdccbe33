from typing import Any

import pytest

from bitvcheck.checks.base import CheckRegistry, create_default_registry
from bitvcheck.core._types import Category, EvidenceMode, Severity
from bitvcheck.core.record import RuleRegistrationError
from bitvcheck.core.rule import Rule
from bitvcheck.rules import ALL_RULES, RULES, _collect_rules

_RULE = Rule("9.9.9", "Test rule", Severity.LOW, Category.ROBUST)


async def _noop(ctx: Any) -> list:
    return []


# Rule metadata


def test_rule_count() -> None:
    assert len(ALL_RULES) == 28


def test_rule_ids_unique() -> None:
    assert len(RULES) == len(ALL_RULES)


@pytest.mark.parametrize(
    ("rule_id", "severity", "category"),
    [
        pytest.param("1.1.1", Severity.HIGH, Category.PERCEIVABLE, id="alt-text"),
        pytest.param("1.3.1", Severity.CRITICAL, Category.PERCEIVABLE, id="form-labels"),
        pytest.param("1.3.1a", Severity.CRITICAL, Category.PERCEIVABLE, id="headings"),
        pytest.param("1.4.3", Severity.HIGH, Category.PERCEIVABLE, id="contrast"),
        pytest.param("2.5.3", Severity.LOW, Category.OPERABLE, id="label-in-name"),
        pytest.param("3.1.3", Severity.LOW, Category.UNDERSTANDABLE, id="unusual-words"),
        pytest.param("4.1.2", Severity.CRITICAL, Category.ROBUST, id="name-role-value"),
    ],
)
def test_rule_metadata(rule_id: str, severity: Severity, category: Category) -> None:
    rule = RULES[rule_id]
    assert rule.severity is severity
    assert rule.category is category


def test_every_rule_has_fix_suggestion() -> None:
    assert all(rule.fix_suggestion for rule in ALL_RULES)


def test_collect_rules_rejects_duplicates() -> None:
    class _A:
        R = _RULE

    class _B:
        R = Rule("9.9.9", "Other", Severity.HIGH, Category.ROBUST)

    with pytest.raises(ValueError, match="Duplicate rule ID: 9.9.9"):
        _collect_rules(_A, _B)


def test_rule_str() -> None:
    assert str(RULES["2.4.2"]) == "[2.4.2] Page Titled"


# CheckRegistry


def test_register_and_lookup() -> None:
    registry = CheckRegistry()
    check = registry.register(_RULE, _noop, evidence=EvidenceMode.PAGE)
    assert "9.9.9" in registry
    assert registry.get("9.9.9") is check
    assert check.evidence is EvidenceMode.PAGE
    assert len(registry) == 1


def test_register_duplicate_id_rejected() -> None:
    registry = CheckRegistry()
    registry.register(_RULE, _noop)
    with pytest.raises(RuleRegistrationError, match="Duplicate rule ID"):
        registry.register(_RULE, _noop)


def test_register_unknown_severity_rejected() -> None:
    rule = Rule("9.9.8", "Bad", "urgent", Category.ROBUST)  # type: ignore[arg-type]
    with pytest.raises(RuleRegistrationError, match="unknown severity"):
        CheckRegistry().register(rule, _noop)


def test_register_unknown_category_rejected() -> None:
    rule = Rule("9.9.7", "Bad", Severity.LOW, "robustness")  # type: ignore[arg-type]
    with pytest.raises(RuleRegistrationError, match="unknown category"):
        CheckRegistry().register(rule, _noop)


def test_registration_error_is_value_error() -> None:
    assert issubclass(RuleRegistrationError, ValueError)


def test_iteration_is_registration_order() -> None:
    registry = CheckRegistry()
    second = Rule("1.0.0", "Second by id, first registered", Severity.LOW, Category.ROBUST)
    registry.register(_RULE, _noop)
    registry.register(second, _noop)
    assert [c.rule.id for c in registry.checks()] == ["9.9.9", "1.0.0"]


# Default registry


def test_default_registry_covers_every_rule() -> None:
    registry = create_default_registry()
    assert [c.rule.id for c in registry.checks()] == [r.id for r in ALL_RULES]


def test_default_registry_uses_rule_constants() -> None:
    registry = create_default_registry()
    for check in registry.checks():
        assert check.rule is RULES[check.rule.id]


def test_default_registry_fresh_instances() -> None:
    assert create_default_registry() is not create_default_registry()
