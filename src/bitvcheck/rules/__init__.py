from bitvcheck.core.rule import Rule
from bitvcheck.rules import operable, perceivable, robust, understandable


def _collect_rules(*modules: object) -> dict[str, Rule]:
    """Collect all Rule instances from the given modules, in definition order."""
    rules: dict[str, Rule] = {}
    for module in modules:
        for obj in vars(module).values():
            if isinstance(obj, Rule):
                if obj.id in rules:
                    msg = f"Duplicate rule ID: {obj.id}"
                    raise ValueError(msg)
                rules[obj.id] = obj
    return rules


RULES: dict[str, Rule] = _collect_rules(perceivable, operable, understandable, robust)
ALL_RULES: list[Rule] = list(RULES.values())

__all__ = ["ALL_RULES", "RULES"]
