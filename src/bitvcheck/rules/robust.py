from bitvcheck.core._types import Category, Severity
from bitvcheck.core.rule import Rule

_CAT = Category.ROBUST

R_4_1_1 = Rule(
    "4.1.1",
    "Parsing",
    Severity.HIGH,
    _CAT,
    fix_suggestion="Keep id values unique and do not nest block elements inside <button>",
    fixable_by_automation=True,
)
R_4_1_2 = Rule(
    "4.1.2",
    "Name, Role, Value",
    Severity.CRITICAL,
    _CAT,
    fix_suggestion="Give every element with an ARIA role an accessible name",
)
