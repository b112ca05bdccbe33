from bitvcheck.core._types import Category, Severity
from bitvcheck.core.rule import Rule

_CAT = Category.UNDERSTANDABLE

R_3_1_1 = Rule(
    "3.1.1",
    "Language of Page",
    Severity.HIGH,
    _CAT,
    fix_suggestion='Declare the page language on <html>, e.g. lang="de" or lang="en-GB"',
    fixable_by_automation=True,
)
R_3_1_3 = Rule(
    "3.1.3",
    "Unusual Words",
    Severity.LOW,
    _CAT,
    fix_suggestion="Link a glossary explaining technical terms and abbreviations",
)
R_3_2_4 = Rule(
    "3.2.4",
    "Consistent Identification",
    Severity.HIGH,
    _CAT,
    fix_suggestion="Use distinct link texts for distinct targets",
)
R_3_3_1 = Rule(
    "3.3.1",
    "Error Identification",
    Severity.HIGH,
    _CAT,
    fix_suggestion="Add validation attributes (pattern, minlength, …) or aria-invalid handling",
)
R_3_3_2 = Rule(
    "3.3.2",
    "Labels or Instructions",
    Severity.HIGH,
    _CAT,
    fix_suggestion="Label important fields visibly; a placeholder is not a label",
)
