from bitvcheck.core._types import Category, Severity
from bitvcheck.core.rule import Rule

_CAT = Category.OPERABLE

R_2_1_1 = Rule(
    "2.1.1",
    "Keyboard",
    Severity.CRITICAL,
    _CAT,
    fix_suggestion="Use native controls or add key handlers and keep interactive elements tabbable",
)
R_2_2_2 = Rule(
    "2.2.2",
    "Pause, Stop, Hide",
    Severity.CRITICAL,
    _CAT,
    fix_suggestion="Provide a pause or stop button for moving content",
)
R_2_4_1 = Rule(
    "2.4.1",
    "Bypass Blocks",
    Severity.HIGH,
    _CAT,
    fix_suggestion="Add a skip link to the main content and use <main> and <nav> landmarks",
    fixable_by_automation=True,
)
R_2_4_2 = Rule(
    "2.4.2",
    "Page Titled",
    Severity.HIGH,
    _CAT,
    fix_suggestion="Give the document a descriptive, unique <title>",
    fixable_by_automation=True,
)
R_2_4_3 = Rule(
    "2.4.3",
    "Focus Order",
    Severity.MEDIUM,
    _CAT,
    fix_suggestion="Remove positive tabindex values and order the DOM logically",
    fixable_by_automation=True,
)
R_2_4_4 = Rule(
    "2.4.4",
    "Link Purpose (In Context)",
    Severity.HIGH,
    _CAT,
    fix_suggestion='Replace generic link texts like "click here" with the link target\'s purpose',
)
R_2_4_5 = Rule(
    "2.4.5",
    "Multiple Ways",
    Severity.MEDIUM,
    _CAT,
    fix_suggestion="Offer at least two of: navigation, search, sitemap",
)
R_2_4_6 = Rule(
    "2.4.6",
    "Headings and Labels",
    Severity.MEDIUM,
    _CAT,
    fix_suggestion="Remove empty headings and labels or give them descriptive text",
)
R_2_4_7 = Rule(
    "2.4.7",
    "Focus Visible",
    Severity.HIGH,
    _CAT,
    fix_suggestion="Define a visible :focus or :focus-visible outline for interactive elements",
)
R_2_5_3 = Rule(
    "2.5.3",
    "Label in Name",
    Severity.LOW,
    _CAT,
    fix_suggestion="Start the aria-label with the visible text of the control",
)
