from bitvcheck.core._types import Category, Severity
from bitvcheck.core.rule import Rule

_CAT = Category.PERCEIVABLE

R_1_1_1 = Rule(
    "1.1.1",
    "Non-text Content (Alternative Text)",
    Severity.HIGH,
    _CAT,
    fix_suggestion=(
        "Give every informative image a concise alt text describing its purpose; "
        'mark purely decorative images with role="presentation"'
    ),
)
R_1_2_3 = Rule(
    "1.2.3",
    "Audio Description or Media Alternative",
    Severity.MEDIUM,
    _CAT,
    fix_suggestion='Add a <track kind="descriptions"> or <track kind="captions"> to each video',
)
R_1_2_5 = Rule(
    "1.2.5",
    "Audio Description (Prerecorded)",
    Severity.MEDIUM,
    _CAT,
    fix_suggestion="Make sure every description track referenced by a video can be loaded",
)
R_1_3_1 = Rule(
    "1.3.1",
    "Info and Relationships (Form Labels)",
    Severity.CRITICAL,
    _CAT,
    fix_suggestion="Associate each form field with a <label for>, aria-label or aria-labelledby",
    fixable_by_automation=True,
)
R_1_3_1A = Rule(
    "1.3.1a",
    "Info and Relationships (Heading Structure)",
    Severity.CRITICAL,
    _CAT,
    fix_suggestion="Nest headings without skipping levels (h1 → h2 → h3)",
)
R_1_3_2 = Rule(
    "1.3.2",
    "Meaningful Sequence",
    Severity.HIGH,
    _CAT,
    fix_suggestion="Keep interactive elements in DOM order instead of stacking them with z-index",
)
R_1_4_3 = Rule(
    "1.4.3",
    "Contrast (Minimum)",
    Severity.HIGH,
    _CAT,
    fix_suggestion="Use at least 4.5:1 contrast for body text and 3:1 for large text and headings",
    fixable_by_automation=True,
)
R_1_4_4 = Rule(
    "1.4.4",
    "Resize Text",
    Severity.HIGH,
    _CAT,
    fix_suggestion="Size text in relative units and let containers grow instead of clipping",
)
R_1_4_10 = Rule(
    "1.4.10",
    "Reflow",
    Severity.HIGH,
    _CAT,
    fix_suggestion="Use a responsive layout that fits a 320 CSS pixel wide viewport",
)
R_1_4_11 = Rule(
    "1.4.11",
    "Non-text Contrast",
    Severity.MEDIUM,
    _CAT,
    fix_suggestion="Give controls a border or fill with at least 3:1 contrast to their surroundings",
    fixable_by_automation=True,
)
R_1_4_12 = Rule(
    "1.4.12",
    "Text Spacing",
    Severity.MEDIUM,
    _CAT,
    fix_suggestion="Avoid fixed heights with overflow: hidden on text containers",
)
