"""Checks for the *operable* principle (2.x)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from bitvcheck.checks._dom import script
from bitvcheck.checks.perceivable import HEADINGS
from bitvcheck.core._types import EvidenceMode
from bitvcheck.rules import operable as rules

if TYPE_CHECKING:
    from bitvcheck.checks.base import CheckRegistry
    from bitvcheck.core.context import CheckContext
    from bitvcheck.core.record import ErrorRecord

# --- Scripts ---

INTERACTIVE = script(
    "interactive-elements",
    """
  const selector = 'a, button, input, select, textarea, [role="button"], [role="link"], [onclick], [tabindex]';
  const native = 'button, a, input[type="button"], input[type="submit"]';
  return Array.from(document.querySelectorAll(selector), (el) => ({
    ...describe(el),
    role: el.getAttribute('role'),
    visible: isVisible(el),
    disabled: el.hasAttribute('disabled') || el.getAttribute('aria-disabled') === 'true',
    tabindex: el.getAttribute('tabindex'),
    clickHandler: ['onclick', 'onmousedown', 'onmouseup'].some((a) => el.hasAttribute(a)),
    keyHandler: ['onkeypress', 'onkeydown', 'onkeyup'].some((a) => el.hasAttribute(a)),
    nativeControl: el.closest(native) !== null,
  }));
""",
)

MOVING_CONTENT = script(
    "moving-content",
    """
  const moving = '[style*="animation"], [style*="transition"], marquee';
  const controls = 'button[aria-label*="pause" i], button[aria-label*="stop" i]';
  return Array.from(document.querySelectorAll(moving), (el) => ({
    ...describe(el),
    pauseControl: el.querySelector(controls) !== null,
    ariaControls: el.hasAttribute('aria-controls'),
  }));
""",
)

PAGE_OUTLINE = script(
    "page-outline",
    """
  const has = (sel) => document.querySelector(sel) !== null;
  return {
    html: describe(document.documentElement),
    head: describe(document.head),
    body: describe(document.body),
    lang: document.documentElement.getAttribute('lang'),
    title: document.title,
    anchorLinks: Array.from(document.querySelectorAll('a[href^="#"]'), textOf),
    main: has('main, [role="main"]'),
    nav: has('nav, [role="navigation"]'),
    search: has('form[role="search"], [role="search"], input[type="search"]'),
    sitemap: has('a[href*="sitemap"], a[href*="site-map"]'),
    glossary: has('a[href*="glossary"], a[href*="glossar"], [id*="glossary"], [id*="glossar"]'),
  };
""",
)

LINKS = script(
    "links",
    """
  return Array.from(document.querySelectorAll('a[href]'), (a) => ({
    ...describe(a),
    text: textOf(a),
    href: a.href,
    ariaLabel: a.getAttribute('aria-label') || '',
    parentText: a.parentElement ? textOf(a.parentElement) : '',
  }));
""",
)

LABELS = script(
    "labels",
    """
  return Array.from(document.querySelectorAll('label'), (label) => ({
    ...describe(label),
    text: textOf(label),
    labelsControl: label.control !== null,
  }));
""",
)

FOCUS_STYLES = script(
    "focus-styles",
    """
  const focusable = 'a[href], button, input:not([type="hidden"]), select, textarea, '
    + '[tabindex]:not([tabindex^="-"])';
  const focusRules = [];
  const plainRules = [];
  for (const sheet of Array.from(document.styleSheets)) {
    let cssRules;
    try {
      cssRules = sheet.cssRules;
    } catch (e) {
      continue;  // cross-origin sheet
    }
    for (const rule of Array.from(cssRules || [])) {
      if (!rule.selectorText) continue;
      if (rule.selectorText.includes(':focus')) {
        const base = rule.selectorText.replace(/:focus(-visible|-within)?/g, '');
        focusRules.push({ base, style: rule.style });
      } else if (rule.style.outlineStyle || rule.style.outlineWidth) {
        plainRules.push({ base: rule.selectorText, style: rule.style });
      }
    }
  }
  const matching = (el, rules) => rules.filter(({ base }) => {
    try {
      return el.matches(base || '*');
    } catch (e) {
      return false;
    }
  });
  const declared = (el, rules) => {
    let outlineStyle = null;
    let outlineWidth = null;
    let boxShadow = null;
    for (const { style } of matching(el, rules)) {
      outlineStyle = style.outlineStyle || outlineStyle;
      outlineWidth = style.outlineWidth || outlineWidth;
      boxShadow = style.boxShadow || boxShadow;
    }
    return { outlineStyle, outlineWidth, boxShadow };
  };
  const result = [];
  for (const el of document.querySelectorAll(focusable)) {
    if (!isVisible(el)) continue;
    const inline = el.style;
    result.push({
      ...describe(el),
      focus: declared(el, focusRules),
      author: {
        ...declared(el, plainRules),
        ...(inline.outlineStyle ? { outlineStyle: inline.outlineStyle } : {}),
        ...(inline.outlineWidth ? { outlineWidth: inline.outlineWidth } : {}),
      },
    });
  }
  return result;
""",
)

ARIA_LABELLED = script(
    "aria-labelled",
    """
  return Array.from(document.querySelectorAll('[aria-label]'), (el) => ({
    ...describe(el),
    role: el.getAttribute('role'),
    ariaLabel: el.getAttribute('aria-label') || '',
    text: textOf(el),
  }));
""",
)

# --- 2.1.1 ---

_DECORATIVE_ROLES = frozenset({"presentation", "none"})


async def check_keyboard(ctx: CheckContext) -> list[ErrorRecord]:
    errors = []
    for el in await ctx.page.evaluate(INTERACTIVE):
        if not el.get("visible") or el.get("disabled") or el.get("role") in _DECORATIVE_ROLES:
            continue
        if el.get("tabindex") == "-1" and el.get("clickHandler"):
            errors.append(ctx.error("Interactive element is not reachable by keyboard", element=el))
        if el.get("clickHandler") and not el.get("keyHandler") and not el.get("nativeControl"):
            errors.append(ctx.error("Element can only be operated with a mouse", element=el))
    return errors


# --- 2.2.2 ---


async def check_pause_stop_hide(ctx: CheckContext) -> list[ErrorRecord]:
    return [
        ctx.error("No mechanism to pause or stop moving content", element=el)
        for el in await ctx.page.evaluate(MOVING_CONTENT)
        if not el.get("pauseControl") and not el.get("ariaControls")
    ]


# --- 2.4.1 / 2.4.2 / 2.4.5 ---


def has_skip_link(anchor_texts: list[str], phrases: tuple[str, ...]) -> bool:
    lowered = [phrase.lower() for phrase in phrases]
    return any(phrase in text.lower() for text in anchor_texts for phrase in lowered)


async def check_bypass_blocks(ctx: CheckContext) -> list[ErrorRecord]:
    outline = await ctx.page.evaluate(PAGE_OUTLINE)
    body = outline["body"]
    errors = []
    if not has_skip_link(outline.get("anchorLinks", []), ctx.config.skip_link_phrases):
        errors.append(ctx.error("No skip link to the main content found", element=body))
    if not outline.get("main"):
        errors.append(ctx.error("No main content area (main) defined", element=body))
    if not outline.get("nav"):
        errors.append(ctx.error("No navigation (nav) defined", element=body))
    return errors


TITLE_MIN_LENGTH = 5
_DEFAULT_TITLES = ("untitled", "new page")


async def check_page_title(ctx: CheckContext) -> list[ErrorRecord]:
    outline = await ctx.page.evaluate(PAGE_OUTLINE)
    title = (outline.get("title") or "").strip()
    head = outline.get("head")
    if not title:
        message = "No document title present"
    elif len(title) < TITLE_MIN_LENGTH:
        message = f'Document title too short: "{title}"'
    elif any(default in title.lower() for default in _DEFAULT_TITLES):
        message = f'Default title not changed: "{title}"'
    else:
        return []
    return [ctx.error(message, element=head, selector="title")]


async def check_multiple_ways(ctx: CheckContext) -> list[ErrorRecord]:
    outline = await ctx.page.evaluate(PAGE_OUTLINE)
    found = [
        name
        for key, name in (("nav", "navigation"), ("search", "search"), ("sitemap", "sitemap"))
        if outline.get(key)
    ]
    if len(found) >= 2:
        return []
    return [
        ctx.error(
            f"Fewer than two ways to find this page: {', '.join(found) or 'none'}",
            selector="body",
            found=found,
        ),
    ]


# --- 2.4.3 ---


def positive_tabindex(value: str | None) -> int | None:
    try:
        number = int(str(value).strip())
    except ValueError:
        return None
    return number if number > 0 else None


async def check_focus_order(ctx: CheckContext) -> list[ErrorRecord]:
    errors = []
    for el in await ctx.page.evaluate(INTERACTIVE):
        tabindex = positive_tabindex(el.get("tabindex"))
        if tabindex is not None:
            errors.append(
                ctx.error(
                    f"Positive tabindex ({tabindex}) overrides the natural focus order",
                    element=el,
                ),
            )
    return errors


# --- 2.4.4 ---


def is_generic_link(link: dict[str, Any], phrases: tuple[str, ...]) -> bool:
    """A generic link text with neither an aria-label nor surrounding text."""
    text = link.get("text", "")
    if text.lower() not in {phrase.lower() for phrase in phrases}:
        return False
    if link.get("ariaLabel"):
        return False
    parent_text = link.get("parentText", "")
    has_context = len(parent_text) > len(text) and parent_text != text
    return not has_context


async def check_link_purpose(ctx: CheckContext) -> list[ErrorRecord]:
    return [
        ctx.error(
            "Generic link text without context",
            element=link,
            text=link.get("text"),
            href=link.get("href"),
        )
        for link in await ctx.page.evaluate(LINKS)
        if is_generic_link(link, ctx.config.generic_link_phrases)
    ]


# --- 2.4.6 ---


async def check_headings_and_labels(ctx: CheckContext) -> list[ErrorRecord]:
    errors = [
        ctx.error("Empty heading", element=heading)
        for heading in await ctx.page.evaluate(HEADINGS)
        if not heading.get("text")
    ]
    errors.extend(
        ctx.error("Empty label", element=label)
        for label in await ctx.page.evaluate(LABELS)
        if not label.get("text")
    )
    return errors


# --- 2.4.7 ---

FOCUS_MANUAL_CHECK = (
    "Focus styles are read from stylesheets without focusing the element; "
    "confirm the focus indicator by tabbing through the page"
)
_NO_OUTLINE = frozenset({"none", "hidden"})


def _shows_outline(style: str | None, width: str | None) -> bool:
    if style is not None and style.strip().lower() in _NO_OUTLINE:
        return False
    return (width or "").strip().lower() not in ("0", "0px")


def has_focus_indicator(element: dict[str, Any]) -> bool:
    """Resolve the focus indicator from author styles.

    A declared ``:focus`` rule decides first.  Without one, an author rule that
    removes the outline outside the focus state also removes the focus ring.
    With neither, the browser's own focus ring is shown.
    """
    focus = element.get("focus") or {}
    author = element.get("author") or {}
    if (focus.get("boxShadow") or "none").strip().lower() != "none":
        return True
    for declared in (focus, author):
        style, width = declared.get("outlineStyle"), declared.get("outlineWidth")
        if style is not None or width is not None:
            return _shows_outline(style, width)
    return True


async def check_focus_visible(ctx: CheckContext) -> list[ErrorRecord]:
    return [
        ctx.error("No visible focus indicator", element=el, manual_check=FOCUS_MANUAL_CHECK)
        for el in await ctx.page.evaluate(FOCUS_STYLES)
        if not has_focus_indicator(el)
    ]


# --- 2.5.3 ---

_CONTENT_NAMED_TAGS = frozenset({"a", "button", "input", "select", "textarea", "summary"})
_WIDGET_ROLES = frozenset(
    {"button", "link", "menuitem", "tab", "checkbox", "radio", "switch", "option"},
)


def is_content_named(element: dict[str, Any]) -> bool:
    """Controls whose visible text is their label; landmarks and regions are not."""
    role = (element.get("role") or "").strip().lower()
    if role:
        return role in _WIDGET_ROLES
    return element.get("tag") in _CONTENT_NAMED_TAGS


async def check_label_in_name(ctx: CheckContext) -> list[ErrorRecord]:
    errors = []
    for el in await ctx.page.evaluate(ARIA_LABELLED):
        if not is_content_named(el):
            continue
        text = el.get("text", "")
        label = el.get("ariaLabel", "")
        if text and text.lower() not in label.lower():
            errors.append(
                ctx.error(
                    f'Accessible name "{label}" does not contain the visible text "{text[:50]}"',
                    element=el,
                ),
            )
    return errors


def register(registry: CheckRegistry) -> None:
    registry.register(rules.R_2_1_1, check_keyboard, evidence=EvidenceMode.PAGE)
    registry.register(rules.R_2_2_2, check_pause_stop_hide, evidence=EvidenceMode.ELEMENT)
    registry.register(rules.R_2_4_1, check_bypass_blocks, evidence=EvidenceMode.FIRST_PAGE)
    registry.register(rules.R_2_4_2, check_page_title, evidence=EvidenceMode.FIRST_PAGE)
    registry.register(rules.R_2_4_3, check_focus_order)
    registry.register(rules.R_2_4_4, check_link_purpose, evidence=EvidenceMode.ELEMENT)
    registry.register(rules.R_2_4_5, check_multiple_ways)
    registry.register(rules.R_2_4_6, check_headings_and_labels)
    registry.register(rules.R_2_4_7, check_focus_visible)
    registry.register(rules.R_2_5_3, check_label_in_name)

