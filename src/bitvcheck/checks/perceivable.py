"""Checks for the *perceivable* principle (1.x)."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any

from bitvcheck.checks._dom import script
from bitvcheck.checks.extractor import extract_colors
from bitvcheck.core._types import EvidenceMode
from bitvcheck.core.contrast import ColorParseError, contrast_ratio, is_transparent
from bitvcheck.core.page import injected_stylesheet, viewport_restore
from bitvcheck.rules import perceivable as rules

if TYPE_CHECKING:
    from bitvcheck.checks.base import CheckRegistry
    from bitvcheck.core.context import CheckContext
    from bitvcheck.core.record import ErrorRecord

logger = logging.getLogger("bitvcheck.checks.perceivable")

# --- Scripts ---

IMAGES = script(
    "images",
    """
  return Array.from(document.querySelectorAll('img'), (img) => ({
    ...describe(img),
    alt: img.getAttribute('alt'),
    role: img.getAttribute('role'),
    src: img.src,
  }));
""",
)

VIDEOS = script(
    "videos",
    """
  return Array.from(document.querySelectorAll('video'), (video) => ({
    ...describe(video),
    src: video.currentSrc,
    textTracks: video.querySelectorAll('track[kind="descriptions"], track[kind="captions"]').length,
  }));
""",
)

DESCRIPTION_TRACKS = script(
    "description-tracks",
    """
  const result = [];
  for (const video of document.querySelectorAll('video')) {
    const tracks = Array.from(video.querySelectorAll('track[kind="descriptions"]'), (t) => t.src);
    let reachable = 0;
    for (const url of tracks) {
      const controller = new AbortController();
      const timer = setTimeout(() => controller.abort(), arg);
      try {
        const response = await fetch(url, { signal: controller.signal });
        if (response.ok) reachable += 1;
      } catch (e) {
        // unreachable or timed out
      } finally {
        clearTimeout(timer);
      }
    }
    result.push({ ...describe(video), src: video.currentSrc, declared: tracks.length, reachable });
  }
  return result;
""",
    is_async=True,
)

FORM_FIELDS = script(
    "form-fields",
    """
  const excluded = 'form[role="search"], form.search, form.newsletter, .search, .newsletter';
  return Array.from(document.querySelectorAll('input, select, textarea'), (el) => {
    const form = el.closest('form');
    return {
      ...describe(el),
      type: (el.getAttribute('type') || el.type || '').toLowerCase(),
      visible: isVisible(el),
      hasLabel: (el.labels ? el.labels.length : 0) > 0,
      ariaLabel: el.hasAttribute('aria-label'),
      ariaLabelledby: el.hasAttribute('aria-labelledby'),
      title: el.hasAttribute('title'),
      placeholder: el.hasAttribute('placeholder'),
      required: el.hasAttribute('required'),
      validation: ['pattern', 'minlength', 'maxlength', 'min', 'max'].some((a) => el.hasAttribute(a)),
      ariaInvalid: el.hasAttribute('aria-invalid'),
      inForm: form !== null,
      excluded: el.closest(excluded) !== null,
    };
  });
""",
)

HEADINGS = script(
    "headings",
    """
  return Array.from(document.querySelectorAll('h1, h2, h3, h4, h5, h6'), (h) => ({
    ...describe(h),
    level: Number.parseInt(h.tagName.slice(1), 10),
    text: textOf(h),
  }));
""",
)

POSITIONED = script(
    "positioned-elements",
    """
  const result = [];
  for (const el of document.querySelectorAll('body *')) {
    const style = window.getComputedStyle(el);
    if (style.position !== 'absolute' && style.position !== 'fixed') continue;
    result.push({
      ...describe(el),
      position: style.position,
      zIndex: style.zIndex,
      onclick: el.hasAttribute('onclick'),
      role: el.getAttribute('role'),
    });
  }
  return result;
""",
)

BODY_BOX = script(
    "body-box",
    """
  const box = document.body.getBoundingClientRect();
  return { width: box.width, height: box.height };
""",
)

CLIPPED_TEXT = script(
    "clipped-text",
    """
  const result = [];
  for (const el of document.querySelectorAll('p, div, span, a, li, td, th, label, h1, h2, h3, h4, h5, h6')) {
    if (!textOf(el)) continue;
    const style = window.getComputedStyle(el);
    if (style.overflowX !== 'hidden' && style.overflowY !== 'hidden') continue;
    result.push({
      ...describe(el),
      overflowX: style.overflowX,
      overflowY: style.overflowY,
      scrollWidth: el.scrollWidth,
      clientWidth: el.clientWidth,
      scrollHeight: el.scrollHeight,
      clientHeight: el.clientHeight,
    });
  }
  return result;
""",
)

REFLOW = script(
    "reflow",
    """
  const width = window.innerWidth;
  const beyond = new Set();
  for (const el of document.querySelectorAll('body *')) {
    if (!isVisible(el)) continue;
    const rect = el.getBoundingClientRect();
    if (rect.width > 0 && rect.right > width + 1) beyond.add(el);
  }
  const outermost = Array.from(beyond).filter((el) => !beyond.has(el.parentElement));
  return {
    viewportWidth: width,
    scrollWidth: document.documentElement.scrollWidth,
    overflowing: outermost.map((el) => ({ ...describe(el), right: el.getBoundingClientRect().right })),
  };
""",
)

CONTROL_COLORS = script(
    "control-colors",
    """
  const controls = 'button, input:not([type="hidden"]), select, textarea, [role="button"]';
  const result = [];
  for (const el of document.querySelectorAll(controls)) {
    if (!isVisible(el)) continue;
    const style = window.getComputedStyle(el);
    const ancestors = [];
    for (let node = el.parentElement; node; node = node.parentElement) {
      ancestors.push(window.getComputedStyle(node).backgroundColor);
    }
    result.push({
      ...describe(el),
      borderColor: style.borderTopColor,
      borderStyle: style.borderTopStyle,
      borderWidth: style.borderTopWidth,
      backgroundColor: style.backgroundColor,
      ancestorBackgrounds: ancestors,
    });
  }
  return result;
""",
)

# --- 1.1.1 ---

_PLACEHOLDER_ALT_RE = re.compile(r"^(image|graphic|img\d+\.\w+)$", re.IGNORECASE)
ALT_MIN_LENGTH = 5
ALT_MAX_LENGTH = 150


def is_suspicious_alt(alt: str) -> bool:
    if _PLACEHOLDER_ALT_RE.match(alt):
        return True
    return len(alt) < ALT_MIN_LENGTH or len(alt) > ALT_MAX_LENGTH


async def check_alt_text(ctx: CheckContext) -> list[ErrorRecord]:
    errors = []
    for img in await ctx.page.evaluate(IMAGES):
        if img.get("role") == "presentation":
            continue
        alt = img.get("alt") or ""
        if alt == "":
            errors.append(ctx.error("Missing alternative text", element=img, src=img.get("src")))
        elif is_suspicious_alt(alt):
            errors.append(
                ctx.error(f'Suspicious alternative text: "{alt}"', element=img, src=img.get("src")),
            )
    return errors


# --- 1.2.x ---


async def check_media_alternative(ctx: CheckContext) -> list[ErrorRecord]:
    return [
        ctx.error("No audio description or captions found", element=video, src=video.get("src"))
        for video in await ctx.page.evaluate(VIDEOS)
        if not video.get("textTracks")
    ]


async def check_audio_description(ctx: CheckContext) -> list[ErrorRecord]:
    return [
        ctx.error("Audio description tracks cannot be loaded", element=video, src=video.get("src"))
        for video in await ctx.page.evaluate(
            DESCRIPTION_TRACKS,
            ctx.config.visibility_timeout * 1000,
        )
        if video.get("declared", 0) > 0 and not video.get("reachable")
    ]


# --- 1.3.1 ---


def _programmatically_labelled(field: dict[str, Any]) -> bool:
    return bool(field.get("hasLabel") or field.get("ariaLabel") or field.get("ariaLabelledby"))


async def check_form_labels(ctx: CheckContext) -> list[ErrorRecord]:
    return [
        ctx.error("No programmatically determinable label", element=field)
        for field in await ctx.page.evaluate(FORM_FIELDS)
        if field.get("type") != "hidden"
        and field.get("visible", True)
        and not _programmatically_labelled(field)
    ]


def skipped_levels(levels: list[int]) -> list[tuple[int, int, int]]:
    """Return ``(index, previous, current)`` for every heading that skips a level.

    The previous level always moves to the current heading, so one skip is
    reported once and not again for the headings that follow it.
    """
    skips = []
    last = 0
    for index, level in enumerate(levels):
        if last and level > last + 1:
            skips.append((index, last, level))
        last = level
    return skips


async def check_heading_structure(ctx: CheckContext) -> list[ErrorRecord]:
    headings = await ctx.page.evaluate(HEADINGS)
    return [
        ctx.error(f"Skipped heading level: H{previous} to H{level}", element=headings[index])
        for index, previous, level in skipped_levels([int(h["level"]) for h in headings])
    ]


# --- 1.3.2 ---


def _is_interactive(element: dict[str, Any]) -> bool:
    return (
        element.get("tag") in ("a", "button")
        or bool(element.get("onclick"))
        or element.get("role") == "button"
    )


async def check_meaningful_sequence(ctx: CheckContext) -> list[ErrorRecord]:
    return [
        ctx.error("Positioned interactive element could interfere with reading order", element=el)
        for el in await ctx.page.evaluate(POSITIONED)
        if el.get("zIndex", "auto") != "auto" and _is_interactive(el)
    ]


# --- 1.4.3 ---

CONTRAST_SELECTOR = (
    'h1, h2, h3, h4, h5, h6, p, a, label, button, input[type="submit"], input[type="button"]'
)
_HEADING_TAGS = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})
# CONTRAST_SELECTOR only picks up submit and button inputs
_BUTTON_TAGS = frozenset({"button", "input"})
SHORT_TEXT_LENGTH = 4
NORMAL_TEXT_RATIO = 4.5
LARGE_TEXT_RATIO = 3.0


async def check_text_contrast(ctx: CheckContext) -> list[ErrorRecord]:
    errors = []
    for sample in await extract_colors(ctx.page, CONTRAST_SELECTOR):
        is_heading = sample.tag in _HEADING_TAGS
        if len(sample.text) < SHORT_TEXT_LENGTH and not (is_heading or sample.tag in _BUTTON_TAGS):
            continue
        try:
            ratio = contrast_ratio(sample.foreground, sample.background)
        except ColorParseError as exc:
            logger.debug("Skipping %s: %s", sample.selector, exc)
            continue
        required = LARGE_TEXT_RATIO if sample.is_large_text or is_heading else NORMAL_TEXT_RATIO
        if ratio < required - ctx.config.contrast_tolerance:
            errors.append(
                ctx.error(
                    f"Contrast too low: {ratio:.2f} < {required}",
                    element={"selector": sample.selector, "snippet": sample.element_snippet},
                    text=sample.text[:50],
                    foreground=sample.foreground,
                    background=sample.background,
                    ratio=round(ratio, 2),
                    required=required,
                ),
            )
    return errors


# --- 1.4.4 / 1.4.12 ---

OVERFLOW_TOLERANCE = 1.1

ZOOM_CSS = "html { font-size: 200% !important; }"

TEXT_SPACING_CSS = """
* {
  line-height: 1.5 !important;
  letter-spacing: 0.12em !important;
  word-spacing: 0.16em !important;
}
p { margin-bottom: 2em !important; }
"""


def is_clipped(element: dict[str, Any]) -> bool:
    """True when a ``overflow: hidden`` axis has more content than room."""
    if element.get("overflowX") == "hidden" and element.get("scrollWidth", 0) > element.get(
        "clientWidth", 0
    ):
        return True
    return element.get("overflowY") == "hidden" and element.get("scrollHeight", 0) > element.get(
        "clientHeight", 0
    )


async def check_resize_text(ctx: CheckContext) -> list[ErrorRecord]:
    baseline = await ctx.page.evaluate(BODY_BOX)
    async with injected_stylesheet(ctx.page, ZOOM_CSS):
        zoomed = await ctx.page.evaluate(BODY_BOX)
        clipped = [el for el in await ctx.page.evaluate(CLIPPED_TEXT) if is_clipped(el)]

    errors = []
    if zoomed["width"] > baseline["width"] * OVERFLOW_TOLERANCE:
        errors.append(
            ctx.error(
                "Horizontal scrolling required at 200% text size",
                selector="body",
                baseline_width=baseline["width"],
                zoomed_width=zoomed["width"],
            ),
        )
    errors.extend(ctx.error("Text is cut off at 200% text size", element=el) for el in clipped)
    return errors


async def check_text_spacing(ctx: CheckContext) -> list[ErrorRecord]:
    async with injected_stylesheet(ctx.page, TEXT_SPACING_CSS):
        candidates = await ctx.page.evaluate(CLIPPED_TEXT)
    return [
        ctx.error("Text is cut off with increased text spacing", element=el)
        for el in candidates
        if is_clipped(el)
    ]


# --- 1.4.10 ---

REFLOW_VIEWPORT = {"width": 320, "height": 256}


async def check_reflow(ctx: CheckContext) -> list[ErrorRecord]:
    async with viewport_restore(ctx.page):
        await ctx.page.set_viewport_size(REFLOW_VIEWPORT)
        layout = await ctx.page.evaluate(REFLOW)

    width = layout.get("viewportWidth") or REFLOW_VIEWPORT["width"]
    errors = []
    if layout.get("scrollWidth", 0) > width * OVERFLOW_TOLERANCE:
        errors.append(
            ctx.error(
                "Horizontal scrolling required at 320 CSS pixels width",
                selector="html",
                scroll_width=layout["scrollWidth"],
            ),
        )
    errors.extend(
        ctx.error("Content extends beyond the viewport at 320 CSS pixels width", element=el)
        for el in layout.get("overflowing", [])
    )
    return errors


# --- 1.4.11 ---

NON_TEXT_RATIO = 3.0
DEFAULT_BACKGROUND = "rgb(255, 255, 255)"


def surrounding_background(ancestors: list[str]) -> str:
    """The nearest ancestor background that is opaque enough to be seen."""
    for color in ancestors:
        try:
            if not is_transparent(color):
                return color
        except ColorParseError:
            continue
    return DEFAULT_BACKGROUND


def _visible_border(control: dict[str, Any]) -> bool:
    if control.get("borderStyle") in (None, "none", "hidden"):
        return False
    width = str(control.get("borderWidth") or "0").removesuffix("px")
    try:
        return float(width) > 0
    except ValueError:
        return False


async def check_non_text_contrast(ctx: CheckContext) -> list[ErrorRecord]:
    errors = []
    for control in await ctx.page.evaluate(CONTROL_COLORS):
        background = surrounding_background(control.get("ancestorBackgrounds", []))
        boundaries = []
        try:
            if _visible_border(control) and not is_transparent(control["borderColor"]):
                boundaries.append(control["borderColor"])
            if not is_transparent(control["backgroundColor"]):
                boundaries.append(control["backgroundColor"])
            ratios = [(contrast_ratio(color, background), color) for color in boundaries]
        except ColorParseError as exc:
            logger.debug("Skipping %s: %s", control.get("selector"), exc)
            continue
        if not ratios:
            continue
        best, color = max(ratios)
        if best < NON_TEXT_RATIO:
            errors.append(
                ctx.error(
                    f"Control boundary contrast too low: {best:.2f} < {NON_TEXT_RATIO}",
                    element=control,
                    foreground=color,
                    background=background,
                    ratio=round(best, 2),
                ),
            )
    return errors


def register(registry: CheckRegistry) -> None:
    registry.register(rules.R_1_1_1, check_alt_text, evidence=EvidenceMode.ELEMENT)
    registry.register(rules.R_1_2_3, check_media_alternative)
    registry.register(rules.R_1_2_5, check_audio_description)
    registry.register(rules.R_1_3_1, check_form_labels, evidence=EvidenceMode.ELEMENT)
    registry.register(rules.R_1_3_1A, check_heading_structure, evidence=EvidenceMode.ELEMENT)
    registry.register(rules.R_1_3_2, check_meaningful_sequence, evidence=EvidenceMode.FIRST_PAGE)
    registry.register(rules.R_1_4_3, check_text_contrast, evidence=EvidenceMode.ELEMENT)
    registry.register(rules.R_1_4_4, check_resize_text, evidence=EvidenceMode.PAGE)
    registry.register(rules.R_1_4_10, check_reflow)
    registry.register(rules.R_1_4_11, check_non_text_contrast)
    registry.register(rules.R_1_4_12, check_text_spacing)
