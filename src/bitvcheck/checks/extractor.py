"""Resolved text colors of the live page."""

from __future__ import annotations

import logging
import re
from collections import Counter
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from bitvcheck.checks._dom import script
from bitvcheck.core.contrast import ColorParseError, is_transparent

if TYPE_CHECKING:
    from bitvcheck.core.page import LivePage

logger = logging.getLogger("bitvcheck.checks.extractor")

LARGE_TEXT_PX = 18.0
BOLD_TEXT_PX = 14.0
BOLD_WEIGHT = 700

_NUMBER_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)")

_TEXT_COLORS = script(
    "text-colors",
    """
  const samples = [];
  for (const el of document.querySelectorAll(arg)) {
    const text = textOf(el);
    if (!text) continue;
    const style = window.getComputedStyle(el);
    samples.push({
      ...describe(el),
      text,
      color: style.color,
      backgroundColor: style.backgroundColor,
      fontSize: style.fontSize,
      fontWeight: style.fontWeight,
    });
  }
  return samples;
""",
)


@dataclass(frozen=True, slots=True)
class ColorSample:
    """Computed colors and font metrics of one text-bearing element."""

    selector: str
    element_snippet: str
    tag: str
    text: str
    foreground: str
    background: str
    font_size: float
    font_weight: int

    @property
    def is_large_text(self) -> bool:
        if self.font_size >= LARGE_TEXT_PX:
            return True
        return self.font_size >= BOLD_TEXT_PX and self.font_weight >= BOLD_WEIGHT


def _number(value: Any, default: float) -> float:
    match = _NUMBER_RE.match(str(value or ""))
    return float(match.group(1)) if match else default


def _font_weight(value: Any) -> int:
    keyword = str(value or "").strip().lower()
    if keyword == "bold":
        return BOLD_WEIGHT
    return int(_number(keyword, 400))


async def extract_colors(page: LivePage, selector: str = "*") -> list[ColorSample]:
    """Collect computed colors for every element under *selector* that has text.

    Elements whose background is fully transparent or cannot be parsed are
    left out; resolving an ancestor background is up to the caller.  The
    order of the result carries no meaning.
    """
    raw = await page.evaluate(_TEXT_COLORS, selector)
    samples: list[ColorSample] = []
    for item in raw or []:
        background = item.get("backgroundColor", "")
        try:
            if is_transparent(background):
                continue
        except ColorParseError:
            logger.debug("Skipping %s: unparseable background %r", item.get("selector"), background)
            continue
        samples.append(
            ColorSample(
                selector=item.get("selector", ""),
                element_snippet=item.get("snippet", ""),
                tag=item.get("tag", ""),
                text=item.get("text", ""),
                foreground=item.get("color", ""),
                background=background,
                font_size=_number(item.get("fontSize"), 16.0),
                font_weight=_font_weight(item.get("fontWeight")),
            ),
        )
    return samples


def summarize_palette(samples: list[ColorSample]) -> list[dict[str, Any]]:
    """Distinct foreground/background pairs, most frequent first."""
    pairs = Counter((s.foreground, s.background) for s in samples)
    return [
        {"foreground": fg, "background": bg, "count": count}
        for (fg, bg), count in pairs.most_common()
    ]
