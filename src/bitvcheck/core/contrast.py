"""Relative luminance and contrast ratio (WCAG 2.x definition)."""

import re
from dataclasses import dataclass

_RGB_RE = re.compile(
    r"^rgba?\(\s*(\d{1,3}(?:\.\d+)?)\s*,\s*(\d{1,3}(?:\.\d+)?)\s*,\s*(\d{1,3}(?:\.\d+)?)"
    r"\s*(?:,\s*(\d*\.?\d+)\s*)?\)$",
    re.IGNORECASE,
)

MIN_RATIO = 1.0
MAX_RATIO = 21.0


class ColorParseError(ValueError):
    """Raised for a color string that is not ``rgb()``/``rgba()``/``transparent``."""


@dataclass(frozen=True, slots=True)
class RGBA:
    r: int
    g: int
    b: int
    a: float = 1.0

    @property
    def transparent(self) -> bool:
        return self.a == 0


def parse_color(color: str) -> RGBA:
    """Parse a computed CSS color string into integer channels.

    Accepts ``rgb(r, g, b)``, ``rgba(r, g, b, a)`` and ``transparent``, which
    is what ``getComputedStyle`` returns for colors.

    Raises:
        :class:`ColorParseError`: For any other input.

    """
    value = color.strip() if isinstance(color, str) else ""
    if value.lower() == "transparent":
        return RGBA(0, 0, 0, 0.0)
    match = _RGB_RE.match(value)
    if match is None:
        raise ColorParseError(f"Unparseable color: {color!r}")
    r, g, b = (min(255, round(float(c))) for c in match.group(1, 2, 3))
    alpha = float(match.group(4)) if match.group(4) is not None else 1.0
    return RGBA(r, g, b, max(0.0, min(1.0, alpha)))


def is_transparent(color: str) -> bool:
    """Return ``True`` when *color* has zero alpha.

    Raises:
        :class:`ColorParseError`: If *color* cannot be parsed.

    """
    return parse_color(color).transparent


def _linearize(channel: int) -> float:
    c = channel / 255
    return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4


def relative_luminance(color: RGBA) -> float:
    return (
        0.2126 * _linearize(color.r)
        + 0.7152 * _linearize(color.g)
        + 0.0722 * _linearize(color.b)
    )


def contrast_ratio(color_a: str, color_b: str) -> float:
    """Return the contrast ratio between two colors, in ``[1, 21]``.

    Alpha is ignored: a semi-transparent color is treated as opaque.

    Raises:
        :class:`ColorParseError`: If either color cannot be parsed.  Callers
            skip the comparison rather than reporting it.

    """
    lum_a = relative_luminance(parse_color(color_a))
    lum_b = relative_luminance(parse_color(color_b))
    lighter, darker = max(lum_a, lum_b), min(lum_a, lum_b)
    return (lighter + 0.05) / (darker + 0.05)
