# labelcloud/core/text_metrics.py
"""
Measure label boxes using Pillow. 1 font unit = 1 canvas unit.
Width is the text advance plus a small slack; height is a fixed line-height
multiple of the font size, matching how labels are painted (centered, middle
baseline). Labels are measured in the weight they are painted with.
"""

from __future__ import annotations

import warnings
from typing import Callable

from labelcloud.core.config import (
    DEFAULT_FONT_FAMILY,
    LABEL_FONT_WEIGHT,
    LINE_HEIGHT_RATIO,
    WIDTH_SLACK,
)

TextMeasurer = Callable[[str, float], tuple[float, float]]
"""(text, font_size) -> (width, height) of the unrotated label box."""

_font_warning_emitted: set[str] = set()


def _font_candidates(font_family: str, font_weight: str) -> list[str]:
    """Font file names to try, requested weight first."""
    compact = font_family.replace(" ", "")
    regular = [font_family + ".ttf", compact + ".ttf", "DejaVuSans.ttf", "arial.ttf", "Arial.ttf"]
    if font_weight != "bold":
        return regular
    bold = [
        compact + "-Bold.ttf",
        font_family + " Bold.ttf",
        "DejaVuSans-Bold.ttf",
        "arialbd.ttf",
        "Arial Bold.ttf",
    ]
    return bold + regular


def _load_font(font_family: str, font_size: float, font_weight: str = LABEL_FONT_WEIGHT):
    """Load PIL ImageFont; fallback with warning if font not found."""
    from PIL import ImageFont

    size = max(1, int(round(font_size)))
    for name in _font_candidates(font_family, font_weight):
        try:
            return ImageFont.truetype(name, size=size)
        except OSError:
            continue
    if font_family not in _font_warning_emitted:
        _font_warning_emitted.add(font_family)
        warnings.warn(f"Font not found: {font_family!r}; using default.", UserWarning)
    return ImageFont.load_default(size=size)


def text_advance(
    text: str,
    font_family: str,
    font_size: float,
    font_weight: str = LABEL_FONT_WEIGHT,
) -> float:
    """Horizontal advance of text at font_size, rescaled for the integer size Pillow loaded."""
    font = _load_font(font_family, font_size, font_weight)
    advance = float(font.getlength(text))
    size_used = float(getattr(font, "size", font_size) or font_size)
    return advance * (font_size / max(1.0, size_used))


def measure_label(
    text: str,
    font_size: float,
    font_family: str = DEFAULT_FONT_FAMILY,
    font_weight: str = LABEL_FONT_WEIGHT,
) -> tuple[float, float]:
    """Return (width, height) of the label box at font_size."""
    w = text_advance(text, font_family, font_size, font_weight) + WIDTH_SLACK
    h = font_size * LINE_HEIGHT_RATIO
    return (w, h)


def make_measurer(
    font_family: str = DEFAULT_FONT_FAMILY,
    font_weight: str = LABEL_FONT_WEIGHT,
) -> TextMeasurer:
    """Bind a font family and weight into a TextMeasurer for the layout engine."""

    def measure(text: str, font_size: float) -> tuple[float, float]:
        return measure_label(text, font_size, font_family, font_weight)

    return measure
