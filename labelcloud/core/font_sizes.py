# labelcloud/core/font_sizes.py
"""
Font tiers from canvas area and label count, and the compact-mode spacing
constants that go with them.
"""

from __future__ import annotations

import math

from labelcloud.core.config import (
    BASE_SIZE_FACTOR,
    COMPACT_FONT_FACTOR,
    COMPACT_THRESHOLD,
    FALLBACK_GAP,
    FALLBACK_GAP_COMPACT,
    MAX_PRIMARY,
    MAX_SECONDARY,
    MIN_PRIMARY,
    MIN_SECONDARY,
    PADDING,
    PADDING_COMPACT,
    PRIMARY_FACTOR,
    SECONDARY_FACTOR,
    SPIRAL_ANGLE_STEP,
    SPIRAL_ANGLE_STEP_COMPACT,
    SPIRAL_RADIUS_STEP,
    SPIRAL_RADIUS_STEP_COMPACT,
)
from labelcloud.core.types import FontTiers, LayoutSpacing


def _clamp(value: float, lo: float, hi: float) -> float:
    return min(hi, max(lo, value))


def _round_half_up(value: float) -> float:
    return float(math.floor(value + 0.5))


def compute_font_tiers(canvas_w: float, canvas_h: float, n_labels: int) -> FontTiers:
    """
    Primary and secondary font sizes for n_labels on a canvas_w x canvas_h canvas.
    Sizes are whole units. With more than COMPACT_THRESHOLD labels both tiers
    shrink by COMPACT_FONT_FACTOR (never below the tier minimum) and compact is set.
    """
    area_per_label = (canvas_w * canvas_h) / max(n_labels, 1)
    base = math.sqrt(area_per_label) * BASE_SIZE_FACTOR
    primary = _round_half_up(_clamp(base * PRIMARY_FACTOR, MIN_PRIMARY, MAX_PRIMARY))
    secondary = _round_half_up(_clamp(base * SECONDARY_FACTOR, MIN_SECONDARY, MAX_SECONDARY))
    compact = n_labels > COMPACT_THRESHOLD
    if compact:
        primary = max(MIN_PRIMARY, _round_half_up(primary * COMPACT_FONT_FACTOR))
        secondary = max(MIN_SECONDARY, _round_half_up(secondary * COMPACT_FONT_FACTOR))
    return FontTiers(primary=primary, secondary=secondary, compact=compact)


def layout_spacing(compact: bool) -> LayoutSpacing:
    """Padding, fallback gap and spiral steps for normal or compact layouts."""
    if compact:
        return LayoutSpacing(
            padding=PADDING_COMPACT,
            fallback_gap=FALLBACK_GAP_COMPACT,
            angle_step=SPIRAL_ANGLE_STEP_COMPACT,
            radius_step=SPIRAL_RADIUS_STEP_COMPACT,
        )
    return LayoutSpacing(
        padding=PADDING,
        fallback_gap=FALLBACK_GAP,
        angle_step=SPIRAL_ANGLE_STEP,
        radius_step=SPIRAL_RADIUS_STEP,
    )
