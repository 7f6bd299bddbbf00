"""
Font tiers from canvas area and label count; compact spacing constants.
"""

from __future__ import annotations

import pytest

from labelcloud.core.config import (
    MAX_PRIMARY,
    MAX_SECONDARY,
    MIN_PRIMARY,
    MIN_SECONDARY,
)
from labelcloud.core.font_sizes import compute_font_tiers, layout_spacing


def test_large_canvas_few_labels_hits_maxima() -> None:
    tiers = compute_font_tiers(300, 300, 3)
    assert tiers.primary == MAX_PRIMARY
    assert tiers.secondary == MAX_SECONDARY
    assert tiers.compact is False


def test_crowded_canvas_is_compact_and_clamped() -> None:
    # base = sqrt(200*200/30) * 0.45 ~ 16.4; primary 26 -> 22 compact; secondary 12 -> 12
    tiers = compute_font_tiers(200, 200, 30)
    assert tiers.compact is True
    assert tiers.primary == 22
    assert tiers.secondary == 12


def test_mid_range_is_rounded() -> None:
    # base = sqrt(320*400/8) * 0.45 ~ 56.9 -> primary clamps, secondary clamps
    tiers = compute_font_tiers(320, 400, 8)
    assert tiers.primary == 42
    assert tiers.secondary == 24
    # base = sqrt(200*100/10) * 0.45 ~ 20.1 -> primary 32, secondary 15
    tiers = compute_font_tiers(200, 100, 10)
    assert tiers.primary == 32
    assert tiers.secondary == 15
    assert tiers.compact is False


def test_compact_threshold_boundary() -> None:
    assert compute_font_tiers(320, 400, 10).compact is False
    assert compute_font_tiers(320, 400, 11).compact is True


def test_zero_labels_treated_as_one() -> None:
    assert compute_font_tiers(300, 300, 0) == compute_font_tiers(300, 300, 1)


@pytest.mark.parametrize("n", [1, 5, 11, 40, 200])
def test_tiers_within_bounds_and_ordered(n: int) -> None:
    tiers = compute_font_tiers(375, 500, n)
    assert MIN_PRIMARY <= tiers.primary <= MAX_PRIMARY
    assert MIN_SECONDARY <= tiers.secondary <= MAX_SECONDARY
    assert tiers.primary >= tiers.secondary
    assert tiers.primary == int(tiers.primary)
    assert tiers.secondary == int(tiers.secondary)


def test_tiers_deterministic() -> None:
    assert compute_font_tiers(333, 444, 17) == compute_font_tiers(333, 444, 17)


def test_layout_spacing_tighter_when_compact() -> None:
    normal = layout_spacing(False)
    compact = layout_spacing(True)
    assert normal.padding == 12 and compact.padding == 8
    assert normal.fallback_gap == 10 and compact.fallback_gap == 6
    assert compact.angle_step < normal.angle_step
    assert compact.radius_step < normal.radius_step
