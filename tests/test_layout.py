"""
Layout engine: cardinality, containment, non-overlap, identity and rotation
properties; spiral/random/fallback/forced escalation; shrink-to-fit.
Uses a fixed-width stub measurer and seeded generators so runs are repeatable.
"""

from __future__ import annotations

import math

import numpy as np
import pytest

from labelcloud.core.config import MAX_ROTATION_RAD, MIN_FONT_SIZE
from labelcloud.core.font_sizes import layout_spacing
from labelcloud.core.geometry import aabb_within, collides, overlaps
from labelcloud.core.layout import layout_sources, place, run_layout
from labelcloud.core.placement import (
    LayoutContext,
    SizedLabel,
    fit_font_size,
    place_label,
    random_rotation,
    spiral_points,
    try_fallback,
)
from labelcloud.core.types import FallbackCursor, Label, LabelSource, PlacedLabel
from labelcloud.core.validate import validate_layout


def _measure(text: str, size: float) -> tuple[float, float]:
    return (len(text) * size * 0.6 + 1.0, size * 1.08)


def _labels(sizes: list[float], texts: list[str] | None = None) -> list[Label]:
    texts = texts or [f"Trait{i:02d}" for i in range(len(sizes))]
    return [
        Label(text=t, size=s, color_index=i, source_index=i)
        for i, (t, s) in enumerate(zip(texts, sizes))
    ]


def _ctx(canvas_w: float, canvas_h: float, compact: bool = False, seed: int = 0) -> LayoutContext:
    spacing = layout_spacing(compact)
    return LayoutContext(
        canvas_w=canvas_w,
        canvas_h=canvas_h,
        spacing=spacing,
        cursor=FallbackCursor.start(canvas_w, canvas_h, spacing.padding, spacing.fallback_gap),
        rng=np.random.default_rng(seed),
    )


def test_three_labels_on_square_canvas() -> None:
    labels = _labels([40, 24, 16], ["Curious", "Calm", "Kind"])
    summary = run_layout(labels, 300, 300, compact=False, rng=np.random.default_rng(7), measure=_measure)
    assert len(summary.placed) == 3
    assert summary.forced_count == 0
    report = validate_layout(summary.placed, 300, 300, padding=8)
    assert report.ok
    assert report.overlapping_pairs == []
    for p in summary.placed:
        box = p.aabb
        assert 8 <= box.x and box.right <= 292
        assert 8 <= box.y and box.bottom <= 292


def test_first_label_lands_on_spiral_near_anchor() -> None:
    labels = _labels([40, 24, 16], ["Curious", "Calm", "Kind"])
    placed = place(labels, 300, 300, rng=np.random.default_rng(1), measure=_measure)
    first = placed[0]
    assert first.phase == "spiral"
    assert math.hypot(first.cx - 150, first.cy - 300 * 0.38) < 15


@pytest.mark.parametrize("seed", [0, 1, 2, 3, 4])
def test_invariants_hold_for_moderate_layout(seed: int) -> None:
    sizes = [22, 22] + [12] * 10
    labels = _labels(sizes)
    summary = run_layout(labels, 320, 400, compact=True, rng=np.random.default_rng(seed), measure=_measure)
    assert len(summary.placed) == len(labels)
    assert summary.forced_count == 0
    report = validate_layout(summary.placed, 320, 400, padding=layout_spacing(True).padding)
    assert report.ok, report
    assert sorted(p.source_index for p in summary.placed) == list(range(len(labels)))
    assert all(abs(p.angle) <= MAX_ROTATION_RAD for p in summary.placed)


def test_output_keeps_size_order_and_identity() -> None:
    labels = _labels([12, 30, 18, 30])
    placed = place(labels, 320, 400, rng=np.random.default_rng(5), measure=_measure)
    assert [p.source_index for p in placed] == [1, 3, 2, 0]
    assert [p.requested_size for p in placed] == [30, 30, 18, 12]


def test_overcrowded_canvas_drops_nothing() -> None:
    labels = _labels([20] * 30)
    summary = run_layout(labels, 200, 200, compact=True, rng=np.random.default_rng(11), measure=_measure)
    placed = summary.placed
    assert len(placed) == 30
    assert sorted(p.source_index for p in placed) == list(range(30))
    assert sum(summary.phase_counts.values()) == 30
    assert summary.phase_counts["fallback"] + summary.forced_count > 0
    assert all(abs(p.angle) <= MAX_ROTATION_RAD for p in placed)

    padding = layout_spacing(True).padding
    searched = [p for p in placed if p.phase != "forced"]
    for p in searched:
        assert aabb_within(p.aabb, 200, 200, padding)
    for i in range(len(searched)):
        for j in range(i + 1, len(searched)):
            assert not overlaps(searched[i].aabb, searched[j].aabb)


def test_wide_label_is_shrunk_and_stays_in_bounds() -> None:
    labels = _labels([42], ["Extraordinarily"])
    summary = run_layout(labels, 200, 200, rng=np.random.default_rng(3), measure=_measure)
    (p,) = summary.placed
    assert p.requested_size == 42
    assert p.effective_size < p.requested_size
    assert p.effective_size == 17
    assert p.phase != "forced"
    assert validate_layout(summary.placed, 200, 200, padding=12).ok


def test_label_wider_than_canvas_is_forced_not_dropped() -> None:
    labels = _labels([12], ["W" * 40])
    summary = run_layout(labels, 200, 200, rng=np.random.default_rng(0), measure=_measure)
    assert len(summary.placed) == 1
    (p,) = summary.placed
    assert p.phase == "forced"
    assert p.effective_size == MIN_FONT_SIZE
    assert summary.forced_count == 1


def test_injected_generator_makes_layout_repeatable() -> None:
    labels = _labels([30, 20, 20, 14, 14, 14])
    a = place(labels, 320, 400, rng=np.random.default_rng(42), measure=_measure)
    b = place(labels, 320, 400, rng=np.random.default_rng(42), measure=_measure)
    assert [(p.cx, p.cy, p.angle) for p in a] == [(p.cx, p.cy, p.angle) for p in b]


def test_layout_sources_end_to_end() -> None:
    sources = [
        LabelSource(text="Curious", weight_class="primary", color_index=0, source_index=0),
        LabelSource(text="Calm", weight_class="secondary", color_index=1, source_index=1),
        LabelSource(text="", weight_class="secondary", color_index=2, source_index=2),
        LabelSource(text="Kind", weight_class="secondary", color_index=3, source_index=3),
    ]
    summary = layout_sources(sources, 320, 400, rng=np.random.default_rng(2), measure=_measure)
    assert [p.source_index for p in summary.placed] == [0, 1, 3]
    assert summary.placed[0].requested_size == 42
    assert [p.source_index for p in summary.by_source_index()] == [0, 1, 3]


def test_layout_sources_rejects_bad_canvas() -> None:
    sources = [LabelSource(text="Calm", weight_class="secondary", color_index=0, source_index=0)]
    with pytest.raises(ValueError):
        layout_sources(sources, 0, 400, rng=np.random.default_rng(0), measure=_measure)


def test_run_layout_never_raises_on_degenerate_canvas() -> None:
    labels = [Label(text=t, size=16, color_index=i, source_index=i) for i, t in enumerate(["Calm", "Kind"])]
    summary = run_layout(labels, 0, 0, rng=np.random.default_rng(0), measure=_measure)
    assert [p.source_index for p in summary.placed] == [0, 1]
    assert summary.phase_counts["forced"] == 2


def test_fit_font_size_shrinks_in_whole_steps() -> None:
    label = Label(text="Extraordinarily", size=42, color_index=0, source_index=0)
    sized = fit_font_size(label, 176, _measure)
    assert sized.size == 17
    assert sized.width <= 176
    untouched = fit_font_size(Label(text="Hi", size=30, color_index=0, source_index=0), 176, _measure)
    assert untouched.size == 30


def test_random_rotation_bounded() -> None:
    rng = np.random.default_rng(9)
    values = [random_rotation(rng) for _ in range(500)]
    assert all(-MAX_ROTATION_RAD <= v <= MAX_ROTATION_RAD for v in values)
    assert min(values) < 0 < max(values)


def test_spiral_starts_at_anchor_and_moves_out() -> None:
    xs, ys = spiral_points((100.0, 50.0), 32 * math.pi, 0.04, 1.2)
    assert xs[0] == pytest.approx(100.0) and ys[0] == pytest.approx(50.0)
    radii = np.hypot(xs - 100.0, ys - 50.0)
    assert np.all(np.diff(radii) >= -1e-9)
    assert radii[-1] == pytest.approx(1.2 * math.sqrt(32 * math.pi), rel=1e-3)


def _sized(w: float, h: float, source_index: int = 0) -> SizedLabel:
    label = Label(text=f"L{source_index}", size=20, color_index=0, source_index=source_index)
    return SizedLabel(label=label, size=20, width=w, height=h)


def test_fallback_packs_bottom_row_left_to_right() -> None:
    ctx = _ctx(300, 200)
    placed: list[PlacedLabel] = []
    first = try_fallback(_sized(60, 20, 0), placed, ctx)
    assert first.ok and first.phase == "fallback"
    placed.append(first.placed)
    box1 = first.placed.aabb
    assert box1.x == pytest.approx(12)
    assert box1.bottom == pytest.approx(188)

    second = try_fallback(_sized(60, 20, 1), placed, ctx)
    assert second.ok
    box2 = second.placed.aabb
    assert box2.x == pytest.approx(box1.right + 10)
    assert box2.bottom == pytest.approx(188)
    assert not overlaps(box1, box2)


def test_fallback_cursor_wraps_to_row_above() -> None:
    ctx = _ctx(300, 200)
    placed: list[PlacedLabel] = []
    for i in range(3):
        attempt = try_fallback(_sized(100, 20, i), placed, ctx)
        assert attempt.ok
        placed.append(attempt.placed)
    row1 = [p.aabb for p in placed[:2]]
    third = placed[2].aabb
    assert third.x == pytest.approx(12)
    assert third.bottom <= min(b.y for b in row1) - 10 + 1e-9
    report = validate_layout(placed, 300, 200, padding=12, expected_sources=[0, 1, 2])
    assert report.ok


def test_fallback_skips_occupied_slot() -> None:
    ctx = _ctx(300, 200)
    obstacle = PlacedLabel(
        text="obstacle", cx=40, cy=170, angle=0.0,
        effective_size=20, requested_size=20, color_index=0, source_index=99,
        width=56, height=36,
    )
    attempt = try_fallback(_sized(60, 20, 0), [obstacle], ctx)
    assert attempt.ok
    assert attempt.probes >= 2
    assert not collides(attempt.placed.aabb, [obstacle])


def test_full_canvas_escalates_to_forced() -> None:
    ctx = _ctx(300, 200)
    blocker = PlacedLabel(
        text="blocker", cx=150, cy=100, angle=0.0,
        effective_size=40, requested_size=40, color_index=0, source_index=99,
        width=300, height=200,
    )
    label = Label(text="Late", size=20, color_index=1, source_index=0)
    attempt, probes = place_label(label, [blocker], ctx, _measure)
    assert attempt.phase == "forced"
    assert attempt.placed is not None
    assert attempt.placed.source_index == 0
    assert probes > 1
