# labelcloud/core/layout.py
"""
Label cloud layout orchestration. Labels are processed in descending size
order; each gets the spiral first, then random retry, then the shared
fallback cursor. Output keeps processing order; re-sort by source_index for
input order.
"""

from __future__ import annotations

import logging

import numpy as np

from labelcloud.core.config import DEFAULT_FONT_FAMILY, SEED
from labelcloud.core.font_sizes import layout_spacing
from labelcloud.core.labels import prepare_labels, sort_labels, validate_canvas
from labelcloud.core.placement import LayoutContext, place_label
from labelcloud.core.text_metrics import TextMeasurer, make_measurer
from labelcloud.core.types import (
    PHASES,
    FallbackCursor,
    Label,
    LabelSource,
    LayoutSummary,
    PlacedLabel,
)

logger = logging.getLogger(__name__)


def run_layout(
    labels: list[Label],
    canvas_w: float,
    canvas_h: float,
    compact: bool = False,
    rng: np.random.Generator | None = None,
    measure: TextMeasurer | None = None,
    seed: int | None = SEED,
) -> LayoutSummary:
    """
    Place every label on a canvas_w x canvas_h canvas. Labels should already
    be sorted descending by size; unsorted input is sorted stably here.
    rng defaults to np.random.default_rng(seed); measure defaults to Pillow
    metrics with DEFAULT_FONT_FAMILY.
    """
    if rng is None:
        rng = np.random.default_rng(seed)
    if measure is None:
        measure = make_measurer(DEFAULT_FONT_FAMILY)
    spacing = layout_spacing(compact)
    ctx = LayoutContext(
        canvas_w=canvas_w,
        canvas_h=canvas_h,
        spacing=spacing,
        cursor=FallbackCursor.start(canvas_w, canvas_h, spacing.padding, spacing.fallback_gap),
        rng=rng,
    )
    phase_counts = {phase: 0 for phase in PHASES}
    placed: list[PlacedLabel] = []
    probes = 0

    for label in sort_labels(labels):
        attempt, spent = place_label(label, placed, ctx, measure)
        placed.append(attempt.placed)
        phase_counts[attempt.phase] += 1
        probes += spent

    if phase_counts["forced"]:
        logger.warning(
            "Layout of %d labels on %.0fx%.0f forced %d placement(s)",
            len(labels), canvas_w, canvas_h, phase_counts["forced"],
        )
    logger.debug("Layout phases: %s (%d probes)", phase_counts, probes)
    return LayoutSummary(
        placed=placed,
        canvas_width=canvas_w,
        canvas_height=canvas_h,
        compact=compact,
        phase_counts=phase_counts,
        probes=probes,
    )


def place(
    labels: list[Label],
    canvas_w: float,
    canvas_h: float,
    compact: bool = False,
    rng: np.random.Generator | None = None,
    measure: TextMeasurer | None = None,
) -> list[PlacedLabel]:
    """Placed labels only, one per input label, in processing order."""
    return run_layout(labels, canvas_w, canvas_h, compact, rng=rng, measure=measure).placed


def layout_sources(
    sources: list[LabelSource],
    canvas_w: float,
    canvas_h: float,
    rng: np.random.Generator | None = None,
    measure: TextMeasurer | None = None,
    seed: int | None = SEED,
) -> LayoutSummary:
    """Font tiers, label preparation and layout in one call. Rejects a non-positive canvas."""
    validate_canvas(canvas_w, canvas_h)
    labels, tiers = prepare_labels(sources, canvas_w, canvas_h)
    return run_layout(labels, canvas_w, canvas_h, tiers.compact, rng=rng, measure=measure, seed=seed)
