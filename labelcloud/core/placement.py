# labelcloud/core/placement.py
"""
Per-label placement: shrink-to-fit, then escalate spiral -> random -> fallback
cursor -> forced. Each phase returns a PhaseAttempt; place_label stops at the
first one that placed the label.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np

from labelcloud.core.config import (
    ANCHOR_X_RATIO,
    ANCHOR_Y_RATIO,
    FALLBACK_ATTEMPTS,
    LABELCLOUD_DEBUG,
    MAX_ROTATION_RAD,
    MIN_FONT_SIZE,
    OVERLAP_PAD,
    RANDOM_ATTEMPTS,
    SHRINK_RATIO,
    SPIRAL_MAX_ANGLE,
)
from labelcloud.core.geometry import aabb_within, collides, rotated_aabb
from labelcloud.core.text_metrics import TextMeasurer
from labelcloud.core.types import (
    AABB,
    FallbackCursor,
    Label,
    LayoutSpacing,
    PhaseAttempt,
    PlacedLabel,
    PlacementPhase,
)

logger = logging.getLogger(__name__)

_ESCALATION_LEVEL = logging.INFO if LABELCLOUD_DEBUG else logging.DEBUG


def spiral_anchor(canvas_w: float, canvas_h: float) -> tuple[float, float]:
    """Spiral start: horizontally centered, above the vertical middle."""
    return (canvas_w * ANCHOR_X_RATIO, canvas_h * ANCHOR_Y_RATIO)


@dataclass
class LayoutContext:
    """State for one layout call: canvas, spacing, shared fallback cursor, random source."""
    canvas_w: float
    canvas_h: float
    spacing: LayoutSpacing
    cursor: FallbackCursor
    rng: np.random.Generator
    pad: float = OVERLAP_PAD

    @property
    def anchor(self) -> tuple[float, float]:
        return spiral_anchor(self.canvas_w, self.canvas_h)

    @property
    def max_width(self) -> float:
        return self.canvas_w - 2 * self.spacing.padding


@dataclass(frozen=True)
class SizedLabel:
    """A label after shrink-to-fit: effective size and unrotated box."""
    label: Label
    size: float
    width: float
    height: float

    def at(self, cx: float, cy: float, angle: float, phase: PlacementPhase) -> PlacedLabel:
        return PlacedLabel(
            text=self.label.text,
            cx=float(cx),
            cy=float(cy),
            angle=float(angle),
            effective_size=self.size,
            requested_size=self.label.size,
            color_index=self.label.color_index,
            source_index=self.label.source_index,
            width=self.width,
            height=self.height,
            phase=phase,
        )


def random_rotation(rng: np.random.Generator, max_rotation: float = MAX_ROTATION_RAD) -> float:
    """Uniform rotation in [-max_rotation, max_rotation], clamped explicitly."""
    r = float(rng.uniform(-max_rotation, max_rotation))
    return max(-max_rotation, min(max_rotation, r))


def fit_font_size(label: Label, max_width: float, measure: TextMeasurer) -> SizedLabel:
    """
    Measure label at its requested size; while it is wider than max_width,
    shrink by SHRINK_RATIO (whole units) down to MIN_FONT_SIZE.
    """
    size = label.size
    w, h = measure(label.text, size)
    while w > max_width and size > MIN_FONT_SIZE:
        size = max(MIN_FONT_SIZE, float(math.floor(size * SHRINK_RATIO)))
        w, h = measure(label.text, size)
    return SizedLabel(label=label, size=size, width=w, height=h)


def spiral_points(
    anchor: tuple[float, float],
    max_angle: float,
    angle_step: float,
    radius_step: float,
) -> tuple[np.ndarray, np.ndarray]:
    """Candidate centers along r = radius_step * sqrt(theta), theta in [0, max_angle)."""
    thetas = np.arange(0.0, max_angle, angle_step)
    r = radius_step * np.sqrt(thetas)
    return anchor[0] + r * np.cos(thetas), anchor[1] + r * np.sin(thetas)


def _inside_mask(
    cxs: np.ndarray,
    cys: np.ndarray,
    rots: np.ndarray,
    sized: SizedLabel,
    ctx: LayoutContext,
) -> np.ndarray:
    """Vectorized canvas containment of the rotated boxes; exact check follows per candidate."""
    hw = sized.width / 2.0
    hh = sized.height / 2.0
    cos_a = np.abs(np.cos(rots))
    sin_a = np.abs(np.sin(rots))
    ex = hw * cos_a + hh * sin_a
    ey = hw * sin_a + hh * cos_a
    pad = ctx.spacing.padding
    return (
        (cxs - ex >= pad)
        & (cys - ey >= pad)
        & (cxs + ex <= ctx.canvas_w - pad)
        & (cys + ey <= ctx.canvas_h - pad)
    )


def _first_free(
    cxs: np.ndarray,
    cys: np.ndarray,
    rots: np.ndarray,
    sized: SizedLabel,
    placed: list[PlacedLabel],
    ctx: LayoutContext,
    phase: PlacementPhase,
) -> PhaseAttempt:
    """First candidate (in order) that is inside the canvas and clear of placed labels."""
    inside = np.flatnonzero(_inside_mask(cxs, cys, rots, sized, ctx))
    for i in inside:
        cx, cy, rot = float(cxs[i]), float(cys[i]), float(rots[i])
        aabb = rotated_aabb(cx, cy, sized.width, sized.height, rot)
        if not aabb_within(aabb, ctx.canvas_w, ctx.canvas_h, ctx.spacing.padding):
            continue
        if collides(aabb, placed, ctx.pad):
            continue
        return PhaseAttempt(phase, sized.at(cx, cy, rot, phase), probes=int(i) + 1)
    return PhaseAttempt(phase, None, probes=len(cxs))


def try_spiral(sized: SizedLabel, placed: list[PlacedLabel], ctx: LayoutContext) -> PhaseAttempt:
    """Phase A: walk the spiral out from the anchor; each candidate gets its own rotation."""
    cxs, cys = spiral_points(ctx.anchor, SPIRAL_MAX_ANGLE, ctx.spacing.angle_step, ctx.spacing.radius_step)
    rots = ctx.rng.uniform(-MAX_ROTATION_RAD, MAX_ROTATION_RAD, size=len(cxs))
    return _first_free(cxs, cys, rots, sized, placed, ctx, "spiral")


def try_random(sized: SizedLabel, placed: list[PlacedLabel], ctx: LayoutContext) -> PhaseAttempt:
    """Phase B: up to RANDOM_ATTEMPTS uniform centers in the padded canvas."""
    pad = ctx.spacing.padding
    if ctx.canvas_w - 2 * pad <= 0 or ctx.canvas_h - 2 * pad <= 0:
        return PhaseAttempt("random", None)
    cxs = ctx.rng.uniform(pad, ctx.canvas_w - pad, size=RANDOM_ATTEMPTS)
    cys = ctx.rng.uniform(pad, ctx.canvas_h - pad, size=RANDOM_ATTEMPTS)
    rots = ctx.rng.uniform(-MAX_ROTATION_RAD, MAX_ROTATION_RAD, size=RANDOM_ATTEMPTS)
    return _first_free(cxs, cys, rots, sized, placed, ctx, "random")


def _cursor_slot(sized: SizedLabel, cursor: FallbackCursor, rot: float) -> tuple[float, float, AABB]:
    """Center that puts the rotated box's bottom-left corner on the cursor."""
    extent = rotated_aabb(0.0, 0.0, sized.width, sized.height, rot)
    cx = cursor.x + extent.w / 2.0
    cy = cursor.y - extent.h / 2.0
    return cx, cy, rotated_aabb(cx, cy, sized.width, sized.height, rot)


def try_fallback(sized: SizedLabel, placed: list[PlacedLabel], ctx: LayoutContext) -> PhaseAttempt:
    """
    Phase C: pack at the shared cursor, bottom rows first, left to right.
    A rejected slot is skipped; the probe loop stops once the next row would
    cross the top padding.
    """
    cursor = ctx.cursor
    pad = ctx.spacing.padding
    attempts = 0
    while attempts < FALLBACK_ATTEMPTS:
        attempts += 1
        rot = random_rotation(ctx.rng)
        cx, cy, aabb = _cursor_slot(sized, cursor, rot)
        if cursor.x + aabb.w > cursor.right:
            cursor.wrap()
            cx, cy, aabb = _cursor_slot(sized, cursor, rot)
        if aabb.y < pad:
            break
        if aabb_within(aabb, ctx.canvas_w, ctx.canvas_h, pad) and not collides(aabb, placed, ctx.pad):
            cursor.row_max_height = max(cursor.row_max_height, aabb.h)
            cursor.advance(aabb.w)
            return PhaseAttempt("fallback", sized.at(cx, cy, rot, "fallback"), probes=attempts)
        cursor.advance(aabb.w)
    return PhaseAttempt("fallback", None, probes=attempts)


def place_forced(sized: SizedLabel, ctx: LayoutContext) -> PhaseAttempt:
    """Escape valve: place at the cursor even if it overlaps or leaves the padded canvas."""
    cursor = ctx.cursor
    rot = random_rotation(ctx.rng)
    cx, cy, aabb = _cursor_slot(sized, cursor, rot)
    cursor.row_max_height = max(cursor.row_max_height, aabb.h)
    cursor.advance(aabb.w)
    logger.warning(
        "Forced placement for label %r (source %d) at (%.1f, %.1f); overlap or out-of-bounds possible",
        sized.label.text, sized.label.source_index, cx, cy,
    )
    return PhaseAttempt("forced", sized.at(cx, cy, rot, "forced"), probes=1)


PHASE_STEPS = (try_spiral, try_random, try_fallback)


def place_label(
    label: Label,
    placed: list[PlacedLabel],
    ctx: LayoutContext,
    measure: TextMeasurer,
) -> tuple[PhaseAttempt, int]:
    """
    Place one label. Returns the successful attempt and the probes spent
    across every phase tried. Never fails: the last step is place_forced.
    """
    sized = fit_font_size(label, ctx.max_width, measure)
    if sized.size < label.size:
        logger.debug("Label %r shrunk from %.0f to %.0f", label.text, label.size, sized.size)
    probes = 0
    for step in PHASE_STEPS:
        attempt = step(sized, placed, ctx)
        probes += attempt.probes
        if attempt.ok:
            return attempt, probes
        logger.log(_ESCALATION_LEVEL, "Label %r: %s phase failed after %d probes", label.text, attempt.phase, attempt.probes)
    attempt = place_forced(sized, ctx)
    return attempt, probes + attempt.probes
