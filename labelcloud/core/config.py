# labelcloud/core/config.py
"""
Central configuration for label cloud layout.
All tunable values live here; no magic numbers in other modules.
See: DESIGN.md (open question decisions).
"""

from __future__ import annotations

import math
import os

# ----- Paths (repo-relative) -----
REPORTS_DIR: str = "reports"

# ----- Font tiers -----
MIN_FONT_SIZE: float = 12.0
"""Hard floor when shrinking an over-wide label to fit the canvas."""

MIN_PRIMARY: float = 22.0
MAX_PRIMARY: float = 42.0
MIN_SECONDARY: float = 12.0
MAX_SECONDARY: float = 24.0

BASE_SIZE_FACTOR: float = 0.45
"""base = sqrt(area per label) * BASE_SIZE_FACTOR."""

PRIMARY_FACTOR: float = 1.6
SECONDARY_FACTOR: float = 0.75

COMPACT_THRESHOLD: int = 10
"""More labels than this switches to compact mode."""

COMPACT_FONT_FACTOR: float = 0.85
"""Both tiers are scaled by this in compact mode, then re-clamped."""

# ----- Text metrics -----
SHRINK_RATIO: float = 0.85
"""Per-step font shrink when a label is wider than the canvas."""

LINE_HEIGHT_RATIO: float = 1.08
"""Label box height = font size * LINE_HEIGHT_RATIO."""

WIDTH_SLACK: float = 1.0
"""Added to measured advance width."""

DEFAULT_FONT_FAMILY: str = "DejaVu Sans"

LABEL_FONT_WEIGHT: str = "bold"
"""Weight labels are painted with; text metrics measure the same weight."""

# ----- Spacing (normal, compact) -----
PADDING: float = 12.0
PADDING_COMPACT: float = 8.0
"""Canvas edge padding; labels must stay inside [padding, size - padding]."""

FALLBACK_GAP: float = 10.0
FALLBACK_GAP_COMPACT: float = 6.0
"""Gap between labels packed by the fallback cursor."""

OVERLAP_PAD: float = 4.0
"""Inflation applied to both boxes in the overlap test."""

CONTAINMENT_TOLERANCE: float = 1e-9
"""Tolerance for canvas containment; absorbs float rounding of boxes aligned to the padding."""

# ----- Phase A: spiral -----
ANCHOR_X_RATIO: float = 0.5
ANCHOR_Y_RATIO: float = 0.38
"""Spiral anchor, biased toward the upper middle of the canvas."""

SPIRAL_MAX_ANGLE: float = 32.0 * math.pi
SPIRAL_ANGLE_STEP: float = 0.04
SPIRAL_ANGLE_STEP_COMPACT: float = 0.03
SPIRAL_RADIUS_STEP: float = 1.2
SPIRAL_RADIUS_STEP_COMPACT: float = 1.0

# ----- Phase B: random retry -----
RANDOM_ATTEMPTS: int = 1200

# ----- Phase C: fallback cursor -----
FALLBACK_ATTEMPTS: int = 500

# ----- Rotation -----
MAX_ROTATION_DEG: float = 10.0
MAX_ROTATION_RAD: float = math.radians(MAX_ROTATION_DEG)

# ----- Determinism -----
SEED: int | None = None
"""Random seed for rotation jitter and random-phase centers; None for non-deterministic."""

# ----- Rendering -----
PALETTE: tuple[str, ...] = (
    "#1A56DB", "#0D9488", "#7C3AED", "#DC2626", "#DB2777", "#0369A1",
    "#059669", "#9333EA", "#EA580C", "#4F46E5", "#BE185D", "#0F766E",
)
"""Saturated colors readable on white; indexed by color_index % len(PALETTE)."""

BACKGROUND_COLOR: str = "#FFFFFF"
DEFAULT_CANVAS_WIDTH: float = 320.0
DEFAULT_CANVAS_HEIGHT: float = 400.0
RENDER_DPI: int = 100

SCHEMA_VERSION: str = "1.0"

# ----- Debug flags -----
LABELCLOUD_DEBUG: bool = os.environ.get("LABELCLOUD_DEBUG", "").lower() in ("1", "true", "yes")
"""Log every phase escalation at INFO instead of DEBUG. Set env LABELCLOUD_DEBUG=1 to enable."""
