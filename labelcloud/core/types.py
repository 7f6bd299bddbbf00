# labelcloud/core/types.py
"""
Dataclasses for labels, placed labels, bounding boxes and layout results.
Schema aligns with reporting.placements_to_dict.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property
from typing import Literal


WeightClass = Literal["primary", "secondary"]
PlacementPhase = Literal["spiral", "random", "fallback", "forced"]

PHASES: tuple[PlacementPhase, ...] = ("spiral", "random", "fallback", "forced")


@dataclass(frozen=True)
class AABB:
    """Axis-aligned box: top-left (x, y), width w, height h."""
    x: float
    y: float
    w: float
    h: float

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def bottom(self) -> float:
        return self.y + self.h

    def contains_point(self, px: float, py: float) -> bool:
        """Inclusive on all four edges."""
        return self.x <= px <= self.right and self.y <= py <= self.bottom


@dataclass(frozen=True)
class LabelSource:
    """Caller-supplied label before font tiers are assigned."""
    text: str
    weight_class: WeightClass
    color_index: int
    source_index: int


@dataclass(frozen=True)
class Label:
    """Label ready for layout: size already tier-assigned."""
    text: str
    size: float
    color_index: int
    source_index: int


@dataclass(frozen=True)
class FontTiers:
    primary: float
    secondary: float
    compact: bool


@dataclass(frozen=True)
class LayoutSpacing:
    """Spacing and search-step constants; tighter in compact mode."""
    padding: float
    fallback_gap: float
    angle_step: float
    radius_step: float


@dataclass(frozen=True)
class PlacedLabel:
    """
    One label on the canvas. (cx, cy) is the rotation center; width/height are
    the unrotated box at effective_size.
    """
    text: str
    cx: float
    cy: float
    angle: float
    effective_size: float
    requested_size: float
    color_index: int
    source_index: int
    width: float
    height: float
    phase: PlacementPhase = "spiral"

    @property
    def center(self) -> tuple[float, float]:
        return (self.cx, self.cy)

    @cached_property
    def aabb(self) -> AABB:
        from labelcloud.core.geometry import rotated_aabb

        return rotated_aabb(self.cx, self.cy, self.width, self.height, self.angle)


@dataclass
class FallbackCursor:
    """
    Row-packing cursor shared by every label that reaches the fallback phase
    in one layout call. Rows fill left to right starting at the bottom; (x, y)
    is the bottom-left corner of the next slot.
    """
    x: float
    y: float
    left: float
    right: float
    gap: float
    row_max_height: float = 0.0

    @classmethod
    def start(cls, canvas_w: float, canvas_h: float, padding: float, gap: float) -> "FallbackCursor":
        return cls(x=padding, y=canvas_h - padding, left=padding, right=canvas_w - padding, gap=gap)

    def wrap(self) -> None:
        """Start a new row above the tallest label of the current one."""
        self.x = self.left
        self.y -= self.row_max_height + self.gap
        self.row_max_height = 0.0

    def advance(self, width: float) -> None:
        """Move past a slot of the given width; wrap when the row is full."""
        self.x += width + self.gap
        if self.x >= self.right:
            self.wrap()


@dataclass
class PhaseAttempt:
    """Tagged outcome of one placement phase for one label."""
    phase: PlacementPhase
    placed: PlacedLabel | None
    probes: int = 0

    @property
    def ok(self) -> bool:
        return self.placed is not None


@dataclass
class LayoutSummary:
    """Summary of one layout call: placed labels in processing order plus phase stats."""
    placed: list[PlacedLabel]
    canvas_width: float
    canvas_height: float
    compact: bool
    phase_counts: dict[str, int] = field(default_factory=dict)
    probes: int = 0

    @property
    def forced_count(self) -> int:
        return self.phase_counts.get("forced", 0)

    def hit_test(self, x: float, y: float) -> int | None:
        from labelcloud.core.hit_test import hit_test

        return hit_test(self.placed, x, y)

    def by_source_index(self) -> list[PlacedLabel]:
        """Placed labels re-sorted into original input order."""
        return sorted(self.placed, key=lambda p: p.source_index)


@dataclass
class LayoutReport:
    """Invariant check result for a layout. See validate.validate_layout."""
    n_labels: int
    out_of_bounds: list[int] = field(default_factory=list)
    overlapping_pairs: list[tuple[int, int]] = field(default_factory=list)
    overlap_area: float = 0.0
    missing_sources: list[int] = field(default_factory=list)
    duplicate_sources: list[int] = field(default_factory=list)
    rotation_violations: list[int] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not (
            self.out_of_bounds
            or self.overlapping_pairs
            or self.missing_sources
            or self.duplicate_sources
            or self.rotation_violations
        )


@dataclass
class HitMap:
    """Placed labels plus the canvas size recorded at layout time."""
    placed: list[PlacedLabel]
    width: float
    height: float

    def resolve(self, x: float, y: float) -> int | None:
        """Hit test a layout-space point, clamped to the canvas first."""
        from labelcloud.core.hit_test import hit_test

        cx = min(max(0.0, x), self.width)
        cy = min(max(0.0, y), self.height)
        return hit_test(self.placed, cx, cy)
