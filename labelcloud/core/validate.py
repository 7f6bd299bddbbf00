# labelcloud/core/validate.py
"""
Check a finished layout against its invariants: canvas containment, padded
non-overlap, one placement per source index, rotation bound.
"""

from __future__ import annotations

from collections import Counter

from labelcloud.core.config import MAX_ROTATION_RAD, OVERLAP_PAD, PADDING
from labelcloud.core.geometry import aabb_within, overlaps, placed_to_polygon
from labelcloud.core.types import LayoutReport, PlacedLabel

_ROTATION_TOLERANCE = 1e-9


def validate_layout(
    placed: list[PlacedLabel],
    canvas_w: float,
    canvas_h: float,
    padding: float = PADDING,
    pad: float = OVERLAP_PAD,
    expected_sources: list[int] | None = None,
) -> LayoutReport:
    """
    Indices in the report are positions in placed. overlap_area sums the
    shapely intersection area of the rotated label rectangles for every
    overlapping AABB pair. expected_sources defaults to 0..n-1.
    """
    report = LayoutReport(n_labels=len(placed))
    aabbs = [p.aabb for p in placed]

    for i, (p, box) in enumerate(zip(placed, aabbs)):
        if not aabb_within(box, canvas_w, canvas_h, padding):
            report.out_of_bounds.append(i)
        if abs(p.angle) > MAX_ROTATION_RAD + _ROTATION_TOLERANCE:
            report.rotation_violations.append(i)

    for i in range(len(placed)):
        for j in range(i + 1, len(placed)):
            if overlaps(aabbs[i], aabbs[j], pad):
                report.overlapping_pairs.append((i, j))
                inter = placed_to_polygon(placed[i]).intersection(placed_to_polygon(placed[j]))
                if not inter.is_empty:
                    report.overlap_area += float(inter.area)

    counts = Counter(p.source_index for p in placed)
    expected = expected_sources if expected_sources is not None else list(range(len(placed)))
    report.missing_sources = sorted(s for s in set(expected) if s not in counts)
    report.duplicate_sources = sorted(s for s, c in counts.items() if c > 1)
    return report


def forced_indices(placed: list[PlacedLabel]) -> list[int]:
    """Positions of labels placed by the escape valve."""
    return [i for i, p in enumerate(placed) if p.phase == "forced"]
