# labelcloud/core/hit_test.py
"""
Map a tap back to the label drawn under it. Labels are painted in placement
order, so the last placed label is on top and is tested first.
"""

from __future__ import annotations

from labelcloud.core.types import HitMap, LayoutSummary, PlacedLabel


def hit_test(placed: list[PlacedLabel], x: float, y: float) -> int | None:
    """source_index of the topmost label whose rotated AABB contains (x, y), else None."""
    for p in reversed(placed):
        if p.aabb.contains_point(x, y):
            return p.source_index
    return None


def view_to_canvas(
    view_x: float,
    view_y: float,
    view_w: float,
    view_h: float,
    canvas_w: float,
    canvas_h: float,
    scroll_top: float = 0.0,
) -> tuple[float, float]:
    """
    Rescale a point relative to the presentation surface's top-left corner into
    layout units. view_w/view_h of zero mean the surface is not scaled.
    scroll_top is already in layout units.
    """
    scale_x = canvas_w / view_w if view_w else 1.0
    scale_y = canvas_h / view_h if view_h else 1.0
    return (view_x * scale_x, view_y * scale_y + scroll_top)


def hit_map(summary: LayoutSummary) -> HitMap:
    """HitMap recording the canvas size the layout was computed for."""
    return HitMap(placed=list(summary.placed), width=summary.canvas_width, height=summary.canvas_height)
