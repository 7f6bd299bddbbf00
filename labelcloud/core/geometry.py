# labelcloud/core/geometry.py
"""
Geometry helpers: rotated-rectangle AABB, padded overlap test, canvas
containment, shapely polygons for validation and rendering.
"""

from __future__ import annotations

import math
from typing import Iterable

from shapely.geometry import Polygon, box

from labelcloud.core.config import CONTAINMENT_TOLERANCE, OVERLAP_PAD
from labelcloud.core.types import AABB, PlacedLabel


def rotated_corners(
    cx: float, cy: float, w: float, h: float, angle: float
) -> list[tuple[float, float]]:
    """Four corners of a w x h rectangle centered at (cx, cy), rotated by angle (radians)."""
    hw = w / 2.0
    hh = h / 2.0
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    corners = [
        (-hw, -hh),
        (hw, -hh),
        (hw, hh),
        (-hw, hh),
    ]
    return [
        (cx + x * cos_a - y * sin_a, cy + x * sin_a + y * cos_a)
        for x, y in corners
    ]


def rotated_aabb(cx: float, cy: float, w: float, h: float, angle: float) -> AABB:
    """Axis-aligned box enclosing the rotated rectangle."""
    pts = rotated_corners(cx, cy, w, h, angle)
    xs = [p[0] for p in pts]
    ys = [p[1] for p in pts]
    min_x = min(xs)
    min_y = min(ys)
    return AABB(min_x, min_y, max(xs) - min_x, max(ys) - min_y)


def overlaps(a: AABB, b: AABB, pad: float = OVERLAP_PAD) -> bool:
    """
    True if a and b intersect once both are inflated by pad. Strict
    inequalities: boxes exactly pad apart do not overlap.
    """
    return (
        a.x < b.right + pad
        and a.right + pad > b.x
        and a.y < b.bottom + pad
        and a.bottom + pad > b.y
    )


def aabb_within(
    aabb: AABB,
    canvas_w: float,
    canvas_h: float,
    padding: float,
    tolerance: float = CONTAINMENT_TOLERANCE,
) -> bool:
    """True if aabb lies inside [padding, canvas_w - padding] x [padding, canvas_h - padding]."""
    return (
        aabb.x >= padding - tolerance
        and aabb.y >= padding - tolerance
        and aabb.right <= canvas_w - padding + tolerance
        and aabb.bottom <= canvas_h - padding + tolerance
    )


def collides(aabb: AABB, placed: Iterable[PlacedLabel], pad: float = OVERLAP_PAD) -> bool:
    """True if aabb overlaps any already placed label."""
    for p in placed:
        if overlaps(aabb, p.aabb, pad):
            return True
    return False


def oriented_rectangle(cx: float, cy: float, w: float, h: float, angle: float) -> Polygon:
    """Rotated label rectangle as a shapely polygon."""
    return Polygon(rotated_corners(cx, cy, w, h, angle))


def aabb_to_polygon(aabb: AABB, buffer: float = 0.0) -> Polygon:
    """AABB as a shapely box, optionally grown by buffer on every side."""
    return box(aabb.x - buffer, aabb.y - buffer, aabb.right + buffer, aabb.bottom + buffer)


def placed_to_polygon(p: PlacedLabel) -> Polygon:
    return oriented_rectangle(p.cx, p.cy, p.width, p.height, p.angle)


def canvas_polygon(canvas_w: float, canvas_h: float, padding: float = 0.0) -> Polygon:
    """Padded canvas area as a shapely box; empty if padding swallows it."""
    if canvas_w - 2 * padding <= 0 or canvas_h - 2 * padding <= 0:
        return Polygon()
    return box(padding, padding, canvas_w - padding, canvas_h - padding)
