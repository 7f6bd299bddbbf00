# labelcloud/core/render.py
"""
Matplotlib PNG rendering: cloud.png (labels in palette colors) and debug.png
(rotated boxes, AABBs, spiral anchor and path, labels colored by phase).
Canvas coordinates are screen-like: origin top-left, y down.
"""

from __future__ import annotations

import math
import warnings
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
from shapely.geometry import Polygon

from labelcloud.core.config import (
    BACKGROUND_COLOR,
    DEFAULT_FONT_FAMILY,
    LABEL_FONT_WEIGHT,
    PALETTE,
    RENDER_DPI,
    SPIRAL_MAX_ANGLE,
)
from labelcloud.core.font_sizes import layout_spacing
from labelcloud.core.geometry import aabb_to_polygon, canvas_polygon, placed_to_polygon
from labelcloud.core.placement import spiral_anchor, spiral_points
from labelcloud.core.types import LayoutSummary, PlacedLabel

PHASE_COLORS: dict[str, str] = {
    "spiral": "tab:green",
    "random": "tab:blue",
    "fallback": "tab:orange",
    "forced": "tab:red",
}


def label_color(color_index: int) -> str:
    return PALETTE[color_index % len(PALETTE)]


def _new_fig(canvas_w: float, canvas_h: float, scale: int = 1) -> tuple[plt.Figure, plt.Axes]:
    fig = plt.figure(
        figsize=(canvas_w * scale / RENDER_DPI, canvas_h * scale / RENDER_DPI),
        dpi=RENDER_DPI,
        constrained_layout=False,
    )
    ax = fig.add_axes([0, 0, 1, 1])  # full-canvas axes
    ax.set_xlim(0, canvas_w)
    ax.set_ylim(canvas_h, 0)  # y down
    ax.set_aspect("equal", adjustable="box")
    ax.axis("off")
    return fig, ax


def _draw_label(
    ax: plt.Axes,
    p: PlacedLabel,
    color: str,
    font_family: str,
    scale: int,
) -> None:
    # Canvas units are pixels at RENDER_DPI; matplotlib sizes are points.
    # y is flipped, so a clockwise canvas angle is a negative matplotlib rotation.
    ax.text(
        p.cx, p.cy, p.text,
        fontsize=p.effective_size * scale * 72.0 / RENDER_DPI,
        fontfamily=font_family,
        fontweight=LABEL_FONT_WEIGHT,
        ha="center", va="center",
        color=color,
        rotation=-math.degrees(p.angle),
        rotation_mode="anchor",
        zorder=5,
    )


def _save(fig: plt.Figure, output_path: str | Path, **kwargs: object) -> None:
    with warnings.catch_warnings():
        warnings.filterwarnings("ignore", message=".*constrained_layout.*", category=UserWarning)
        fig.savefig(output_path, dpi=RENDER_DPI, facecolor=BACKGROUND_COLOR, **kwargs)
    plt.close(fig)


def render_cloud(
    summary: LayoutSummary,
    output_path: str | Path,
    font_family: str = DEFAULT_FONT_FAMILY,
    scale: int = 1,
) -> None:
    """Paint labels in placement order. scale multiplies output resolution (1x, 2x, 4x)."""
    fig, ax = _new_fig(summary.canvas_width, summary.canvas_height, scale)
    for p in summary.placed:
        _draw_label(ax, p, label_color(p.color_index), font_family, scale)
    _save(fig, output_path)


def _plot_outline(ax: plt.Axes, poly: Polygon, **kwargs: object) -> None:
    if poly.is_empty:
        return
    xy = np.array(poly.exterior.coords)
    ax.plot(xy[:, 0], xy[:, 1], **kwargs)


def render_debug(
    summary: LayoutSummary,
    output_path: str | Path,
    font_family: str = DEFAULT_FONT_FAMILY,
    scale: int = 1,
    show_spiral: bool = True,
) -> None:
    """Debug overlay: padded canvas, rotated boxes, AABBs, spiral anchor/path, labels colored by phase."""
    cw, ch = summary.canvas_width, summary.canvas_height
    spacing = layout_spacing(summary.compact)
    fig, ax = _new_fig(cw, ch, scale)

    _plot_outline(ax, canvas_polygon(cw, ch, spacing.padding), linestyle="--", linewidth=1, color="gray")

    if show_spiral:
        anchor = spiral_anchor(cw, ch)
        xs, ys = spiral_points(anchor, SPIRAL_MAX_ANGLE, spacing.angle_step, spacing.radius_step)
        ax.plot(xs, ys, linewidth=0.3, alpha=0.4, color="gray")
        ax.scatter([anchor[0]], [anchor[1]], s=12, marker="x", color="black", zorder=7)

    for p in summary.placed:
        color = PHASE_COLORS.get(p.phase, "black")
        _plot_outline(ax, placed_to_polygon(p), linewidth=1, color=color)
        _plot_outline(ax, aabb_to_polygon(p.aabb), linewidth=0.5, linestyle=":", color=color)
        _draw_label(ax, p, color, font_family, scale)

    _save(fig, output_path)
