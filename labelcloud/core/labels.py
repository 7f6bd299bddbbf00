# labelcloud/core/labels.py
"""
Turn caller label sources into layout-ready labels: display names, tier
sizes, descending-size order.
"""

from __future__ import annotations

from typing import Iterable

from labelcloud.core.font_sizes import compute_font_tiers
from labelcloud.core.types import FontTiers, Label, LabelSource


def display_name(text: str | None, source_index: int | None = None) -> str:
    """Trimmed label text; unnamed items get a generated 'Label-<n>' name."""
    s = text.strip() if isinstance(text, str) else ""
    if s:
        return s
    if source_index is not None:
        return f"Label-{source_index}"
    return ""


def sort_labels(labels: Iterable[Label]) -> list[Label]:
    """Descending by size; equal sizes keep input order (sorted() is stable)."""
    return sorted(labels, key=lambda lab: -lab.size)


def build_labels(sources: Iterable[LabelSource], tiers: FontTiers) -> list[Label]:
    """Assign tier sizes, drop empty texts, sort for layout."""
    out: list[Label] = []
    for src in sources:
        text = src.text.strip()
        if not text:
            continue
        size = tiers.primary if src.weight_class == "primary" else tiers.secondary
        out.append(Label(text=text, size=size, color_index=src.color_index, source_index=src.source_index))
    return sort_labels(out)


def prepare_labels(
    sources: list[LabelSource],
    canvas_w: float,
    canvas_h: float,
) -> tuple[list[Label], FontTiers]:
    """Font tiers for this canvas and label count, then layout-ready labels."""
    n = sum(1 for s in sources if s.text.strip())
    tiers = compute_font_tiers(canvas_w, canvas_h, n)
    return build_labels(sources, tiers), tiers


def validate_canvas(canvas_w: float, canvas_h: float) -> None:
    """Raise ValueError for non-positive canvas dimensions."""
    if not (canvas_w > 0 and canvas_h > 0):
        raise ValueError(f"Canvas dimensions must be positive, got {canvas_w} x {canvas_h}")
