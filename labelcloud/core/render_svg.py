# labelcloud/core/render_svg.py
"""
Export a laid-out cloud as a self-contained SVG: one <text> per label,
centered on its placement point and rotated about it. SVG shares the canvas
coordinate system (origin top-left, y down), so no flip is needed.
"""

from __future__ import annotations

import math
import xml.etree.ElementTree as ET
from pathlib import Path

from labelcloud.core.config import BACKGROUND_COLOR, DEFAULT_FONT_FAMILY, LABEL_FONT_WEIGHT
from labelcloud.core.render import label_color
from labelcloud.core.types import LayoutSummary

SVG_NS = "http://www.w3.org/2000/svg"


def cloud_to_svg(summary: LayoutSummary, font_family: str = DEFAULT_FONT_FAMILY) -> str:
    """SVG document as a string. Labels appear in placement (paint) order."""
    w, h = summary.canvas_width, summary.canvas_height
    root = ET.Element(
        "svg",
        {
            "xmlns": SVG_NS,
            "width": f"{w:.0f}",
            "height": f"{h:.0f}",
            "viewBox": f"0 0 {w:.2f} {h:.2f}",
        },
    )
    ET.SubElement(root, "rect", {"x": "0", "y": "0", "width": f"{w:.2f}", "height": f"{h:.2f}", "fill": BACKGROUND_COLOR})

    g = ET.SubElement(root, "g", {"id": "labels", "font-family": font_family, "font-weight": LABEL_FONT_WEIGHT})
    for p in summary.placed:
        text = ET.SubElement(
            g,
            "text",
            {
                "x": f"{p.cx:.2f}",
                "y": f"{p.cy:.2f}",
                "font-size": f"{p.effective_size:.2f}",
                "fill": label_color(p.color_index),
                "text-anchor": "middle",
                "dominant-baseline": "middle",
                "transform": f"rotate({math.degrees(p.angle):.3f} {p.cx:.2f} {p.cy:.2f})",
                "data-source-index": str(p.source_index),
            },
        )
        text.text = p.text

    return '<?xml version="1.0" encoding="UTF-8"?>\n' + ET.tostring(root, encoding="unicode", method="xml")


def export_cloud_svg(
    summary: LayoutSummary,
    out_path: str | Path,
    font_family: str = DEFAULT_FONT_FAMILY,
) -> Path:
    """Write the SVG to out_path and return the path."""
    path = Path(out_path)
    path.write_text(cloud_to_svg(summary, font_family), encoding="utf-8")
    return path
