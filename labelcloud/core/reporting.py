# labelcloud/core/reporting.py
"""
Create reports/<run_name>/ and write placements.json and run_metadata.json.
"""

from __future__ import annotations

import json
import math
from datetime import datetime, timezone
from pathlib import Path

from labelcloud.core.config import (
    DEFAULT_FONT_FAMILY,
    FALLBACK_ATTEMPTS,
    MAX_ROTATION_DEG,
    OVERLAP_PAD,
    RANDOM_ATTEMPTS,
    REPORTS_DIR,
    SCHEMA_VERSION,
    SEED,
    SPIRAL_MAX_ANGLE,
)
from labelcloud.core.error_codes import layout_warnings
from labelcloud.core.font_sizes import layout_spacing
from labelcloud.core.types import FontTiers, LayoutReport, LayoutSummary, PlacedLabel
from labelcloud.core.validate import forced_indices


def placed_to_dict(p: PlacedLabel) -> dict:
    """One placed label; angle in radians and degrees, AABB in canvas units."""
    box = p.aabb
    return {
        "text": p.text,
        "source_index": p.source_index,
        "color_index": p.color_index,
        "center": {"x": p.cx, "y": p.cy},
        "angle_rad": p.angle,
        "angle_deg": math.degrees(p.angle),
        "requested_size": p.requested_size,
        "effective_size": p.effective_size,
        "width": p.width,
        "height": p.height,
        "aabb": {"x": box.x, "y": box.y, "w": box.w, "h": box.h},
        "phase": p.phase,
    }


def report_to_dict(report: LayoutReport) -> dict:
    return {
        "ok": report.ok,
        "out_of_bounds": list(report.out_of_bounds),
        "overlapping_pairs": [list(pair) for pair in report.overlapping_pairs],
        "overlap_area": report.overlap_area,
        "missing_sources": list(report.missing_sources),
        "duplicate_sources": list(report.duplicate_sources),
        "rotation_violations": list(report.rotation_violations),
    }


def placements_to_dict(
    summary: LayoutSummary,
    report: LayoutReport,
    tiers: FontTiers | None = None,
) -> dict:
    """Exact structure for placements.json."""
    out = {
        "schema_version": SCHEMA_VERSION,
        "canvas": {
            "width": summary.canvas_width,
            "height": summary.canvas_height,
            "compact": summary.compact,
            "padding": layout_spacing(summary.compact).padding,
        },
        "labels": [placed_to_dict(p) for p in summary.placed],
        "summary": {
            "n_labels": len(summary.placed),
            "phase_counts": dict(summary.phase_counts),
            "forced_count": summary.forced_count,
            "forced_indices": forced_indices(summary.placed),
            "probes": summary.probes,
        },
        "validation": report_to_dict(report),
        "warnings": layout_warnings(summary.forced_count, report.ok),
    }
    if tiers is not None:
        out["font_tiers"] = {"primary": tiers.primary, "secondary": tiers.secondary}
    return out


def run_metadata_dict(
    run_name: str,
    labels_source: str,
    canvas_w: float,
    canvas_h: float,
    font_family: str,
    seed: int | None,
) -> dict:
    """Timestamp and config snapshot for run_metadata.json."""
    return {
        "run_name": run_name,
        "timestamp_utc": datetime.now(timezone.utc).isoformat(),
        "labels_source": labels_source,
        "canvas": {"width": canvas_w, "height": canvas_h},
        "font_family": font_family,
        "seed": seed,
        "config": {
            "SPIRAL_MAX_ANGLE": SPIRAL_MAX_ANGLE,
            "RANDOM_ATTEMPTS": RANDOM_ATTEMPTS,
            "FALLBACK_ATTEMPTS": FALLBACK_ATTEMPTS,
            "MAX_ROTATION_DEG": MAX_ROTATION_DEG,
            "OVERLAP_PAD": OVERLAP_PAD,
            "DEFAULT_FONT_FAMILY": DEFAULT_FONT_FAMILY,
            "SEED": SEED,
        },
    }


def ensure_report_dir(
    repo_root: Path,
    run_name: str,
    output_dir: str | None = None,
) -> Path:
    """Create output_dir/<run_name>/ under repo_root; return path. Default output_dir from config."""
    base = output_dir if output_dir is not None else REPORTS_DIR
    out = (repo_root / base).resolve() / run_name
    out.mkdir(parents=True, exist_ok=True)
    return out


def write_placements_json(
    report_dir: Path,
    summary: LayoutSummary,
    report: LayoutReport,
    tiers: FontTiers | None = None,
) -> Path:
    """Write placements.json to report_dir. Returns path to file."""
    path = report_dir / "placements.json"
    data = placements_to_dict(summary, report, tiers)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    return path


def write_run_metadata_json(
    report_dir: Path,
    run_name: str,
    labels_source: str,
    canvas_w: float,
    canvas_h: float,
    font_family: str,
    seed: int | None,
) -> Path:
    """Write run_metadata.json to report_dir."""
    path = report_dir / "run_metadata.json"
    data = run_metadata_dict(run_name, labels_source, canvas_w, canvas_h, font_family, seed)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path
