"""
placements.json shape: required keys exist, JSON round-trips, files are written.
"""

from __future__ import annotations

import json
import tempfile
from pathlib import Path

import numpy as np

from labelcloud.core.font_sizes import compute_font_tiers
from labelcloud.core.layout import run_layout
from labelcloud.core.reporting import (
    ensure_report_dir,
    placements_to_dict,
    write_placements_json,
    write_run_metadata_json,
)
from labelcloud.core.types import Label
from labelcloud.core.validate import validate_layout


def _measure(text: str, size: float) -> tuple[float, float]:
    return (len(text) * size * 0.6 + 1.0, size * 1.08)


def _summary():
    labels = [
        Label(text="Curious", size=40, color_index=0, source_index=0),
        Label(text="Calm", size=24, color_index=1, source_index=1),
    ]
    summary = run_layout(labels, 300, 300, rng=np.random.default_rng(0), measure=_measure)
    report = validate_layout(summary.placed, 300, 300, padding=12)
    return summary, report


REQUIRED_KEYS = [
    "schema_version",
    ("canvas", "width"),
    ("canvas", "height"),
    ("canvas", "compact"),
    ("canvas", "padding"),
    ("summary", "n_labels"),
    ("summary", "phase_counts"),
    ("summary", "forced_count"),
    ("summary", "forced_indices"),
    ("validation", "ok"),
    ("validation", "overlapping_pairs"),
    "labels",
    "warnings",
]

LABEL_KEYS = (
    "text", "source_index", "color_index", "center", "angle_rad", "angle_deg",
    "requested_size", "effective_size", "width", "height", "aabb", "phase",
)


def test_placements_schema_required_keys_exist() -> None:
    summary, report = _summary()
    data = placements_to_dict(summary, report)
    for key in REQUIRED_KEYS:
        if isinstance(key, tuple):
            obj = data
            for k in key:
                assert k in obj, f"Missing key: {key}"
                obj = obj[k]
        else:
            assert key in data, f"Missing key: {key}"
    assert data["schema_version"] == "1.0"
    for entry in data["labels"]:
        for k in LABEL_KEYS:
            assert k in entry, f"Missing label key: {k}"


def test_placements_json_roundtrip() -> None:
    summary, report = _summary()
    tiers = compute_font_tiers(300, 300, 2)
    data = placements_to_dict(summary, report, tiers)
    loaded = json.loads(json.dumps(data))
    assert loaded["summary"]["n_labels"] == 2
    assert [e["source_index"] for e in loaded["labels"]] == [0, 1]
    assert loaded["font_tiers"]["primary"] == tiers.primary
    assert loaded["validation"]["ok"] is True
    assert loaded["warnings"] == []


def test_write_reports() -> None:
    summary, report = _summary()
    with tempfile.TemporaryDirectory() as tmp:
        report_dir = ensure_report_dir(Path(tmp), "unit", output_dir="reports")
        assert report_dir.is_dir()
        p1 = write_placements_json(report_dir, summary, report)
        p2 = write_run_metadata_json(report_dir, "unit", "Curious,Calm", 300, 300, "DejaVu Sans", 0)
        assert p1.exists() and p2.exists()
        meta = json.loads(p2.read_text(encoding="utf-8"))
        assert meta["run_name"] == "unit"
        assert meta["canvas"] == {"width": 300, "height": 300}
        assert "RANDOM_ATTEMPTS" in meta["config"]


def test_forced_labels_listed_in_summary() -> None:
    labels = [Label(text="W" * 40, size=16, color_index=0, source_index=0)]
    summary = run_layout(labels, 100, 100, rng=np.random.default_rng(0), measure=_measure)
    report = validate_layout(summary.placed, 100, 100, padding=12)
    data = placements_to_dict(summary, report)
    assert data["summary"]["forced_indices"] == [0]
    assert "forced_placement" in data["warnings"]
