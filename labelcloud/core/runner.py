# labelcloud/core/runner.py
"""
CLI entrypoint: load labels, compute font tiers, lay out, validate, render, export.
"""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path

import numpy as np

from labelcloud.core.config import (
    DEFAULT_CANVAS_HEIGHT,
    DEFAULT_CANVAS_WIDTH,
    DEFAULT_FONT_FAMILY,
    REPORTS_DIR,
    SEED,
)
from labelcloud.core.error_codes import INVALID_CANVAS, NO_LABELS, layout_warnings, user_message
from labelcloud.core.font_sizes import layout_spacing
from labelcloud.core.hit_test import hit_map
from labelcloud.core.io import load_label_sources, parse_label_sources
from labelcloud.core.labels import prepare_labels
from labelcloud.core.layout import run_layout
from labelcloud.core.reporting import (
    ensure_report_dir,
    write_placements_json,
    write_run_metadata_json,
)
from labelcloud.core.text_metrics import make_measurer
from labelcloud.core.validate import validate_layout

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Non-overlapping label cloud layout.")
    p.add_argument("--labels", type=str, default="", help="Label(s): 'Curious*,Calm,Kind' (* = primary) or a JSON list")
    p.add_argument("--labels-file", type=str, default=None, dest="labels_file", help="Labels .json or .csv (repo-relative)")
    p.add_argument("--width", type=float, default=DEFAULT_CANVAS_WIDTH, help="Canvas width (logical units)")
    p.add_argument("--height", type=float, default=DEFAULT_CANVAS_HEIGHT, help="Canvas height (logical units)")
    p.add_argument("--seed", type=int, default=SEED, help="Random seed (default: non-deterministic)")
    p.add_argument("--font-family", type=str, default=DEFAULT_FONT_FAMILY, dest="font_family", help="Font family for metrics and rendering")
    p.add_argument("--run-name", type=str, default="run", dest="run_name", help="Reports subdir name")
    p.add_argument("--output-dir", type=str, default=REPORTS_DIR, dest="output_dir", help="Output directory (repo-relative)")
    p.add_argument("--repo-root", type=str, default=None, dest="repo_root", help="Repo root (default: cwd)")
    p.add_argument("--hit", type=str, default=None, help="Resolve a tap at 'X,Y' (layout units) and print its source index")
    p.add_argument("--no-render", action="store_true", dest="no_render", help="Skip PNG/SVG output")
    return p.parse_args(argv)


def _parse_point(s: str) -> tuple[float, float]:
    parts = [t.strip() for t in s.split(",")]
    if len(parts) != 2:
        raise ValueError(f"Expected 'X,Y', got {s!r}")
    return float(parts[0]), float(parts[1])


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=getattr(logging, os.environ.get("LOG_LEVEL", "WARNING").upper(), logging.WARNING))
    args = _parse_args(argv)
    repo_root = Path(args.repo_root).resolve() if args.repo_root else Path.cwd().resolve()

    if not (args.width > 0 and args.height > 0):
        raise ValueError(user_message(INVALID_CANVAS))

    if args.labels_file:
        sources = load_label_sources(args.labels_file, repo_root=repo_root)
        labels_source = args.labels_file
    else:
        sources = parse_label_sources(args.labels)
        labels_source = args.labels
    labels, tiers = prepare_labels(sources, args.width, args.height)
    if not labels:
        raise ValueError(user_message(NO_LABELS))

    rng = np.random.default_rng(args.seed)
    summary = run_layout(
        labels,
        args.width,
        args.height,
        compact=tiers.compact,
        rng=rng,
        measure=make_measurer(args.font_family),
    )
    report = validate_layout(
        summary.placed,
        args.width,
        args.height,
        padding=layout_spacing(summary.compact).padding,
        expected_sources=[lab.source_index for lab in labels],
    )

    report_dir = ensure_report_dir(repo_root, args.run_name, output_dir=args.output_dir)
    outputs = [
        write_placements_json(report_dir, summary, report, tiers),
        write_run_metadata_json(report_dir, args.run_name, labels_source, args.width, args.height, args.font_family, args.seed),
    ]
    if not args.no_render:
        from labelcloud.core.render import render_cloud, render_debug
        from labelcloud.core.render_svg import export_cloud_svg

        render_cloud(summary, report_dir / "cloud.png", font_family=args.font_family)
        render_debug(summary, report_dir / "debug.png", font_family=args.font_family)
        outputs.append(report_dir / "cloud.png")
        outputs.append(report_dir / "debug.png")
        outputs.append(export_cloud_svg(summary, report_dir / "cloud.svg", font_family=args.font_family))

    for p in outputs:
        print(p)
    print("Phases:", ", ".join(f"{k}={v}" for k, v in summary.phase_counts.items()))
    for key in layout_warnings(summary.forced_count, report.ok):
        print("Warning:", user_message(key))

    if args.hit:
        x, y = _parse_point(args.hit)
        print("Hit:", hit_map(summary).resolve(x, y))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
