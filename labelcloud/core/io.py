# labelcloud/core/io.py
"""
Load label sources from JSON, CSV or a comma-separated string.
Texts are trimmed; entries without text get a generated display name.
"""

from __future__ import annotations

import csv
import json
from pathlib import Path

from labelcloud.core.labels import display_name
from labelcloud.core.types import LabelSource, WeightClass

PRIMARY_MARKER = "*"


def _resolve_path(path: str | Path, repo_root: Path | None) -> Path:
    """Resolve path; if relative, against repo_root (or cwd if repo_root is None)."""
    p = Path(path)
    if not p.is_absolute() and repo_root is not None:
        p = repo_root / p
    return p.resolve()


def _weight_class(value: object) -> WeightClass:
    s = str(value or "").strip().lower()
    if s in ("primary", "1", "true", "yes", PRIMARY_MARKER):
        return "primary"
    if s in ("", "secondary", "0", "false", "no"):
        return "secondary"
    raise ValueError(f"Unknown weight class: {value!r}")


def _source_from_record(record: object, index: int) -> LabelSource:
    """One JSON entry: a plain string or an object with text/name, weight_class, color_index."""
    if isinstance(record, str):
        text, weight = _split_marker(record)
        return LabelSource(text=text, weight_class=weight, color_index=index, source_index=index)
    if not isinstance(record, dict):
        raise ValueError(f"Label entry {index} must be a string or an object")
    text = record.get("text", record.get("name"))
    color = record.get("color_index", index)
    return LabelSource(
        text=display_name(text, index),
        weight_class=_weight_class(record.get("weight_class")),
        color_index=int(color),
        source_index=index,
    )


def _split_marker(raw: str) -> tuple[str, WeightClass]:
    """'Curious*' -> ('Curious', 'primary'); 'Calm' -> ('Calm', 'secondary')."""
    s = raw.strip()
    if s.endswith(PRIMARY_MARKER):
        return s[: -len(PRIMARY_MARKER)].strip(), "primary"
    return s, "secondary"


def parse_label_sources(text: str) -> list[LabelSource]:
    """
    Parse 'A*,B,C' (a trailing * marks a primary label) or a JSON list.
    Empty items are skipped; source indices follow the kept items.
    """
    text = (text or "").strip()
    if not text:
        return []
    if text.startswith("["):
        try:
            arr = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON label list: {e}") from e
        return [_source_from_record(rec, i) for i, rec in enumerate(arr)]
    out: list[LabelSource] = []
    for part in text.split(","):
        label_text, weight = _split_marker(part)
        if not label_text:
            continue
        i = len(out)
        out.append(LabelSource(text=label_text, weight_class=weight, color_index=i, source_index=i))
    return out


def _load_csv(path: Path) -> list[LabelSource]:
    """CSV with header text,weight_class[,color_index]."""
    out: list[LabelSource] = []
    with open(path, newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        if reader.fieldnames is None or "text" not in reader.fieldnames:
            raise ValueError(f"CSV must have a 'text' column: {path}")
        for i, row in enumerate(reader):
            color = (row.get("color_index") or "").strip()
            out.append(LabelSource(
                text=display_name(row.get("text"), i),
                weight_class=_weight_class(row.get("weight_class")),
                color_index=int(color) if color else i,
                source_index=i,
            ))
    return out


def load_label_sources(path: str | Path, repo_root: Path | None = None) -> list[LabelSource]:
    """
    Load label sources from a .json or .csv file.
    Raises FileNotFoundError if path is missing, ValueError on bad content.
    """
    resolved = _resolve_path(path, repo_root)
    if not resolved.exists():
        raise FileNotFoundError(f"Labels file not found: {resolved}")
    if resolved.suffix.lower() == ".csv":
        return _load_csv(resolved)
    try:
        data = json.loads(resolved.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {resolved}: {e}") from e
    if isinstance(data, dict):
        data = data.get("labels", [])
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of labels in {resolved}")
    return [_source_from_record(rec, i) for i, rec in enumerate(data)]
