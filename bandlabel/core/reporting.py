"""
Create reports/<run_name>/ and write placements.json, run_metadata.json
and density.json.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence

from bandlabel.core.config import (
    BOUNDARY_MODE,
    DENSITY_THRESHOLDS,
    FONT_HEIGHT_PX,
    FONT_WIDTH_PX,
    OFFSCREEN_ANCHOR,
    REPORTS_DIR,
    STACK_OFFSET,
    STREAM_COLORMAP,
)
from bandlabel.core.error_codes import user_message
from bandlabel.core.types import PlacementResult

SCHEMA_VERSION = "1.0"


def placement_to_dict(result: PlacementResult) -> dict:
    """One entry of placements.json."""
    return {
        "key": result.key,
        "label": result.label_text,
        "mode": result.mode,
        "anchor": {"x": result.anchor[0], "y": result.anchor[1]} if result.anchor is not None else None,
        "step_index": result.step_index,
        "footprint": {"width": result.width_px, "height": result.height_px},
        "bbox": [{"x": float(x), "y": float(y)} for x, y in result.bbox],
        "reason": result.reason,
        "message": user_message(result.reason),
    }


def placements_summary(results: Sequence[PlacementResult]) -> dict:
    placed = sum(1 for r in results if r.placed)
    by_mode: dict[str, int] = {}
    for r in results:
        by_mode[r.mode] = by_mode.get(r.mode, 0) + 1
    return {"n_bands": len(results), "placed": placed, "hidden": len(results) - placed, "by_mode": by_mode}


def run_metadata_dict(
    run_name: str,
    chart: str,
    inputs: dict,
    font_width_px: float,
    font_height_px: float,
    boundary: str,
) -> dict:
    """Timestamp and config snapshot for run_metadata.json."""
    return {
        "run_name": run_name,
        "chart": chart,
        "timestamp_utc": datetime.now(timezone.utc).isoformat(),
        "inputs": inputs,
        "font_width_px": font_width_px,
        "font_height_px": font_height_px,
        "boundary": boundary,
        "config": {
            "FONT_WIDTH_PX": FONT_WIDTH_PX,
            "FONT_HEIGHT_PX": FONT_HEIGHT_PX,
            "BOUNDARY_MODE": BOUNDARY_MODE,
            "OFFSCREEN_ANCHOR": list(OFFSCREEN_ANCHOR),
            "STACK_OFFSET": STACK_OFFSET,
            "STREAM_COLORMAP": STREAM_COLORMAP,
            "DENSITY_THRESHOLDS": list(DENSITY_THRESHOLDS),
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


def _write_json(path: Path, data: dict) -> Path:
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    return path


def write_placements_json(report_dir: Path, results: Sequence[PlacementResult], inputs: dict) -> Path:
    """Write placements.json: schema_version, placements, summary, input."""
    data = {
        "schema_version": SCHEMA_VERSION,
        "placements": [placement_to_dict(r) for r in results],
        "summary": placements_summary(results),
        "input": inputs,
    }
    return _write_json(report_dir / "placements.json", data)


def write_run_metadata_json(
    report_dir: Path,
    run_name: str,
    chart: str,
    inputs: dict,
    font_width_px: float = FONT_WIDTH_PX,
    font_height_px: float = FONT_HEIGHT_PX,
    boundary: str = BOUNDARY_MODE,
) -> Path:
    data = run_metadata_dict(run_name, chart, inputs, font_width_px, font_height_px, boundary)
    return _write_json(report_dir / "run_metadata.json", data)


def write_density_json(report_dir: Path, summary: dict, inputs: dict) -> Path:
    """Write density.json: class counts and districts without census data."""
    data = {"schema_version": SCHEMA_VERSION, "summary": summary, "input": inputs}
    return _write_json(report_dir / "density.json", data)
