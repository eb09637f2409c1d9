"""
placements.json / run_metadata.json shape. Deterministic, no data files.
"""

from __future__ import annotations

import json
from pathlib import Path

from bandlabel.core.placement import place_with_details
from bandlabel.core.reporting import (
    ensure_report_dir,
    placement_to_dict,
    placements_summary,
    write_placements_json,
    write_run_metadata_json,
)
from bandlabel.core.types import Band

REQUIRED_KEYS = ["key", "label", "mode", "anchor", "step_index", "footprint", "bbox", "reason", "message"]


def _results():
    big = Band.from_steps("big", [(0, 0, 100), (200, 0, 100)])
    small = Band.from_steps("small", [(0, 0, 5), (10, 0, 5)])
    return [place_with_details(big, "Big"), place_with_details(small, "Small")]


def test_placement_to_dict_keys() -> None:
    placed, hidden = (placement_to_dict(r) for r in _results())
    for key in REQUIRED_KEYS:
        assert key in placed and key in hidden
    assert placed["anchor"] == {"x": 100.0, "y": 50.0}
    assert len(placed["bbox"]) == 4
    assert hidden["anchor"] is None
    assert hidden["reason"] == "no_fit"
    assert hidden["message"]


def test_placements_summary() -> None:
    s = placements_summary(_results())
    assert s == {"n_bands": 2, "placed": 1, "hidden": 1, "by_mode": {"centroid": 1, "none": 1}}


def test_write_json_files(tmp_path: Path) -> None:
    report_dir = ensure_report_dir(tmp_path, "r1")
    assert report_dir == (tmp_path / "reports" / "r1").resolve()
    p = write_placements_json(report_dir, _results(), {"portfolio": "x.json"})
    data = json.loads(p.read_text(encoding="utf-8"))
    assert data["schema_version"] == "1.0"
    assert len(data["placements"]) == 2
    assert data["input"] == {"portfolio": "x.json"}
    m = write_run_metadata_json(report_dir, "r1", "streamgraph", {"portfolio": "x.json"})
    meta = json.loads(m.read_text(encoding="utf-8"))
    assert meta["run_name"] == "r1"
    assert meta["config"]["FONT_WIDTH_PX"] == 5.0
