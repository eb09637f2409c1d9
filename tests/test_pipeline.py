"""
End-to-end: sample portfolio -> stream graph layout, labels inside their
bands; smoke run writes every artifact.
"""

from __future__ import annotations

import sys
from pathlib import Path

from bandlabel.core.config import REPORTS_DIR
from bandlabel.core.geometry import band_polygon, point_in_polygon
from bandlabel.core.pipeline import canvas_size, layout_streamgraph
from bandlabel.core.portfolio import load_portfolio
from bandlabel.core.runner import _parse_args
from bandlabel.core.smoke import run_smoke

REPO_ROOT = Path(__file__).resolve().parent.parent


def test_canvas_size_has_minimum() -> None:
    assert canvas_size(None, None) == (1200.0, 700.0)
    assert canvas_size(1600, 500) == (1600.0, 700.0)


def test_layout_places_labels_inside_bands() -> None:
    table = load_portfolio("data/sample_portfolio.json", repo_root=REPO_ROOT)
    layout = layout_streamgraph(table)
    assert [b.key for b in layout.bands] == sorted(table.tickers)
    assert len(layout.placements) == len(layout.bands)
    assert any(r.placed for r in layout.placements)
    for band, result in zip(layout.bands, layout.placements):
        assert result.key == band.key
        if result.placed:
            poly = band_polygon(band)
            assert all(point_in_polygon(c, poly) for c in result.bbox)
    assert len(layout.ticks) == len(table.dates)
    assert layout.ticks[0][0] == 0.0


def test_smoke_writes_all_outputs(tmp_path: Path) -> None:
    report_dir = run_smoke(REPO_ROOT, output_dir=str(tmp_path))
    for name in (
        "streamgraph.svg",
        "streamgraph.png",
        "debug.png",
        "placements.json",
        "run_metadata.json",
        "density.svg",
        "density.json",
    ):
        assert (report_dir / name).exists(), name


def test_cli_writes_under_configured_reports_dir(monkeypatch) -> None:
    monkeypatch.setattr(sys, "argv", ["bandlabel"])
    args = _parse_args()
    assert args.output_dir == REPORTS_DIR
    assert args.chart == "streamgraph"
