"""
CLI entrypoint: render the holdings stream graph (default) or the district
density choropleth and write them to reports/<run_name>/.
Default inputs are the bundled sample datasets under data/.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from bandlabel.core.config import (
    BANDLABEL_DEBUG,
    BOUNDARY_MODE,
    BOUNDARY_MODES,
    DEFAULT_DISTRICTS_PATH,
    DEFAULT_POPULATION_PATH,
    DEFAULT_PORTFOLIO_PATH,
    DEFAULT_STATES_PATH,
    DENSITY_HEIGHT_PX,
    DENSITY_WIDTH_PX,
    FONT_HEIGHT_PX,
    FONT_WIDTH_PX,
    LOG_LEVEL,
    REPORTS_DIR,
    STACK_OFFSET,
    STACK_OFFSETS,
    STREAM_MIN_HEIGHT_PX,
    STREAM_MIN_WIDTH_PX,
)
from bandlabel.core.pipeline import layout_streamgraph, run_density, write_streamgraph
from bandlabel.core.portfolio import load_portfolio
from bandlabel.core.reporting import ensure_report_dir, write_run_metadata_json

logger = logging.getLogger(__name__)


def _parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Stream graph with in-band labels, or district density choropleth.")
    p.add_argument("--chart", choices=("streamgraph", "density"), default="streamgraph", help="Which chart to render")
    p.add_argument("--portfolio", type=str, default=DEFAULT_PORTFOLIO_PATH, help="Portfolio JSON path (repo-relative)")
    p.add_argument("--population", type=str, default=DEFAULT_POPULATION_PATH, help="Census JSON path (repo-relative)")
    p.add_argument("--districts", type=str, default=DEFAULT_DISTRICTS_PATH, help="District GeoJSON path (repo-relative)")
    p.add_argument("--states", type=str, default=DEFAULT_STATES_PATH, help="State GeoJSON path; '' to skip")
    p.add_argument("--width", type=float, default=None, help="Canvas width (px)")
    p.add_argument("--height", type=float, default=None, help="Canvas height (px)")
    p.add_argument("--offset", choices=STACK_OFFSETS, default=STACK_OFFSET, help="Stack baseline")
    p.add_argument("--font-width", type=float, default=FONT_WIDTH_PX, dest="font_width", help="Per-character width (px)")
    p.add_argument("--font-height", type=float, default=FONT_HEIGHT_PX, dest="font_height", help="Line height (px)")
    p.add_argument("--boundary", choices=BOUNDARY_MODES, default=BOUNDARY_MODE, help="Edge points count as inside?")
    p.add_argument("--run-name", type=str, default="run", dest="run_name", help="Reports subdir name")
    p.add_argument("--output-dir", type=str, default=REPORTS_DIR, dest="output_dir", help="Output directory (repo-relative)")
    p.add_argument("--repo-root", type=str, default=None, dest="repo_root", help="Repo root (default: cwd)")
    p.add_argument("--debug", action="store_true", default=BANDLABEL_DEBUG, help="Also write debug.png")
    return p.parse_args()


def main() -> None:
    logging.basicConfig(level=getattr(logging, LOG_LEVEL, logging.INFO))
    args = _parse_args()
    repo_root = Path(args.repo_root).resolve() if args.repo_root else Path.cwd().resolve()
    report_dir = ensure_report_dir(repo_root, args.run_name, output_dir=args.output_dir)

    if args.chart == "density":
        inputs = {"population": args.population, "districts": args.districts, "states": args.states}
        paths = run_density(
            args.population,
            args.districts,
            args.states or None,
            report_dir,
            repo_root=repo_root,
            width=args.width or DENSITY_WIDTH_PX,
            height=args.height or DENSITY_HEIGHT_PX,
        )
    else:
        table = load_portfolio(args.portfolio, repo_root=repo_root)
        layout = layout_streamgraph(
            table,
            width=args.width or STREAM_MIN_WIDTH_PX,
            height=args.height or STREAM_MIN_HEIGHT_PX,
            offset=args.offset,
            font_width_px=args.font_width,
            font_height_px=args.font_height,
            boundary=args.boundary,
        )
        inputs = {"portfolio": args.portfolio, "offset": args.offset, "n_months": len(table.dates)}
        paths = write_streamgraph(layout, report_dir, inputs, debug=args.debug)
        hidden = sum(1 for r in layout.placements if not r.placed)
        print("Labels placed:", len(layout.placements) - hidden, "hidden:", hidden)

    paths.append(
        write_run_metadata_json(
            report_dir, args.run_name, args.chart, inputs,
            font_width_px=args.font_width, font_height_px=args.font_height, boundary=args.boundary,
        )
    )
    for p in paths:
        print(p)


if __name__ == "__main__":
    main()
