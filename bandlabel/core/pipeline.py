"""
End-to-end chart pipelines shared by the CLI, the smoke run and the UI:
portfolio -> stack -> bands -> labels -> SVG/PNG, and
census + boundaries -> density classes -> SVG.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from bandlabel.core.config import (
    BOUNDARY_MODE,
    DENSITY_HEIGHT_PX,
    DENSITY_PADDING_PX,
    DENSITY_WIDTH_PX,
    FONT_HEIGHT_PX,
    FONT_WIDTH_PX,
    STACK_OFFSET,
    STREAM_MARGIN_BOTTOM_PX,
    STREAM_MARGIN_LEFT_PX,
    STREAM_MARGIN_TOP_PX,
    STREAM_MIN_HEIGHT_PX,
    STREAM_MIN_WIDTH_PX,
)
from bandlabel.core.density import (
    classify_districts,
    default_density_scale,
    density,
    district_title,
    fit_mercator,
    load_features,
    load_population,
    census_code,
)
from bandlabel.core.placement import place_all
from bandlabel.core.portfolio import sorted_view, volume_ranks
from bandlabel.core.render import render_debug, render_streamgraph
from bandlabel.core.render_svg import band_colors, export_density_svg, export_streamgraph_svg
from bandlabel.core.reporting import write_density_json, write_placements_json
from bandlabel.core.stack import bands_in_screen_space, linear_scale, stack_series
from bandlabel.core.types import Band, PlacementResult, PortfolioTable

logger = logging.getLogger(__name__)


@dataclass
class StreamgraphLayout:
    """Everything needed to draw the stream graph, in screen pixels."""
    width: float
    height: float
    margin_top: float
    margin_left: float
    bands: list[Band]
    placements: list[PlacementResult]
    labels: dict[str, str]
    colors: dict[str, str]
    ticks: list


def canvas_size(width: float | None, height: float | None) -> tuple[float, float]:
    """Requested size, never smaller than the minimum stream canvas."""
    w = max(float(width or 0), float(STREAM_MIN_WIDTH_PX))
    h = max(float(height or 0), float(STREAM_MIN_HEIGHT_PX))
    return w, h


def layout_streamgraph(
    table: PortfolioTable,
    width: float | None = None,
    height: float | None = None,
    offset: str = STACK_OFFSET,
    font_width_px: float = FONT_WIDTH_PX,
    font_height_px: float = FONT_HEIGHT_PX,
    boundary: str = BOUNDARY_MODE,
) -> StreamgraphLayout:
    """Stack the table (tickers sorted), project to pixels and place one label per band."""
    w, h = canvas_size(width, height)
    keys, rows = sorted_view(table)
    stacked = stack_series(rows, keys, offset=offset)
    xs = [d.timestamp() for d in table.dates]
    plot_height = h - STREAM_MARGIN_TOP_PX - STREAM_MARGIN_BOTTOM_PX
    bands = bands_in_screen_space(stacked, xs, w, plot_height)
    labels = {k: table.labels.get(k, k) for k in keys}
    placements = place_all(bands, labels, font_width_px=font_width_px, font_height_px=font_height_px, boundary=boundary)
    colors = band_colors(keys, volume_ranks(table))
    x = linear_scale((min(xs), max(xs)), (0.0, w)) if xs else linear_scale((0.0, 0.0), (0.0, w))
    ticks = [(x(v), d) for v, d in zip(xs, table.dates)]
    return StreamgraphLayout(
        width=w,
        height=h,
        margin_top=STREAM_MARGIN_TOP_PX,
        margin_left=STREAM_MARGIN_LEFT_PX,
        bands=bands,
        placements=placements,
        labels=labels,
        colors=colors,
        ticks=ticks,
    )


def write_streamgraph(
    layout: StreamgraphLayout,
    report_dir: Path,
    inputs: dict,
    debug: bool = False,
) -> list[Path]:
    """Write streamgraph.svg, streamgraph.png, placements.json and optionally debug.png."""
    svg_path = export_streamgraph_svg(
        layout.bands,
        layout.placements,
        layout.labels,
        layout.colors,
        report_dir / "streamgraph.svg",
        width=layout.width,
        height=layout.height,
        margin_left=layout.margin_left,
        margin_top=layout.margin_top,
        ticks=layout.ticks,
    )
    png_path = report_dir / "streamgraph.png"
    render_streamgraph(
        layout.bands, layout.placements, layout.colors, png_path,
        width=layout.width, height=layout.height, margin_top=layout.margin_top,
    )
    json_path = write_placements_json(report_dir, layout.placements, inputs)
    out = [svg_path, png_path, json_path]
    if debug:
        debug_path = report_dir / "debug.png"
        render_debug(layout.bands, layout.placements, debug_path, width=layout.width, height=layout.height)
        out.append(debug_path)
    return out


def run_density(
    population_path: str | Path,
    districts_path: str | Path,
    states_path: str | Path | None,
    report_dir: Path,
    repo_root: Path | None = None,
    width: float = DENSITY_WIDTH_PX,
    height: float = DENSITY_HEIGHT_PX,
    padding: float = DENSITY_PADDING_PX,
) -> list[Path]:
    """Write density.svg and density.json for one census + boundary set."""
    records = load_population(population_path, repo_root)
    districts = load_features(districts_path, repo_root)
    states = load_features(states_path, repo_root) if states_path else []
    project = fit_mercator([g for _, g in districts], ((padding, padding), (width - padding, height - padding)))
    scale = default_density_scale()

    drawn = []
    for props, geom in districts:
        value = density(records.get(census_code(props)))
        drawn.append((props, project(geom), scale(value), district_title(props, records)))
    state_outlines = [project(g) for _, g in states]

    svg_path = export_density_svg(drawn, state_outlines, scale, report_dir / "density.svg", width=width, height=height)
    summary = classify_districts(districts, records, scale)
    if summary["missing"]:
        logger.warning("%d districts have no census data", len(summary["missing"]))
    json_path = write_density_json(
        report_dir,
        summary,
        {"population": str(population_path), "districts": str(districts_path), "states": str(states_path or "")},
    )
    return [svg_path, json_path]
