"""
Self-contained SVG export: holdings stream graph with band labels, and the
district density choropleth with its legend key.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from datetime import datetime
from pathlib import Path
from typing import Mapping, Sequence

from matplotlib import colormaps
from matplotlib.colors import to_hex
from shapely.geometry import MultiPolygon, Polygon
from shapely.geometry.base import BaseGeometry

from bandlabel.core.config import (
    DENSITY_LEGEND_BAR_HEIGHT_PX,
    DENSITY_LEGEND_TICK_SIZE_PX,
    DENSITY_STATE_STROKE_OPACITY,
    DENSITY_STATE_STROKE_WIDTH,
    FONT_FAMILY,
    FONT_HEIGHT_PX,
    LABEL_COLOR,
    STREAM_AXIS_OFFSET_PX,
    STREAM_COLORMAP,
    STREAM_TICK_FORMAT,
)
from bandlabel.core.density import ThresholdScale, legend_rects, legend_ticks
from bandlabel.core.geometry import band_outline
from bandlabel.core.placement import anchor_or_offscreen
from bandlabel.core.types import Band, PlacementResult

SVG_NS = "http://www.w3.org/2000/svg"


def band_colors(
    keys: Sequence[str],
    ranks: Mapping[str, int],
    cmap_name: str = STREAM_COLORMAP,
) -> dict[str, str]:
    """Hex color per key: colormap sampled at rank / len(keys)."""
    cmap = colormaps[cmap_name]
    n = max(1, len(keys))
    return {k: to_hex(cmap(ranks.get(k, 0) / n)) for k in keys}


def _ring_d(coords: Sequence[tuple[float, ...]]) -> str:
    if len(coords) < 2:
        return ""
    parts = [f"M {coords[0][0]:.2f} {coords[0][1]:.2f}"]
    for c in coords[1:]:
        parts.append(f"L {c[0]:.2f} {c[1]:.2f}")
    parts.append("Z")
    return " ".join(parts)


def geom_to_svg_d(geom: BaseGeometry) -> str:
    """Polygon / MultiPolygon (exterior and holes) as SVG path d."""
    if geom is None or geom.is_empty:
        return ""
    if isinstance(geom, Polygon):
        rings = [list(geom.exterior.coords)] + [list(r.coords) for r in geom.interiors]
        return " ".join(d for d in (_ring_d(r) for r in rings) if d)
    if isinstance(geom, MultiPolygon):
        return " ".join(geom_to_svg_d(p) for p in geom.geoms if not p.is_empty)
    return ""


def band_to_svg_d(band: Band) -> str:
    return _ring_d(band_outline(band))


def _svg_root(width: float, height: float) -> ET.Element:
    return ET.Element(
        "svg",
        {
            "xmlns": SVG_NS,
            "width": f"{width:g}",
            "height": f"{height:g}",
            "viewBox": f"0 0 {width:g} {height:g}",
        },
    )


def _write(root: ET.Element, out_path: str | Path) -> Path:
    out = Path(out_path)
    out_str = ET.tostring(root, encoding="unicode", method="xml")
    out.write_text('<?xml version="1.0" encoding="UTF-8"?>\n' + out_str, encoding="utf-8")
    return out


def export_streamgraph_svg(
    bands: Sequence[Band],
    placements: Sequence[PlacementResult],
    labels: Mapping[str, str],
    colors: Mapping[str, str],
    out_path: str | Path,
    width: float,
    height: float,
    margin_left: float = 0.0,
    margin_top: float = 0.0,
    ticks: Sequence[tuple[float, datetime]] = (),
) -> Path:
    """
    Write the stream graph: one filled path per band with a <title>, then one
    text per band centered at its placement. Hidden labels go off canvas.
    ticks are (x_px, date) pairs for the top axis.
    """
    root = _svg_root(width, height)

    if ticks:
        axis = ET.SubElement(
            root, "g", {"class": "x axis", "transform": f"translate({margin_left:g}, {STREAM_AXIS_OFFSET_PX:g})"}
        )
        for x, date in ticks:
            tick = ET.SubElement(axis, "g", {"class": "tick", "transform": f"translate({x:.2f}, 0)"})
            ET.SubElement(tick, "line", {"y2": f"{height:g}", "stroke": "#ccc"})
            t = ET.SubElement(
                tick, "text", {"y": "-3", "font-size": "10", "font-family": FONT_FAMILY, "text-anchor": "middle"}
            )
            t.text = date.strftime(STREAM_TICK_FORMAT)

    shift = f"translate({margin_left:g}, {margin_top:g})"
    layers = ET.SubElement(root, "g", {"class": "bands"})
    for band in bands:
        path = ET.SubElement(
            layers,
            "path",
            {"transform": shift, "d": band_to_svg_d(band), "fill": colors.get(band.key, "#999")},
        )
        title = ET.SubElement(path, "title")
        title.text = labels.get(band.key, band.key)

    texts = ET.SubElement(root, "g", {"class": "labels"})
    for result in placements:
        x, y = anchor_or_offscreen(result)
        text = ET.SubElement(
            texts,
            "text",
            {
                "transform": shift,
                "x": f"{x:.2f}",
                "y": f"{y:.2f}",
                "dy": "0.32em",
                "fill": LABEL_COLOR,
                "font-size": f"{FONT_HEIGHT_PX:g}px",
                "text-anchor": "middle",
                "font-family": FONT_FAMILY,
            },
        )
        text.text = result.label_text

    return _write(root, out_path)


def export_density_svg(
    districts: Sequence[tuple[dict, BaseGeometry, str, str]],
    states: Sequence[BaseGeometry],
    scale: ThresholdScale,
    out_path: str | Path,
    width: float,
    height: float,
) -> Path:
    """
    Write the choropleth. districts are (properties, projected geometry,
    fill color, tooltip); states are projected outlines drawn on top.
    """
    root = _svg_root(width, height)

    g_districts = ET.SubElement(root, "g", {"class": "districts"})
    for _, geom, color, tooltip in districts:
        path = ET.SubElement(g_districts, "path", {"d": geom_to_svg_d(geom), "fill": color, "fill-rule": "evenodd"})
        title = ET.SubElement(path, "title")
        title.text = tooltip

    g_states = ET.SubElement(root, "g", {"class": "states"})
    for geom in states:
        ET.SubElement(
            g_states,
            "path",
            {
                "d": geom_to_svg_d(geom),
                "stroke": "#000",
                "stroke-width": f"{DENSITY_STATE_STROKE_WIDTH:g}",
                "stroke-opacity": f"{DENSITY_STATE_STROKE_OPACITY:g}",
                "fill": "none",
            },
        )

    key = ET.SubElement(root, "g", {"class": "key"})
    for x, w, color in legend_rects(scale, width):
        ET.SubElement(
            key,
            "rect",
            {"height": f"{DENSITY_LEGEND_BAR_HEIGHT_PX:g}", "x": f"{x:g}", "width": f"{w:g}", "fill": color},
        )
    for x, label in legend_ticks(scale, width):
        tick = ET.SubElement(key, "g", {"class": "tick", "transform": f"translate({x:g}, 0)"})
        ET.SubElement(tick, "line", {"y2": f"{DENSITY_LEGEND_TICK_SIZE_PX:g}", "stroke": "#000"})
        t = ET.SubElement(
            tick,
            "text",
            {"y": f"{DENSITY_LEGEND_TICK_SIZE_PX + 3:g}", "dy": "0.71em", "font-size": "10", "text-anchor": "middle"},
        )
        t.text = label

    return _write(root, out_path)
