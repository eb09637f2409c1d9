"""
Matplotlib PNG rendering: streamgraph.png and debug.png (band outlines,
candidate points, placed label boxes). Coordinates are screen pixels with
y pointing down, so the y axis is inverted.
"""

from __future__ import annotations

import warnings
from pathlib import Path
from typing import Mapping, Sequence

import matplotlib.pyplot as plt
import numpy as np

from bandlabel.core.config import FONT_FAMILY, FONT_HEIGHT_PX, LABEL_COLOR, RENDER_DPI
from bandlabel.core.geometry import band_outline, band_polygon, polygon_centroid
from bandlabel.core.placement import step_midpoints
from bandlabel.core.types import Band, PlacementResult


def _new_fig(width_px: float, height_px: float) -> tuple[plt.Figure, plt.Axes]:
    fig = plt.figure(
        figsize=(width_px / RENDER_DPI, height_px / RENDER_DPI),
        dpi=RENDER_DPI,
        constrained_layout=False,
    )
    ax = fig.add_axes([0, 0, 1, 1])  # full-canvas axes
    ax.axis("off")
    return fig, ax


def set_axes_to_canvas(ax: plt.Axes, width: float, height: float) -> None:
    """Pixel canvas: x in [0, width], y in [0, height] with y growing downward."""
    ax.set_xlim(0, width)
    ax.set_ylim(height, 0)
    ax.axis("off")


def _save(fig: plt.Figure, output_path: str | Path, **kwargs) -> None:
    with warnings.catch_warnings():
        warnings.filterwarnings("ignore", message=".*constrained_layout.*", category=UserWarning)
        fig.savefig(output_path, dpi=RENDER_DPI, facecolor="white", **kwargs)
    plt.close(fig)


def _fill_band(ax: plt.Axes, band: Band, color: str, alpha: float = 1.0, dy: float = 0.0) -> None:
    coords = band_outline(band)
    if len(coords) < 3:
        return
    xy = np.array(coords)
    ax.fill(xy[:, 0], xy[:, 1] + dy, facecolor=color, edgecolor="none", alpha=alpha)


def render_streamgraph(
    bands: Sequence[Band],
    placements: Sequence[PlacementResult],
    colors: Mapping[str, str],
    output_path: str | Path,
    width: float,
    height: float,
    margin_top: float = 0.0,
) -> None:
    """Render filled bands and placed labels. Hidden labels are not drawn."""
    fig, ax = _new_fig(width, height)
    for band in bands:
        _fill_band(ax, band, colors.get(band.key, "#999999"), dy=margin_top)
    for result in placements:
        if result.anchor is None:
            continue
        cx, cy = result.anchor
        ax.text(
            cx, cy + margin_top, result.label_text,
            fontsize=FONT_HEIGHT_PX * 0.75,  # px -> pt at 72/96
            fontfamily=FONT_FAMILY,
            ha="center", va="center",
            color=LABEL_COLOR,
            zorder=5,
        )
    set_axes_to_canvas(ax, width, height)
    _save(fig, output_path)


def render_debug(
    bands: Sequence[Band],
    placements: Sequence[PlacementResult],
    output_path: str | Path,
    width: float,
    height: float,
) -> None:
    """Band outlines, every candidate tried (centroid and step midpoints), and placed label boxes."""
    fig = plt.figure(figsize=(width / RENDER_DPI, height / RENDER_DPI), dpi=RENDER_DPI, constrained_layout=False)
    # Leave bottom margin so legend does not overlap the image
    ax = fig.add_axes([0.05, 0.08, 0.9, 0.88])
    ax.axis("off")

    centroids: list[tuple[float, float]] = []
    midpoints: list[tuple[float, float]] = []
    for band in bands:
        coords = band_outline(band)
        if len(coords) >= 3:
            xy = np.array(coords + [coords[0]])
            ax.plot(xy[:, 0], xy[:, 1], linewidth=0.8, color="navy")
        c = polygon_centroid(band_polygon(band))
        if c is not None:
            centroids.append(c)
        midpoints.extend(p for _, p in step_midpoints(band))

    if midpoints:
        mp = np.array(midpoints)
        ax.scatter(mp[:, 0], mp[:, 1], s=4, alpha=0.5, label="step midpoints")
    if centroids:
        cp = np.array(centroids)
        ax.scatter(cp[:, 0], cp[:, 1], s=10, marker="x", label="centroids")

    labelled = False
    for result in placements:
        if not result.bbox:
            continue
        xy = np.array(result.bbox + [result.bbox[0]])
        ax.plot(xy[:, 0], xy[:, 1], linewidth=1.5, color="red", label=None if labelled else "placed")
        labelled = True

    set_axes_to_canvas(ax, width, height)
    handles, _ = ax.get_legend_handles_labels()
    if handles:
        leg = ax.legend(loc="upper center", bbox_to_anchor=(0.5, -0.02), ncol=3, fontsize=8)
        _save(fig, output_path, bbox_inches="tight", bbox_extra_artists=[leg])
    else:
        _save(fig, output_path)
