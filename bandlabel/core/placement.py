"""
Label placement inside a stacked band. The band outline is built once per
call; candidates are tried in order (area centroid, then the vertical
midpoint of each step) and the first whose label box fits is returned.
"No fit" is a normal outcome, reported as None / mode "none", never raised.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, Iterator, Mapping

from shapely.geometry.base import BaseGeometry

from bandlabel.core import error_codes
from bandlabel.core.config import (
    BOUNDARY_MODE,
    FONT_HEIGHT_PX,
    FONT_WIDTH_PX,
    OFFSCREEN_ANCHOR,
)
from bandlabel.core.geometry import (
    band_polygon,
    is_degenerate,
    label_box,
    point_in_polygon,
    polygon_centroid,
)
from bandlabel.core.types import Band, LabelSpec, PlacementMode, PlacementResult, Point

logger = logging.getLogger(__name__)


def can_place(
    point: Point,
    polygon: BaseGeometry,
    width: float,
    height: float,
    boundary: str = BOUNDARY_MODE,
) -> bool:
    """
    True iff all four corners of the width x height box centered at point
    lie inside polygon. A zero-area polygon never hosts a label.
    """
    if is_degenerate(polygon):
        return False
    return all(point_in_polygon(c, polygon, boundary) for c in label_box(point, width, height))


def step_midpoints(band: Band) -> Iterator[tuple[int, Point]]:
    """Vertical midpoint of each step's [lower, upper] extent, in step order."""
    for i, (x, lower, upper) in enumerate(band.steps):
        yield i, (x, lower + (upper - lower) / 2.0)


def _band_is_usable(band: Band) -> bool:
    if band is None:
        return False
    n = len(band.xs)
    if n == 0 or len(band.lowers) != n or len(band.uppers) != n:
        return False
    return all(math.isfinite(v) for v in (*band.xs, *band.lowers, *band.uppers))


def _result(
    band: Band,
    spec: LabelSpec,
    mode: PlacementMode,
    anchor: Point | None,
    step_index: int | None = None,
    reason: str | None = None,
) -> PlacementResult:
    w, h = spec.footprint
    return PlacementResult(
        key=band.key if band is not None else "",
        label_text=spec.text,
        mode=mode,
        anchor=anchor,
        width_px=w,
        height_px=h,
        step_index=step_index,
        bbox=label_box(anchor, w, h) if anchor is not None else [],
        reason=reason,
    )


def place_with_details(
    band: Band,
    label: str,
    font_width_px: float = FONT_WIDTH_PX,
    font_height_px: float = FONT_HEIGHT_PX,
    boundary: str = BOUNDARY_MODE,
) -> PlacementResult:
    """
    Same decision as place(), plus which candidate won (centroid or step
    midpoint and its index) and a reason key when nothing fits.
    """
    spec = LabelSpec(text=label or "", font_width_px=font_width_px, font_height_px=font_height_px)
    if not spec.text:
        return _result(band, spec, "none", None, reason=error_codes.EMPTY_LABEL)
    if not _band_is_usable(band):
        logger.debug("Band %r has no usable steps", getattr(band, "key", None))
        return _result(band, spec, "none", None, reason=error_codes.EMPTY_BAND)

    polygon = band_polygon(band)
    if is_degenerate(polygon):
        logger.debug("Band %r is degenerate; hiding %r", band.key, spec.text)
        return _result(band, spec, "none", None, reason=error_codes.DEGENERATE_BAND)

    w, h = spec.footprint
    center = polygon_centroid(polygon)
    if center is not None and can_place(center, polygon, w, h, boundary):
        logger.debug("Band %r: %r placed at centroid %s", band.key, spec.text, center)
        return _result(band, spec, "centroid", center)

    for i, point in step_midpoints(band):
        if can_place(point, polygon, w, h, boundary):
            logger.debug("Band %r: %r placed at step %d midpoint %s", band.key, spec.text, i, point)
            return _result(band, spec, "step_midpoint", point, step_index=i)

    logger.debug("Band %r: %r (%.1f x %.1f px) fits nowhere", band.key, spec.text, w, h)
    return _result(band, spec, "none", None, reason=error_codes.NO_FIT)


def place(
    band: Band,
    label: str,
    font_width_px: float = FONT_WIDTH_PX,
    font_height_px: float = FONT_HEIGHT_PX,
    boundary: str = BOUNDARY_MODE,
) -> Point | None:
    """
    Point at which to center label inside band, or None when no candidate
    fits. Pure: same inputs give the same result.
    """
    return place_with_details(band, label, font_width_px, font_height_px, boundary).anchor


def place_all(
    bands: Iterable[Band],
    labels: Mapping[str, str],
    font_width_px: float = FONT_WIDTH_PX,
    font_height_px: float = FONT_HEIGHT_PX,
    boundary: str = BOUNDARY_MODE,
) -> list[PlacementResult]:
    """
    Place one label per band. labels maps band key to display text; bands
    without an entry are labeled with their key.
    """
    results = [
        place_with_details(
            band,
            labels.get(band.key, band.key),
            font_width_px=font_width_px,
            font_height_px=font_height_px,
            boundary=boundary,
        )
        for band in bands
    ]
    hidden = sum(1 for r in results if not r.placed)
    if hidden:
        logger.info("Placed %d of %d labels (%d hidden)", len(results) - hidden, len(results), hidden)
    return results


def anchor_or_offscreen(result: PlacementResult, offscreen: Point = OFFSCREEN_ANCHOR) -> Point:
    """Anchor for drawing: the placement, or a point far off canvas when hidden."""
    return result.anchor if result.anchor is not None else offscreen
