"""
Geometry helpers: band outline polygon, area centroid, label box,
point containment with a documented boundary convention.
"""

from __future__ import annotations

import math

from shapely.geometry import Point, Polygon
from shapely.geometry.base import BaseGeometry

from bandlabel.core.config import BOUNDARY_MODE, MIN_POLYGON_AREA
from bandlabel.core.types import Band
from bandlabel.core.types import Point as XY


def band_outline(band: Band) -> list[XY]:
    """
    Outline vertices: (x, upper) for increasing step index, then
    (x, lower) for decreasing step index. The ring is implicitly closed.
    """
    steps = band.steps
    upper_edge = [(x, upper) for x, _, upper in steps]
    lower_edge = [(x, lower) for x, lower, _ in reversed(steps)]
    return upper_edge + lower_edge


def band_polygon(band: Band) -> Polygon:
    """
    Band outline as a shapely Polygon. Returns an empty Polygon when the
    outline has fewer than 3 vertices or any non-finite coordinate.
    """
    coords = band_outline(band)
    if len(coords) < 3:
        return Polygon()
    if not all(math.isfinite(x) and math.isfinite(y) for x, y in coords):
        return Polygon()
    return Polygon(coords)


def polygon_area(poly: BaseGeometry) -> float:
    if poly is None or poly.is_empty:
        return 0.0
    return abs(float(poly.area))


def is_degenerate(poly: BaseGeometry, min_area: float = MIN_POLYGON_AREA) -> bool:
    """True if poly is empty or encloses (almost) no area."""
    return polygon_area(poly) <= min_area


def polygon_centroid(poly: BaseGeometry) -> XY | None:
    """Area centroid, or None for empty / zero-area polygons."""
    if is_degenerate(poly):
        return None
    c = poly.centroid
    if c.is_empty:
        return None
    return (float(c.x), float(c.y))


def label_box(center: XY, width: float, height: float) -> list[XY]:
    """Axis-aligned box corners centered at center: top-left, top-right, bottom-right, bottom-left."""
    cx, cy = center
    hw = width / 2.0
    hh = height / 2.0
    return [
        (cx - hw, cy - hh),
        (cx + hw, cy - hh),
        (cx + hw, cy + hh),
        (cx - hw, cy + hh),
    ]


def point_in_polygon(point: XY, poly: BaseGeometry, boundary: str = BOUNDARY_MODE) -> bool:
    """
    Containment test. 'inclusive' treats points on the outline as inside
    (shapely covers); 'exclusive' requires strict interior (shapely contains).
    """
    if poly is None or poly.is_empty:
        return False
    p = Point(point)
    if boundary == "inclusive":
        return bool(poly.covers(p))
    if boundary == "exclusive":
        return bool(poly.contains(p))
    raise ValueError(f"Unknown boundary mode: {boundary!r}")
