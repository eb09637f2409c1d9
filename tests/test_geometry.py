"""
Deterministic tests for geometry: band outline, centroid, label box,
point containment under both boundary conventions.
"""

from __future__ import annotations

import pytest
from shapely.geometry import Polygon

from bandlabel.core.geometry import (
    band_outline,
    band_polygon,
    is_degenerate,
    label_box,
    point_in_polygon,
    polygon_centroid,
)
from bandlabel.core.types import Band


def _square_band() -> Band:
    return Band.from_steps("sq", [(0, 0, 10), (10, 0, 10)])


def test_band_outline_upper_forward_lower_backward() -> None:
    band = Band.from_steps("b", [(0, 1, 5), (10, 2, 6), (20, 3, 7)])
    assert band_outline(band) == [(0, 5), (10, 6), (20, 7), (20, 3), (10, 2), (0, 1)]


def test_band_polygon_area() -> None:
    poly = band_polygon(_square_band())
    assert poly.area == pytest.approx(100.0)


def test_band_polygon_single_step_is_empty() -> None:
    poly = band_polygon(Band.from_steps("one", [(5, 0, 10)]))
    assert poly.is_empty
    assert is_degenerate(poly)


def test_band_polygon_non_finite_is_empty() -> None:
    poly = band_polygon(Band.from_steps("nan", [(0, 0, float("nan")), (10, 0, 10)]))
    assert poly.is_empty


def test_polygon_centroid_rectangle() -> None:
    assert polygon_centroid(band_polygon(_square_band())) == pytest.approx((5.0, 5.0))


def test_polygon_centroid_zero_area_is_none() -> None:
    flat = band_polygon(Band.from_steps("flat", [(0, 5, 5), (10, 5, 5), (20, 5, 5)]))
    assert polygon_centroid(flat) is None
    assert polygon_centroid(Polygon()) is None


def test_label_box_centered() -> None:
    corners = label_box((5, 5), 10, 4)
    assert corners == [(0, 3), (10, 3), (10, 7), (0, 7)]


def test_point_in_polygon_interior_both_modes() -> None:
    poly = band_polygon(_square_band())
    assert point_in_polygon((5, 5), poly, "inclusive") is True
    assert point_in_polygon((5, 5), poly, "exclusive") is True


def test_point_in_polygon_edge_and_vertex() -> None:
    poly = band_polygon(_square_band())
    for p in [(0, 5), (10, 10), (5, 0)]:
        assert point_in_polygon(p, poly, "inclusive") is True
        assert point_in_polygon(p, poly, "exclusive") is False


def test_point_in_polygon_outside() -> None:
    poly = band_polygon(_square_band())
    assert point_in_polygon((11, 5), poly, "inclusive") is False
    assert point_in_polygon((5, -0.01), poly, "inclusive") is False


def test_point_in_polygon_empty() -> None:
    assert point_in_polygon((0, 0), Polygon()) is False


def test_point_in_polygon_unknown_mode() -> None:
    with pytest.raises(ValueError):
        point_in_polygon((5, 5), band_polygon(_square_band()), "fuzzy")
