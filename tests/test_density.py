"""
Density choropleth: census parsing, density, threshold classes, Mercator
fit, legend key, per-class summary.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pyproj import Transformer
from shapely.geometry import box

from bandlabel.core.density import (
    DensityFormatError,
    ThresholdScale,
    classify_districts,
    default_density_scale,
    density,
    density_colors,
    district_title,
    fit_mercator,
    legend_rects,
    load_features,
    load_population,
    parse_district_code,
    parse_population,
    sqrt_scale,
)
from bandlabel.core.types import DistrictRecord

REPO_ROOT = Path(__file__).resolve().parent.parent


def test_parse_district_code() -> None:
    assert parse_district_code("District - 012") == 12
    assert parse_district_code(7) == 7
    with pytest.raises(DensityFormatError):
        parse_district_code("n/a")


def test_parse_population() -> None:
    recs = parse_population([
        {"District": "001", "Total Population Person": "1000", "Area": "3", "State": "X"},
        {"District": "002", "Total Population Person": "", "Area": "10"},
    ])
    assert recs[1].total == 1000 and recs[1].area == 3
    assert recs[1].extra == {"State": "X"}
    assert recs[2].total == 0
    with pytest.raises(DensityFormatError):
        parse_population({"District": "001"})


def test_density() -> None:
    assert density(None) == 0.0
    assert density(DistrictRecord(code=1, total=0, area=10)) == 0.0
    assert density(DistrictRecord(code=1, total=10, area=0)) == 0.0
    assert density(DistrictRecord(code=1, total=1000, area=3)) == 333.33


def test_threshold_scale_classes() -> None:
    scale = default_density_scale()
    assert len(scale.colors) == 9
    assert scale(50) == scale.colors[0]
    assert scale(100) == scale.colors[1]
    assert scale(450) == scale.colors[3]
    assert scale(500) == scale.colors[4]
    assert scale(25000) == scale.colors[8]


def test_threshold_scale_invert_extent() -> None:
    scale = default_density_scale()
    assert scale.invert_extent(scale.colors[0]) == (None, 100)
    assert scale.invert_extent(scale.colors[3]) == (300, 500)
    assert scale.invert_extent(scale.colors[8]) == (20000, None)


def test_threshold_scale_needs_one_more_color() -> None:
    with pytest.raises(ValueError):
        ThresholdScale(thresholds=(1, 2), colors=("#000000", "#111111"))


def test_density_colors_are_hex_light_to_dark() -> None:
    colors = density_colors()
    assert len(colors) == 9
    assert all(c.startswith("#") and len(c) == 7 for c in colors)

    def brightness(c: str) -> int:
        return sum(int(c[i:i + 2], 16) for i in (1, 3, 5))

    assert brightness(colors[0]) > brightness(colors[-1])


def test_district_title() -> None:
    recs = {1: DistrictRecord(code=1, total=1000, area=4)}
    text = district_title({"censuscode": 1, "DISTRICT": "Alpha", "ST_NM": "North"}, recs)
    assert text.splitlines() == [
        "Density: 250.00 km²",
        "Total: 1000",
        "Area: 4 km²",
        "District: Alpha",
        "State: North",
    ]
    missing = district_title({"censuscode": 2, "DISTRICT": "Beta", "ST_NM": "North"}, recs)
    assert missing.startswith("Density: Data Not Available")


def test_district_title_sparse_district_is_not_missing() -> None:
    recs = {1: DistrictRecord(code=1, total=1, area=1000)}
    text = district_title({"censuscode": 1, "DISTRICT": "Gamma", "ST_NM": "South"}, recs)
    assert text.splitlines()[0] == "Density: 0.00 km²"


def test_fit_mercator_fills_extent() -> None:
    geoms = [box(74, 20, 78, 24), box(78, 24, 82, 28)]
    project = fit_mercator(geoms, ((30, 30), (930, 970)))
    projected = [project(g) for g in geoms]
    minx = min(g.bounds[0] for g in projected)
    miny = min(g.bounds[1] for g in projected)
    maxx = max(g.bounds[2] for g in projected)
    maxy = max(g.bounds[3] for g in projected)
    assert minx >= 30 - 1e-6 and maxx <= 930 + 1e-6
    assert miny >= 30 - 1e-6 and maxy <= 970 + 1e-6
    assert maxx - minx == pytest.approx(900) or maxy - miny == pytest.approx(940)
    # north is up: the northern box ends higher on screen
    assert projected[1].bounds[1] < projected[0].bounds[1]


def test_fit_mercator_keeps_web_mercator_proportions() -> None:
    geom = box(70, 10, 90, 30)
    project = fit_mercator([geom], ((0, 0), (1000, 1000)))
    minx, miny, maxx, maxy = project(geom).bounds
    to_metres = Transformer.from_crs("EPSG:4326", "EPSG:3857", always_xy=True)
    (mx0, mx1), (my0, my1) = to_metres.transform([70, 90], [10, 30])
    assert (maxx - minx) / (maxy - miny) == pytest.approx((mx1 - mx0) / (my1 - my0))


def test_fit_mercator_needs_geometry() -> None:
    with pytest.raises(DensityFormatError):
        fit_mercator([], ((0, 0), (10, 10)))


def test_sqrt_scale() -> None:
    x = sqrt_scale((0, 45000), (0, 900))
    assert x(0) == 0
    assert x(45000) == 900
    assert x(11250) == 450


def test_legend_rects_cover_domain() -> None:
    rects = legend_rects(default_density_scale(), 900)
    assert len(rects) == 9
    assert rects[0][0] == 0
    assert rects[-1][0] + rects[-1][1] == 900
    assert all(w > 0 for _, w, _ in rects)


def test_sample_data_summary() -> None:
    recs = load_population("data/sample_population.json", repo_root=REPO_ROOT)
    feats = load_features("data/sample_districts.geojson", repo_root=REPO_ROOT)
    summary = classify_districts(feats, recs, default_density_scale())
    assert summary["n_districts"] == 5
    assert summary["missing"] == ["Islands"]
    assert sum(c["count"] for c in summary["class_counts"]) == 5


def test_load_features_rejects_non_collection(tmp_path: Path) -> None:
    p = tmp_path / "x.geojson"
    p.write_text('{"type": "Feature"}', encoding="utf-8")
    with pytest.raises(DensityFormatError):
        load_features(p)
