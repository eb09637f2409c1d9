"""
District population density choropleth: census records, density, threshold
color classes, Mercator fit of district outlines, legend key geometry.
"""

from __future__ import annotations

import logging
import math
import re
from bisect import bisect_right
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable, Mapping, Sequence

import numpy as np
from matplotlib import colormaps
from matplotlib.colors import to_hex
from pyproj import Transformer
from shapely.geometry import shape
from shapely.geometry.base import BaseGeometry
from shapely.ops import transform

from bandlabel.core.config import (
    DENSITY_COLORMAP,
    DENSITY_LEGEND_DOMAIN,
    DENSITY_THRESHOLDS,
    MISSING_TEXT,
)
from bandlabel.core.io import read_json
from bandlabel.core.types import DistrictRecord

logger = logging.getLogger(__name__)


class DensityFormatError(ValueError):
    """Population or boundary data does not have the expected shape."""


# ----- Population records -----

def parse_district_code(raw: object) -> int:
    """Digits of a census district id, e.g. 'District - 012' -> 12."""
    digits = re.sub(r"[^0-9]", "", str(raw))
    if not digits:
        raise DensityFormatError(f"District id without digits: {raw!r}")
    return int(digits)


def _to_int(raw: object) -> int:
    """Leading integer of a census figure; '' and None count as 0."""
    m = re.match(r"\s*-?\d+", str(raw if raw is not None else ""))
    return int(m.group(0)) if m else 0


def parse_population(records: object) -> dict[int, DistrictRecord]:
    """Index census rows by district code. Later rows for the same code win."""
    if not isinstance(records, list):
        raise DensityFormatError("Population data must be a JSON list")
    out: dict[int, DistrictRecord] = {}
    for i, row in enumerate(records):
        if not isinstance(row, dict) or "District" not in row:
            raise DensityFormatError(f"Row {i}: expected object with 'District'")
        code = parse_district_code(row["District"])
        extra = {k: v for k, v in row.items() if k not in ("District", "Total Population Person", "Area")}
        out[code] = DistrictRecord(
            code=code,
            total=_to_int(row.get("Total Population Person")),
            area=_to_int(row.get("Area")),
            extra=extra,
        )
    return out


def load_population(path: str | Path, repo_root: Path | None = None) -> dict[int, DistrictRecord]:
    records = parse_population(read_json(path, repo_root, kind="Population"))
    logger.info("Loaded population for %d districts", len(records))
    return records


def density(record: DistrictRecord | None) -> float:
    """People per km², rounded to 2 decimals; 0 when unknown."""
    if record is None or not record.total or not record.area:
        return 0.0
    return round(record.total / record.area, 2)


def district_title(properties: Mapping[str, Any], records: Mapping[int, DistrictRecord]) -> str:
    """Tooltip text for one district."""
    rec = records.get(census_code(properties))
    known = rec is not None and bool(rec.total) and bool(rec.area)
    den = f"{density(rec):.2f} km²" if known else MISSING_TEXT
    area = f"{rec.area} km²" if rec is not None and rec.area else MISSING_TEXT
    total = rec.total if rec is not None and rec.total else MISSING_TEXT
    return (
        f"Density: {den}\n"
        f"Total: {total}\n"
        f"Area: {area}\n"
        f"District: {properties.get('DISTRICT', '')}\n"
        f"State: {properties.get('ST_NM', '')}"
    )


# ----- Threshold color scale -----

def density_colors(n: int | None = None, cmap_name: str = DENSITY_COLORMAP) -> list[str]:
    """n hex colors sampled evenly from a sequential matplotlib colormap (light to dark)."""
    n = n if n is not None else len(DENSITY_THRESHOLDS) + 1
    cmap = colormaps[cmap_name]
    return [to_hex(c) for c in cmap(np.linspace(0.0, 1.0, n))]


@dataclass(frozen=True)
class ThresholdScale:
    """Value -> color by class breaks; len(colors) == len(thresholds) + 1."""
    thresholds: tuple[float, ...]
    colors: tuple[str, ...]

    def __post_init__(self) -> None:
        if len(self.colors) != len(self.thresholds) + 1:
            raise ValueError(f"Need {len(self.thresholds) + 1} colors for {len(self.thresholds)} thresholds")

    def class_index(self, value: float) -> int:
        return bisect_right(self.thresholds, value)

    def __call__(self, value: float) -> str:
        return self.colors[self.class_index(value)]

    def invert_extent(self, color: str) -> tuple[float | None, float | None]:
        """Value interval [lo, hi) mapped to color; None marks an open end."""
        i = self.colors.index(color)
        lo = self.thresholds[i - 1] if i > 0 else None
        hi = self.thresholds[i] if i < len(self.thresholds) else None
        return lo, hi


def default_density_scale() -> ThresholdScale:
    return ThresholdScale(thresholds=tuple(DENSITY_THRESHOLDS), colors=tuple(density_colors()))


# ----- Boundaries and projection -----

def census_code(properties: Mapping[str, Any]) -> int | None:
    raw = properties.get("censuscode")
    if raw is None:
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def load_features(path: str | Path, repo_root: Path | None = None) -> list[tuple[dict, BaseGeometry]]:
    """(properties, geometry) pairs from a GeoJSON FeatureCollection."""
    data = read_json(path, repo_root, kind="Boundary")
    if not isinstance(data, dict) or data.get("type") != "FeatureCollection":
        raise DensityFormatError("Boundary data must be a GeoJSON FeatureCollection")
    out: list[tuple[dict, BaseGeometry]] = []
    for i, feat in enumerate(data.get("features", [])):
        geom_json = feat.get("geometry")
        if not geom_json:
            logger.warning("Feature %d has no geometry; skipped", i)
            continue
        out.append((dict(feat.get("properties") or {}), shape(geom_json)))
    return out


@lru_cache(maxsize=1)
def _web_mercator() -> Transformer:
    """lon/lat (EPSG:4326) to Web Mercator metres (EPSG:3857)."""
    return Transformer.from_crs("EPSG:4326", "EPSG:3857", always_xy=True)


def fit_mercator(
    geoms: Sequence[BaseGeometry],
    extent: tuple[tuple[float, float], tuple[float, float]],
) -> Callable[[BaseGeometry], BaseGeometry]:
    """
    Projection that maps the union of geoms (lon/lat) into extent
    ((x0, y0), (x1, y1)) with uniform scale, centered in the leftover axis.
    Output y points down (screen orientation).
    """
    (x0, y0), (x1, y1) = extent
    to_metres = _web_mercator().transform
    bounds = [transform(to_metres, g).bounds for g in geoms if g is not None and not g.is_empty]
    if not bounds:
        raise DensityFormatError("No geometry to fit")
    bx0 = min(b[0] for b in bounds)
    by0 = min(b[1] for b in bounds)
    bx1 = max(b[2] for b in bounds)
    by1 = max(b[3] for b in bounds)
    dx = max(bx1 - bx0, 1e-9)
    dy = max(by1 - by0, 1e-9)
    w, h = x1 - x0, y1 - y0
    k = min(w / dx, h / dy)
    tx = x0 + (w - k * dx) / 2.0 - k * bx0
    # north edge (by1) maps to the top of the extent
    ty = y0 + (h - k * dy) / 2.0 + k * by1

    def _project(x, y, z=None):
        mx, my = to_metres(x, y)
        return k * np.asarray(mx) + tx, ty - k * np.asarray(my)

    def project(geom: BaseGeometry) -> BaseGeometry:
        return transform(_project, geom)

    return project


# ----- Legend key -----

def sqrt_scale(
    domain: tuple[float, float],
    range_: tuple[float, float],
    round_output: bool = True,
) -> Callable[[float], float]:
    """Square-root scale; values are clamped at 0 before the root."""
    d0, d1 = math.sqrt(max(0.0, domain[0])), math.sqrt(max(0.0, domain[1]))
    r0, r1 = float(range_[0]), float(range_[1])
    span = (d1 - d0) or 1.0

    def scale(v: float) -> float:
        out = r0 + (math.sqrt(max(0.0, float(v))) - d0) / span * (r1 - r0)
        return float(round(out)) if round_output else out
    return scale


def legend_rects(
    scale: ThresholdScale,
    width: float,
    domain: tuple[float, float] = DENSITY_LEGEND_DOMAIN,
) -> list[tuple[float, float, str]]:
    """(x, width, color) per color class; open ends clamped to domain."""
    x = sqrt_scale(domain, (0.0, width))
    out: list[tuple[float, float, str]] = []
    for color in scale.colors:
        lo, hi = scale.invert_extent(color)
        lo = domain[0] if lo is None else lo
        hi = domain[1] if hi is None else hi
        out.append((x(lo), x(hi) - x(lo), color))
    return out


def legend_ticks(scale: ThresholdScale, width: float, domain: tuple[float, float] = DENSITY_LEGEND_DOMAIN) -> list[tuple[float, str]]:
    x = sqrt_scale(domain, (0.0, width))
    return [(x(t), f"{t:g}") for t in scale.thresholds]


# ----- Summary -----

def classify_districts(
    features: Sequence[tuple[dict, BaseGeometry]],
    records: Mapping[int, DistrictRecord],
    scale: ThresholdScale,
) -> dict:
    """Per-class district counts plus districts with no usable census data."""
    counts = [0] * len(scale.colors)
    missing: list[str] = []
    for props, _ in features:
        d = density(records.get(census_code(props)))
        if not d:
            missing.append(str(props.get("DISTRICT", props.get("censuscode", ""))))
        counts[scale.class_index(d)] += 1
    return {
        "n_districts": len(features),
        "class_counts": [
            {"color": c, "lo": scale.invert_extent(c)[0], "hi": scale.invert_extent(c)[1], "count": n}
            for c, n in zip(scale.colors, counts)
        ],
        "missing": missing,
    }
