"""
Dataclasses for bands, labels, placement results and the chart datasets.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Literal

import numpy as np


Point = tuple[float, float]

PlacementMode = Literal["centroid", "step_midpoint", "none"]


@dataclass(frozen=True)
class Band:
    """
    One stacked series in screen space: an x-position and a [lower, upper]
    vertical extent per step. Built by stack.bands_in_screen_space.
    """
    key: str
    xs: tuple[float, ...]
    lowers: tuple[float, ...]
    uppers: tuple[float, ...]

    @classmethod
    def from_steps(cls, key: str, steps: Iterable[tuple[float, float, float]]) -> "Band":
        """Build from (x, lower, upper) tuples."""
        xs: list[float] = []
        lowers: list[float] = []
        uppers: list[float] = []
        for x, lower, upper in steps:
            xs.append(float(x))
            lowers.append(float(lower))
            uppers.append(float(upper))
        return cls(key=key, xs=tuple(xs), lowers=tuple(lowers), uppers=tuple(uppers))

    @property
    def steps(self) -> list[tuple[float, float, float]]:
        return list(zip(self.xs, self.lowers, self.uppers))


@dataclass(frozen=True)
class LabelSpec:
    """Label text and the fixed per-character footprint metrics (px)."""
    text: str
    font_width_px: float
    font_height_px: float

    @property
    def footprint(self) -> tuple[float, float]:
        """(width, height) of the label box."""
        return (len(self.text) * self.font_width_px, self.font_height_px)


@dataclass
class PlacementResult:
    """
    Outcome of placing one label in one band.
    Serializes to an entry of placements.json.
    """
    key: str
    label_text: str
    mode: PlacementMode
    anchor: Point | None
    width_px: float
    height_px: float

    # optional / defaults (must follow required fields in dataclass)
    step_index: int | None = None
    bbox: list[Point] = field(default_factory=list)
    reason: str | None = None

    @property
    def placed(self) -> bool:
        return self.anchor is not None


@dataclass
class PortfolioTable:
    """Holdings pivoted to one row per ticker and one column per month."""
    dates: list[datetime]
    tickers: list[str]
    values: np.ndarray  # shape (len(tickers), len(dates))
    labels: dict[str, str] = field(default_factory=dict)
    volumes: dict[str, int] = field(default_factory=dict)

    def series(self, ticker: str) -> np.ndarray:
        return self.values[self.tickers.index(ticker)]


@dataclass(frozen=True)
class DistrictRecord:
    """Census population row for one district."""
    code: int
    total: int
    area: int
    extra: dict = field(default_factory=dict)
