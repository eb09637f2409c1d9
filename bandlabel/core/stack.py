"""
Stacking transform for stream graphs: baseline offsets (zero, silhouette,
wiggle), linear scales, and conversion of stacked series into screen-space
Bands for placement and drawing. Series keep their input order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

import numpy as np

from bandlabel.core.config import STACK_OFFSET, STACK_OFFSETS
from bandlabel.core.types import Band


@dataclass
class StackResult:
    """Stacked extents; lower/upper have shape (n_series, n_steps)."""
    keys: list[str]
    lower: np.ndarray
    upper: np.ndarray

    @property
    def y_min(self) -> float:
        return float(np.min(self.lower)) if self.lower.size else 0.0

    @property
    def y_max(self) -> float:
        return float(np.max(self.upper)) if self.upper.size else 0.0


def baseline_zero(Y: np.ndarray) -> np.ndarray:
    return np.zeros(Y.shape[1], dtype=float)


def baseline_silhouette(Y: np.ndarray) -> np.ndarray:
    """Center the stack around zero."""
    return -0.5 * Y.sum(axis=0)


def baseline_wiggle(Y: np.ndarray) -> np.ndarray:
    """
    Weighted wiggle baseline (Byron & Wattenberg), step-wise form:
        g[0] = 0
        g[j] = g[j-1] - sum_i(s_ij * y_ij) / sum_i(y_ij)
        s_ij = dy_ij / 2 + sum_{k<i} dy_kj,  dy_ij = y_ij - y_i(j-1)
    Columns summing to zero keep the previous baseline.
    """
    n, m = Y.shape
    g = np.zeros(m, dtype=float)
    if n == 0 or m < 2:
        return g
    dY = np.diff(Y, axis=1)  # (n, m-1)
    # sum_{k<i} dy_kj: exclusive prefix sum down the series axis
    before = np.vstack([np.zeros((1, m - 1)), np.cumsum(dY, axis=0)[:-1, :]])
    S = 0.5 * dY + before
    num = (S * Y[:, 1:]).sum(axis=0)
    den = Y[:, 1:].sum(axis=0)
    step = np.where(den != 0.0, -num / np.where(den != 0.0, den, 1.0), 0.0)
    g[1:] = np.cumsum(step)
    return g


_BASELINES: dict[str, Callable[[np.ndarray], np.ndarray]] = {
    "zero": baseline_zero,
    "silhouette": baseline_silhouette,
    "wiggle": baseline_wiggle,
}


def stack_series(
    values: np.ndarray | Sequence[Sequence[float]],
    keys: Sequence[str],
    offset: str = STACK_OFFSET,
) -> StackResult:
    """
    Stack rows of values (n_series, n_steps) on the chosen baseline.
    upper[i] = lower[i] + values[i]; lower[i+1] = upper[i].
    NaN values count as 0.
    """
    if offset not in STACK_OFFSETS:
        raise ValueError(f"Unknown stack offset: {offset!r} (expected one of {STACK_OFFSETS})")
    Y = np.nan_to_num(np.asarray(values, dtype=float), nan=0.0)
    if Y.ndim != 2:
        Y = Y.reshape(len(keys), -1) if len(keys) else np.zeros((0, 0))
    if Y.shape[0] != len(keys):
        raise ValueError(f"Got {Y.shape[0]} series for {len(keys)} keys")
    base = _BASELINES[offset](Y)
    upper = base + np.cumsum(Y, axis=0)
    lower = upper - Y
    return StackResult(keys=list(keys), lower=lower, upper=upper)


def linear_scale(
    domain: tuple[float, float],
    range_: tuple[float, float],
) -> Callable[[float], float]:
    """Map domain linearly onto range_. A zero-width domain maps to the range midpoint."""
    d0, d1 = float(domain[0]), float(domain[1])
    r0, r1 = float(range_[0]), float(range_[1])
    if d1 == d0:
        mid = (r0 + r1) / 2.0

        def scale(_: float) -> float:
            return mid
        return scale

    k = (r1 - r0) / (d1 - d0)

    def scale(v: float) -> float:
        return r0 + (float(v) - d0) * k
    return scale


def bands_in_screen_space(
    stack: StackResult,
    xs: Sequence[float],
    width: float,
    plot_height: float,
) -> list[Band]:
    """
    Project stacked extents to pixels: x over [0, width], y inverted so the
    stack maximum sits at 0 and the minimum at plot_height.
    """
    xs_arr = np.asarray(xs, dtype=float)
    if stack.lower.shape[1] != len(xs_arr):
        raise ValueError(f"Got {len(xs_arr)} x values for {stack.lower.shape[1]} steps")
    if len(xs_arr):
        x = linear_scale((float(xs_arr.min()), float(xs_arr.max())), (0.0, float(width)))
    else:
        x = linear_scale((0.0, 0.0), (0.0, float(width)))
    y = linear_scale((stack.y_min, stack.y_max), (float(plot_height), 0.0))
    px = [x(v) for v in xs_arr]
    bands: list[Band] = []
    for i, key in enumerate(stack.keys):
        bands.append(
            Band(
                key=key,
                xs=tuple(px),
                lowers=tuple(y(v) for v in stack.lower[i]),
                uppers=tuple(y(v) for v in stack.upper[i]),
            )
        )
    return bands
