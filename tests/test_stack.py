"""
Stacking transform: baselines, stacked extents, scales and screen-space bands.
"""

from __future__ import annotations

import numpy as np
import pytest

from bandlabel.core.stack import (
    baseline_wiggle,
    bands_in_screen_space,
    linear_scale,
    stack_series,
)


def test_zero_offset_stacks_in_input_order() -> None:
    s = stack_series([[1, 2], [3, 4]], ["a", "b"], offset="zero")
    np.testing.assert_allclose(s.lower, [[0, 0], [1, 2]])
    np.testing.assert_allclose(s.upper, [[1, 2], [4, 6]])


def test_silhouette_offset_centers_stack() -> None:
    s = stack_series([[1, 2], [3, 4]], ["a", "b"], offset="silhouette")
    np.testing.assert_allclose(s.lower[0], [-2, -3])
    np.testing.assert_allclose(s.upper[1], [2, 3])


def test_wiggle_keeps_single_series_midline_flat() -> None:
    s = stack_series([[1, 3, 5, 2]], ["a"], offset="wiggle")
    mid = (s.lower[0] + s.upper[0]) / 2
    np.testing.assert_allclose(mid, [0.5, 0.5, 0.5, 0.5])


def test_wiggle_first_baseline_is_zero() -> None:
    g = baseline_wiggle(np.array([[1.0, 2.0, 4.0], [3.0, 1.0, 0.5]]))
    assert g[0] == 0.0
    assert g.shape == (3,)


def test_wiggle_baseline_values_for_two_series() -> None:
    g = baseline_wiggle(np.array([[1.0, 2.0, 4.0], [3.0, 1.0, 0.5]]))
    np.testing.assert_allclose(g, [0.0, -1 / 3, -1 / 3 - 4.875 / 4.5])


def test_wiggle_zero_columns_keep_previous_baseline() -> None:
    g = baseline_wiggle(np.zeros((2, 4)))
    np.testing.assert_allclose(g, [0, 0, 0, 0])


def test_stack_layers_are_contiguous() -> None:
    rng = np.random.default_rng(7)
    Y = rng.uniform(0, 10, size=(4, 12))
    s = stack_series(Y, list("abcd"), offset="wiggle")
    np.testing.assert_allclose(s.upper - s.lower, Y)
    np.testing.assert_allclose(s.lower[1:], s.upper[:-1])


def test_nan_counts_as_zero() -> None:
    s = stack_series([[1, float("nan")]], ["a"], offset="zero")
    np.testing.assert_allclose(s.upper, [[1, 0]])


def test_stack_rejects_unknown_offset_and_key_mismatch() -> None:
    with pytest.raises(ValueError):
        stack_series([[1, 2]], ["a"], offset="expand")
    with pytest.raises(ValueError):
        stack_series([[1, 2], [3, 4]], ["a"], offset="zero")


def test_linear_scale() -> None:
    x = linear_scale((0, 10), (0, 100))
    assert x(5) == 50
    y = linear_scale((0, 2), (50, 0))
    assert y(0) == 50 and y(2) == 0 and y(1) == 25
    flat = linear_scale((3, 3), (0, 100))
    assert flat(3) == 50 and flat(99) == 50


def test_bands_in_screen_space() -> None:
    s = stack_series([[1, 1], [1, 1]], ["a", "b"], offset="zero")
    bands = bands_in_screen_space(s, [0, 1], width=100, plot_height=50)
    assert [b.key for b in bands] == ["a", "b"]
    a, b = bands
    assert a.xs == (0, 100)
    assert a.lowers == (50, 50) and a.uppers == (25, 25)
    assert b.lowers == (25, 25) and b.uppers == (0, 0)


def test_bands_in_screen_space_rejects_x_mismatch() -> None:
    s = stack_series([[1, 1]], ["a"], offset="zero")
    with pytest.raises(ValueError):
        bands_in_screen_space(s, [0, 1, 2], width=100, plot_height=50)
