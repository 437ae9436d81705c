import math

import numpy as np
import pytest

from cartlab.analysis.regression import (
    linear_regression,
    linear_regression_in_window,
    mean,
    mean_in_window,
    slice_window,
)


def test_exact_line_is_recovered() -> None:
    x = [0.0, 1.0, 2.0, 3.0, 4.0]
    y = [3 * v + 2 for v in x]

    fit = linear_regression(x, y)

    assert fit is not None
    assert fit.slope == pytest.approx(3.0)
    assert fit.intercept == pytest.approx(2.0)
    assert fit.r2 == pytest.approx(1.0)
    assert fit.count == 5
    assert fit.predict(10.0) == pytest.approx(32.0)


def test_windowed_fit_uses_inclusive_bounds() -> None:
    times = [0.0, 1.0, 2.0, 3.0, 4.0]
    values = [1.0, 3.0, 5.0, 7.0, 100.0]

    fit = linear_regression_in_window(times, values, 0.0, 2.0)

    assert fit is not None
    assert fit.slope == pytest.approx(2.0)
    assert fit.intercept == pytest.approx(1.0)
    assert fit.count == 3


def test_slice_window_accepts_reversed_bounds() -> None:
    t, v = slice_window([0, 1, 2, 3], [10, 11, 12, 13], 2.0, 1.0)

    np.testing.assert_array_equal(t, [1.0, 2.0])
    np.testing.assert_array_equal(v, [11.0, 12.0])


def test_slice_window_rejects_mismatched_lengths() -> None:
    with pytest.raises(ValueError):
        slice_window([0, 1, 2], [1, 2], 0.0, 1.0)


def test_mean_of_empty_is_nan() -> None:
    assert math.isnan(mean([]))
    assert math.isnan(mean_in_window([0.0, 1.0], [5.0, 6.0], 2.0, 3.0))
    assert mean([1.0, 2.0, 6.0]) == pytest.approx(3.0)


@pytest.mark.parametrize(
    "x, y",
    [
        ([], []),
        ([1.0], [2.0]),
        ([2.0, 2.0, 2.0], [1.0, 2.0, 3.0]),
        ([1.0, 2.0], [1.0]),
    ],
)
def test_degenerate_input_returns_none(x, y) -> None:
    assert linear_regression(x, y) is None


def test_constant_y_has_perfect_r2() -> None:
    fit = linear_regression([0.0, 1.0, 2.0], [4.0, 4.0, 4.0])

    assert fit is not None
    assert fit.slope == pytest.approx(0.0)
    assert fit.r2 == 1.0
