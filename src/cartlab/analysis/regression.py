"""Window slicing, means, and ordinary least-squares fits.

None of these helpers raise on degenerate input: an empty mean is ``nan``
and an impossible fit is ``None``. Callers must treat both as
"insufficient data".
"""

from __future__ import annotations

from typing import Optional, Tuple

import numpy as np
from numpy.typing import ArrayLike

from ..core.models import FitResult


def mean(values: ArrayLike) -> float:
    """Arithmetic mean, or ``nan`` for an empty input."""
    arr = np.asarray(values, dtype=float)
    if arr.size == 0:
        return float("nan")
    return float(np.sum(arr) / arr.size)


def slice_window(
    times: ArrayLike,
    values: ArrayLike,
    start_s: float,
    end_s: float,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Return the samples whose time lies in ``[start_s, end_s]`` (inclusive).

    The bounds may be given in either order.
    """
    t = np.asarray(times, dtype=float)
    v = np.asarray(values, dtype=float)
    if t.shape != v.shape:
        raise ValueError(f"times and values must match, got {t.shape} and {v.shape}")
    lo = min(start_s, end_s)
    hi = max(start_s, end_s)
    mask = (t >= lo) & (t <= hi)
    return t[mask], v[mask]


def mean_in_window(times: ArrayLike, values: ArrayLike, start_s: float, end_s: float) -> float:
    _, selected = slice_window(times, values, start_s, end_s)
    return mean(selected)


def linear_regression(x: ArrayLike, y: ArrayLike) -> Optional[FitResult]:
    """
    Ordinary least-squares line through ``(x, y)``.

    Returns ``None`` when the inputs differ in length, hold fewer than two
    points, or all ``x`` are equal. ``r2`` is 1 when every ``y`` is equal.
    """
    xa = np.asarray(x, dtype=float)
    ya = np.asarray(y, dtype=float)
    if xa.size != ya.size or xa.size < 2:
        return None

    dx = xa - mean(xa)
    dy = ya - mean(ya)
    ssxx = float(np.sum(dx * dx))
    if ssxx == 0.0:
        return None
    ssxy = float(np.sum(dx * dy))
    sst = float(np.sum(dy * dy))

    slope = ssxy / ssxx
    intercept = mean(ya) - slope * mean(xa)
    residual = float(np.sum((ya - (slope * xa + intercept)) ** 2))
    r2 = 1.0 if sst == 0.0 else 1.0 - residual / sst

    return FitResult(slope=slope, intercept=intercept, r2=r2, count=int(xa.size))


def linear_regression_in_window(
    times: ArrayLike,
    values: ArrayLike,
    start_s: float,
    end_s: float,
) -> Optional[FitResult]:
    selected_t, selected_v = slice_window(times, values, start_s, end_s)
    return linear_regression(selected_t, selected_v)
