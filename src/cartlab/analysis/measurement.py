"""Turn window selections into trial measurements and cross-trial fits."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from ..core.models import FitResult, Interval, TrialMeasurement, TrialRecord, TrialSignals
from .regression import linear_regression, linear_regression_in_window, mean, slice_window

MIN_SELECTION_WIDTH_S = 0.12
MIN_POINTS = 6


def is_valid_selection(
    interval: Interval | None,
    min_width_s: float = MIN_SELECTION_WIDTH_S,
) -> bool:
    """True when ``interval`` exists and spans at least ``min_width_s``."""
    if interval is None:
        return False
    return interval.width_s >= min_width_s


def measure_force_mean(
    signals: TrialSignals,
    window: Interval | None,
    *,
    min_width_s: float = MIN_SELECTION_WIDTH_S,
    min_points: int = MIN_POINTS,
) -> Optional[float]:
    """Mean force inside ``window``, or ``None`` if the window is too small."""
    if not is_valid_selection(window, min_width_s):
        return None
    w = window.normalized()
    _, values = slice_window(signals.times_s, signals.force_n, w.start_s, w.end_s)
    if values.size < min_points:
        return None
    value = mean(values)
    if math.isnan(value):
        return None
    return value


def measure_acceleration(
    signals: TrialSignals,
    window: Interval | None,
    *,
    min_width_s: float = MIN_SELECTION_WIDTH_S,
    min_points: int = MIN_POINTS,
) -> Optional[float]:
    """Slope of velocity vs time inside ``window``, or ``None``."""
    if not is_valid_selection(window, min_width_s):
        return None
    w = window.normalized()
    fit = linear_regression_in_window(signals.times_s, signals.velocity_mps, w.start_s, w.end_s)
    if fit is None or fit.count < min_points:
        return None
    return fit.slope


def measure_trial(
    signals: TrialSignals | None,
    force_window: Interval | None,
    velocity_window: Interval | None,
    *,
    min_width_s: float = MIN_SELECTION_WIDTH_S,
    min_points: int = MIN_POINTS,
) -> TrialMeasurement:
    """
    Recompute the measurement for the current selections.

    Both windows are stored normalized; the derived values are ``None`` when
    there is no trial or when a window fails the width/sample gates.
    """
    force_window = force_window.normalized() if force_window else None
    velocity_window = velocity_window.normalized() if velocity_window else None

    if signals is None:
        return TrialMeasurement(force_window=force_window, velocity_window=velocity_window)

    return TrialMeasurement(
        force_window=force_window,
        velocity_window=velocity_window,
        force_mean_n=measure_force_mean(
            signals, force_window, min_width_s=min_width_s, min_points=min_points
        ),
        acceleration_mps2=measure_acceleration(
            signals, velocity_window, min_width_s=min_width_s, min_points=min_points
        ),
    )


@dataclass(frozen=True)
class ScenarioFit:
    """Points plotted on the force-vs-acceleration graph and their fit."""

    scenario: str
    points: Tuple[Tuple[float, float], ...]
    fit: Optional[FitResult]


def scenario_fit(records: Iterable[TrialRecord], scenario: str) -> ScenarioFit:
    """
    Fit force mean against acceleration for accepted trials of ``scenario``.

    Every point counts equally. The fit is ``None`` until two points exist
    (or when every acceleration is identical).
    """
    points: List[Tuple[float, float]] = [
        (record.accel_mps2, record.force_mean_n)
        for record in records
        if record.scenario == scenario
    ]
    fit = None
    if len(points) >= 2:
        fit = linear_regression([p[0] for p in points], [p[1] for p in points])
    return ScenarioFit(scenario=scenario, points=tuple(points), fit=fit)
