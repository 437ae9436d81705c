"""Shared dataclasses for trials, selections, and fits."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

import numpy as np

if TYPE_CHECKING:
    from ..physics.model import ScenarioConfig


@dataclass(frozen=True)
class Interval:
    """
    A time window in seconds.

    Bounds are not required to be ordered (a drag may run backwards); use
    :meth:`normalized` before consuming the interval.
    """

    start_s: float
    end_s: float

    def normalized(self) -> "Interval":
        if self.start_s <= self.end_s:
            return self
        return Interval(start_s=self.end_s, end_s=self.start_s)

    @property
    def width_s(self) -> float:
        return abs(self.end_s - self.start_s)


@dataclass(frozen=True)
class PhysicsResult:
    moved: bool
    acceleration_mps2: float
    tension_n: float
    pulling_force_n: float
    travel_time_s: Optional[float]
    net_force_n: float = 0.0
    hanging_mass_kg: float = 0.0
    config: Optional["ScenarioConfig"] = None


@dataclass(frozen=True)
class SignalPhases:
    initial_start_s: float
    accel_start_s: float
    accel_end_s: float
    stop_end_s: float


@dataclass(frozen=True)
class TrialSignals:
    """
    Fixed-rate force/velocity series for one trial.

    ``times_s``, ``force_n`` and ``velocity_mps`` are parallel float64 arrays
    of identical length. ``motion_window`` is the constant-acceleration
    interval, or ``None`` when the cart did not move.
    """

    times_s: np.ndarray
    force_n: np.ndarray
    velocity_mps: np.ndarray
    motion_window: Optional[Interval]
    phases: SignalPhases

    @property
    def duration_s(self) -> float:
        if self.times_s.size == 0:
            return 0.0
        return float(self.times_s[-1])

    def __len__(self) -> int:
        return int(self.times_s.size)


@dataclass(frozen=True)
class FitResult:
    slope: float
    intercept: float
    r2: float
    count: int

    def predict(self, x: float) -> float:
        return self.slope * x + self.intercept


@dataclass(frozen=True)
class TrialMeasurement:
    """Windows chosen on the current trial and the values derived from them."""

    force_window: Optional[Interval] = None
    velocity_window: Optional[Interval] = None
    force_mean_n: Optional[float] = None
    acceleration_mps2: Optional[float] = None


@dataclass(frozen=True)
class CurrentTrial:
    id: int
    physics: PhysicsResult
    signals: TrialSignals


@dataclass(frozen=True)
class TrialRecord:
    """One accepted trial as it appears in the data table and CSV export."""

    scenario: str
    preset: str
    trial_id: int
    hanging_mass_kg: float
    force_mean_n: float
    accel_mps2: float
    moved: bool
    force_window_start_s: float
    force_window_end_s: float
    vel_window_start_s: float
    vel_window_end_s: float
    noise_enabled: bool
    timestamp_iso: str = field(default="")
