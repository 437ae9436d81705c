"""Playback cursor and kinematic helpers for the trial animation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

from .models import Interval, PhysicsResult, TrialSignals

logger = logging.getLogger(__name__)

TimeCallback = Callable[[float], None]


def _clamp(value: float, lo: float, hi: float) -> float:
    return min(hi, max(lo, value))


class PlaybackClock:
    """
    Cancellable repeating task that advances a time cursor once per frame.

    The host scheduler (a ``QTimer`` in the GUI, a plain loop in tests) calls
    :meth:`frame` with a monotonic timestamp in seconds and schedules the next
    frame only while it returns ``True``. Cancellation is the ``playing``
    flag, checked at the top of every frame.
    """

    def __init__(self, duration_s: float = 0.0, on_time_update: TimeCallback | None = None) -> None:
        self.duration_s = max(0.0, float(duration_s))
        self.current_time_s = 0.0
        self.playing = False
        self._last_frame_s: float | None = None
        self._on_time_update = on_time_update

    def reset(self, duration_s: float) -> None:
        """Stop and rewind for a new trial of ``duration_s`` seconds."""
        self.duration_s = max(0.0, float(duration_s))
        self.playing = False
        self._last_frame_s = None
        self.current_time_s = 0.0
        self._emit()

    def start(self, restart: bool = True) -> None:
        if restart:
            self.current_time_s = 0.0
            self._emit()
        self.playing = True
        self._last_frame_s = None

    def pause(self) -> None:
        self.playing = False

    def toggle(self) -> None:
        if self.playing:
            self.pause()
        else:
            self.start(restart=self.current_time_s >= self.duration_s)

    def seek(self, time_s: float) -> None:
        """Jump to ``time_s``; seeking always pauses playback."""
        self.playing = False
        self.current_time_s = _clamp(float(time_s), 0.0, self.duration_s)
        self._emit()

    def frame(self, timestamp_s: float) -> bool:
        """
        Advance by the wall-clock delta since the previous frame.

        Returns ``True`` if another frame should be scheduled.
        """
        if not self.playing:
            return False

        if self._last_frame_s is None:
            self._last_frame_s = timestamp_s
        dt = max(0.0, timestamp_s - self._last_frame_s)
        self._last_frame_s = timestamp_s

        self.current_time_s = _clamp(self.current_time_s + dt, 0.0, self.duration_s)
        self._emit()

        if self.current_time_s >= self.duration_s:
            self.pause()
            logger.debug("playback reached end at %.2f s", self.current_time_s)
            return False
        return True

    def _emit(self) -> None:
        if self._on_time_update is not None:
            self._on_time_update(self.current_time_s)


@dataclass(frozen=True)
class VisibleSeries:
    times_s: np.ndarray
    force_n: np.ndarray
    velocity_mps: np.ndarray
    motion_window: Optional[Interval]


def visible_series(signals: TrialSignals, time_s: float) -> VisibleSeries:
    """
    Samples revealed up to ``time_s`` during playback.

    At least the first sample is always visible. The motion window is clipped
    to ``time_s`` and hidden until it has non-zero width.
    """
    times = signals.times_s
    count = int(np.searchsorted(times, time_s, side="right"))
    count = max(1, min(count, times.size))

    window = None
    if signals.motion_window is not None:
        mw = signals.motion_window.normalized()
        clipped = Interval(mw.start_s, min(time_s, mw.end_s))
        if clipped.end_s > clipped.start_s:
            window = clipped

    return VisibleSeries(
        times_s=times[:count],
        force_n=signals.force_n[:count],
        velocity_mps=signals.velocity_mps[:count],
        motion_window=window,
    )


def sample_at(signals: TrialSignals, time_s: float) -> tuple[float, float]:
    """Linearly interpolated ``(force, velocity)`` at ``time_s``."""
    if signals.times_s.size == 0:
        return 0.0, 0.0
    force = float(np.interp(time_s, signals.times_s, signals.force_n))
    velocity = float(np.interp(time_s, signals.times_s, signals.velocity_mps))
    return force, velocity


def live_readout(signals: TrialSignals, time_s: float) -> str:
    """Force and velocity at the playback cursor, as shown under the graphs."""
    force, velocity = sample_at(signals, time_s)
    return f"Ft = {force:.3f} N, v = {velocity:.3f} m/s"


def phase_label(physics: PhysicsResult | None, signals: TrialSignals | None, time_s: float) -> str:
    if physics is None or signals is None or not physics.moved:
        return "No sustained motion"
    phases = signals.phases
    if time_s < phases.accel_start_s:
        return "Initial setup phase"
    if time_s <= phases.accel_end_s:
        return "Steady acceleration phase"
    if time_s <= phases.stop_end_s:
        return "Stop/deceleration phase"
    return "Post-stop phase"


def cart_displacement_m(physics: PhysicsResult, signals: TrialSignals, time_s: float) -> float:
    """Idealized cart position used by the machine animation."""
    if not physics.moved:
        return 0.0
    phases = signals.phases
    a = physics.acceleration_mps2

    if time_s <= phases.accel_start_s:
        return 0.0
    if time_s <= phases.accel_end_s:
        dt = time_s - phases.accel_start_s
        return 0.5 * a * dt * dt

    accel_dt = phases.accel_end_s - phases.accel_start_s
    accel_distance = 0.5 * a * accel_dt * accel_dt
    peak_velocity = a * accel_dt
    stop_duration = (phases.stop_end_s - phases.accel_end_s) or 0.001

    if time_s <= phases.stop_end_s:
        stop_dt = time_s - phases.accel_end_s
        decel = peak_velocity / stop_duration
        return accel_distance + peak_velocity * stop_dt - 0.5 * decel * stop_dt * stop_dt

    return accel_distance + 0.5 * peak_velocity * stop_duration
