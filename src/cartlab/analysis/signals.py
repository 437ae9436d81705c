"""Synthetic force/velocity sensor traces for a cart trial."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from ..core.models import Interval, PhysicsResult, SignalPhases, TrialSignals
from .noise import NoiseSampler, build_noise_sampler

DEFAULT_DURATION_S = 4.5
DEFAULT_SAMPLE_RATE_HZ = 60.0

PRE_ROLL_S = 0.7
DEFAULT_TRAVEL_TIME_S = 1.8
STOP_DURATION_S = 0.45
STOP_DECAY_PER_S = 3.2

# Calibration constants for the stuck-cart branch.
PULSE_THRESHOLD = 0.82
PULSE_FORCE_N = 0.04
PULSE_VELOCITY_MPS = 0.015

FORCE_NOISE_MOVED = 0.01
VELOCITY_NOISE_MOVED = 0.006
FORCE_NOISE_STUCK = 0.015
VELOCITY_NOISE_STUCK = 0.003


def _clamp(value: float, lo: float, hi: float) -> float:
    return min(hi, max(lo, value))


@dataclass(frozen=True)
class _Timeline:
    """Phase boundaries plus the derived values the per-sample model needs."""

    phases: SignalPhases
    ramp_window_s: float
    linear_start_s: float
    linear_end_s: float
    stop_duration_s: float
    peak_velocity_mps: float


def compute_phases(physics: PhysicsResult, duration_s: float = DEFAULT_DURATION_S) -> SignalPhases:
    """Return the phase boundaries :func:`generate_trial_signals` would use."""
    return _build_timeline(physics, duration_s).phases


def _build_timeline(physics: PhysicsResult, duration_s: float) -> _Timeline:
    accel_start = PRE_ROLL_S

    if not physics.moved:
        return _Timeline(
            phases=SignalPhases(
                initial_start_s=0.0,
                accel_start_s=accel_start,
                accel_end_s=accel_start,
                stop_end_s=accel_start + 0.35,
            ),
            ramp_window_s=0.0,
            linear_start_s=accel_start,
            linear_end_s=accel_start,
            stop_duration_s=0.0,
            peak_velocity_mps=0.0,
        )

    travel_time = physics.travel_time_s
    if travel_time is None:
        travel_time = DEFAULT_TRAVEL_TIME_S
    accel_duration = _clamp(travel_time * 0.8, 1.1, 2.0)
    accel_end = _clamp(accel_start + accel_duration, 1.8, duration_s - 1.2)
    ramp_window = min(0.24, max(0.12, 0.14 * accel_duration))
    stop_end = _clamp(accel_end + STOP_DURATION_S, accel_end + 0.35, duration_s - 0.35)

    return _Timeline(
        phases=SignalPhases(
            initial_start_s=0.0,
            accel_start_s=accel_start,
            accel_end_s=accel_end,
            stop_end_s=stop_end,
        ),
        ramp_window_s=ramp_window,
        linear_start_s=accel_start + ramp_window,
        linear_end_s=accel_end - ramp_window,
        stop_duration_s=STOP_DURATION_S,
        peak_velocity_mps=physics.acceleration_mps2 * (accel_end - accel_start),
    )


def _accel_velocity(t: float, a: float, tl: _Timeline) -> float:
    """Quadratic ramp-in, linear, quadratic ramp-out velocity (C1 continuous)."""
    ramp = tl.ramp_window_s
    v_ramp = 0.5 * a * ramp
    if t < tl.linear_start_s:
        u = _clamp((t - tl.phases.accel_start_s) / ramp, 0.0, 1.0)
        return v_ramp * u * u
    if t <= tl.linear_end_s:
        return v_ramp + a * (t - tl.linear_start_s)
    u = _clamp((t - tl.linear_end_s) / ramp, 0.0, 1.0)
    v_linear = v_ramp + a * (tl.linear_end_s - tl.linear_start_s)
    return v_linear + a * ramp * (u - 0.5 * u * u)


def _moved_sample(t: float, physics: PhysicsResult, tl: _Timeline) -> tuple[float, float]:
    phases = tl.phases
    tension = physics.tension_n

    if t < phases.accel_start_s:
        ratio = t / phases.accel_start_s
        force = tension * (0.15 + 0.85 * ratio) + 0.01 * math.sin(8 * t)
        velocity = 0.004 * math.sin(9 * t)
    elif t <= phases.accel_end_s:
        dt = t - phases.accel_start_s
        force = tension + 0.035 * math.exp(-3 * dt) * math.sin(14 * dt)
        velocity = _accel_velocity(t, physics.acceleration_mps2, tl)
    elif t <= phases.stop_end_s:
        dt = t - phases.accel_end_s
        ratio = _clamp(dt / tl.stop_duration_s, 0.0, 1.0)
        velocity = tl.peak_velocity_mps * math.exp(-STOP_DECAY_PER_S * dt)
        force = (1 - ratio) * tension * 0.7 + 0.03 * math.sin(18 * dt) * math.exp(-4 * dt)
    else:
        dt = t - phases.stop_end_s
        velocity = 0.002 * math.sin(11 * dt) * math.exp(-4 * dt)
        force = 0.01 * math.sin(14 * dt) * math.exp(-4 * dt)

    return force, velocity


def _stuck_sample(t: float, physics: PhysicsResult) -> tuple[float, float]:
    pulse = 1 if math.sin(10 * t) > PULSE_THRESHOLD else 0
    force = physics.pulling_force_n * (0.9 + 0.05 * math.sin(3.8 * t)) + pulse * PULSE_FORCE_N
    velocity = (PULSE_VELOCITY_MPS if pulse else 0.0) + 0.003 * math.sin(11 * t)
    return force, velocity


def generate_trial_signals(
    physics: PhysicsResult,
    *,
    noise_enabled: bool,
    seed: int,
    duration_s: float = DEFAULT_DURATION_S,
    sample_rate_hz: float = DEFAULT_SAMPLE_RATE_HZ,
) -> TrialSignals:
    """
    Synthesize the force and velocity traces for one trial.

    Parameters
    ----------
    physics:
        Model output for the trial; treated as already validated.
    noise_enabled:
        Add seeded Gaussian noise. When false the output does not depend on
        ``seed`` at all.
    seed:
        32-bit seed for the noise generator.
    duration_s, sample_rate_hz:
        Trace length and fixed sampling rate. Samples are taken at
        ``i / sample_rate_hz`` for ``i`` in ``0..floor(duration * rate)``.

    Returns
    -------
    TrialSignals
        Parallel read-only arrays plus phase boundaries. ``motion_window`` is
        set only when the cart moved.
    """
    if sample_rate_hz <= 0:
        raise ValueError(f"sample_rate_hz must be > 0, got {sample_rate_hz}")

    count = int(math.floor(duration_s * sample_rate_hz)) + 1
    noise: NoiseSampler = build_noise_sampler(seed, noise_enabled)
    tl = _build_timeline(physics, duration_s)

    times = np.empty(count, dtype=np.float64)
    force = np.empty(count, dtype=np.float64)
    velocity = np.empty(count, dtype=np.float64)

    for index in range(count):
        t = index / sample_rate_hz
        if physics.moved:
            f, v = _moved_sample(t, physics, tl)
            f += noise(FORCE_NOISE_MOVED)
            v += noise(VELOCITY_NOISE_MOVED)
        else:
            f, v = _stuck_sample(t, physics)
            f += noise(FORCE_NOISE_STUCK)
            v += noise(VELOCITY_NOISE_STUCK)
        times[index] = t
        force[index] = f
        velocity[index] = v

    for arr in (times, force, velocity):
        arr.flags.writeable = False

    motion_window = None
    if physics.moved:
        motion_window = Interval(start_s=tl.phases.accel_start_s, end_s=tl.phases.accel_end_s)

    return TrialSignals(
        times_s=times,
        force_n=force,
        velocity_mps=velocity,
        motion_window=motion_window,
        phases=tl.phases,
    )
