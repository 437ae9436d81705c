import pytest

from cartlab.analysis.signals import generate_trial_signals
from cartlab.core.models import Interval
from cartlab.core.playback import (
    PlaybackClock,
    cart_displacement_m,
    live_readout,
    phase_label,
    sample_at,
    visible_series,
)
from cartlab.physics.model import compute_physics


@pytest.fixture
def moved():
    physics = compute_physics("cart_only", "low", 0.1)
    return physics, generate_trial_signals(physics, noise_enabled=False, seed=1)


def test_clock_advances_by_wall_clock_delta() -> None:
    seen = []
    clock = PlaybackClock(2.0, on_time_update=seen.append)
    clock.start()

    assert clock.frame(10.0) is True
    assert clock.current_time_s == 0.0
    assert clock.frame(10.5) is True
    assert clock.current_time_s == pytest.approx(0.5)
    assert seen[-1] == pytest.approx(0.5)


def test_clock_stops_itself_at_the_end() -> None:
    clock = PlaybackClock(2.0)
    clock.start()
    clock.frame(0.0)

    assert clock.frame(5.0) is False
    assert clock.current_time_s == 2.0
    assert clock.playing is False
    assert clock.frame(6.0) is False


def test_paused_clock_does_not_advance() -> None:
    clock = PlaybackClock(2.0)
    clock.start()
    clock.frame(0.0)
    clock.pause()

    assert clock.frame(1.0) is False
    assert clock.current_time_s == 0.0


def test_seek_clamps_and_pauses() -> None:
    clock = PlaybackClock(2.0)
    clock.start()
    clock.seek(5.0)
    assert clock.current_time_s == 2.0
    assert not clock.playing

    clock.seek(-1.0)
    assert clock.current_time_s == 0.0


def test_toggle_restarts_after_reaching_the_end() -> None:
    clock = PlaybackClock(1.0)
    clock.seek(1.0)
    clock.toggle()

    assert clock.playing
    assert clock.current_time_s == 0.0


def test_visible_series_reveals_prefix(moved) -> None:
    _, signals = moved

    start = visible_series(signals, 0.0)
    assert start.times_s.size == 1
    assert start.motion_window is None

    mid = visible_series(signals, 1.0)
    assert mid.times_s.size == 61
    assert mid.force_n.size == 61
    assert mid.motion_window == Interval(0.7, 1.0)

    end = visible_series(signals, 10.0)
    assert end.times_s.size == len(signals)
    assert end.motion_window == signals.motion_window


def test_sample_at_interpolates(moved) -> None:
    _, signals = moved
    force, velocity = sample_at(signals, 0.0)
    assert force == pytest.approx(signals.force_n[0])
    assert velocity == pytest.approx(signals.velocity_mps[0])

    t_mid = 0.5 * (signals.times_s[60] + signals.times_s[61])
    force, velocity = sample_at(signals, t_mid)
    assert force == pytest.approx(0.5 * (signals.force_n[60] + signals.force_n[61]))
    assert velocity == pytest.approx(0.5 * (signals.velocity_mps[60] + signals.velocity_mps[61]))


def test_live_readout_reports_values_at_cursor(moved) -> None:
    _, signals = moved
    force, velocity = sample_at(signals, 1.2)
    text = live_readout(signals, 1.2)

    assert text == f"Ft = {force:.3f} N, v = {velocity:.3f} m/s"
    assert velocity > 0.0


def test_phase_labels(moved) -> None:
    physics, signals = moved
    assert phase_label(physics, signals, 0.3) == "Initial setup phase"
    assert phase_label(physics, signals, 1.0) == "Steady acceleration phase"
    assert phase_label(physics, signals, 2.0) == "Stop/deceleration phase"
    assert phase_label(physics, signals, 3.0) == "Post-stop phase"
    assert phase_label(None, None, 1.0) == "No sustained motion"


def test_cart_displacement(moved) -> None:
    physics, signals = moved
    a = physics.acceleration_mps2

    assert cart_displacement_m(physics, signals, 0.5) == 0.0
    assert cart_displacement_m(physics, signals, 1.2) == pytest.approx(0.5 * a * 0.5**2)
    final = cart_displacement_m(physics, signals, 4.0)
    assert final >= cart_displacement_m(physics, signals, 1.8)


def test_stuck_cart_stays_put() -> None:
    physics = compute_physics("cart_plus_pad", "high", 0.1)
    signals = generate_trial_signals(physics, noise_enabled=False, seed=1)
    assert cart_displacement_m(physics, signals, 3.0) == 0.0
