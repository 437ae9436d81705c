import pytest

from cartlab.analysis.measurement import (
    is_valid_selection,
    measure_acceleration,
    measure_force_mean,
    measure_trial,
    scenario_fit,
)
from cartlab.analysis.signals import generate_trial_signals
from cartlab.core.models import Interval, TrialRecord
from cartlab.physics.model import compute_physics


@pytest.fixture
def physics():
    return compute_physics("cart_only", "low", 0.1)


@pytest.fixture
def signals(physics):
    return generate_trial_signals(physics, noise_enabled=False, seed=1)


def _record(scenario: str, trial_id: int, accel: float, force: float) -> TrialRecord:
    return TrialRecord(
        scenario=scenario,
        preset="Low Friction",
        trial_id=trial_id,
        hanging_mass_kg=0.1,
        force_mean_n=force,
        accel_mps2=accel,
        moved=True,
        force_window_start_s=0.9,
        force_window_end_s=1.6,
        vel_window_start_s=0.9,
        vel_window_end_s=1.6,
        noise_enabled=False,
    )


def test_width_gate() -> None:
    assert not is_valid_selection(None)
    assert not is_valid_selection(Interval(1.0, 1.1))
    assert is_valid_selection(Interval(1.2, 1.0))
    assert is_valid_selection(Interval(1.0, 1.1), min_width_s=0.05)


def test_acceleration_from_linear_segment(signals, physics) -> None:
    accel = measure_acceleration(signals, Interval(0.9, 1.6))
    assert accel == pytest.approx(physics.acceleration_mps2, rel=1e-9)


def test_force_mean_near_model_tension(signals, physics) -> None:
    force = measure_force_mean(signals, Interval(0.9, 1.6))
    assert force == pytest.approx(physics.tension_n, abs=0.02)


def test_narrow_window_yields_no_value(signals) -> None:
    assert measure_force_mean(signals, Interval(1.0, 1.1)) is None
    assert measure_acceleration(signals, Interval(1.0, 1.1)) is None


def test_minimum_sample_gate(signals) -> None:
    window = Interval(1.0, 1.2)
    assert measure_force_mean(signals, window) is not None
    assert measure_force_mean(signals, window, min_points=100) is None
    assert measure_acceleration(signals, window, min_points=100) is None


def test_measure_trial_normalizes_windows(signals) -> None:
    m = measure_trial(signals, Interval(1.6, 0.9), None)

    assert m.force_window == Interval(0.9, 1.6)
    assert m.force_mean_n is not None
    assert m.velocity_window is None
    assert m.acceleration_mps2 is None


def test_measure_trial_without_signals_keeps_windows() -> None:
    m = measure_trial(None, Interval(2.0, 1.0), Interval(0.5, 0.9))

    assert m.force_window == Interval(1.0, 2.0)
    assert m.velocity_window == Interval(0.5, 0.9)
    assert m.force_mean_n is None
    assert m.acceleration_mps2 is None


def test_scenario_fit_filters_by_scenario() -> None:
    records = [
        _record("cart_only", 1, 1.0, 0.6),
        _record("cart_plus_pad", 2, 0.5, 1.5),
        _record("cart_only", 3, 2.0, 1.1),
        _record("cart_only", 4, 3.0, 1.6),
    ]

    view = scenario_fit(records, "cart_only")

    assert view.points == ((1.0, 0.6), (2.0, 1.1), (3.0, 1.6))
    assert view.fit is not None
    assert view.fit.slope == pytest.approx(0.5)
    assert view.fit.intercept == pytest.approx(0.1)
    assert view.fit.count == 3


def test_scenario_fit_needs_two_points() -> None:
    view = scenario_fit([_record("cart_plus_pad", 1, 0.5, 1.5)], "cart_plus_pad")
    assert len(view.points) == 1
    assert view.fit is None
