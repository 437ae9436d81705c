from cartlab.core.models import Interval, TrialMeasurement
from cartlab.core.store import LabState, LabStore


def test_defaults() -> None:
    state = LabStore().state
    assert state.scenario == "cart_only"
    assert state.preset_id == "low"
    assert state.hanging_mass_kg == 0.1
    assert state.current_trial is None
    assert state.trial_records == ()
    assert state.next_trial_id == 1


def test_set_state_notifies_with_new_snapshot() -> None:
    store = LabStore()
    seen = []
    store.subscribe(seen.append)
    before = store.state

    store.set_state(hanging_mass_kg=0.3)

    assert len(seen) == 1
    assert seen[0].hanging_mass_kg == 0.3
    assert before.hanging_mass_kg == 0.1
    assert store.get_state() is seen[0]


def test_update_applies_function() -> None:
    store = LabStore(LabState(next_trial_id=4))
    store.update(lambda s: LabState(next_trial_id=s.next_trial_id + 1))
    assert store.state.next_trial_id == 5


def test_unsubscribe_stops_notifications() -> None:
    store = LabStore()
    seen = []
    unsubscribe = store.subscribe(seen.append)

    store.set_state(noise_enabled=True)
    unsubscribe()
    unsubscribe()
    store.set_state(noise_enabled=False)

    assert len(seen) == 1


def test_reset_measurement() -> None:
    store = LabStore()
    store.set_state(measurement=TrialMeasurement(force_window=Interval(1.0, 2.0), force_mean_n=0.5))
    store.reset_measurement()
    assert store.state.measurement == TrialMeasurement()
