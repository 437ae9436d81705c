"""Lab session controller: runs trials, tracks selections, accepts records."""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from ..analysis.measurement import ScenarioFit, is_valid_selection, measure_trial, scenario_fit
from ..analysis.signals import generate_trial_signals
from ..config.runtime import LabConfig
from ..dataio.trial_export import write_trial_csv
from ..physics.model import compute_physics
from ..physics.presets import available_presets, get_preset
from ..tools.debug import time_block
from .models import CurrentTrial, Interval, TrialRecord
from .store import LabState, LabStore

logger = logging.getLogger(__name__)


def round_to(value: float, digits: int = 3) -> float:
    """Round half up to ``digits`` decimals (ties go toward +inf)."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def trial_seed(state: LabState) -> int:
    """Seed derived from the trial id, mass, scenario and preset."""
    scenario_offset = 7000 if state.scenario == "cart_plus_pad" else 2000
    return int(
        math.floor(
            state.next_trial_id * 997
            + state.hanging_mass_kg * 10000
            + scenario_offset
            + ord(state.preset_id[0])
        )
    )


class LabSession:
    """
    Operations behind the lab controls, applied to a :class:`LabStore`.

    Parameters
    ----------
    store:
        State owner; a fresh one is created when omitted.
    config:
        Synthesis and gating parameters.
    """

    def __init__(self, store: LabStore | None = None, config: LabConfig | None = None) -> None:
        self.config = config or LabConfig()
        if store is None:
            preset = get_preset(self.config.default_preset)
            scenario = self.config.default_scenario
            if preset not in available_presets(scenario):
                preset = available_presets(scenario)[0]
            store = LabStore(
                LabState(
                    scenario=scenario,
                    preset_id=preset.id,
                    hanging_mass_kg=self.config.default_hanging_mass_kg,
                    noise_enabled=preset.noise_default,
                )
            )
        self.store = store

    @property
    def state(self) -> LabState:
        return self.store.state

    # ------------------------------------------------------------------ setup
    def select_scenario(self, scenario: str) -> None:
        """Switch scenario, keeping the preset when the scenario offers it."""
        options = available_presets(scenario)
        current = self.state.preset_id
        preset_id = current if any(p.id == current for p in options) else options[0].id
        preset = get_preset(preset_id)
        self.store.set_state(
            scenario=scenario,
            preset_id=preset_id,
            noise_enabled=preset.noise_default,
        )

    def select_preset(self, preset_id: str) -> None:
        preset = get_preset(preset_id)
        self.store.set_state(preset_id=preset.id, noise_enabled=preset.noise_default)

    def set_hanging_mass(self, hanging_mass_kg: float) -> None:
        self.store.set_state(hanging_mass_kg=float(hanging_mass_kg))

    def set_noise(self, enabled: bool) -> None:
        self.store.set_state(noise_enabled=bool(enabled))

    def set_show_fbd(self, show: bool) -> None:
        self.store.set_state(show_fbd=bool(show))

    # ------------------------------------------------------------------ trials
    def run_trial(self) -> CurrentTrial:
        """
        Synthesize a new trial from the current settings.

        The measurement is reset and the trial counter advances.
        """
        state = self.state
        physics = compute_physics(state.scenario, state.preset_id, state.hanging_mass_kg)
        seed = trial_seed(state)
        with time_block("generate_trial_signals"):
            signals = generate_trial_signals(
                physics,
                noise_enabled=state.noise_enabled,
                seed=seed,
                duration_s=self.config.duration_s,
                sample_rate_hz=self.config.sample_rate_hz,
            )

        trial = CurrentTrial(id=state.next_trial_id, physics=physics, signals=signals)
        self.store.update(
            lambda prev: replace(
                prev,
                current_trial=trial,
                next_trial_id=prev.next_trial_id + 1,
                measurement=measure_trial(None, None, None),
            )
        )

        if not physics.moved:
            threshold = physics.config.start_threshold_n if physics.config else float("nan")
            logger.warning(
                "Trial %d: hanging force (%.2f N) is below start threshold (%.2f N); do not add it.",
                trial.id,
                physics.pulling_force_n,
                threshold,
            )
        else:
            logger.info("Trial %d ready (seed=%d, a=%.3f m/s^2)", trial.id, seed, physics.acceleration_mps2)
        return trial

    def update_force_window(self, window: Interval | None) -> None:
        self._remeasure(window, self.state.measurement.velocity_window)

    def update_velocity_window(self, window: Interval | None) -> None:
        self._remeasure(self.state.measurement.force_window, window)

    def _remeasure(self, force_window: Interval | None, velocity_window: Interval | None) -> None:
        trial = self.state.current_trial
        measurement = measure_trial(
            trial.signals if trial else None,
            force_window,
            velocity_window,
            min_width_s=self.config.min_selection_width_s,
            min_points=self.config.min_points,
        )
        self.store.set_state(measurement=measurement)

    def can_accept_trial(self) -> bool:
        state = self.state
        m = state.measurement
        return bool(
            state.current_trial is not None
            and state.current_trial.physics.moved
            and m.force_mean_n is not None
            and m.acceleration_mps2 is not None
            and is_valid_selection(m.force_window, self.config.min_selection_width_s)
            and is_valid_selection(m.velocity_window, self.config.min_selection_width_s)
        )

    def accept_trial(self, timestamp: datetime | None = None) -> Optional[TrialRecord]:
        """
        Append the current trial to the table.

        Returns the new record, or ``None`` (with a warning) when the trial
        did not move or a window is missing/too small.
        """
        if not self.can_accept_trial():
            logger.warning("Cannot add trial: run a moving trial and select both windows first.")
            return None

        state = self.state
        trial = state.current_trial
        m = state.measurement
        force_window = m.force_window.normalized()
        velocity_window = m.velocity_window.normalized()
        stamp = timestamp or datetime.now(timezone.utc)

        record = TrialRecord(
            scenario=state.scenario,
            preset=get_preset(state.preset_id).label,
            trial_id=trial.id,
            hanging_mass_kg=round_to(trial.physics.hanging_mass_kg, 3),
            force_mean_n=round_to(m.force_mean_n, 4),
            accel_mps2=round_to(m.acceleration_mps2, 4),
            moved=True,
            force_window_start_s=round_to(force_window.start_s, 3),
            force_window_end_s=round_to(force_window.end_s, 3),
            vel_window_start_s=round_to(velocity_window.start_s, 3),
            vel_window_end_s=round_to(velocity_window.end_s, 3),
            noise_enabled=state.noise_enabled,
            timestamp_iso=_iso_timestamp(stamp),
        )
        self.store.update(
            lambda prev: replace(prev, trial_records=prev.trial_records + (record,))
        )
        logger.info("Trial %d added (F=%.4f N, a=%.4f m/s^2)", record.trial_id, record.force_mean_n, record.accel_mps2)
        return record

    def remove_trial(self, trial_id: int) -> bool:
        records = self.state.trial_records
        kept = tuple(r for r in records if r.trial_id != trial_id)
        if len(kept) == len(records):
            return False
        self.store.set_state(trial_records=kept)
        logger.info("Removed trial %d", trial_id)
        return True

    def clear_trials(self) -> None:
        self.store.set_state(trial_records=())
        logger.info("Cleared recorded trials")

    # ------------------------------------------------------------------ output
    def current_fit(self) -> ScenarioFit:
        """Fit for the accepted trials of the active scenario."""
        state = self.state
        return scenario_fit(state.trial_records, state.scenario)

    def export_csv(self, path: str | Path) -> Optional[Path]:
        records = self.state.trial_records
        if not records:
            logger.warning("No data yet. Add at least one trial before exporting CSV.")
            return None
        target = write_trial_csv(path, records)
        logger.info("CSV export complete: %s (%d trials)", target, len(records))
        return target

    def export_snapshot(self, path: str | Path) -> Optional[Path]:
        state = self.state
        if state.current_trial is None:
            logger.warning("Run a trial first so there is graph data to export.")
            return None
        # matplotlib is only pulled in when a snapshot is requested
        from ..dataio.snapshot import write_snapshot

        return write_snapshot(
            path,
            state.current_trial.signals,
            self.current_fit(),
            force_selection=state.measurement.force_window,
            velocity_selection=state.measurement.velocity_window,
        )


def _iso_timestamp(stamp: datetime) -> str:
    """UTC ISO-8601 with millisecond precision and a ``Z`` suffix."""
    if stamp.tzinfo is not None:
        stamp = stamp.astimezone(timezone.utc).replace(tzinfo=None)
    return stamp.isoformat(timespec="milliseconds") + "Z"
