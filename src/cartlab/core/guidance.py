"""Text shown next to the fit graph: interpretation hints and workflow progress."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from ..analysis.measurement import ScenarioFit
from .store import LabState


@dataclass(frozen=True)
class ChecklistItem:
    key: str
    label: str
    done: bool


_STEP_LABELS = (
    ("setup", "Choose scenario, preset and hanging mass"),
    ("run", "Run a trial"),
    ("force_window", "Select a force window"),
    ("velocity_window", "Select a velocity window"),
    ("add", "Add the trial to the table"),
    ("fit", "Collect 2+ trials for a fit"),
    ("export", "Export CSV"),
)


def workflow_checklist(state: LabState) -> Tuple[ChecklistItem, ...]:
    """
    Progress through one scenario's experiment, derived from ``state``.

    Accepted-trial steps only count records of the current scenario; the
    export step is ready as soon as any record exists.
    """
    relevant = sum(1 for r in state.trial_records if r.scenario == state.scenario)
    done = {
        "setup": bool(state.preset_id and state.hanging_mass_kg),
        "run": state.current_trial is not None,
        "force_window": state.measurement.force_mean_n is not None,
        "velocity_window": state.measurement.acceleration_mps2 is not None,
        "add": relevant > 0,
        "fit": relevant >= 2,
        "export": bool(state.trial_records),
    }
    return tuple(ChecklistItem(key, label, done[key]) for key, label in _STEP_LABELS)


def fit_interpretation(view: ScenarioFit) -> Tuple[str, ...]:
    """Hints for reading the slope and intercept of ``view``."""
    if view.fit is None:
        return (
            "Mathematical meaning: slope = rate of change of Force of Tension with acceleration.",
            "Physical meaning prompt: compare slope and intercept for part 1 vs part 2 "
            "after collecting enough data.",
        )

    fit = view.fit
    if view.scenario == "cart_plus_pad":
        prompt = (
            "For cart + friction pad, expect a larger positive intercept "
            "because friction resists motion."
        )
    else:
        prompt = "For cart only, intercept should stay near zero when friction is minimal."
    return (
        f"Mathematical slope: {fit.slope:.3f} N/m/s^2",
        f"Mathematical intercept: {fit.intercept:.3f} N (Force of Tension at a = 0)",
        "Physical meaning hint: Slope approximates effective accelerated mass of the system.",
        "Physical meaning hint: Intercept represents resistive-force offset "
        "when acceleration trends toward zero.",
        f"Scenario check: {prompt}",
    )
