"""Physics constants model and friction presets.

Pure functions mapping a (scenario, preset, hanging mass) choice onto a
:class:`~cartlab.core.models.PhysicsResult`. Identifiers are validated here so
the signal and statistics layers can treat their inputs as already checked.
"""

from .model import G, TRACK_LENGTH_M, ScenarioConfig, compute_physics, get_scenario_config
from .presets import (
    HANGING_MASS_STEPS_KG,
    PRESETS,
    SCENARIOS,
    FrictionPreset,
    available_presets,
    get_preset,
    scenario_title,
)

__all__ = [
    "G",
    "TRACK_LENGTH_M",
    "ScenarioConfig",
    "compute_physics",
    "get_scenario_config",
    "HANGING_MASS_STEPS_KG",
    "PRESETS",
    "SCENARIOS",
    "FrictionPreset",
    "available_presets",
    "get_preset",
    "scenario_title",
]
