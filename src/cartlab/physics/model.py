"""Constant-force cart model: hanging mass, drag, and start threshold."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from ..core.models import PhysicsResult
from .presets import SCENARIOS, get_preset, scenario_title

G = 9.81
TRACK_LENGTH_M = 1.2

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScenarioConfig:
    scenario: str
    scenario_label: str
    preset_id: str
    preset_label: str
    cart_mass_kg: float
    pad_mass_kg: float
    system_mass_kg: float
    drag_n: float
    start_threshold_n: float


def get_scenario_config(scenario: str, preset_id: str) -> ScenarioConfig:
    """
    Resolve the masses and friction constants for ``scenario``/``preset_id``.

    Raises
    ------
    ValueError
        If either identifier is unknown.
    """
    if scenario not in SCENARIOS:
        raise ValueError(f"Unsupported scenario: {scenario!r}")
    preset = get_preset(preset_id)
    friction = preset.scenario[scenario]

    system_mass = preset.cart_mass_kg
    if scenario == "cart_plus_pad":
        system_mass += preset.pad_mass_kg

    return ScenarioConfig(
        scenario=scenario,
        scenario_label=scenario_title(scenario),
        preset_id=preset.id,
        preset_label=preset.label,
        cart_mass_kg=preset.cart_mass_kg,
        pad_mass_kg=preset.pad_mass_kg,
        system_mass_kg=system_mass,
        drag_n=friction.drag_n,
        start_threshold_n=friction.start_threshold_n,
    )


def compute_physics(scenario: str, preset_id: str, hanging_mass_kg: float) -> PhysicsResult:
    """
    Compute acceleration, string tension and travel time for one trial.

    The cart stays put when the hanging weight does not exceed the start
    threshold, or when drag would leave no net acceleration. In that case the
    tension equals the hanging weight and ``travel_time_s`` is ``None``.
    """
    config = get_scenario_config(scenario, preset_id)
    hanging_mass_kg = float(hanging_mass_kg)
    pulling_force = hanging_mass_kg * G

    if pulling_force <= config.start_threshold_n:
        logger.debug(
            "pulling force %.3f N below start threshold %.3f N",
            pulling_force,
            config.start_threshold_n,
        )
        return PhysicsResult(
            moved=False,
            acceleration_mps2=0.0,
            tension_n=pulling_force,
            pulling_force_n=pulling_force,
            travel_time_s=None,
            net_force_n=0.0,
            hanging_mass_kg=hanging_mass_kg,
            config=config,
        )

    net_force = pulling_force - config.drag_n
    acceleration = net_force / (config.system_mass_kg + hanging_mass_kg)

    if acceleration <= 0:
        return PhysicsResult(
            moved=False,
            acceleration_mps2=0.0,
            tension_n=pulling_force,
            pulling_force_n=pulling_force,
            travel_time_s=None,
            net_force_n=net_force,
            hanging_mass_kg=hanging_mass_kg,
            config=config,
        )

    tension = config.system_mass_kg * acceleration + config.drag_n
    travel_time = math.sqrt((2.0 * TRACK_LENGTH_M) / acceleration)

    return PhysicsResult(
        moved=True,
        acceleration_mps2=acceleration,
        tension_n=tension,
        pulling_force_n=pulling_force,
        travel_time_s=travel_time,
        net_force_n=net_force,
        hanging_mass_kg=hanging_mass_kg,
        config=config,
    )
