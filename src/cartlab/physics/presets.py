"""Friction presets and scenario metadata."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

SCENARIOS: Tuple[str, ...] = ("cart_only", "cart_plus_pad")
HANGING_MASS_STEPS_KG: Tuple[float, ...] = (0.1, 0.2, 0.3, 0.4, 0.5, 0.6)


@dataclass(frozen=True)
class ScenarioFriction:
    """Drag while moving and the pulling force needed to start moving."""

    drag_n: float
    start_threshold_n: float


@dataclass(frozen=True)
class FrictionPreset:
    id: str
    label: str
    noise_default: bool
    cart_mass_kg: float
    pad_mass_kg: float
    scenario: Dict[str, ScenarioFriction]


PRESETS: Tuple[FrictionPreset, ...] = (
    FrictionPreset(
        id="low",
        label="Low Friction",
        noise_default=False,
        cart_mass_kg=0.5,
        pad_mass_kg=0.2,
        scenario={
            "cart_only": ScenarioFriction(drag_n=0.06, start_threshold_n=0.04),
            "cart_plus_pad": ScenarioFriction(drag_n=1.05, start_threshold_n=0.95),
        },
    ),
    FrictionPreset(
        id="medium",
        label="Medium Friction",
        noise_default=False,
        cart_mass_kg=0.5,
        pad_mass_kg=0.22,
        scenario={
            "cart_only": ScenarioFriction(drag_n=0.09, start_threshold_n=0.06),
            "cart_plus_pad": ScenarioFriction(drag_n=1.35, start_threshold_n=1.15),
        },
    ),
    FrictionPreset(
        id="high",
        label="High Friction",
        noise_default=True,
        cart_mass_kg=0.5,
        pad_mass_kg=0.24,
        scenario={
            "cart_only": ScenarioFriction(drag_n=0.12, start_threshold_n=0.08),
            "cart_plus_pad": ScenarioFriction(drag_n=1.7, start_threshold_n=1.35),
        },
    ),
)


def get_preset(preset_id: str) -> FrictionPreset:
    """Look up a preset by id; unknown ids raise ``ValueError``."""
    for preset in PRESETS:
        if preset.id == preset_id:
            return preset
    raise ValueError(f"Unknown preset: {preset_id!r}")


def available_presets(scenario: str) -> Tuple[FrictionPreset, ...]:
    """The cart-only scenario is fixed to the low-friction preset."""
    if scenario == "cart_only":
        return tuple(p for p in PRESETS if p.id == "low")
    return PRESETS


def scenario_title(scenario: str) -> str:
    return "Cart + Friction Pad" if scenario == "cart_plus_pad" else "Cart Only"
