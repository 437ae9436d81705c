import math

import pytest

from cartlab.physics import presets
from cartlab.physics.model import G, TRACK_LENGTH_M, compute_physics, get_scenario_config


def test_cart_only_low_friction_moves() -> None:
    result = compute_physics("cart_only", "low", 0.1)

    pulling = 0.1 * G
    accel = (pulling - 0.06) / (0.5 + 0.1)
    assert result.moved
    assert result.pulling_force_n == pytest.approx(pulling)
    assert result.acceleration_mps2 == pytest.approx(accel)
    assert result.tension_n == pytest.approx(0.5 * accel + 0.06)
    assert result.travel_time_s == pytest.approx(math.sqrt(2 * TRACK_LENGTH_M / accel))
    assert result.hanging_mass_kg == pytest.approx(0.1)


def test_below_start_threshold_does_not_move() -> None:
    result = compute_physics("cart_plus_pad", "high", 0.1)

    assert not result.moved
    assert result.acceleration_mps2 == 0.0
    assert result.tension_n == pytest.approx(result.pulling_force_n)
    assert result.travel_time_s is None


def test_drag_exceeding_pull_does_not_move() -> None:
    # 0.981 N clears the 0.95 N threshold but not the 1.05 N drag
    result = compute_physics("cart_plus_pad", "low", 0.1)

    assert not result.moved
    assert result.net_force_n < 0
    assert result.travel_time_s is None


def test_pad_adds_to_system_mass() -> None:
    cfg = get_scenario_config("cart_plus_pad", "medium")
    assert cfg.system_mass_kg == pytest.approx(0.5 + 0.22)
    assert cfg.preset_label == "Medium Friction"
    assert cfg.scenario_label == "Cart + Friction Pad"


def test_unknown_identifiers_raise() -> None:
    with pytest.raises(ValueError):
        get_scenario_config("sled", "low")
    with pytest.raises(ValueError):
        compute_physics("cart_only", "extreme", 0.2)


def test_cart_only_is_fixed_to_low_preset() -> None:
    assert [p.id for p in presets.available_presets("cart_only")] == ["low"]
    assert [p.id for p in presets.available_presets("cart_plus_pad")] == ["low", "medium", "high"]
    assert presets.get_preset("high").noise_default is True
