"""Runtime configuration for signal synthesis, selection, and playback."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, MutableMapping

import yaml

CONFIG_ENV_VAR = "CARTLAB_CONFIG"


@dataclass(slots=True)
class LabConfig:
    """
    Tuning knobs for trial synthesis and window measurement.

    The defaults reproduce the classroom lab: 4.5 s traces at 60 Hz, windows
    of at least 0.12 s holding at least 6 samples.
    """

    duration_s: float = 4.5
    sample_rate_hz: float = 60.0

    min_selection_width_s: float = 0.12
    min_points: int = 6

    handle_radius_px: float = 9.0
    nudge_step_s: float = 0.02
    fine_nudge_step_s: float = 0.01

    playback_fps: float = 60.0

    default_scenario: str = "cart_only"
    default_preset: str = "low"
    default_hanging_mass_kg: float = 0.1

    def sanitized(self) -> LabConfig:
        """Return a copy with derived limits applied."""
        scenario = str(self.default_scenario or "cart_only").strip().lower()
        if scenario not in {"cart_only", "cart_plus_pad"}:
            scenario = "cart_only"
        return LabConfig(
            duration_s=max(2.0, float(self.duration_s)),
            sample_rate_hz=max(1.0, float(self.sample_rate_hz)),
            min_selection_width_s=max(0.0, float(self.min_selection_width_s)),
            min_points=max(2, int(self.min_points)),
            handle_radius_px=max(1.0, float(self.handle_radius_px)),
            nudge_step_s=max(1e-4, float(self.nudge_step_s)),
            fine_nudge_step_s=max(1e-4, float(self.fine_nudge_step_s)),
            playback_fps=min(240.0, max(1.0, float(self.playback_fps))),
            default_scenario=scenario,
            default_preset=str(self.default_preset or "low").strip().lower(),
            default_hanging_mass_kg=max(0.0, float(self.default_hanging_mass_kg)),
        )

    def frame_interval_ms(self) -> int:
        """Timer interval that corresponds to ``playback_fps``."""
        return max(1, int(round(1000.0 / self.playback_fps)))


def _recognized_fields() -> set[str]:
    """Return the dataclass field names accepted by :class:`LabConfig`."""
    return {f.name for f in fields(LabConfig)}


def _normalize_mapping(data: Mapping[str, Any]) -> MutableMapping[str, Any]:
    """Flatten an optional top-level ``lab`` block."""
    if "lab" in data and isinstance(data["lab"], Mapping):
        merged: MutableMapping[str, Any] = {}
        for key, value in data.items():
            if key == "lab":
                merged.update(value)
            else:
                merged[key] = value
        return merged
    return dict(data)


def config_from_mapping(data: Mapping[str, Any] | None) -> LabConfig:
    """Build :class:`LabConfig` from ``data`` (ignoring unknown keys)."""
    if not data:
        return LabConfig()
    normalized = _normalize_mapping(data)
    known = _recognized_fields()
    payload = {key: normalized[key] for key in normalized.keys() & known}
    return LabConfig(**payload).sanitized()


def load_config(path: str | Path | None) -> LabConfig:
    """
    Load configuration from ``path``.

    Missing files fall back to default :class:`LabConfig`.
    """
    if path is None:
        return LabConfig()
    cfg_path = Path(path).expanduser()
    if not cfg_path.exists():
        return LabConfig()
    with cfg_path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}
    if not isinstance(raw, Mapping):
        raise ValueError(f"Expected mapping in {cfg_path}, got {type(raw).__name__}")
    return config_from_mapping(raw)


def default_config_path() -> Path | None:
    """Path named by ``CARTLAB_CONFIG``, if set."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return None


def save_config(path: str | Path, config: LabConfig) -> None:
    """Write ``config`` as YAML under a ``lab`` block."""
    cfg_path = Path(path)
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    data = {"lab": {f.name: getattr(config, f.name) for f in fields(LabConfig)}}
    with cfg_path.open("w", encoding="utf-8") as fh:
        yaml.safe_dump(data, fh, default_flow_style=False, sort_keys=False)


__all__ = [
    "CONFIG_ENV_VAR",
    "LabConfig",
    "config_from_mapping",
    "default_config_path",
    "load_config",
    "save_config",
]
