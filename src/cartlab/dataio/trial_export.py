"""CSV export of accepted trial records."""

from __future__ import annotations

import math
from pathlib import Path
from typing import Any, Iterable

from ..core.models import TrialRecord

TRIAL_CSV_HEADER: tuple[str, ...] = (
    "scenario",
    "preset",
    "trial_id",
    "hanging_mass_kg",
    "force_mean_N",
    "accel_mps2",
    "moved",
    "force_window_start_s",
    "force_window_end_s",
    "vel_window_start_s",
    "vel_window_end_s",
    "noise_enabled",
    "timestamp_iso",
)

DEFAULT_FILENAME = "trial_data.csv"


def quote_csv(value: Any) -> str:
    """Double-quote ``value`` with embedded quotes doubled."""
    escaped = str(value).replace('"', '""')
    return f'"{escaped}"'


def _verbatim(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        # whole numbers are written without a trailing ".0"
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
    return str(value)


def trial_row(record: TrialRecord) -> list[str]:
    """Cells of one CSV line, in :data:`TRIAL_CSV_HEADER` order."""
    return [
        quote_csv(record.scenario),
        quote_csv(record.preset),
        _verbatim(record.trial_id),
        _verbatim(record.hanging_mass_kg),
        _verbatim(record.force_mean_n),
        _verbatim(record.accel_mps2),
        _verbatim(record.moved),
        _verbatim(record.force_window_start_s),
        _verbatim(record.force_window_end_s),
        _verbatim(record.vel_window_start_s),
        _verbatim(record.vel_window_end_s),
        _verbatim(record.noise_enabled),
        quote_csv(record.timestamp_iso),
    ]


def format_trial_csv(records: Iterable[TrialRecord]) -> str:
    """
    Render ``records`` as CSV text.

    String fields are double-quoted; numbers and booleans are written bare.
    Lines are separated by ``\\n`` with no trailing newline.
    """
    lines = [",".join(TRIAL_CSV_HEADER)]
    lines.extend(",".join(trial_row(record)) for record in records)
    return "\n".join(lines)


def write_trial_csv(path: str | Path, records: Iterable[TrialRecord]) -> Path:
    """
    Write ``records`` to ``path`` (a directory gets ``trial_data.csv``).

    Directories are created as needed.
    """
    target = Path(path)
    if target.is_dir():
        target = target / DEFAULT_FILENAME
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(format_trial_csv(records), encoding="utf-8", newline="")
    return target
