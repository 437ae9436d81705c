"""PNG snapshot of the force, velocity, and fit graphs."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import numpy as np
from matplotlib.axes import Axes
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure

from ..analysis.measurement import ScenarioFit
from ..core.models import Interval, TrialSignals

logger = logging.getLogger(__name__)

SNAPSHOT_TITLE = "Newton's 2nd Law Simulation - Graph Snapshot"
DEFAULT_FILENAME = "graphs_snapshot.png"

_LINE_COLOR = "#10748f"
_MOTION_COLOR = "#129454"
_SELECTION_COLOR = "#f09d00"
_FIT_COLOR = "#cd5b00"


def _draw_series(
    ax: Axes,
    times: np.ndarray,
    values: np.ndarray,
    *,
    title: str,
    y_label: str,
    motion_window: Optional[Interval],
    selection: Optional[Interval],
) -> None:
    ax.plot(times, values, color=_LINE_COLOR, linewidth=1.5)
    if motion_window is not None:
        mw = motion_window.normalized()
        ax.axvspan(mw.start_s, mw.end_s, color=_MOTION_COLOR, alpha=0.10, label="Likely acceleration region")
    if selection is not None:
        sel = selection.normalized()
        ax.axvspan(sel.start_s, sel.end_s, color=_SELECTION_COLOR, alpha=0.22, label="Selection")
        ax.axvline(sel.start_s, color="#c27100", linewidth=1.5)
        ax.axvline(sel.end_s, color="#c27100", linewidth=1.5)
    ax.set_title(title)
    ax.set_xlabel("Time (s)")
    ax.set_ylabel(y_label)
    ax.grid(True, alpha=0.3)
    if motion_window is not None or selection is not None:
        ax.legend(loc="upper right", fontsize="small")


def _draw_fit(ax: Axes, fit_view: ScenarioFit) -> None:
    ax.set_title("Force of Tension vs Acceleration")
    ax.set_xlabel("Acceleration (m/s^2)")
    ax.set_ylabel("Force of Tension (N)")
    ax.grid(True, alpha=0.3)

    if not fit_view.points:
        ax.text(0.02, 0.9, "Add trials to populate this graph.", transform=ax.transAxes)
        return

    xs = np.array([p[0] for p in fit_view.points], dtype=float)
    ys = np.array([p[1] for p in fit_view.points], dtype=float)
    ax.scatter(xs, ys, color="#0e8ba8", zorder=3)

    fit = fit_view.fit
    if fit is None:
        return
    x_line = np.array([xs.min(), xs.max()])
    ax.plot(x_line, fit.slope * x_line + fit.intercept, color=_FIT_COLOR, linewidth=2)
    ax.text(
        0.02,
        0.9,
        f"F = {fit.slope:.3f}·a + {fit.intercept:.3f}   R² = {fit.r2:.4f}",
        transform=ax.transAxes,
    )


def render_snapshot(
    signals: TrialSignals,
    fit_view: ScenarioFit,
    *,
    force_selection: Optional[Interval] = None,
    velocity_selection: Optional[Interval] = None,
) -> Figure:
    """Build a three-panel figure (force, velocity, fit) for one trial."""
    fig = Figure(figsize=(8, 10))
    FigureCanvasAgg(fig)
    axes = fig.subplots(3, 1)
    fig.suptitle(SNAPSHOT_TITLE)

    _draw_series(
        axes[0],
        signals.times_s,
        signals.force_n,
        title="Tension (Ft) vs Time",
        y_label="Ft (N)",
        motion_window=signals.motion_window,
        selection=force_selection,
    )
    _draw_series(
        axes[1],
        signals.times_s,
        signals.velocity_mps,
        title="Velocity vs Time",
        y_label="Velocity (m/s)",
        motion_window=signals.motion_window,
        selection=velocity_selection,
    )
    _draw_fit(axes[2], fit_view)
    fig.tight_layout()
    return fig


def write_snapshot(
    path: str | Path,
    signals: TrialSignals,
    fit_view: ScenarioFit,
    *,
    force_selection: Optional[Interval] = None,
    velocity_selection: Optional[Interval] = None,
    dpi: int = 100,
) -> Path:
    """Render and save the snapshot as PNG; returns the written path."""
    target = Path(path)
    if target.is_dir():
        target = target / DEFAULT_FILENAME
    target.parent.mkdir(parents=True, exist_ok=True)
    fig = render_snapshot(
        signals,
        fit_view,
        force_selection=force_selection,
        velocity_selection=velocity_selection,
    )
    fig.savefig(target, format="png", dpi=dpi)
    logger.info("graph snapshot written to %s", target)
    return target
