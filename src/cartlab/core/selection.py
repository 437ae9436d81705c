"""Pointer/keyboard driven time-window selection over a plotted series.

:class:`WindowSelector` is a small explicit state machine that knows nothing
about Qt. A plot widget feeds it pixel coordinates and key presses; the
selector converts them to times, tracks which bound is being dragged, and
reports every change through callbacks:

- ``on_selection_change(interval_or_none)`` with a normalized interval after
  every state transition and every bound change,
- ``on_redraw()`` after every state transition.

States::

    IDLE ──down──▶ SELECTING_NEW ──up──▶ SETTLED ──down on handle──▶ DRAGGING_START/END
      ▲                                     │                               │
      └────────────── clear() ◀─────────────┴──────────────── up ◀──────────┘
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Callable, Literal, Optional, Sequence

from .models import Interval

logger = logging.getLogger(__name__)

Boundary = Literal["start", "end"]
SelectionCallback = Callable[[Optional[Interval]], None]

HANDLE_RADIUS_PX = 9.0
NUDGE_STEP_S = 0.02
FINE_NUDGE_STEP_S = 0.01

KEY_LEFT = "left"
KEY_RIGHT = "right"


class SelectionState(enum.Enum):
    IDLE = "idle"
    SELECTING_NEW = "selecting-new"
    DRAGGING_START = "dragging-start"
    DRAGGING_END = "dragging-end"
    SETTLED = "settled"


_DRAG_STATES = (
    SelectionState.SELECTING_NEW,
    SelectionState.DRAGGING_START,
    SelectionState.DRAGGING_END,
)


def _clamp(value: float, lo: float, hi: float) -> float:
    return min(hi, max(lo, value))


@dataclass
class PlotGeometry:
    """Horizontal placement of the plot area, in the same pixels as events."""

    plot_left_px: float = 0.0
    plot_right_px: float = 1.0


class WindowSelector:
    """
    Track one draggable time interval over a series.

    Parameters
    ----------
    on_selection_change:
        Called with the normalized interval (or ``None``) on every state
        transition and every bound change, not only on release.
    on_redraw:
        Called after every state transition.
    handle_radius_px:
        Hit radius around each bound, before device pixel scaling.
    device_pixel_ratio:
        Scale between logical and event pixels.
    """

    def __init__(
        self,
        on_selection_change: SelectionCallback | None = None,
        *,
        on_redraw: Callable[[], None] | None = None,
        handle_radius_px: float = HANDLE_RADIUS_PX,
        device_pixel_ratio: float = 1.0,
        nudge_step_s: float = NUDGE_STEP_S,
        fine_nudge_step_s: float = FINE_NUDGE_STEP_S,
    ) -> None:
        self._on_selection_change = on_selection_change
        self._on_redraw = on_redraw
        self.handle_radius_px = float(handle_radius_px)
        self.device_pixel_ratio = float(device_pixel_ratio) or 1.0
        self.nudge_step_s = float(nudge_step_s)
        self.fine_nudge_step_s = float(fine_nudge_step_s)

        self.geometry = PlotGeometry()
        self._x_min = 0.0
        self._x_max = 0.0
        self._has_data = False
        self._motion_window: Interval | None = None

        # Raw bounds; may be transiently unordered while dragging.
        self._start: float | None = None
        self._end: float | None = None
        self._state = SelectionState.IDLE
        self._pointer_id: int | None = None

    # ------------------------------------------------------------------
    # Data / geometry
    # ------------------------------------------------------------------
    def set_data(
        self,
        times: Sequence[float],
        motion_window: Interval | None = None,
        selection: Interval | None = None,
    ) -> None:
        """
        Replace the series domain and, optionally, the current selection.

        Does not report a selection change: the caller already owns
        ``selection``. While a drag is in progress the raw bounds are kept so
        the dragged bound stays the one under the pointer.
        """
        n = len(times)
        self._has_data = n > 0
        if self._has_data:
            self._x_min = float(times[0])
            self._x_max = float(times[n - 1])
        self._motion_window = motion_window

        if self._state in _DRAG_STATES and self._has_data and selection is not None:
            self._redraw()
            return

        if selection is None:
            self._start = self._end = None
        else:
            sel = selection.normalized()
            self._start, self._end = sel.start_s, sel.end_s
        self._pointer_id = None
        self._state = SelectionState.SETTLED if self._start is not None else SelectionState.IDLE
        self._redraw()

    def set_geometry(self, plot_left_px: float, plot_right_px: float) -> None:
        self.geometry = PlotGeometry(float(plot_left_px), float(plot_right_px))

    @property
    def has_data(self) -> bool:
        return self._has_data

    @property
    def domain(self) -> tuple[float, float]:
        return self._x_min, self._x_max

    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def selection(self) -> Interval | None:
        """The current selection, always normalized."""
        if self._start is None or self._end is None:
            return None
        return Interval(self._start, self._end).normalized()

    @property
    def hit_radius_px(self) -> float:
        return self.handle_radius_px * self.device_pixel_ratio

    def time_to_px(self, time_s: float) -> float:
        span = (self._x_max - self._x_min) or 1.0
        ratio = (time_s - self._x_min) / span
        g = self.geometry
        return g.plot_left_px + ratio * (g.plot_right_px - g.plot_left_px)

    def px_to_time(self, x_px: float) -> float:
        g = self.geometry
        width = (g.plot_right_px - g.plot_left_px) or 1.0
        ratio = (x_px - g.plot_left_px) / width
        return self._x_min + ratio * (self._x_max - self._x_min)

    def _clamped_time(self, x_px: float) -> float:
        return _clamp(self.px_to_time(x_px), self._x_min, self._x_max)

    # ------------------------------------------------------------------
    # Pointer events
    # ------------------------------------------------------------------
    def detect_handle(self, x_px: float) -> Boundary | None:
        """
        Return the bound under ``x_px``, if any.

        When both bounds are in range the closer one wins; an exact tie goes
        to the start bound.
        """
        if self._start is None or self._end is None:
            return None
        threshold = self.hit_radius_px
        d_start = abs(x_px - self.time_to_px(self._start))
        d_end = abs(x_px - self.time_to_px(self._end))
        if d_start < threshold and d_start <= d_end:
            return "start"
        if d_end < threshold:
            return "end"
        return None

    def pointer_down(self, x_px: float, pointer_id: int = 0) -> bool:
        """Begin a drag. Returns ``False`` (and does nothing) without data."""
        if not self._has_data:
            return False

        handle = self.detect_handle(x_px)
        if handle == "start":
            self._state = SelectionState.DRAGGING_START
        elif handle == "end":
            self._state = SelectionState.DRAGGING_END
        else:
            t = self._clamped_time(x_px)
            self._start = self._end = t
            self._state = SelectionState.SELECTING_NEW

        self._pointer_id = pointer_id
        self._publish()
        logger.debug("pointer down at %.1f px -> %s", x_px, self._state.value)
        self._redraw()
        return True

    def pointer_move(self, x_px: float, pointer_id: int = 0) -> bool:
        """Move the tracked bound. Ignored unless ``pointer_id`` owns the drag."""
        if self._state not in _DRAG_STATES or pointer_id != self._pointer_id:
            return False
        if not self._has_data:
            return False

        t = self._clamped_time(x_px)
        if self._start is None or self._end is None:
            self._start = self._end = t

        if self._state == SelectionState.DRAGGING_START:
            self._start = t
        else:
            self._end = t

        self._publish()
        self._redraw()
        return True

    def pointer_up(self, pointer_id: int = 0) -> bool:
        """Release the drag; the stored interval is normalized."""
        if self._state not in _DRAG_STATES or pointer_id != self._pointer_id:
            return False
        self._pointer_id = None
        sel = self.selection
        if sel is None:
            self._state = SelectionState.IDLE
        else:
            self._start, self._end = sel.start_s, sel.end_s
            self._state = SelectionState.SETTLED
        self._publish()
        self._redraw()
        return True

    pointer_cancel = pointer_up

    # ------------------------------------------------------------------
    # Keyboard
    # ------------------------------------------------------------------
    def _seed_bounds(self) -> tuple[float, float]:
        if self._motion_window is not None:
            mw = self._motion_window.normalized()
            span = mw.end_s - mw.start_s
            return mw.start_s + span * 0.2, mw.end_s - span * 0.2
        width = (self._x_max - self._x_min) * 0.2
        return self._x_min + width, self._x_min + 2 * width

    def nudge(self, boundary: Boundary, delta_s: float) -> bool:
        """
        Shift one bound by ``delta_s`` seconds, clamped to the data domain.

        Without a selection, one is seeded inside the motion window (or at
        20-40 % of the domain) before the shift is applied.
        """
        if not self._has_data:
            return False
        if self._start is None or self._end is None:
            start, end = self._seed_bounds()
        else:
            start, end = self._start, self._end

        if boundary == "start":
            start = _clamp(start + delta_s, self._x_min, self._x_max)
        else:
            end = _clamp(end + delta_s, self._x_min, self._x_max)

        sel = Interval(start, end).normalized()
        self._start, self._end = sel.start_s, sel.end_s
        if self._state not in _DRAG_STATES:
            self._state = SelectionState.SETTLED
        self._publish()
        self._redraw()
        return True

    def key_press(self, key: str, *, shift: bool = False, fine: bool = False) -> bool:
        """
        Handle an arrow key. Returns ``True`` when the key was consumed.

        Left/Right move the end bound; with ``shift`` they move the start
        bound. ``fine`` selects the smaller step.
        """
        if key not in (KEY_LEFT, KEY_RIGHT):
            return False
        direction = -1.0 if key == KEY_LEFT else 1.0
        step = self.fine_nudge_step_s if fine else self.nudge_step_s
        boundary: Boundary = "start" if shift else "end"
        self.nudge(boundary, direction * step)
        return True

    # ------------------------------------------------------------------
    def clear(self) -> None:
        self._start = self._end = None
        self._pointer_id = None
        self._state = SelectionState.IDLE
        self._publish()
        self._redraw()

    def _publish(self) -> None:
        if self._on_selection_change is not None:
            self._on_selection_change(self.selection)

    def _redraw(self) -> None:
        if self._on_redraw is not None:
            self._on_redraw()
