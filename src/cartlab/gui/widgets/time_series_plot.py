"""PyQtGraph time-series plot with an interactive selection window."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import pyqtgraph as pg
from PySide6.QtCore import QPointF, Qt, Signal
from PySide6.QtGui import QKeyEvent, QMouseEvent, QResizeEvent
from PySide6.QtWidgets import QWidget

from ...config.runtime import LabConfig
from ...core.models import Interval
from ...core.selection import KEY_LEFT, KEY_RIGHT, WindowSelector

logger = logging.getLogger(__name__)

_SERIES_PEN = pg.mkPen("#10748f", width=2)
_MOTION_BRUSH = pg.mkBrush(18, 148, 84, 28)
_SELECTION_BRUSH = pg.mkBrush(240, 157, 0, 56)
_HANDLE_PEN = pg.mkPen("#c27100", width=2)


class TimeSeriesPlotWidget(pg.PlotWidget):
    """
    One force or velocity trace plus its selection window.

    Mouse and arrow-key input is forwarded to a :class:`WindowSelector`;
    the widget only draws what the selector reports.
    """

    selectionChanged = Signal(object)  # Interval | None

    def __init__(
        self,
        title: str,
        y_label: str,
        *,
        config: LabConfig | None = None,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent=parent)
        cfg = config or LabConfig()

        self.selector = WindowSelector(
            self._on_selector_change,
            on_redraw=self._redraw_overlays,
            handle_radius_px=cfg.handle_radius_px,
            # Qt delivers logical pixels, so no device scaling is applied.
            device_pixel_ratio=1.0,
            nudge_step_s=cfg.nudge_step_s,
            fine_nudge_step_s=cfg.fine_nudge_step_s,
        )

        plot = self.getPlotItem()
        plot.setTitle(title)
        plot.setLabel("left", y_label)
        plot.setLabel("bottom", "Time", units="s")
        plot.showGrid(x=True, y=True, alpha=0.3)
        plot.setMenuEnabled(False)
        plot.hideButtons()
        plot.setMouseEnabled(x=False, y=False)
        plot.enableAutoRange(x=False, y=True)
        self.setXRange(0.0, 4.5, padding=0.0)

        self._curve = plot.plot([], [], pen=_SERIES_PEN)

        self._motion_region = pg.LinearRegionItem(brush=_MOTION_BRUSH, movable=False)
        self._motion_region.setZValue(-10)
        self._motion_region.setVisible(False)
        plot.addItem(self._motion_region)

        self._selection_region = pg.LinearRegionItem(brush=_SELECTION_BRUSH, movable=False)
        self._selection_region.setZValue(-5)
        self._selection_region.setVisible(False)
        plot.addItem(self._selection_region)

        self._start_line = pg.InfiniteLine(angle=90, movable=False, pen=_HANDLE_PEN)
        self._end_line = pg.InfiniteLine(angle=90, movable=False, pen=_HANDLE_PEN)
        for line in (self._start_line, self._end_line):
            line.setVisible(False)
            plot.addItem(line)

        self.setFocusPolicy(Qt.StrongFocus)

    # ------------------------------------------------------------------ data
    def set_series(
        self,
        times: Sequence[float],
        values: Sequence[float],
        motion_window: Interval | None,
        selection: Interval | None,
    ) -> None:
        """Show ``values`` over ``times`` and sync the selector domain."""
        self._curve.setData(times, values)
        if len(times) > 1:
            self.setXRange(float(times[0]), float(times[-1]), padding=0.0)
        if motion_window is not None:
            mw = motion_window.normalized()
            self._motion_region.setRegion((mw.start_s, mw.end_s))
            self._motion_region.setVisible(True)
        else:
            self._motion_region.setVisible(False)
        self.selector.set_data(times, motion_window, selection)

    def clear_series(self, selection: Interval | None = None) -> None:
        self.set_series([], [], None, selection)

    # -------------------------------------------------------------- geometry
    def _sync_geometry(self) -> None:
        """Express the data domain in scene pixels for the selector."""
        vb = self.getPlotItem().getViewBox()
        x_min, x_max = self.selector.domain
        left = vb.mapViewToScene(QPointF(x_min, 0.0)).x()
        right = vb.mapViewToScene(QPointF(x_max, 0.0)).x()
        self.selector.set_geometry(left, right)

    def _event_x(self, event: QMouseEvent) -> float:
        return self.mapToScene(event.position().toPoint()).x()

    def resizeEvent(self, event: QResizeEvent) -> None:
        super().resizeEvent(event)
        self._sync_geometry()

    # ---------------------------------------------------------------- events
    def mousePressEvent(self, event: QMouseEvent) -> None:
        if event.button() != Qt.LeftButton:
            super().mousePressEvent(event)
            return
        self.setFocus()
        self._sync_geometry()
        if self.selector.pointer_down(self._event_x(event)):
            event.accept()

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        if self.selector.pointer_move(self._event_x(event)):
            event.accept()
            return
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        if event.button() == Qt.LeftButton and self.selector.pointer_up():
            event.accept()
            return
        super().mouseReleaseEvent(event)

    def keyPressEvent(self, event: QKeyEvent) -> None:
        key = {Qt.Key_Left: KEY_LEFT, Qt.Key_Right: KEY_RIGHT}.get(event.key())
        if key is None:
            super().keyPressEvent(event)
            return
        modifiers = event.modifiers()
        consumed = self.selector.key_press(
            key,
            shift=bool(modifiers & Qt.ShiftModifier),
            fine=bool(modifiers & Qt.AltModifier),
        )
        if consumed:
            event.accept()

    def focusOutEvent(self, event) -> None:
        self.selector.pointer_cancel()
        super().focusOutEvent(event)

    # -------------------------------------------------------------- drawing
    def _on_selector_change(self, interval: Interval | None) -> None:
        self.selectionChanged.emit(interval)

    def _redraw_overlays(self) -> None:
        sel = self.selector.selection
        visible = sel is not None
        self._selection_region.setVisible(visible)
        self._start_line.setVisible(visible)
        self._end_line.setVisible(visible)
        if sel is None:
            return
        self._selection_region.setRegion((sel.start_s, sel.end_s))
        self._start_line.setValue(sel.start_s)
        self._end_line.setValue(sel.end_s)
