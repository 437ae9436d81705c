"""Scatter of accepted trials with the force-vs-acceleration fit line."""

from __future__ import annotations

from typing import Optional

import numpy as np
import pyqtgraph as pg
from PySide6.QtWidgets import QWidget

from ...analysis.measurement import ScenarioFit


class FitPlotWidget(pg.PlotWidget):
    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent=parent)
        plot = self.getPlotItem()
        plot.setTitle("Force of Tension vs Acceleration")
        plot.setLabel("left", "Force of Tension", units="N")
        plot.setLabel("bottom", "Acceleration (m/s^2)")
        plot.showGrid(x=True, y=True, alpha=0.3)
        plot.setMenuEnabled(False)
        plot.hideButtons()

        self._scatter = pg.ScatterPlotItem(size=9, brush=pg.mkBrush("#0e8ba8"), pen=None)
        self._line = pg.PlotDataItem(pen=pg.mkPen("#cd5b00", width=2))
        plot.addItem(self._scatter)
        plot.addItem(self._line)

    def set_fit(self, fit_view: ScenarioFit) -> None:
        if not fit_view.points:
            self._scatter.setData([], [])
            self._line.setData([], [])
            return

        xs = np.array([p[0] for p in fit_view.points], dtype=float)
        ys = np.array([p[1] for p in fit_view.points], dtype=float)
        self._scatter.setData(xs, ys)

        fit = fit_view.fit
        if fit is None:
            self._line.setData([], [])
            return
        x_line = np.array([xs.min(), xs.max()])
        self._line.setData(x_line, fit.slope * x_line + fit.intercept)
