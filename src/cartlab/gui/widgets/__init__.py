"""Reusable plot widgets for the CartLab GUI."""

from .fit_plot import FitPlotWidget
from .time_series_plot import TimeSeriesPlotWidget

__all__ = ["FitPlotWidget", "TimeSeriesPlotWidget"]
