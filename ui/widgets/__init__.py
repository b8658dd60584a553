"""Convenience imports for UI widgets."""

from .admission_panel import AdmissionPanel
from .queue_view import QueueView
from .stats_panel import StatsPanel
from .history_plot import HistoryPlotWidget

__all__ = [
    "AdmissionPanel",
    "QueueView",
    "StatsPanel",
    "HistoryPlotWidget",
]
