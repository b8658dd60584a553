"""Main application window assembling all widgets."""

import logging

from PyQt6.QtWidgets import (
    QMainWindow,
    QMessageBox,
    QWidget,
    QHBoxLayout,
    QVBoxLayout,
)

from triage.errors import AdmissionRejected, RejectionReason
from triage.records import MAX_PRIORITY, MIN_PRIORITY

from .widgets.admission_panel import AdmissionPanel
from .widgets.queue_view import QueueView
from .widgets.stats_panel import StatsPanel
from .widgets.history_plot import HistoryPlotWidget

logger = logging.getLogger(__name__)

REJECTION_MESSAGES = {
    RejectionReason.EMPTY_NAME: "Please enter the patient's name.",
    RejectionReason.INVALID_PRIORITY: f"Please choose a severity between {MIN_PRIORITY} and {MAX_PRIORITY}.",
}


class MainWindow(QMainWindow):
    def __init__(self, controller, settings, parent=None):
        super().__init__(parent)
        self.setWindowTitle(settings.window_title)
        self.resize(1100, 650)
        self.controller = controller
        self.settings = settings

        self._build_ui()
        self._refresh()

    def _build_ui(self):
        central = QWidget()
        self.setCentralWidget(central)

        layout = QHBoxLayout(central)
        layout.setContentsMargins(8, 8, 8, 8)
        layout.setSpacing(12)

        self.admission_panel = AdmissionPanel()
        self.queue_view = QueueView(self.controller)
        self.stats_panel = StatsPanel()
        self.history_plot = HistoryPlotWidget(self.settings.history_limit)

        layout.addWidget(self.admission_panel, stretch=0)
        layout.addWidget(self.queue_view, stretch=2)

        side_panel = QVBoxLayout()
        side_panel.setContentsMargins(0, 0, 0, 0)
        side_panel.setSpacing(8)
        side_panel.addWidget(self.stats_panel)
        side_panel.addWidget(self.history_plot, stretch=1)

        layout.addLayout(side_panel, stretch=1)

        self.admission_panel.admit_requested.connect(self._on_admit_requested)
        self.admission_panel.treat_requested.connect(self._on_treat_requested)
        self.admission_panel.save_exit_requested.connect(self.close)

    def _refresh(self):
        snapshot = self.controller.snapshot()
        self.queue_view.update_from_snapshot(snapshot)
        self.stats_panel.update_from_snapshot(snapshot)
        self.history_plot.update_from_snapshot(snapshot)

    def _on_admit_requested(self, name: str, priority: int, category: str):
        try:
            self.controller.admit_patient(name, priority, category)
        except AdmissionRejected as exc:
            logger.debug("Admission declined: %s", exc)
            QMessageBox.information(self, "Admission", REJECTION_MESSAGES.get(exc.reason, str(exc)))
            return
        self.admission_panel.clear_inputs()
        self._refresh()

    def _on_treat_requested(self):
        record = self.controller.treat_next()
        if record is None:
            QMessageBox.information(self, "Treatment", "Queue is empty!")
            return
        QMessageBox.information(
            self, "Treatment", f"Treating: {record.name}\nSeverity: {record.priority}"
        )
        self._refresh()

    def closeEvent(self, event):
        if not self.controller.shutdown():
            QMessageBox.warning(
                self,
                "Save failed",
                f"The queue could not be saved to {self.settings.state_file}.\n"
                "Waiting patients from this session will not be restored.",
            )
        event.accept()
