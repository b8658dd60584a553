import pyqtgraph as pg
from PyQt6.QtWidgets import QVBoxLayout, QWidget


class HistoryPlotWidget(QWidget):
    """Waiting and critical counts after every admission or treatment."""

    def __init__(self, history_limit: int = 500, parent=None):
        super().__init__(parent)
        self.history_limit = history_limit

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.plot_widget = pg.PlotWidget()
        self.plot_widget.setBackground("#ffffff")
        self.plot_widget.showGrid(x=True, y=True, alpha=0.25)
        axis_pen = pg.mkPen(color="#52606d", width=1)
        for axis in ("left", "bottom"):
            ax = self.plot_widget.getAxis(axis)
            ax.setPen(axis_pen)
            ax.setTextPen(axis_pen)
        self.plot_widget.setLabel("left", "Patients waiting")
        self.plot_widget.setLabel("bottom", "Queue event")
        self.plot_widget.setTitle("Queue length this session", color="#102a43")
        self.plot_widget.addLegend()

        pen = pg.mkPen(color=(45, 125, 210), width=3)
        self._curve = self.plot_widget.plot(pen=pen, fillLevel=0, brush=(45, 125, 210, 40), name="Waiting")
        critical_pen = pg.mkPen(color=(192, 57, 43), width=2)
        self._critical_curve = self.plot_widget.plot(pen=critical_pen, name="Critical")
        layout.addWidget(self.plot_widget)

        self._events = []
        self._queue_lengths = []
        self._critical_counts = []
        self._event_counter = 0

    def reset(self):
        self._events.clear()
        self._queue_lengths.clear()
        self._critical_counts.clear()
        self._event_counter = 0
        self._curve.setData([], [])
        self._critical_curve.setData([], [])

    def update_from_snapshot(self, snapshot):
        self._events.append(self._event_counter)
        self._event_counter += 1
        self._queue_lengths.append(snapshot.size)
        self._critical_counts.append(snapshot.critical_count)
        if len(self._events) > self.history_limit:
            self._events = self._events[-self.history_limit:]
            self._queue_lengths = self._queue_lengths[-self.history_limit:]
            self._critical_counts = self._critical_counts[-self.history_limit:]
        self._curve.setData(self._events, self._queue_lengths)
        self._critical_curve.setData(self._events, self._critical_counts)
