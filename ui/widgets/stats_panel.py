from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QWidget,
    QVBoxLayout,
    QGridLayout,
    QLabel,
    QGroupBox,
)

from triage.records import PRIORITY_CLASSES


def _metric_label(name: str) -> QLabel:
    label = QLabel(name)
    label.setAlignment(Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter)
    label.setStyleSheet("font-weight: bold;")
    return label


def _value_label() -> QLabel:
    label = QLabel("–")
    label.setAlignment(Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignVCenter)
    return label


class StatsPanel(QWidget):
    """Waiting, critical and treated totals plus a per-severity breakdown."""

    SUMMARY_KEYS = ("Waiting", "Critical", "Total Treated", "Next Token")

    def __init__(self, parent=None):
        super().__init__(parent)
        self._build_ui()

    def _build_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(8, 8, 8, 8)
        layout.setSpacing(10)

        self.summary_group, self.summary_values = self._create_group("Session", self.SUMMARY_KEYS)
        self.summary_values["Critical"].setStyleSheet("color: #c0392b; font-weight: bold;")
        self.summary_values["Total Treated"].setStyleSheet("color: #006400; font-weight: bold;")

        labels = [PRIORITY_CLASSES[level].label for level in sorted(PRIORITY_CLASSES)]
        self.breakdown_group, self.breakdown_values = self._create_group("Waiting by severity", labels)

        layout.addWidget(self.summary_group)
        layout.addWidget(self.breakdown_group)
        layout.addStretch()

    def _create_group(self, title: str, keys):
        group = QGroupBox(title)
        grid = QGridLayout()
        grid.setContentsMargins(8, 8, 8, 8)
        grid.setHorizontalSpacing(12)
        grid.setVerticalSpacing(6)

        labels = {}
        for row, key in enumerate(keys):
            grid.addWidget(_metric_label(key), row, 0)
            value = _value_label()
            labels[key] = value
            grid.addWidget(value, row, 1)

        group.setLayout(grid)
        return group, labels

    def update_from_snapshot(self, snapshot):
        self.summary_values["Waiting"].setText(str(snapshot.size))
        self.summary_values["Critical"].setText(str(snapshot.critical_count))
        self.summary_values["Total Treated"].setText(str(snapshot.treated_count))
        self.summary_values["Next Token"].setText(str(snapshot.next_arrival_sequence))

        for level, priority_class in PRIORITY_CLASSES.items():
            count = snapshot.counts_by_priority.get(level, 0)
            self.breakdown_values[priority_class.label].setText(str(count))
