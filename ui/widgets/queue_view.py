from PyQt6.QtCore import Qt
from PyQt6.QtGui import QBrush, QColor
from PyQt6.QtWidgets import (
    QWidget,
    QVBoxLayout,
    QHBoxLayout,
    QLabel,
    QTableWidget,
    QTableWidgetItem,
    QHeaderView,
    QAbstractItemView,
)

from triage.records import CRITICAL_PRIORITY

COLUMNS = ("Token", "Severity", "Condition", "Patient Name")
ROW_HEIGHT = 30

CRITICAL_COLOR = QColor(255, 180, 180)
HIGH_COLOR = QColor(255, 220, 150)
DEFAULT_COLOR = QColor("#ffffff")


def row_color(priority: int) -> QColor:
    if priority == CRITICAL_PRIORITY:
        return CRITICAL_COLOR
    if priority == CRITICAL_PRIORITY + 1:
        return HIGH_COLOR
    return DEFAULT_COLOR


def severity_text(record) -> str:
    kind = "Critical" if record.is_critical else "Normal"
    return f"{record.priority} ({kind})"


class QueueView(QWidget):
    """Waiting patients in the order they will be treated."""

    def __init__(self, controller, parent=None):
        super().__init__(parent)
        self.controller = controller

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addLayout(self._build_legend())

        self.table = QTableWidget(0, len(COLUMNS))
        self.table.setHorizontalHeaderLabels(COLUMNS)
        self.table.verticalHeader().setVisible(False)
        self.table.verticalHeader().setDefaultSectionSize(ROW_HEIGHT)
        self.table.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeMode.Stretch)
        self.table.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        self.table.setSelectionMode(QAbstractItemView.SelectionMode.NoSelection)
        self.table.setMinimumSize(420, 240)
        layout.addWidget(self.table)

        self.sync_once()

    def _build_legend(self) -> QHBoxLayout:
        layout = QHBoxLayout()
        layout.setContentsMargins(6, 4, 6, 10)
        layout.setSpacing(12)

        def _item(color: QColor, text: str) -> QWidget:
            container = QWidget()
            row = QHBoxLayout(container)
            row.setContentsMargins(0, 0, 0, 0)
            row.setSpacing(6)
            swatch = QLabel()
            swatch.setFixedSize(18, 18)
            swatch.setStyleSheet(
                f"background: {color.name()}; border: 1px solid #d6deeb; border-radius: 5px;"
            )
            label = QLabel(text)
            label.setStyleSheet("color: #334e68; font-weight: 600;")
            row.addWidget(swatch)
            row.addWidget(label)
            return container

        layout.addWidget(_item(CRITICAL_COLOR, "Critical"))
        layout.addWidget(_item(HIGH_COLOR, "High"))
        layout.addWidget(_item(DEFAULT_COLOR, "Medium / Low"))
        layout.addStretch()
        return layout

    def sync_once(self):
        self.update_from_snapshot(self.controller.snapshot())

    def update_from_snapshot(self, snapshot):
        waiting = snapshot.waiting
        self.table.setRowCount(len(waiting))
        for row, record in enumerate(waiting):
            values = (
                str(record.arrival_sequence),
                severity_text(record),
                record.category,
                record.name,
            )
            brush = QBrush(row_color(record.priority))
            for column, value in enumerate(values):
                item = QTableWidgetItem(value)
                item.setBackground(brush)
                if column < 2:
                    item.setTextAlignment(Qt.AlignmentFlag.AlignCenter)
                self.table.setItem(row, column, item)
