from PyQt6.QtCore import pyqtSignal, Qt
from PyQt6.QtWidgets import (
    QWidget,
    QVBoxLayout,
    QFormLayout,
    QComboBox,
    QLineEdit,
    QPushButton,
    QHBoxLayout,
    QLabel,
    QGroupBox,
)

from triage.records import PRIORITY_CLASSES


def _format_label(text: str) -> QLabel:
    label = QLabel(text)
    label.setStyleSheet("font-weight: bold; color: #102a43;")
    return label


class AdmissionPanel(QWidget):
    """Registration form plus the treat / save actions."""

    admit_requested = pyqtSignal(str, int, str)
    treat_requested = pyqtSignal()
    save_exit_requested = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self._build_ui()

    def _build_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(8, 8, 8, 8)
        layout.setSpacing(12)

        header = QLabel("Patient Registration")
        header.setObjectName("admission-header")
        header.setProperty("class", "section-title")
        helper = QLabel("Admit patients by severity; the most urgent, then the earliest, is treated first.")
        helper.setWordWrap(True)
        helper.setProperty("class", "helper-text")
        layout.addWidget(header)
        layout.addWidget(helper)

        form_group = QGroupBox("New patient")
        form_layout = QFormLayout()
        form_layout.setFormAlignment(form_layout.formAlignment() | Qt.AlignmentFlag.AlignLeft)
        form_layout.setHorizontalSpacing(12)
        form_layout.setVerticalSpacing(10)

        self.name_edit = QLineEdit()
        self.name_edit.setPlaceholderText("Full name")
        self.name_edit.returnPressed.connect(self._on_admit_clicked)

        self.priority_combo = QComboBox()
        for level, priority_class in sorted(PRIORITY_CLASSES.items()):
            self.priority_combo.addItem(priority_class.display_name, level)
        self.priority_combo.setToolTip("1 is the most urgent class")

        self.category_edit = QLineEdit()
        self.category_edit.setPlaceholderText("Defaults to the severity description")

        form_layout.addRow(_format_label("Name"), self.name_edit)
        form_layout.addRow(_format_label("Condition"), self.priority_combo)
        form_layout.addRow(_format_label("Notes"), self.category_edit)

        self.admit_button = QPushButton("Admit Patient")
        self.admit_button.setMinimumHeight(38)
        self.admit_button.setStyleSheet("background: #006400; color: white; font-weight: bold;")
        self.admit_button.clicked.connect(self._on_admit_clicked)
        form_layout.addRow(self.admit_button)

        form_group.setLayout(form_layout)
        layout.addWidget(form_group)

        actions_group = QGroupBox("Actions")
        button_row = QHBoxLayout()
        button_row.setSpacing(10)

        self.treat_button = QPushButton("Treat Next Patient")
        self.treat_button.setMinimumHeight(38)
        self.treat_button.setStyleSheet("background: #b22222; color: white; font-weight: bold;")
        self.treat_button.clicked.connect(self.treat_requested.emit)
        self.save_button = QPushButton("Save && Exit")
        self.save_button.setMinimumHeight(38)
        self.save_button.clicked.connect(self.save_exit_requested.emit)

        button_row.addWidget(self.save_button)
        button_row.addWidget(self.treat_button)

        actions_group.setLayout(button_row)
        layout.addWidget(actions_group)
        layout.addStretch()

    def _on_admit_clicked(self):
        name = self.name_edit.text()
        priority = self.priority_combo.currentData()
        category = self.category_edit.text()
        self.admit_requested.emit(name, int(priority), category)

    def clear_inputs(self):
        """Reset the text fields after a successful admission."""
        self.name_edit.clear()
        self.category_edit.clear()
        self.name_edit.setFocus()
