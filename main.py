"""Application entry point for the ER triage desk."""

import signal
import sys

from PyQt6.QtCore import QTimer
from PyQt6.QtWidgets import QApplication, QMessageBox

from triage.config import TriageSettings
from triage.logging_config import configure_from_env
from triage.session import SessionController
from triage.store import LoadStatus, StateStore
from ui.main_window import MainWindow


def main():
    configure_from_env(default_level="INFO")
    settings = TriageSettings.from_env()
    controller = SessionController(StateStore(settings.state_file))
    load_result = controller.start()

    app = QApplication(sys.argv)
    app.aboutToQuit.connect(controller.shutdown)
    signal.signal(signal.SIGINT, lambda *_: app.quit())
    # Qt only yields to the interpreter between events; wake it so SIGINT is seen.
    wakeup = QTimer()
    wakeup.start(250)
    wakeup.timeout.connect(lambda: None)

    window = MainWindow(controller, settings)
    window.show()
    if load_result.status is LoadStatus.CORRUPT:
        QMessageBox.warning(
            window,
            "Saved queue unreadable",
            f"{settings.state_file} could not be loaded ({load_result.reason}).\n"
            "Starting with an empty queue.",
        )
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
