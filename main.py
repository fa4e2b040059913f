# main.py
from __future__ import annotations
import sys
import logging

from PySide6.QtWidgets import QApplication, QMessageBox

from app import config
from app.errors import StorageError
from app.state import AppState
from ui.main_window import MainWindow
from utils.file_handler import FileStore


def setup_logging() -> None:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    try:
        config.DATA_DIR.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(config.LOG_FILE, encoding="utf-8"))
    except OSError as e:
        print(f"File logging disabled: {e}", file=sys.stderr)
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        handlers=handlers,
    )

    # Log any uncaught exceptions rather than silently dying
    def excepthook(exctype, value, tb):
        logging.critical("Unhandled exception", exc_info=(exctype, value, tb))
        if QApplication.instance() is not None:
            QMessageBox.critical(None, "Application Error", f"{exctype.__name__}: {value}")
        sys.exit(1)

    sys.excepthook = excepthook


def main() -> int:
    setup_logging()

    app = QApplication.instance() or QApplication(sys.argv)
    app.setApplicationName(config.APP_NAME)
    app.setOrganizationName(config.APP_NAME)

    try:
        state = AppState(FileStore(config.DATA_DIR))
    except StorageError as e:
        logging.critical("Cannot open data directory: %s", e)
        QMessageBox.critical(None, config.APP_NAME, str(e))
        return 1
    logging.info("Loaded %d exercises and %d history entries from %s",
                 len(state.exercises), len(state.history), config.DATA_DIR)

    win = MainWindow(state)
    win.show()

    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
