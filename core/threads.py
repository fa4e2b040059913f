# core/threads.py
from PySide6.QtCore import QObject, QRunnable, QThreadPool, Signal

from app.errors import StorageError
from utils.file_handler import read_text_file


class TextLoadWorkerSignals(QObject):
    loaded = Signal(str, str)  # name, text
    failed = Signal(str)


class TextLoadWorker(QRunnable):
    def __init__(self, path: str):
        super().__init__()
        self.path = path
        self.signals = TextLoadWorkerSignals()

    def run(self):
        try:
            name, text = read_text_file(self.path)
        except StorageError as e:
            self.signals.failed.emit(str(e))
            return
        self.signals.loaded.emit(name, text)


class Workers:
    pool = QThreadPool.globalInstance()
