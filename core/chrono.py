# core/chrono.py
from PySide6.QtCore import QObject, QTimer, Signal

from app import config


class StatsTicker(QObject):
    """Periodic tick for re-reading live stats. Never touches the session itself."""

    tick = Signal()

    def __init__(self, tick_ms: int = config.LIVE_TICK_MS, parent=None):
        super().__init__(parent)
        self._tick = QTimer(self)
        self._tick.setInterval(tick_ms)
        self._tick.timeout.connect(self.tick.emit)

    @property
    def running(self) -> bool:
        return self._tick.isActive()

    def start(self):
        if not self._tick.isActive():
            self._tick.start()

    def stop(self):
        if self._tick.isActive():
            self._tick.stop()
            self.tick.emit()
