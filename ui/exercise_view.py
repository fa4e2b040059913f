from __future__ import annotations
import logging

from PySide6.QtCore import Qt, Signal, Slot
from PySide6.QtWidgets import QWidget, QLabel, QVBoxLayout, QHBoxLayout, QPushButton, QMessageBox

from app.errors import StorageError
from app.models import Exercise, HistoryEntry
from app.state import AppState
from core.chrono import StatsTicker
from services.typing_engine import KeystrokeResult, TypingEngine
from ui.widgets.typing_area import TypingArea

log = logging.getLogger(__name__)

_SHORTCUT_MODIFIERS = Qt.ControlModifier | Qt.AltModifier | Qt.MetaModifier


def key_input(key, text: str, modifiers=Qt.NoModifier) -> str | None:
    """Map a key press to engine input; None for shortcuts and non-printing keys."""
    if modifiers & _SHORTCUT_MODIFIERS:
        return None
    if key in (Qt.Key_Return, Qt.Key_Enter):
        return "\r"
    if key == Qt.Key_Tab:
        return "\t"
    if text and text.isprintable():
        return text
    return None


class StatBox(QWidget):
    def __init__(self, title: str, parent=None):
        super().__init__(parent)
        v = QVBoxLayout(self)
        v.setContentsMargins(0, 0, 0, 0)
        v.setSpacing(2)
        self.title = QLabel(title, self)
        self.title.setObjectName("statTitle")
        self.title.setAlignment(Qt.AlignCenter)
        self.value = QLabel("0", self)
        self.value.setObjectName("statValue")
        self.value.setAlignment(Qt.AlignCenter)
        v.addWidget(self.title)
        v.addWidget(self.value)
        self.setMinimumWidth(70)

    def set(self, text: str):
        self.value.setText(text)


class ExerciseView(QWidget):
    """
    Practice screen for one exercise. Keystrokes go straight to the
    TypingEngine; the header is refreshed on every keystroke and once a second.
    """

    back = Signal()
    completed = Signal(object)  # HistoryEntry

    def __init__(self, exercise: Exercise, state: AppState, parent=None):
        super().__init__(parent)
        self.setFocusPolicy(Qt.StrongFocus)
        self.state = state
        self.exercise = exercise

        self.engine = TypingEngine(exercise)
        self.engine.on_change(self._on_change)
        self.engine.on_finished(self._on_finished)

        root = QVBoxLayout(self)
        root.setContentsMargins(16, 16, 16, 16)
        root.setSpacing(20)

        stats = QHBoxLayout()
        stats.setSpacing(24)
        stats.addStretch(1)
        self.box_total = StatBox("Total", self)
        self.box_errors = StatBox("Errors", self)
        self.box_err_pct = StatBox("Error %", self)
        self.box_cpm = StatBox("CPM", self)
        self.box_wpm = StatBox("WPM", self)
        for box in (self.box_total, self.box_errors, self.box_err_pct, self.box_cpm, self.box_wpm):
            stats.addWidget(box)
        stats.addStretch(1)
        root.addLayout(stats)

        self.area = TypingArea(self)
        root.addWidget(self.area, stretch=1)

        self.footer = QWidget(self)
        f = QVBoxLayout(self.footer)
        done = QLabel("Complete!", self.footer)
        done.setObjectName("lblComplete")
        done.setAlignment(Qt.AlignCenter)
        saved = QLabel("Results saved to History.", self.footer)
        saved.setAlignment(Qt.AlignCenter)
        self.saved_label = saved
        btn_back = QPushButton("Back to Exercises", self.footer)
        btn_back.setFocusPolicy(Qt.NoFocus)
        btn_back.clicked.connect(self.back.emit)
        f.addWidget(done)
        f.addWidget(saved)
        f.addWidget(btn_back, alignment=Qt.AlignHCenter)
        self.footer.setVisible(False)
        root.addWidget(self.footer)

        self.ticker = StatsTicker(parent=self)
        self.ticker.tick.connect(self.refresh_metrics)

        self.apply_theme()
        self.refresh_metrics()

    # ---------------- Theme ----------------
    def apply_theme(self):
        theme = self.state.current_theme
        fg = theme.default_text_color.to_css()
        self.setStyleSheet(
            f"""
            ExerciseView {{ background: {theme.background_color.to_css()}; }}
            QLabel#statTitle {{ color: {theme.default_text_color.with_opacity(0.6).to_css()}; font-size: 11px; }}
            QLabel#statValue {{ color: {fg}; font-size: 20px; font-weight: 600; }}
            QLabel#lblComplete {{ color: {theme.correct_text_color.to_css()}; font-size: 30px; }}
            """
        )
        self._render()

    # ---------------- Engine callbacks ----------------
    def _on_change(self, result: KeystrokeResult):
        if not self.ticker.running and not result.finished:
            self.ticker.start()
        self._render()
        self.refresh_metrics()

    def _on_finished(self, entry: HistoryEntry):
        self.ticker.stop()
        try:
            self.state.add_history_entry(entry)
        except StorageError as e:
            log.error("Could not save history entry: %s", e)
            self.saved_label.setText("Results could not be saved.")
            QMessageBox.warning(self, "History", str(e))
        self.footer.setVisible(True)
        self.completed.emit(entry)

    @Slot()
    def refresh_metrics(self):
        live = self.engine.live_stats()
        session = self.engine.session
        self.box_total.set(str(session.total_chars))
        self.box_errors.set(str(session.error_count))
        self.box_err_pct.set(f"{live.error_percent:.1f}")
        self.box_cpm.set(str(live.cpm))
        self.box_wpm.set(str(live.wpm))

    def _render(self):
        self.area.show_session(self.engine.session, self.state.current_theme)

    # ---------------- Keys ----------------
    def focusNextPrevChild(self, next_: bool) -> bool:
        # keep Tab for typing
        return False

    def keyPressEvent(self, ev):
        ch = self._normalize_key(ev)
        if ch is None or self.engine.is_finished:
            return super().keyPressEvent(ev)
        self.engine.process_key(ch)
        ev.accept()

    def _normalize_key(self, ev) -> str | None:
        return key_input(ev.key(), ev.text(), ev.modifiers())

    def showEvent(self, ev):
        super().showEvent(ev)
        self.setFocus()

    def discard(self):
        """Drop the session; nothing is saved unless it was completed."""
        self.ticker.stop()
