# ui/main_window.py
from typing import Optional
import logging

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QLabel,
    QMenu, QFileDialog, QMessageBox, QPushButton, QListWidget, QListWidgetItem, QStackedWidget,
)
from PySide6.QtCore import Qt

from app.errors import EmptyExerciseError, StorageError
from app.models import Exercise
from app.state import AppState, EditorRegistry, CONFIGURATION, EXERCISES
from core.threads import TextLoadWorker, Workers
from services.weakkeys import aggregate_mistakes
from ui.exercise_editor import ExerciseEditor
from ui.exercise_view import ExerciseView
from ui.progress_dialog import ProgressDialog
from ui.theme_editor import SettingsDialog
from ui.weakkeys_dialog import MistakesDialog
from ui.widgets.rename_dialog import RenameDialog

log = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self, state: AppState):
        super().__init__()
        self.state = state
        self.editors: EditorRegistry[ExerciseEditor] = EditorRegistry()
        self.practice: Optional[ExerciseView] = None
        self.setWindowTitle("Typing Exercises")
        self.resize(800, 600)

        self.stack = QStackedWidget(self)
        self.list_page = QWidget(self)
        root_v = QVBoxLayout(self.list_page)
        root_v.setContentsMargins(16, 16, 16, 16)
        root_v.setSpacing(16)
        self._build_top_bar(root_v)

        self.exercise_list = QListWidget(self.list_page)
        self.exercise_list.setContextMenuPolicy(Qt.CustomContextMenu)
        self.exercise_list.customContextMenuRequested.connect(self._context_menu)
        self.exercise_list.itemActivated.connect(lambda item: self._practice(item.data(Qt.UserRole)))
        root_v.addWidget(self.exercise_list, 1)

        self.stack.addWidget(self.list_page)
        self.setCentralWidget(self.stack)

        self._unsubscribe = state.subscribe(self._on_state_changed)
        self._rebuild_list()
        self._apply_theme()

    # ---------------- Top Bar ----------------
    def _build_top_bar(self, parent_layout):
        bar = QWidget(self)
        bar.setObjectName("TopBar")
        h = QHBoxLayout(bar)
        h.setContentsMargins(14, 10, 14, 10)
        h.setSpacing(10)

        title = QLabel("Typing Exercises", bar)
        title.setStyleSheet("font-size: 20px; font-weight: 600;")
        h.addWidget(title)
        h.addStretch(1)

        for text, handler in [
            ("Import", self._on_import),
            ("Add", lambda: self.open_editor(None)),
            ("Settings", self._open_settings),
            ("Progress", self._open_progress),
            ("Mistakes", self._open_mistakes),
        ]:
            button = QPushButton(text, bar)
            button.clicked.connect(handler)
            button.setObjectName("TopBtn")
            button.setFocusPolicy(Qt.NoFocus)
            h.addWidget(button)

        parent_layout.addWidget(bar)

    # ---------------- Theme ----------------
    def _apply_theme(self):
        theme = self.state.current_theme
        bg = theme.background_color
        fg = theme.default_text_color
        border = "rgba(255,255,255,0.10)" if bg.is_dark() else "rgba(0,0,0,0.12)"
        self.setStyleSheet(
            f"""
            QMainWindow, QWidget {{ background: {bg.to_css()}; color: {fg.to_css()}; }}
            QWidget#TopBar {{ border: 1px solid {border}; border-radius: 12px; }}
            QPushButton#TopBtn {{
                background: transparent;
                border: 1px solid {border};
                border-radius: 9px;
                padding: 6px 12px;
            }}
            QListWidget {{ border: none; }}
            QListWidget::item {{ padding: 6px; }}
            QListWidget::item:selected {{ background: {theme.cursor_color.to_css()}; }}
            """
        )
        if self.practice is not None:
            self.practice.apply_theme()

    def _on_state_changed(self, topic: str):
        if topic == EXERCISES:
            self._rebuild_list()
        elif topic == CONFIGURATION:
            self._apply_theme()

    # ---------------- Exercise list ----------------
    def _rebuild_list(self):
        self.exercise_list.clear()
        for e in self.state.exercises:
            first_line = e.text.splitlines()[0] if e.text else ""
            item = QListWidgetItem(f"{e.name}\n{first_line}")
            item.setData(Qt.UserRole, e.id)
            item.setToolTip(e.text[:400])
            self.exercise_list.addItem(item)

    def _context_menu(self, pos):
        item = self.exercise_list.itemAt(pos)
        if item is None:
            return
        exercise = self.state.find_exercise(item.data(Qt.UserRole))
        if exercise is None:
            return
        menu = QMenu(self)
        menu.addAction("Practice", lambda: self._practice(exercise.id))
        menu.addAction("Edit", lambda: self.open_editor(exercise))
        menu.addAction("Rename", lambda: self._rename(exercise))
        menu.addSeparator()
        menu.addAction("Delete", lambda: self._delete(exercise))
        menu.exec(self.exercise_list.viewport().mapToGlobal(pos))

    def _rename(self, exercise: Exercise):
        dlg = RenameDialog(exercise.name, self)
        if not dlg.exec():
            return
        try:
            self.state.rename_exercise(exercise.id, dlg.new_name)
        except StorageError as e:
            QMessageBox.warning(self, "Rename", str(e))

    def _delete(self, exercise: Exercise):
        try:
            self.state.delete_exercise(exercise)
        except StorageError as e:
            QMessageBox.warning(self, "Delete", str(e))

    # ---------------- Editor windows ----------------
    def open_editor(self, exercise: Optional[Exercise], imported: Optional[Exercise] = None):
        target = exercise or imported or Exercise.create()
        editor, created = self.editors.open(
            target.id,
            lambda: ExerciseEditor(target, self.state, on_closed=self.editors.close),
        )
        if created:
            editor.resize(600, 450)
            editor.show()
        editor.raise_()
        editor.activateWindow()

    def _on_import(self):
        path, _ = QFileDialog.getOpenFileName(self, "Import text", "", "Text (*.txt);;All files (*)")
        if not path:
            return
        worker = TextLoadWorker(path)
        worker.signals.loaded.connect(self._on_loaded_text)
        worker.signals.failed.connect(self._on_load_failed)
        Workers.pool.start(worker)

    def _on_loaded_text(self, name: str, text: str):
        self.open_editor(None, imported=Exercise.create(name, text))

    def _on_load_failed(self, msg: str):
        log.warning("Import failed: %s", msg)
        QMessageBox.warning(self, "Import", msg)

    # ---------------- Practice ----------------
    def _practice(self, exercise_id: str):
        exercise = self.state.find_exercise(exercise_id)
        if exercise is None:
            return
        try:
            view = ExerciseView(exercise, self.state, self.stack)
        except EmptyExerciseError as e:
            QMessageBox.information(self, "Practice", str(e))
            return
        self._close_practice()
        view.back.connect(self._close_practice)
        self.practice = view
        self.stack.addWidget(view)
        self.stack.setCurrentWidget(view)
        self.setWindowTitle(exercise.name)
        view.setFocus()

    def _close_practice(self):
        if self.practice is None:
            return
        view, self.practice = self.practice, None
        view.discard()
        self.stack.setCurrentWidget(self.list_page)
        self.stack.removeWidget(view)
        view.deleteLater()
        self.setWindowTitle("Typing Exercises")

    def keyPressEvent(self, ev):
        if ev.key() == Qt.Key_Escape and self.practice is not None:
            self._close_practice()
            return
        super().keyPressEvent(ev)

    # ---------------- Dialogs ----------------
    def _open_settings(self):
        SettingsDialog(self.state, self).exec()

    def _open_progress(self):
        ProgressDialog(self.state, self).exec()

    def _open_mistakes(self):
        MistakesDialog(aggregate_mistakes(self.state.history), self).exec()

    def closeEvent(self, ev):
        self._close_practice()
        try:
            self.state.save_configuration()
        except StorageError as e:
            log.error("Could not save configuration on exit: %s", e)
        self._unsubscribe()
        super().closeEvent(ev)
