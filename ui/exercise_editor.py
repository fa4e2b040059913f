from typing import Callable, Optional
import logging

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QLineEdit, QPlainTextEdit,
    QPushButton, QFileDialog, QMessageBox,
)
from PySide6.QtGui import QFont
from PySide6.QtCore import Qt

from app.errors import StorageError
from app.models import Exercise
from app.state import AppState
from app.validation import can_save_exercise, clean_name, normalize_apostrophes
from core.threads import TextLoadWorker, Workers

log = logging.getLogger(__name__)


class ExerciseEditor(QWidget):
    """
    Non-modal editor window for a new or existing exercise.
    `on_closed(exercise_id)` is called once when the window closes.
    """

    def __init__(self, exercise: Exercise, state: AppState,
                 on_closed: Optional[Callable[[str], None]] = None, parent=None):
        super().__init__(parent, Qt.Window)
        self.setAttribute(Qt.WA_DeleteOnClose, True)
        self.state = state
        self.exercise = exercise
        self.is_new = not state.has_exercise(exercise.id)
        self._on_closed = on_closed
        self.setMinimumSize(600, 450)
        self._update_title()

        root = QVBoxLayout(self)
        heading = QLabel("Add New Exercise" if self.is_new else "Edit Exercise", self)
        heading.setStyleSheet("font-size: 24px; font-weight: 600;")
        root.addWidget(heading)

        self.name_edit = QLineEdit(exercise.name, self)
        self.name_edit.setPlaceholderText("Exercise Name")
        self.name_edit.textChanged.connect(self._validate)
        root.addWidget(self.name_edit)

        self.text_edit = QPlainTextEdit(self)
        self.text_edit.setFont(QFont("Menlo", 14))
        self.text_edit.setPlainText(exercise.text)
        self.text_edit.setMinimumHeight(300)
        self.text_edit.textChanged.connect(self._validate)
        root.addWidget(self.text_edit, stretch=1)

        self.btn_import = QPushButton("Import Text from File…", self)
        self.btn_import.clicked.connect(self._import_text)
        root.addWidget(self.btn_import, alignment=Qt.AlignLeft)

        btns = QHBoxLayout()
        btns.addStretch(1)
        cancel = QPushButton("Cancel", self); cancel.clicked.connect(self.close)
        self.btn_save = QPushButton("Save", self); self.btn_save.clicked.connect(self._save)
        self.btn_save.setDefault(True)
        btns.addWidget(cancel); btns.addWidget(self.btn_save)
        root.addLayout(btns)

        self._validate()

    def _update_title(self):
        self.setWindowTitle("New Exercise" if self.is_new else f"Edit: {self.exercise.name}")

    def _validate(self):
        self.btn_save.setEnabled(can_save_exercise(self.name_edit.text(), self.text_edit.toPlainText()))

    def _save(self):
        name, text = self.name_edit.text(), self.text_edit.toPlainText()
        if not can_save_exercise(name, text):
            return
        updated = Exercise(id=self.exercise.id, name=clean_name(name), text=normalize_apostrophes(text))
        try:
            if self.is_new:
                self.state.add_exercise(updated)
            else:
                self.state.update_exercise(updated)
        except StorageError as e:
            QMessageBox.warning(self, "Save Exercise", str(e))
            return
        self.exercise = updated
        self.close()

    # ---------------- Import ----------------
    def _import_text(self):
        path, _ = QFileDialog.getOpenFileName(self, "Import text", "", "Text (*.txt);;All files (*)")
        if not path:
            return
        worker = TextLoadWorker(path)
        worker.signals.loaded.connect(self._on_loaded_text)
        worker.signals.failed.connect(self._on_load_failed)
        Workers.pool.start(worker)

    def _on_loaded_text(self, name: str, text: str):
        self.text_edit.setPlainText(text)
        if not self.name_edit.text():
            self.name_edit.setText(name)

    def _on_load_failed(self, msg: str):
        log.warning("Import failed: %s", msg)
        QMessageBox.warning(self, "Import Text", msg)

    def closeEvent(self, ev):
        if self._on_closed is not None:
            self._on_closed(self.exercise.id)
            self._on_closed = None
        super().closeEvent(ev)
