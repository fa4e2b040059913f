# ui/widgets/rename_dialog.py
from PySide6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout,
    QLabel, QPushButton, QLineEdit
)

from app.validation import can_rename, clean_name


class RenameDialog(QDialog):
    def __init__(self, current_name: str, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Rename Exercise")
        self.setFixedWidth(300)
        self._old = current_name

        layout = QVBoxLayout(self)
        layout.setSpacing(16)
        layout.addWidget(QLabel("Rename Exercise", self))

        self.edit = QLineEdit(current_name, self)
        self.edit.setPlaceholderText("New Name")
        self.edit.textChanged.connect(self._validate)
        layout.addWidget(self.edit)

        row = QHBoxLayout()
        btn_cancel = QPushButton("Cancel", self)
        btn_cancel.clicked.connect(self.reject)
        self.btn_save = QPushButton("Save", self)
        self.btn_save.clicked.connect(self.accept)
        self.btn_save.setDefault(True)
        row.addWidget(btn_cancel)
        row.addWidget(self.btn_save)
        layout.addLayout(row)

        self._validate()
        self.edit.setFocus()
        self.edit.selectAll()

    def _validate(self):
        self.btn_save.setEnabled(can_rename(self.edit.text(), self._old))

    @property
    def new_name(self) -> str:
        return clean_name(self.edit.text())
