from PySide6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QGridLayout, QLabel, QPushButton, QLineEdit,
    QListWidget, QListWidgetItem, QSpinBox, QFontComboBox, QSplitter, QWidget, QMessageBox,
)
from PySide6.QtGui import QFont
from PySide6.QtCore import Qt

from app.errors import StorageError
from app.state import AppState
from app.themes import (
    FONT_SIZE_MAX, FONT_SIZE_MIN, add_theme, copy_configuration, delete_theme, find_theme,
)
from ui.widgets.theme_button import ColorButton

_FIELDS = [
    ("background_color", "BG"),
    ("default_text_color", "Text"),
    ("correct_text_color", "Correct"),
    ("incorrect_text_color", "Incorrect"),
    ("cursor_color", "Cursor"),
    ("special_char_color", "Special Chars"),
]


class SettingsDialog(QDialog):
    """
    Edits a working copy of the configuration; Save hands it to AppState,
    Cancel throws it away.
    """

    def __init__(self, state: AppState, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Settings")
        self.resize(700, 550)
        self.state = state
        self.config = copy_configuration(state.configuration)
        self._loading = False

        root = QVBoxLayout(self)
        title = QLabel("Settings", self)
        title.setStyleSheet("font-size: 24px; font-weight: 600;")
        root.addWidget(title, alignment=Qt.AlignHCenter)

        split = QSplitter(Qt.Horizontal, self)

        left = QWidget(split)
        lv = QVBoxLayout(left)
        self.theme_list = QListWidget(left)
        self.theme_list.currentItemChanged.connect(self._on_select)
        lv.addWidget(self.theme_list)
        lb = QHBoxLayout()
        self.btn_add = QPushButton("+", left); self.btn_add.clicked.connect(self._add)
        self.btn_del = QPushButton("−", left); self.btn_del.clicked.connect(self._delete)
        lb.addWidget(self.btn_add); lb.addWidget(self.btn_del); lb.addStretch(1)
        lv.addLayout(lb)

        right = QWidget(split)
        grid = QGridLayout(right); row = 0
        grid.addWidget(QLabel("Name:"), row, 0)
        self.name_edit = QLineEdit(right)
        self.name_edit.textEdited.connect(self._on_name)
        grid.addWidget(self.name_edit, row, 1); row += 1

        grid.addWidget(QLabel("Font Family:"), row, 0)
        self.font_combo = QFontComboBox(right)
        self.font_combo.setEditable(True)
        self.font_combo.currentFontChanged.connect(self._on_font)
        grid.addWidget(self.font_combo, row, 1); row += 1

        grid.addWidget(QLabel("Font Size:"), row, 0)
        self.size_spin = QSpinBox(right)
        self.size_spin.setRange(int(FONT_SIZE_MIN), int(FONT_SIZE_MAX))
        self.size_spin.valueChanged.connect(self._on_size)
        grid.addWidget(self.size_spin, row, 1); row += 1

        self.color_btns = {}
        for attr, label in _FIELDS:
            grid.addWidget(QLabel(label + ":"), row, 0)
            btn = ColorButton(label, getattr(self.config.current_theme, attr), right)
            btn.colorChanged.connect(lambda c, a=attr: self._on_color(a, c))
            self.color_btns[attr] = btn
            grid.addWidget(btn, row, 1)
            row += 1
        grid.setRowStretch(row, 1)

        split.addWidget(left)
        split.addWidget(right)
        split.setStretchFactor(1, 1)
        root.addWidget(split, stretch=1)

        btns = QHBoxLayout()
        btns.addStretch(1)
        cancel = QPushButton("Cancel", self); cancel.clicked.connect(self.reject)
        save = QPushButton("Save", self); save.clicked.connect(self._save)
        save.setDefault(True)
        btns.addWidget(cancel); btns.addWidget(save)
        root.addLayout(btns)

        self._rebuild_list()

    # ---------------- list ----------------
    def _rebuild_list(self):
        self._loading = True
        self.theme_list.clear()
        current = None
        for t in self.config.themes:
            item = QListWidgetItem(t.name)
            item.setData(Qt.UserRole, t.id)
            self.theme_list.addItem(item)
            if t.id == self.config.last_used_theme_id:
                current = item
        self._loading = False
        self.theme_list.setCurrentItem(current or self.theme_list.item(0))
        self.btn_del.setEnabled(len(self.config.themes) > 1)

    def _selected(self):
        return self.config.current_theme

    def _on_select(self, item, _prev=None):
        if self._loading or item is None:
            return
        theme = find_theme(self.config, item.data(Qt.UserRole))
        if theme is None:
            return
        self.config.last_used_theme_id = theme.id
        self._loading = True
        self.name_edit.setText(theme.name)
        self.font_combo.setCurrentFont(QFont(theme.font_name))
        self.size_spin.setValue(int(theme.font_size))
        for attr, btn in self.color_btns.items():
            btn.set_color(getattr(theme, attr))
        self._loading = False

    def _add(self):
        add_theme(self.config)
        self._rebuild_list()

    def _delete(self):
        delete_theme(self.config, self.config.last_used_theme_id)
        self._rebuild_list()

    # ---------------- fields ----------------
    def _on_name(self, text: str):
        self._selected().name = text
        item = self.theme_list.currentItem()
        if item is not None:
            item.setText(text)

    def _on_font(self, font: QFont):
        if not self._loading:
            self._selected().font_name = font.family()

    def _on_size(self, value: int):
        if not self._loading:
            self._selected().font_size = float(value)

    def _on_color(self, attr, color):
        setattr(self._selected(), attr, color)

    def _save(self):
        try:
            self.state.apply_configuration(self.config)
        except StorageError as e:
            QMessageBox.warning(self, "Settings", str(e))
            return
        self.accept()
