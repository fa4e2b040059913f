from __future__ import annotations
from PySide6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QListWidget, QListWidgetItem, QWidget,
)
from PySide6.QtCore import Qt
import pyqtgraph as pg

from app.models import HistoryEntry
from app.state import AppState
from services.weakkeys import top_mistakes
from utils.graph_helper import setup_progress_plot, update_progress_curves


class HistoryRow(QWidget):
    def __init__(self, entry: HistoryEntry, mistake_color: str, parent=None):
        super().__init__(parent)
        h = QHBoxLayout(self)
        h.setContentsMargins(6, 4, 6, 4)

        left = QVBoxLayout()
        name = QLabel(entry.exercise_name, self)
        name.setStyleSheet("font-weight: 600;")
        when = QLabel(entry.completion_date.astimezone().strftime("%b %d, %Y %H:%M"), self)
        when.setStyleSheet("font-size: 11px;")
        left.addWidget(name)
        left.addWidget(when)

        mistakes = top_mistakes(entry.top_mistakes)
        if mistakes:
            row = QHBoxLayout()
            row.addWidget(QLabel("Mistakes:", self))
            for key, count in mistakes:
                chip = QLabel(f"'{key}' ({count})", self)
                chip.setStyleSheet(
                    f"color: {mistake_color}; background: rgba(128,128,128,0.15);"
                    " border-radius: 4px; padding: 2px 5px;"
                )
                row.addWidget(chip)
            row.addStretch(1)
            left.addLayout(row)
        h.addLayout(left, stretch=1)

        right = QVBoxLayout()
        for text in (f"CPM: {entry.characters_per_minute}", f"Err: {entry.error_percentage:.1f}%"):
            lab = QLabel(text, self)
            lab.setAlignment(Qt.AlignRight)
            right.addWidget(lab)
        h.addLayout(right)


class ProgressDialog(QDialog):
    """CPM and error % over time, plus the history list newest first."""

    def __init__(self, state: AppState, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Progress")
        self.resize(800, 600)

        root = QVBoxLayout(self)
        title = QLabel("Progress", self)
        title.setStyleSheet("font-size: 24px; font-weight: 600;")
        root.addWidget(title, alignment=Qt.AlignHCenter)

        history = state.history_sorted()
        if not history:
            root.addStretch(1)
            empty = QLabel("No history yet.", self)
            empty.setStyleSheet("font-size: 18px;")
            root.addWidget(empty, alignment=Qt.AlignCenter)
            root.addStretch(1)
        else:
            plot = pg.PlotWidget()
            curves = setup_progress_plot(plot)
            update_progress_curves(curves, history)
            root.addWidget(plot, stretch=2)

            lst = QListWidget(self)
            mistake_color = state.current_theme.incorrect_text_color.to_css()
            for entry in reversed(history):
                row = HistoryRow(entry, mistake_color)
                item = QListWidgetItem(lst)
                item.setSizeHint(row.sizeHint())
                lst.addItem(item)
                lst.setItemWidget(item, row)
            root.addWidget(lst, stretch=3)

        btns = QHBoxLayout()
        btns.addStretch(1)
        done = QPushButton("Done", self)
        done.setDefault(True)
        done.clicked.connect(self.accept)
        btns.addWidget(done)
        root.addLayout(btns)
