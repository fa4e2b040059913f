from PySide6.QtWidgets import QPushButton, QColorDialog
from PySide6.QtGui import QColor
from PySide6.QtCore import QSize, Qt, Signal

from app.colors import Color


def to_qcolor(c: Color) -> QColor:
    return QColor.fromRgbF(c.red, c.green, c.blue, c.opacity)


def from_qcolor(q: QColor) -> Color:
    return Color(q.redF(), q.greenF(), q.blueF(), q.alphaF())


class ColorButton(QPushButton):
    """Swatch button that edits one theme color."""

    colorChanged = Signal(object)  # Color

    def __init__(self, label: str, color: Color, parent=None):
        super().__init__(parent)
        self._label = label
        self.setToolTip(f"Pick {label.lower()} color")
        self.setMinimumSize(QSize(120, 28))
        self.setCursor(Qt.PointingHandCursor)
        self.clicked.connect(self._pick)
        self.set_color(color)

    @property
    def color(self) -> Color:
        return self._color

    def set_color(self, color: Color):
        self._color = color
        fg = "#ffffff" if color.is_dark() else "#000000"
        self.setText(color.to_hex())
        self.setStyleSheet(f"QPushButton {{ background: {color.to_css()}; color: {fg}; border-radius: 6px; }}")

    def _pick(self):
        q = QColorDialog.getColor(to_qcolor(self._color), self, f"Pick {self._label}",
                                  QColorDialog.ShowAlphaChannel)
        if q.isValid():
            self.set_color(from_qcolor(q))
            self.colorChanged.emit(self._color)
