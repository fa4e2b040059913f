# ui/widgets/typing_area.py
import html

from PySide6.QtWidgets import QLabel, QScrollArea, QSizePolicy
from PySide6.QtCore import Qt

from app.themes import Theme
from services.typing_engine import CharState, TypingSession, display_char, is_newline


def build_html(session: TypingSession, theme: Theme) -> str:
    """
    One span per target character:
      - typed chars in correct / incorrect color
      - untyped newline and tab drawn with the special-char color
      - the char under the cursor gets the cursor color as background
    """
    ok = theme.correct_text_color.to_css()
    err = theme.incorrect_text_color.to_css()
    plain = theme.default_text_color.to_css()
    special = theme.special_char_color.to_css()
    cursor_bg = theme.cursor_color.to_css()

    parts: list[str] = []
    for i, ch in enumerate(session.target_chars):
        shown = html.escape(display_char(ch)).replace("\n", "<br>")
        state = session.char_state(i)
        if state is CharState.CORRECT:
            color = ok
        elif state is CharState.INCORRECT:
            color = err
        elif is_newline(ch) or ch == "\t":
            color = special
        else:
            color = plain

        style = f"color:{color};"
        if i == session.cursor:
            style += f" background-color:{cursor_bg};"
        parts.append(f'<span style="{style}">{shown}</span>')

    family = html.escape(theme.font_name, quote=True)
    return (
        f'<div style="font-family:\'{family}\'; font-size:{theme.font_size:.0f}px; '
        f'white-space:pre-wrap; line-height:175%;">{"".join(parts)}</div>'
    )


class TypingArea(QScrollArea):
    """Scrollable, read-only view of the exercise text. Keys are captured by the parent view."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setWidgetResizable(True)
        self.setFocusPolicy(Qt.NoFocus)
        self.setFrameShape(QScrollArea.NoFrame)

        self.label = QLabel(self)
        self.label.setTextFormat(Qt.RichText)
        self.label.setWordWrap(True)
        self.label.setAlignment(Qt.AlignLeft | Qt.AlignTop)
        self.label.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.label.setTextInteractionFlags(Qt.NoTextInteraction)
        self.label.setFocusPolicy(Qt.NoFocus)
        self.label.setContentsMargins(16, 16, 16, 16)
        self.setWidget(self.label)

    def show_session(self, session: TypingSession, theme: Theme):
        bg = theme.background_color.with_opacity(theme.background_color.opacity * 0.5).to_css()
        self.setStyleSheet(f"QScrollArea, QLabel {{ background: {bg}; border-radius: 8px; }}")
        self.label.setText(build_html(session, theme))
