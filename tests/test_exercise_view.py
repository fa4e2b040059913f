import pytest
from PySide6.QtCore import Qt

from ui.exercise_view import key_input


@pytest.mark.parametrize(
    "key, text, expected",
    [
        (Qt.Key_A, "a", "a"),
        (Qt.Key_Space, " ", " "),
        (Qt.Key_Return, "\r", "\r"),
        (Qt.Key_Enter, "\r", "\r"),
        (Qt.Key_Tab, "\t", "\t"),
        (Qt.Key_Delete, "\x7f", None),
        (Qt.Key_Backspace, "\b", None),
        (Qt.Key_Escape, "\x1b", None),
        (Qt.Key_Shift, "", None),
    ],
)
def test_key_input(key, text, expected):
    assert key_input(key, text) == expected


def test_shortcuts_are_not_typed():
    assert key_input(Qt.Key_C, "c", Qt.ControlModifier) is None
    assert key_input(Qt.Key_A, "A", Qt.ShiftModifier) == "A"
