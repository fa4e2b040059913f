# app/themes.py
from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Dict, Any, List, Optional
import uuid

from app.colors import Color

FONT_SIZE_MIN = 10.0
FONT_SIZE_MAX = 40.0

_COLOR_FIELDS = (
    "background_color",
    "default_text_color",
    "correct_text_color",
    "incorrect_text_color",
    "cursor_color",
    "special_char_color",
)

# snake_case attribute -> key in config.json
_JSON_KEYS = {
    "font_name": "fontName",
    "font_size": "fontSize",
    "background_color": "backgroundColor",
    "default_text_color": "defaultTextColor",
    "correct_text_color": "correctTextColor",
    "incorrect_text_color": "incorrectTextColor",
    "cursor_color": "cursorColor",
    "special_char_color": "specialCharColor",
}


def _new_id() -> str:
    return str(uuid.uuid4()).upper()


@dataclass
class Theme:
    id: str
    name: str
    font_name: str = "Menlo"
    font_size: float = 22.0
    background_color: Color = field(default_factory=lambda: Color.from_hex("#002b36"))
    default_text_color: Color = field(default_factory=lambda: Color.from_hex("#839496"))
    correct_text_color: Color = field(default_factory=lambda: Color.from_hex("#2aa198"))
    incorrect_text_color: Color = field(default_factory=lambda: Color.from_hex("#dc322f"))
    cursor_color: Color = field(default_factory=lambda: Color.from_hex("#586e75"))
    special_char_color: Color = field(default_factory=lambda: Color.from_hex("#cb4b16"))

    @property
    def is_dark(self) -> bool:
        return self.background_color.is_dark()


@dataclass
class AppConfiguration:
    last_used_theme_id: str
    themes: List[Theme]

    @property
    def current_theme(self) -> Theme:
        return find_theme(self, self.last_used_theme_id) or self.themes[0]


# -------- Built-in themes --------
def builtin_themes() -> List[Theme]:
    return [
        Theme(id=_new_id(), name="Solarized Dark"),
        Theme(
            id=_new_id(),
            name="Classic Light",
            font_name="Helvetica",
            font_size=20.0,
            background_color=Color.from_hex("#FFFFFF"),
            default_text_color=Color.from_hex("#000000"),
            correct_text_color=Color.from_hex("#008000"),
            incorrect_text_color=Color.from_hex("#FF0000"),
            cursor_color=Color.from_hex("#D3D3D3"),
            special_char_color=Color.from_hex("#0000FF"),
        ),
    ]


def default_configuration() -> AppConfiguration:
    themes = builtin_themes()
    return AppConfiguration(last_used_theme_id=themes[0].id, themes=themes)


# -------- helpers --------
def clamp_font_size(size: float) -> float:
    return max(FONT_SIZE_MIN, min(FONT_SIZE_MAX, float(size)))


def theme_from_dict(d: Dict[str, Any]) -> Theme:
    if not isinstance(d, dict):
        raise ValueError(f"Theme must be an object, got {type(d).__name__}")
    required = {"id", "name"}
    missing = required - set(d.keys())
    if missing:
        raise ValueError(f"Missing theme keys: {', '.join(sorted(missing))}")
    theme = Theme(id=str(d["id"]), name=str(d["name"]))
    if _JSON_KEYS["font_name"] in d:
        theme.font_name = str(d[_JSON_KEYS["font_name"]])
    if _JSON_KEYS["font_size"] in d:
        theme.font_size = clamp_font_size(d[_JSON_KEYS["font_size"]])
    for attr in _COLOR_FIELDS:
        key = _JSON_KEYS[attr]
        if key in d:
            setattr(theme, attr, Color.from_dict(d[key]))
    return theme


def theme_to_dict(t: Theme) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "id": t.id,
        "name": t.name,
        "fontName": t.font_name,
        "fontSize": t.font_size,
    }
    for attr in _COLOR_FIELDS:
        payload[_JSON_KEYS[attr]] = getattr(t, attr).to_dict()
    return payload


def configuration_from_dict(d: Dict[str, Any]) -> AppConfiguration:
    if not isinstance(d, dict):
        raise ValueError(f"Configuration must be an object, got {type(d).__name__}")
    items = d.get("themes") or []
    if not isinstance(items, list):
        raise ValueError("themes must be a list")
    themes = [theme_from_dict(item) for item in items]
    if not themes:
        raise ValueError("Configuration has no themes")
    last_used = str(d.get("lastUsedThemeId") or themes[0].id)
    return AppConfiguration(last_used_theme_id=last_used, themes=themes)


def configuration_to_dict(config: AppConfiguration) -> Dict[str, Any]:
    return {
        "lastUsedThemeId": config.last_used_theme_id,
        "themes": [theme_to_dict(t) for t in config.themes],
    }


def copy_configuration(config: AppConfiguration) -> AppConfiguration:
    """Working copy for the settings dialog; Color is frozen so a shallow replace is enough."""
    return AppConfiguration(
        last_used_theme_id=config.last_used_theme_id,
        themes=[replace(t) for t in config.themes],
    )


# -------- public API used by UI --------
def find_theme(config: AppConfiguration, theme_id: str) -> Optional[Theme]:
    return next((t for t in config.themes if t.id == theme_id), None)


def select_theme(config: AppConfiguration, theme_id: str) -> Theme:
    theme = find_theme(config, theme_id)
    if theme is None:
        raise KeyError(theme_id)
    config.last_used_theme_id = theme.id
    return theme


def add_theme(config: AppConfiguration, name: str = "New Theme") -> Theme:
    theme = Theme(id=_new_id(), name=name)
    config.themes.append(theme)
    config.last_used_theme_id = theme.id
    return theme


def delete_theme(config: AppConfiguration, theme_id: str) -> bool:
    """Remove a theme; the last remaining theme is never deleted."""
    if len(config.themes) <= 1:
        return False
    before = len(config.themes)
    config.themes = [t for t in config.themes if t.id != theme_id]
    if len(config.themes) == before:
        return False
    if config.last_used_theme_id == theme_id:
        config.last_used_theme_id = config.themes[0].id
    return True
