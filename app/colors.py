# app/colors.py
from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Any, Dict


def _clamp(v: float) -> float:
    return max(0.0, min(1.0, float(v)))


@dataclass(frozen=True)
class Color:
    """sRGB color with channels in 0..1."""
    red: float
    green: float
    blue: float
    opacity: float = 1.0

    @classmethod
    def from_hex(cls, value: str) -> "Color":
        """
        Accepts #RGB, #RRGGBB and #AARRGGBB (alpha first).
        Anything else falls back to opaque black.
        """
        h = "".join(ch for ch in (value or "") if ch.isalnum())
        try:
            n = int(h, 16) if h else 0
        except ValueError:
            return cls(0.0, 0.0, 0.0, 1.0)
        if len(h) == 3:
            a, r, g, b = 255, (n >> 8) * 17, (n >> 4 & 0xF) * 17, (n & 0xF) * 17
        elif len(h) == 6:
            a, r, g, b = 255, n >> 16, n >> 8 & 0xFF, n & 0xFF
        elif len(h) == 8:
            a, r, g, b = n >> 24, n >> 16 & 0xFF, n >> 8 & 0xFF, n & 0xFF
        else:
            a, r, g, b = 255, 0, 0, 0
        return cls(r / 255, g / 255, b / 255, a / 255)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Color":
        if not isinstance(d, dict):
            raise ValueError(f"Color must be an object, got {type(d).__name__}")
        missing = {"red", "green", "blue", "opacity"} - set(d.keys())
        if missing:
            raise ValueError(f"Missing color keys: {', '.join(sorted(missing))}")
        return cls(
            red=_clamp(d["red"]),
            green=_clamp(d["green"]),
            blue=_clamp(d["blue"]),
            opacity=_clamp(d["opacity"]),
        )

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    def rgba255(self) -> tuple[int, int, int, int]:
        return tuple(int(round(c * 255)) for c in (self.red, self.green, self.blue, self.opacity))

    def to_hex(self) -> str:
        r, g, b, a = self.rgba255()
        if a == 255:
            return f"#{r:02x}{g:02x}{b:02x}"
        return f"#{a:02x}{r:02x}{g:02x}{b:02x}"

    def to_css(self) -> str:
        r, g, b, _ = self.rgba255()
        return f"rgba({r},{g},{b},{self.opacity:.3f})"

    def with_opacity(self, opacity: float) -> "Color":
        return Color(self.red, self.green, self.blue, _clamp(opacity))

    def luminance(self) -> float:
        return 0.2126 * self.red + 0.7152 * self.green + 0.0722 * self.blue

    def is_dark(self) -> bool:
        return self.luminance() < 0.5
