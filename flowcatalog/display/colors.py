"""Deterministic colors for arbitrary strings (tags, workspace names).

The same string always maps to the same color, across runs and across
clients, so a tag keeps its color everywhere it is shown.
"""

from __future__ import annotations

import math

SATURATION = 65
LIGHTNESS = 55
_MASK32 = 0xFFFFFFFF


def string_hash(text: str) -> int:
    """djb2 (xor variant) over UTF-16 code units, as an unsigned 32-bit int."""
    h = 5381
    data = text.encode("utf-16-le")
    for i in range(0, len(data), 2):
        code_unit = data[i] | (data[i + 1] << 8)
        h = (((h << 5) + h) & _MASK32) ^ code_unit
    return h


def hue_from_string(text: str) -> int:
    """Hue in ``[0, 360)``."""
    return string_hash(text) % 360


def _round(value: float) -> int:
    # Half-up, not banker's rounding.
    return math.floor(value + 0.5)


def hsl_to_rgb(hue: float, saturation: float, lightness: float) -> tuple[int, int, int]:
    """Convert HSL (degrees, percent, percent) to 0-255 RGB."""
    s = saturation / 100
    light = lightness / 100
    a = s * min(light, 1 - light)

    def channel(n: int) -> int:
        k = (n + hue / 30) % 12
        return _round(255 * (light - a * max(-1, min(k - 3, 9 - k, 1))))

    return channel(0), channel(8), channel(4)


def rgb_to_hex(rgb: tuple[int, int, int]) -> str:
    return "#" + "".join(f"{component:02x}" for component in rgb)


def color_from_string(text: str) -> str:
    """Hex color for *text*, e.g. ``"#d15f8c"``."""
    return rgb_to_hex(hsl_to_rgb(hue_from_string(text), SATURATION, LIGHTNESS))


def ideal_text_color(background: str) -> str:
    """Black or white, whichever reads better on *background* (``#rrggbb``)."""
    r = int(background[1:3], 16)
    g = int(background[3:5], 16)
    b = int(background[5:7], 16)
    luminance = 0.2126 * r + 0.7152 * g + 0.0722 * b
    return "#000000" if luminance > 140 else "#FFFFFF"
