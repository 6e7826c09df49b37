# src/a11yscan/wcag/detectors/colors.py

import re
from typing import Optional, Sequence, Tuple

RGBA = Tuple[float, float, float, float]

WHITE: RGBA = (255.0, 255.0, 255.0, 1.0)

NAMED_COLORS = {
    "black": (0, 0, 0),
    "white": (255, 255, 255),
    "red": (255, 0, 0),
    "green": (0, 128, 0),
    "blue": (0, 0, 255),
    "yellow": (255, 255, 0),
    "gray": (128, 128, 128),
    "grey": (128, 128, 128),
    "silver": (192, 192, 192),
    "orange": (255, 165, 0),
    "purple": (128, 0, 128),
    "navy": (0, 0, 128),
}

_FUNCTIONAL = re.compile(r"^rgba?\((?P<body>[^)]*)\)$")


def _channel(value: str) -> float:
    value = value.strip()
    if value.endswith("%"):
        return max(0.0, min(255.0, float(value[:-1]) * 2.55))
    return max(0.0, min(255.0, float(value)))


def _alpha(value: str) -> float:
    value = value.strip()
    if value.endswith("%"):
        return max(0.0, min(1.0, float(value[:-1]) / 100))
    return max(0.0, min(1.0, float(value)))


def parse_color(value: Optional[str]) -> Optional[RGBA]:
    """
    Parst CSS-Farben: rgb()/rgba() (Komma- und Leerzeichen-Syntax),
    #rgb, #rgba, #rrggbb, #rrggbbaa, transparent und einige Farbnamen

    Args:
        value: CSS-Farbwert

    Returns:
        (r, g, b, alpha) oder None, wenn der Wert nicht lesbar ist
    """
    if not value:
        return None
    text = value.strip().lower()

    if text == "transparent":
        return (0.0, 0.0, 0.0, 0.0)

    if text in NAMED_COLORS:
        r, g, b = NAMED_COLORS[text]
        return (float(r), float(g), float(b), 1.0)

    if text.startswith("#"):
        digits = text[1:]
        if len(digits) in (3, 4):
            digits = "".join(ch * 2 for ch in digits)
        if len(digits) not in (6, 8):
            return None
        try:
            channels = [int(digits[i:i + 2], 16) for i in range(0, len(digits), 2)]
        except ValueError:
            return None
        alpha = channels[3] / 255 if len(channels) == 4 else 1.0
        return (float(channels[0]), float(channels[1]), float(channels[2]), alpha)

    match = _FUNCTIONAL.match(text)
    if match:
        body = match.group("body").replace("/", " ").replace(",", " ")
        parts = body.split()
        if len(parts) not in (3, 4):
            return None
        try:
            r, g, b = (_channel(part) for part in parts[:3])
            alpha = _alpha(parts[3]) if len(parts) == 4 else 1.0
        except ValueError:
            return None
        return (r, g, b, alpha)

    return None


def _linearize(channel: float) -> float:
    value = channel / 255
    return value / 12.92 if value <= 0.03928 else ((value + 0.055) / 1.055) ** 2.4


def relative_luminance(rgb: Sequence[float]) -> float:
    """Relative Luminanz nach sRGB-Gammakorrektur"""
    r, g, b = (_linearize(channel) for channel in rgb[:3])
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def contrast_ratio(foreground: Sequence[float], background: Sequence[float]) -> float:
    lighter, darker = sorted(
        (relative_luminance(foreground), relative_luminance(background)),
        reverse=True
    )
    return (lighter + 0.05) / (darker + 0.05)
