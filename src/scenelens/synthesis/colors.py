"""Color analysis over the provider's dominant-color list."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from scenelens.synthesis.types import ColorAnalysis, DominantColor, Rgb

if TYPE_CHECKING:
    from collections.abc import Sequence

    from scenelens.synthesis.types import ColorResult

_HEX_RE = re.compile(r"^#?([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})$", re.IGNORECASE)

NEUTRAL_BRIGHTNESS = 50
UNKNOWN_COLOR_NAME = "Unknown"
INSUFFICIENT_DATA = "Insufficient data"

DOMINANT_LIMIT = 5
PALETTE_LIMIT = 8


@dataclass(frozen=True)
class NamedColor:
    name: str
    rgb: Rgb


@dataclass(frozen=True)
class ColorPalette:
    """Reference colors used for naming; earlier entries win distance ties."""

    colors: tuple[NamedColor, ...]

    def nearest(self, rgb: Rgb) -> str:
        best_name = UNKNOWN_COLOR_NAME
        best_distance = math.inf
        for ref in self.colors:
            distance = rgb_distance(rgb, ref.rgb)
            if distance < best_distance:
                best_distance = distance
                best_name = ref.name
        return best_name


DEFAULT_PALETTE = ColorPalette(
    colors=(
        NamedColor("Black", Rgb(0, 0, 0)),
        NamedColor("White", Rgb(255, 255, 255)),
        NamedColor("Red", Rgb(255, 0, 0)),
        NamedColor("Green", Rgb(0, 255, 0)),
        NamedColor("Blue", Rgb(0, 0, 255)),
        NamedColor("Yellow", Rgb(255, 255, 0)),
        NamedColor("Magenta", Rgb(255, 0, 255)),
        NamedColor("Cyan", Rgb(0, 255, 255)),
        NamedColor("Gray", Rgb(128, 128, 128)),
        NamedColor("Orange", Rgb(255, 165, 0)),
        NamedColor("Purple", Rgb(128, 0, 128)),
        NamedColor("Pink", Rgb(255, 192, 203)),
    )
)


def hex_to_rgb(value: str) -> Rgb | None:
    """Decode a 6-digit hex color, with or without ``#``. None if malformed."""
    match = _HEX_RE.match(value)
    if match is None:
        return None
    r, g, b = (int(part, 16) for part in match.groups())
    return Rgb(r, g, b)


def rgb_distance(a: Rgb, b: Rgb) -> float:
    return math.sqrt((a.r - b.r) ** 2 + (a.g - b.g) ** 2 + (a.b - b.b) ** 2)


def brightness(value: str) -> int:
    """Perceived luma (0-255) of a hex color; 50 for malformed input."""
    rgb = hex_to_rgb(value)
    if rgb is None:
        return NEUTRAL_BRIGHTNESS
    # Integer luma weights, rounded half up.
    return (299 * rgb.r + 587 * rgb.g + 114 * rgb.b + 500) // 1000


def color_name(value: str, palette: ColorPalette = DEFAULT_PALETTE) -> str:
    rgb = hex_to_rgb(value)
    if rgb is None:
        return UNKNOWN_COLOR_NAME
    return palette.nearest(rgb)


def saturation(value: str) -> float:
    rgb = hex_to_rgb(value)
    if rgb is None:
        return 0.0
    high = max(rgb.r, rgb.g, rgb.b)
    low = min(rgb.r, rgb.g, rgb.b)
    return 0.0 if high == 0 else (high - low) / high


def sort_by_dominance(colors: Sequence[ColorResult]) -> list[ColorResult]:
    # sorted() is stable, so equal percentages keep provider order.
    return sorted(colors, key=lambda c: c.percentage, reverse=True)


def color_harmony(colors: Sequence[ColorResult]) -> str:
    """Classify how far apart the two most dominant colors are."""
    if len(colors) < 2:
        return INSUFFICIENT_DATA

    first, second = sort_by_dominance(colors)[:2]
    rgb1 = hex_to_rgb(first.hex)
    rgb2 = hex_to_rgb(second.hex)
    if rgb1 is None or rgb2 is None:
        return INSUFFICIENT_DATA

    distance = rgb_distance(rgb1, rgb2)
    if distance > 200:
        return "Contrasted"
    if distance > 100:
        return "Complementary"
    return "Analogous"


def vibrancy(colors: Sequence[ColorResult]) -> str:
    """Bucket the average saturation of all colors."""
    if not colors:
        return "Low"

    avg = sum(saturation(c.hex) for c in colors) / len(colors)
    if avg > 0.5:
        return "Very High"
    if avg > 0.3:
        return "High"
    if avg > 0.1:
        return "Medium"
    return "Low"


def average_brightness(colors: Sequence[ColorResult]) -> float:
    if not colors:
        return float(NEUTRAL_BRIGHTNESS)
    return sum(brightness(c.hex) for c in colors) / len(colors)


def analyze_colors(colors: Sequence[ColorResult], palette: ColorPalette = DEFAULT_PALETTE) -> ColorAnalysis:
    """Enrich the dominant colors and derive harmony, brightness and vibrancy."""
    ordered = sort_by_dominance(colors)
    dominant = tuple(
        DominantColor(
            hex=c.hex,
            rgb=hex_to_rgb(c.hex),
            percentage=round(c.percentage, 2),
            name=color_name(c.hex, palette),
            brightness=brightness(c.hex),
        )
        for c in ordered[:DOMINANT_LIMIT]
    )
    return ColorAnalysis(
        dominant=dominant,
        palette=tuple(c.hex for c in ordered[:PALETTE_LIMIT]),
        color_harmony=color_harmony(colors),
        avg_brightness=round(average_brightness(colors), 2),
        vibrancy=vibrancy(colors),
    )
