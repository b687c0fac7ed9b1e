"""
Style assignment for graph elements.

Colors are chosen as a hue and expanded into three tones (fill, border,
text) at fixed saturation and lightness. Graphviz takes HSV triples with
every channel in [0, 1], so HSL tones are converted before emission.

Two coloring modes exist for modules: by file extension and by size band.
Both are plain lookup tables.
"""

import colorsys
import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, NamedTuple, Tuple

from ..config import GraphConfig
from ..core.types import ModuleDescriptor, Number

# --- Hues (degrees) ---
RED_HUE = 0
ORANGE_HUE = 35
YELLOW_HUE = 60
GREEN_HUE = 105
TURQUOISE_HUE = 180
TS_BLUE_HUE = 211
BLUE_HUE = 225
PURPLE_HUE = 260

TONE_SATURATION = 58
FILL_LIGHTNESS = 85
BORDER_LIGHTNESS = 45
TEXT_LIGHTNESS = 18

# --- Size bands (bytes) ---
TURN_YELLOW_AT = 1 / 10 * 1024
TURN_ORANGE_AT = 1024
TURN_RED_AT = 2.5 * 1024

SIZE_BANDS: Tuple[Tuple[float, int], ...] = (
    (TURN_YELLOW_AT, GREEN_HUE),
    (TURN_ORANGE_AT, YELLOW_HUE),
    (TURN_RED_AT, ORANGE_HUE),
    (math.inf, RED_HUE),
)

# --- Extension kinds ---
EXTENSION_KINDS: Dict[str, str] = {
    ".html": "markup",
    ".htm": "markup",
    ".css": "stylesheet",
    ".scss": "stylesheet",
    ".sass": "stylesheet",
    ".less": "stylesheet",
    ".png": "image",
    ".jpg": "image",
    ".jpeg": "image",
    ".gif": "image",
    ".svg": "image",
    ".webp": "image",
    ".js": "script",
    ".mjs": "script",
    ".cjs": "script",
    ".jsx": "script",
    ".ts": "typed-script",
    ".tsx": "typed-script",
    ".mts": "typed-script",
    ".cts": "typed-script",
}

KIND_HUES: Dict[str, int] = {
    "markup": TURQUOISE_HUE,
    "stylesheet": PURPLE_HUE,
    "image": ORANGE_HUE,
    "script": GREEN_HUE,
    "typed-script": TS_BLUE_HUE,
    "other": YELLOW_HUE,
}


class ColorTriple(NamedTuple):
    """Graphviz HSV strings for one styled element."""
    fill: str
    border: str
    text: str


def hsl_to_graphviz_hsv(hue: float, saturation: float, lightness: float) -> str:
    """
    Convert an HSL color into the Graphviz "H,S,V" notation.

    Args:
        hue: Degrees, 0-360.
        saturation: Percent, 0-100.
        lightness: Percent, 0-100.

    Returns:
        str: Comma separated channels, each normalized to [0, 1].
    """
    r, g, b = colorsys.hls_to_rgb(hue / 360, lightness / 100, saturation / 100)
    _, s, v = colorsys.rgb_to_hsv(r, g, b)
    # Saturation and value are whole percents, like common color converters emit
    s_pct = round(s * 100)
    v_pct = round(v * 100)
    return f"{(hue % 360) / 360:.3f},{s_pct / 100:.3f},{v_pct / 100:.3f}"


def color_triple(hue: float, saturation: float = TONE_SATURATION) -> ColorTriple:
    return ColorTriple(
        fill=hsl_to_graphviz_hsv(hue, saturation, FILL_LIGHTNESS),
        border=hsl_to_graphviz_hsv(hue, saturation, BORDER_LIGHTNESS),
        text=hsl_to_graphviz_hsv(hue, saturation, TEXT_LIGHTNESS),
    )


def gray(lightness: float) -> str:
    """Neutral tone: zero saturation, only lightness matters."""
    return hsl_to_graphviz_hsv(0, 0, lightness)


def extension_kind(file_extension: str) -> str:
    return EXTENSION_KINDS.get(file_extension.lower(), "other")


def hue_for_extension(file_extension: str) -> int:
    return KIND_HUES[extension_kind(file_extension)]


def hue_for_size(size: Number) -> int:
    for upper_bound, hue in SIZE_BANDS:
        if size < upper_bound:
            return hue
    return RED_HUE


def module_colors(module: ModuleDescriptor, config: GraphConfig) -> ColorTriple:
    if config.color_by_size:
        return color_triple(hue_for_size(module.size))
    return color_triple(hue_for_extension(module.file_extension))


def node_style_attrs(colors: ColorTriple) -> Dict[str, str]:
    return {
        "fillcolor": colors.fill,
        "color": colors.border,
        "fontcolor": colors.text,
        "style": "filled",
    }


def _format_unit(value: float, unit: str) -> str:
    # Half-up on the shortest decimal repr, so 1.45 rounds to 1.5
    rounded = Decimal(repr(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    if rounded == rounded.to_integral_value():
        return f"{int(rounded)}{unit}"
    return f"{rounded}{unit}"


def display_size(size: Number) -> str:
    """
    Format a byte count for display.

    Bytes are shown up to 99 (as an integer). Each following unit (KB, MB)
    is used while the value stays below 100, since rounding to one decimal
    would otherwise read like the next unit up. GB is the last unit.

    >>> display_size(50)
    '50B'
    >>> display_size(1536)
    '1.5KB'
    """
    if size < 100:
        return f"{int(size)}B"

    value = size / 1024
    for unit in ("KB", "MB"):
        if value < 100:
            return _format_unit(value, unit)
        value /= 1024
    return _format_unit(value, "GB")
