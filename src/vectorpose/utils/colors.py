"""
Color conversion utilities

Pure functions for parsing SVG/CSS color values into additive RGB triples and
encoding them back as hex. Only `#rgb`, `#rrggbb` and `rgb(r, g, b)` are
understood; anything else (named colors, hsl(), gradients) is left untouched
by normalize_color() and reported as unparseable by hex_to_rgb().
"""

import re
from typing import Optional, Tuple

RGB = Tuple[int, int, int]

_RGB_FUNCTION = re.compile(
    r"^rgb\s*\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*\)",
    re.IGNORECASE,
)
_HEX_DIGITS = re.compile(r"^[0-9a-fA-F]+$")


def hex_to_rgb(value: Optional[str]) -> Optional[RGB]:
    """
    Parse a hex color string to (r, g, b)

    Args:
        value: "#rgb" or "#rrggbb" (leading '#' optional)

    Returns:
        (r, g, b) tuple with values 0-255, or None if not a hex color

    Example:
        hex_to_rgb("#f00")     # (255, 0, 0)
        hex_to_rgb("#00ff80")  # (0, 255, 128)
        hex_to_rgb("red")      # None
    """
    if not value or value == "none":
        return None

    digits = value.strip().lstrip("#")
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    if len(digits) != 6 or not _HEX_DIGITS.match(digits):
        return None

    num = int(digits, 16)
    return ((num >> 16) & 255, (num >> 8) & 255, num & 255)


def rgb_to_hex(r: float, g: float, b: float) -> str:
    """
    Encode RGB channels as "#rrggbb"

    Channels are rounded and clamped to 0-255, so interpolated (float)
    values can be passed directly.
    """
    def to_hex(n: float) -> str:
        return format(int(round(max(0.0, min(255.0, n)))), "02x")

    return f"#{to_hex(r)}{to_hex(g)}{to_hex(b)}"


def normalize_color(value: Optional[str]) -> Optional[str]:
    """
    Normalize a color value for snapshots

    - hex values are returned as written (trimmed)
    - rgb(r, g, b) is converted to hex
    - "none" / empty → None
    - anything else is returned as-is (interpolation treats it as unparseable)
    """
    if not value:
        return None
    value = value.strip()
    if not value or value == "none":
        return None

    if value.startswith("#"):
        return value

    match = _RGB_FUNCTION.match(value)
    if match:
        return rgb_to_hex(int(match.group(1)), int(match.group(2)), int(match.group(3)))

    return value
