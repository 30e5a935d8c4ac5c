"""
Color model - additive RGB triple used during interpolation

Snapshots store colors as normalized strings; Color is the decomposed form
used while tweening between two of them.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from vectorpose.utils.colors import hex_to_rgb, normalize_color, rgb_to_hex


@dataclass(frozen=True)
class Color:
    """
    RGB color with float channels (0-255)

    Channels stay floats so repeated interpolation does not accumulate
    rounding; rounding happens only in to_hex().

    Examples:
        red = Color.parse("#f00")
        mid = red.lerp(Color.parse("rgb(0, 0, 255)"), 0.5)
        mid.to_hex()  # "#800080"
    """

    r: float
    g: float
    b: float

    # === CONSTRUCTORS ===

    @classmethod
    def from_rgb(cls, r: float, g: float, b: float) -> 'Color':
        return cls(float(r), float(g), float(b))

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional['Color']:
        """
        Parse a hex or rgb() color string

        Returns:
            Color, or None when the value is absent or unparseable
        """
        rgb = hex_to_rgb(normalize_color(value))
        if rgb is None:
            return None
        return cls.from_rgb(*rgb)

    # === RENDERING ===

    def to_rgb(self) -> Tuple[int, int, int]:
        """Rounded, clamped (r, g, b)"""
        return tuple(int(round(max(0.0, min(255.0, c)))) for c in (self.r, self.g, self.b))  # type: ignore[return-value]

    def to_hex(self) -> str:
        return rgb_to_hex(self.r, self.g, self.b)

    # === INTERPOLATION ===

    def lerp(self, other: 'Color', t: float) -> 'Color':
        """Per-channel linear interpolation towards `other`"""
        return Color(
            self.r + (other.r - self.r) * t,
            self.g + (other.g - self.g) * t,
            self.b + (other.b - self.b) * t,
        )
