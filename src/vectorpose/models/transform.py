"""
Transform model

Decomposes an SVG `transform` attribute into five independent scalar
channels. Only translate(), scale() and rotate() are recognized; skew and
matrix forms are ignored (treated as identity channels).
"""

import re
from dataclasses import dataclass
from typing import Optional

_NUMBER = r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?"
_TRANSLATE = re.compile(rf"translate\(\s*({_NUMBER})(?:\s*[,\s]\s*({_NUMBER}))?\s*\)")
_SCALE = re.compile(rf"scale\(\s*({_NUMBER})(?:\s*[,\s]\s*({_NUMBER}))?\s*\)")
_ROTATE = re.compile(rf"rotate\(\s*({_NUMBER})")


def format_number(value: float) -> str:
    """Compact decimal form for SVG attributes (no trailing zeros, no "-0")"""
    text = f"{value:.6f}".rstrip("0").rstrip(".")
    if text in ("-0", ""):
        return "0"
    return text


@dataclass(frozen=True)
class Transform:
    """
    Decomposed 2D transform

    Attributes:
        translate_x, translate_y: Translation in user units
        scale_x, scale_y: Scale factors (identity = 1)
        rotate: Rotation in degrees (identity = 0)
    """

    translate_x: float = 0.0
    translate_y: float = 0.0
    scale_x: float = 1.0
    scale_y: float = 1.0
    rotate: float = 0.0

    @classmethod
    def identity(cls) -> 'Transform':
        return cls()

    @classmethod
    def parse(cls, text: Optional[str]) -> 'Transform':
        """
        Parse an SVG transform attribute

        Absent or empty text is the identity transform. A single-argument
        translate() moves along x only; a single-argument scale() is uniform.

        Example:
            Transform.parse("translate(10,5) rotate(30) scale(2)")
            # Transform(10.0, 5.0, 2.0, 2.0, 30.0)
        """
        if not text:
            return cls()

        tx, ty, sx, sy, rot = 0.0, 0.0, 1.0, 1.0, 0.0

        match = _TRANSLATE.search(text)
        if match:
            tx = float(match.group(1))
            ty = float(match.group(2)) if match.group(2) is not None else 0.0

        match = _SCALE.search(text)
        if match:
            sx = float(match.group(1))
            sy = float(match.group(2)) if match.group(2) is not None else sx

        match = _ROTATE.search(text)
        if match:
            rot = float(match.group(1))

        return cls(tx, ty, sx, sy, rot)

    @property
    def is_identity(self) -> bool:
        return self == Transform()

    def lerp(self, other: 'Transform', t: float) -> 'Transform':
        """Interpolate every channel independently"""
        def mix(a: float, b: float) -> float:
            return a + (b - a) * t

        return Transform(
            mix(self.translate_x, other.translate_x),
            mix(self.translate_y, other.translate_y),
            mix(self.scale_x, other.scale_x),
            mix(self.scale_y, other.scale_y),
            mix(self.rotate, other.rotate),
        )

    def to_svg(self) -> Optional[str]:
        """
        Serialize in canonical order: translate, rotate, scale

        Channels at their identity value are omitted. Returns None for the
        identity transform so callers can drop the attribute entirely.
        """
        parts = []
        if self.translate_x != 0 or self.translate_y != 0:
            parts.append(f"translate({format_number(self.translate_x)},{format_number(self.translate_y)})")
        if self.rotate != 0:
            parts.append(f"rotate({format_number(self.rotate)})")
        if self.scale_x != 1 or self.scale_y != 1:
            parts.append(f"scale({format_number(self.scale_x)},{format_number(self.scale_y)})")
        return " ".join(parts) if parts else None
