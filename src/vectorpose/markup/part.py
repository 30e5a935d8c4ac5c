"""
Part handle - read/write access to one animatable SVG element
"""

import re
from typing import Optional
from xml.etree.ElementTree import Element

from vectorpose.markup.style import get_style_property, set_style_property
from vectorpose.models.snapshot import PartSnapshot
from vectorpose.models.transform import Transform, format_number
from vectorpose.utils.colors import normalize_color

PART_ATTRIBUTE = "data-part"

# Numeric SVG attributes that are interpolated
NUMERIC_ATTRS = ("x", "y", "width", "height", "rx", "ry", "cx", "cy", "r", "opacity")

# Style properties that may hold colors
COLOR_PROPS = ("fill", "stroke")

_LEADING_NUMBER = re.compile(r"^\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)")


def parse_number(raw: Optional[str]) -> Optional[float]:
    """Leading numeric value of an attribute ("12.5px" → 12.5), None if absent"""
    if raw is None or raw == "":
        return None
    match = _LEADING_NUMBER.match(raw)
    if not match:
        return None
    return float(match.group(1))


class PartHandle:
    """
    Wraps one element tagged with data-part

    Colors are read from the inline style first, then from the presentation
    attribute; "none" counts as absent. Writes always go to the inline style
    so they win over presentation attributes.
    """

    def __init__(self, element: Element):
        self.element = element

    @property
    def name(self) -> Optional[str]:
        return self.element.get(PART_ATTRIBUTE)

    # ------------------------------------------------------------
    # Numeric attributes
    # ------------------------------------------------------------

    def get_number(self, attr: str) -> Optional[float]:
        return parse_number(self.element.get(attr))

    def set_number(self, attr: str, value: float) -> None:
        self.element.set(attr, format_number(value))

    # ------------------------------------------------------------
    # Colors
    # ------------------------------------------------------------

    def get_color(self, prop: str) -> Optional[str]:
        inline = normalize_color(get_style_property(self.element, prop))
        if inline:
            return inline
        return normalize_color(self.element.get(prop))

    def set_color(self, prop: str, value: str) -> None:
        set_style_property(self.element, prop, value)

    # ------------------------------------------------------------
    # Transform
    # ------------------------------------------------------------

    def get_transform(self) -> Optional[str]:
        return self.element.get("transform") or None

    def set_transform(self, transform: Transform) -> None:
        text = transform.to_svg()
        if text:
            self.element.set("transform", text)
        elif "transform" in self.element.attrib:
            del self.element.attrib["transform"]

    # ------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------

    def read_snapshot(self) -> PartSnapshot:
        numeric = {}
        for attr in NUMERIC_ATTRS:
            value = self.get_number(attr)
            if value is not None:
                numeric[attr] = value

        colors = {}
        for prop in COLOR_PROPS:
            color = self.get_color(prop)
            if color:
                colors[prop] = color

        return PartSnapshot(numeric=numeric, colors=colors, transform=self.get_transform())

    def __repr__(self) -> str:
        return f"PartHandle({self.name!r})"
