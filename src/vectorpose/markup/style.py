"""
Inline style helpers

Reads and writes individual declarations of an element's `style`
attribute while preserving the order of the others.
"""

from typing import Dict, Optional
from xml.etree.ElementTree import Element


def parse_style(text: Optional[str]) -> Dict[str, str]:
    """
    Parse "fill: #f00; stroke:red" into an ordered dict

    Declarations without a colon are dropped.
    """
    declarations: Dict[str, str] = {}
    if not text:
        return declarations
    for chunk in text.split(";"):
        name, sep, value = chunk.partition(":")
        if not sep:
            continue
        name = name.strip().lower()
        if name:
            declarations[name] = value.strip()
    return declarations


def format_style(declarations: Dict[str, str]) -> str:
    return ";".join(f"{name}:{value}" for name, value in declarations.items())


def get_style_property(element: Element, name: str) -> Optional[str]:
    return parse_style(element.get("style")).get(name)


def set_style_property(element: Element, name: str, value: Optional[str]) -> None:
    """Set one declaration; None removes it (and the attribute when empty)"""
    declarations = parse_style(element.get("style"))
    if value is None:
        declarations.pop(name, None)
    else:
        declarations[name] = value

    if declarations:
        element.set("style", format_style(declarations))
    elif "style" in element.attrib:
        del element.attrib["style"]
