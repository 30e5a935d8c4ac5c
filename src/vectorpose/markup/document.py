"""
SVG pose document discovery

An authored document holds one `<g id="state_{name}">` group per pose. Each
group contains the same set of elements tagged `data-part="{part}"`. The
live pose is a deep copy of the initial state's group, appended to the root
as `<g id="live_character">`, while the original state groups are hidden.
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Dict, Mapping, Optional, Union
import xml.etree.ElementTree as ET

from vectorpose.markup.part import PART_ATTRIBUTE, PartHandle
from vectorpose.markup.style import set_style_property
from vectorpose.models.enums import LogCategory
from vectorpose.models.errors import MarkupError, PartMismatchError
from vectorpose.models.snapshot import PartSnapshot
from vectorpose.utils.logger import get_logger

log = get_logger().for_category(LogCategory.MARKUP)

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"
STATE_PREFIX = "state_"
LIVE_GROUP_ID = "live_character"

ET.register_namespace("", SVG_NS)
ET.register_namespace("xlink", XLINK_NS)

SvgSource = Union[str, Path, ET.Element]


def local_name(tag: str) -> str:
    """Tag without its "{namespace}" prefix"""
    return tag.rsplit("}", 1)[-1] if isinstance(tag, str) else ""


def parse_svg(source: SvgSource) -> ET.Element:
    """
    Resolve the <svg> root element

    Args:
        source: Element, markup string, or path to an .svg file

    Raises:
        MarkupError: Unreadable/invalid XML or no <svg> element
    """
    if isinstance(source, ET.Element):
        root = source
    else:
        try:
            if isinstance(source, str) and source.lstrip().startswith("<"):
                root = ET.fromstring(source.strip())
            else:
                root = ET.parse(Path(source)).getroot()
        except ET.ParseError as e:
            raise MarkupError(f"Invalid SVG markup: {e}") from e
        except OSError as e:
            raise MarkupError(f"Cannot read SVG file: {e}") from e

    if local_name(root.tag) == "svg":
        return root

    for element in root.iter():
        if local_name(element.tag) == "svg":
            return element

    raise MarkupError("Provided markup does not contain an <svg> element")


def discover_states(root: ET.Element) -> Dict[str, ET.Element]:
    """
    Map state name → state group

    Raises:
        MarkupError: No `<g id="state_*">` groups found
    """
    states: Dict[str, ET.Element] = {}
    for element in root.iter():
        if local_name(element.tag) != "g":
            continue
        group_id = element.get("id", "")
        if not group_id.startswith(STATE_PREFIX):
            continue
        name = group_id[len(STATE_PREFIX):]
        if name:
            states[name] = element

    if not states:
        raise MarkupError('No state groups found in SVG. Expected groups with id="state_{name}"')

    log.info("Discovered states", count=len(states), states=", ".join(states))
    return states


def _collect_parts(group: ET.Element) -> Dict[str, ET.Element]:
    parts: Dict[str, ET.Element] = {}
    for element in group.iter():
        if element is group:
            continue
        part_name = element.get(PART_ATTRIBUTE)
        if part_name:
            parts[part_name] = element
    return parts


def discover_parts(states: Mapping[str, ET.Element]) -> Dict[str, Dict[str, ET.Element]]:
    """
    Map state name → part name → element

    Raises:
        MarkupError: A state group has no tagged parts
        PartMismatchError: Two states have different part name sets
    """
    state_parts: Dict[str, Dict[str, ET.Element]] = {}
    reference_state: Optional[str] = None
    reference_names: Optional[list] = None

    for state_name, group in states.items():
        parts = _collect_parts(group)
        if not parts:
            raise MarkupError(f'State "{state_name}" has no parts (elements with {PART_ATTRIBUTE} attribute)')

        names = sorted(parts)
        if reference_names is None:
            reference_state, reference_names = state_name, names
        elif names != reference_names:
            raise PartMismatchError(reference_state, reference_names, state_name, names)

        state_parts[state_name] = parts

    return state_parts


def build_state_snapshots(
    state_parts: Mapping[str, Mapping[str, ET.Element]],
) -> Dict[str, Dict[str, PartSnapshot]]:
    """Read every part of every state once, before any mutation"""
    return {
        state_name: {part_name: PartHandle(el).read_snapshot() for part_name, el in parts.items()}
        for state_name, parts in state_parts.items()
    }


def _parent_map(root: ET.Element) -> Dict[ET.Element, ET.Element]:
    return {child: parent for parent in root.iter() for child in parent}


class LivePose:
    """
    The single mutable, animated copy of the character

    Attributes:
        root: Document <svg> element
        group: The live `<g id="live_character">` clone
        parts: Part name → handle into the clone
        current_state: Last state the live pose fully settled on
    """

    def __init__(
        self,
        root: ET.Element,
        group: ET.Element,
        state_groups: Mapping[str, ET.Element],
        current_state: str,
    ):
        self.root = root
        self.group = group
        self.state_groups = state_groups
        self.current_state = current_state
        self.parts: Dict[str, PartHandle] = {
            name: PartHandle(el) for name, el in _collect_parts(group).items()
        }

    def teardown(self) -> None:
        """Show the original state groups again and remove the clone"""
        for group in self.state_groups.values():
            set_style_property(group, "display", None)
        parent = _parent_map(self.root).get(self.group)
        if parent is not None:
            parent.remove(self.group)


def setup_live_pose(
    root: ET.Element,
    states: Mapping[str, ET.Element],
    initial_state: str,
) -> LivePose:
    """
    Clone the initial state into a live group and hide the authored states

    Raises:
        MarkupError: initial_state is not one of the discovered states
    """
    initial_group = states.get(initial_state)
    if initial_group is None:
        available = ", ".join(states)
        raise MarkupError(
            f'initial_state "{initial_state}" not found in SVG. Available states: {available}'
        )

    parents = _parent_map(root)
    for element in list(root.iter()):
        if local_name(element.tag) == "g" and element.get("id") == LIVE_GROUP_ID:
            parents[element].remove(element)

    live_group = copy.deepcopy(initial_group)
    live_group.set("id", LIVE_GROUP_ID)
    live_group.attrib.pop("style", None)
    live_group.tail = None
    root.append(live_group)

    for group in states.values():
        set_style_property(group, "display", "none")

    live = LivePose(root, live_group, states, initial_state)
    log.info("Live pose ready", initial_state=initial_state, parts=len(live.parts))
    return live


def to_string(root: ET.Element) -> str:
    return ET.tostring(root, encoding="unicode")
