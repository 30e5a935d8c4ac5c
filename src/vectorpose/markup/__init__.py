"""
Markup layer - SVG pose discovery and the live, animated pose
"""

from .part import PartHandle, NUMERIC_ATTRS, COLOR_PROPS
from .document import (
    LivePose,
    parse_svg,
    discover_states,
    discover_parts,
    build_state_snapshots,
    setup_live_pose,
    to_string,
)

__all__ = [
    "PartHandle",
    "NUMERIC_ATTRS",
    "COLOR_PROPS",
    "LivePose",
    "parse_svg",
    "discover_states",
    "discover_parts",
    "build_state_snapshots",
    "setup_live_pose",
    "to_string",
]
