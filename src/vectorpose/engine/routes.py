"""
Route and duration resolution

Pure lookups over the validated route table. A route table is static
declared data, so cyclic tables are legal and simply yield whatever path
was authored.
"""

from typing import List, Mapping, Optional, Sequence

from vectorpose.models.config import DEFAULT_MS, RouteBlock, positive_number


def resolve_path(target: str, source: str, routes: Mapping[str, RouteBlock]) -> List[str]:
    """
    Ordered waypoint path for reaching `target` from `source`

    Lookup order:
    1. No route block for target → [target]
    2. Source-specific path (always beats the wildcard)
    3. Wildcard path
    4. [target]

    Example:
        routes = {"right": RouteBlock.model_validate({"*": ["center", "right"]})}
        resolve_path("right", "left", routes)   # ["center", "right"]
        resolve_path("jump", "left", routes)    # ["jump"]
    """
    block = routes.get(target)
    if block is None:
        return [target]

    specific = block.path_for(source)
    if specific:
        return list(specific)

    if block.wildcard:
        return list(block.wildcard)

    return [target]


def normalize_path(path: Sequence[str], current_state: str) -> List[str]:
    """Drop a leading entry that restates the current state (no-op step)"""
    if path and path[0] == current_state:
        return list(path[1:])
    return list(path)


def resolve_ms(
    action_ms: Optional[float],
    route_ms: Optional[float],
    global_ms: Optional[float],
) -> float:
    """
    Step duration by precedence: action > route block > global > 120

    Non-positive or non-numeric candidates count as absent, never as a
    zero-duration instruction.
    """
    for candidate in (action_ms, route_ms, global_ms):
        ms = positive_number(candidate)
        if ms is not None:
            return ms
    return float(DEFAULT_MS)


def route_ms_for(state: str, routes: Mapping[str, RouteBlock]) -> Optional[float]:
    """Duration override declared on the route block keyed by `state`, if any"""
    block = routes.get(state)
    return block.ms if block is not None else None
