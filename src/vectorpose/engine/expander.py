"""
Step Expander

Turns an ordered instruction list into concrete Steps. Each instruction is
either a route key or a state name; routes are resolved against the running
pointer, not the original start.

Two strategies:
- expand_sequence: visit every waypoint of each resolved path
- expand_direct: jump to the last waypoint only, skipping instructions that
  land where the pointer already is
"""

from typing import AbstractSet, List, Mapping, Optional, Sequence

from vectorpose.engine.routes import normalize_path, resolve_ms, resolve_path, route_ms_for
from vectorpose.models.config import ActionConfig, RouteBlock
from vectorpose.models.enums import ActionKind, LogCategory, TraversalMode
from vectorpose.models.errors import UnknownStateError
from vectorpose.models.step import Expansion, Step
from vectorpose.utils.logger import get_logger

log = get_logger().for_category(LogCategory.ROUTE)


def _check_state(route_key: str, state: str, valid_states: Optional[AbstractSet[str]]) -> None:
    if valid_states is not None and state not in valid_states:
        raise UnknownStateError(route_key, state)


def _step_for(
    state: str,
    routes: Mapping[str, RouteBlock],
    action_ms: Optional[float],
    global_ms: Optional[float],
) -> Step:
    # The visited state's own route block sets the duration, not the instruction's key
    return Step(state=state, ms=resolve_ms(action_ms, route_ms_for(state, routes), global_ms))


def expand_sequence(
    order: Sequence[str],
    start_state: str,
    routes: Mapping[str, RouteBlock],
    action_ms: Optional[float],
    global_ms: Optional[float],
    valid_states: Optional[AbstractSet[str]] = None,
) -> Expansion:
    """
    Waypoint-preserving expansion

    Args:
        order: Instruction entries (route keys or state names)
        start_state: Pointer value before the first instruction
        routes: Validated route table
        action_ms: Action-level duration override (highest precedence)
        global_ms: Configured default duration
        valid_states: Known state names; None skips validation

    Returns:
        Expansion with one Step per visited state and the final pointer

    Raises:
        UnknownStateError: A resolved path names a state not in valid_states
    """
    steps: List[Step] = []
    current = start_state

    for route_key in order:
        path = normalize_path(resolve_path(route_key, current, routes), current)
        if not path:
            continue

        for state in path:
            _check_state(route_key, state, valid_states)

        for state in path:
            steps.append(_step_for(state, routes, action_ms, global_ms))
            current = state

    return Expansion(steps=tuple(steps), final_state=current)


def expand_direct(
    order: Sequence[str],
    start_state: str,
    routes: Mapping[str, RouteBlock],
    action_ms: Optional[float],
    global_ms: Optional[float],
    valid_states: Optional[AbstractSet[str]] = None,
) -> Expansion:
    """
    Waypoint-collapsing expansion

    Same arguments as expand_sequence. Only the last state of each resolved
    path becomes a Step; an instruction whose destination equals the pointer
    emits nothing.
    """
    steps: List[Step] = []
    current = start_state

    for route_key in order:
        destination = resolve_path(route_key, current, routes)[-1]
        if destination == current:
            continue

        _check_state(route_key, destination, valid_states)
        steps.append(_step_for(destination, routes, action_ms, global_ms))
        current = destination

    return Expansion(steps=tuple(steps), final_state=current)


def expand_action(
    action: ActionConfig,
    start_state: str,
    routes: Mapping[str, RouteBlock],
    global_ms: Optional[float],
    valid_states: Optional[AbstractSet[str]] = None,
) -> Expansion:
    """One iteration of `action`: direct expansion for direct-mode loops, sequence otherwise"""
    if action.kind is ActionKind.LOOP and action.mode is TraversalMode.DIRECT:
        strategy = expand_direct
    else:
        strategy = expand_sequence

    expansion = strategy(action.order, start_state, routes, action.ms, global_ms, valid_states)
    log.debug(
        "Action expanded",
        strategy=strategy.__name__,
        from_state=start_state,
        path=" > ".join(expansion.states) or "(none)",
        final_state=expansion.final_state,
    )
    return expansion
