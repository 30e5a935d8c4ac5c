"""
Pose Engine

Public entry point: discovers the poses in an SVG document, builds the live
pose, and plays configured actions with last-request-wins semantics.

Example:
    engine = PoseEngine(svg="walker.svg", config="walker.yaml")
    engine.on("state_change", lambda state: print("now", state))

    await engine.play("shuffle")
    engine.stop()
"""

from __future__ import annotations

import inspect
from typing import Any, Callable, Dict, FrozenSet, List, Mapping, Optional, Tuple

from vectorpose.engine.player import StepOutcome, StepPlayer
from vectorpose.engine.tick_source import TickSource, default_tick_source
from vectorpose.managers.config_manager import ConfigManager, ConfigSource
from vectorpose.markup.document import (
    SvgSource,
    build_state_snapshots,
    discover_parts,
    discover_states,
    parse_svg,
    setup_live_pose,
    to_string,
)
from vectorpose.markup.part import PartHandle
from vectorpose.models.config import ActionConfig, PoseConfig
from vectorpose.models.enums import LogCategory, PlaybackPhase
from vectorpose.models.errors import ConfigurationError, UnknownActionError
from vectorpose.models.events import (
    ActionEndedEvent,
    ActionStartedEvent,
    Event,
    EventType,
    PlaybackErrorEvent,
    StateChangedEvent,
)
from vectorpose.models.session import PlaybackSession
from vectorpose.services.event_bus import EventBus
from vectorpose.utils.logger import get_logger

log = get_logger().for_category(LogCategory.PLAYBACK)

# Listener names accepted by on()/off()
LISTENER_EVENTS: Dict[str, EventType] = {
    "state_change": EventType.STATE_CHANGED,
    "action_start": EventType.ACTION_STARTED,
    "action_end": EventType.ACTION_ENDED,
    "error": EventType.PLAYBACK_ERROR,
}


class PoseEngine:
    """
    Route-driven pose transitions for one SVG character

    Construction validates everything up front; any failure raises and no
    engine exists. Afterwards the engine owns exactly one mutable pair: the
    live pose's current state and the active playback session.

    Args:
        svg: SVG markup string, path to an .svg file, or a parsed Element
        config: Config dict, YAML/JSON text or path, or a PoseConfig
        tick_source: Timing capability for tweens (default: AsyncioTickSource)
        event_bus: Bus for lifecycle notifications (default: private EventBus)
    """

    def __init__(
        self,
        svg: SvgSource,
        config: ConfigSource,
        tick_source: Optional[TickSource] = None,
        event_bus: Optional[EventBus] = None,
    ):
        self._config: PoseConfig = ConfigManager(config).load()

        self._root = parse_svg(svg)
        self._state_groups = discover_states(self._root)
        state_parts = discover_parts(self._state_groups)
        self._valid_states: FrozenSet[str] = frozenset(self._state_groups)

        initial_state = self._config.initial_state
        if initial_state not in self._valid_states:
            available = ", ".join(self._state_groups)
            raise ConfigurationError(
                f'initial_state "{initial_state}" not found in SVG. Available states: {available}'
            )

        # Snapshots must be read before the live pose hides or mutates anything
        self._state_snapshots = build_state_snapshots(state_parts)
        self._live = setup_live_pose(self._root, self._state_groups, initial_state)

        self.tick_source: TickSource = tick_source or default_tick_source()
        self.event_bus = event_bus or EventBus()
        self._player = StepPlayer(
            live_parts=self._live.parts,
            state_snapshots=self._state_snapshots,
            routes=self._config.routes,
            global_ms=self._config.ms,
            valid_states=self._valid_states,
            tick_source=self.tick_source,
        )

        self._session: Optional[PlaybackSession] = None
        # (event type, user callback, bus wrapper)
        self._listeners: List[Tuple[EventType, Callable, Callable[[Event], Any]]] = []

        log.info(
            "PoseEngine initialized",
            name=self._config.name,
            states=len(self._valid_states),
            parts=len(self._live.parts),
            initial_state=initial_state,
        )

    # ------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------

    @property
    def config(self) -> PoseConfig:
        return self._config

    @property
    def states(self) -> Tuple[str, ...]:
        """Discovered state names in document order"""
        return tuple(self._state_groups)

    @property
    def parts(self) -> Mapping[str, PartHandle]:
        return dict(self._live.parts)

    @property
    def actions(self) -> Dict[str, ActionConfig]:
        return dict(self._config.actions)

    @property
    def current_state(self) -> str:
        return self._live.current_state

    @property
    def is_playing(self) -> bool:
        return self._session is not None and not self._session.cancelled

    @property
    def current_action(self) -> Optional[str]:
        return self._session.action_name if self._session else None

    @property
    def session(self) -> Optional[PlaybackSession]:
        return self._session

    @property
    def svg_root(self):
        return self._root

    def to_svg(self) -> str:
        """Serialize the document, live pose included"""
        return to_string(self._root)

    # ------------------------------------------------------------
    # Playback
    # ------------------------------------------------------------

    async def play(self, action_name: str) -> None:
        """
        Play a named action, superseding whatever is playing

        Returns normally on completion and on cancellation (stop() or a newer
        play()). Raises UnknownActionError / UnknownStateError after
        publishing them on the error channel.
        """
        action = self._config.actions.get(action_name)
        if action is None:
            error = UnknownActionError(action_name)
            log.error("Unknown action", action=action_name)
            self._publish(PlaybackErrorEvent(error))
            raise error

        if action.is_noop:
            log.warn(f'Action "{action_name}" has empty order, nothing to play')
            return

        self.stop()

        session = PlaybackSession(action_name=action_name)
        self._session = session
        start_state = self._live.current_state
        log.info("Action started", action=action_name, kind=action.kind.name, from_state=start_state)
        self._publish(ActionStartedEvent(action_name))

        def on_state_change(state: str) -> None:
            if self._session is not session:
                return
            self._live.current_state = state
            self._publish(StateChangedEvent(state))

        result = await self._player.run_action(action, start_state, session, on_state_change)

        if result.outcome is StepOutcome.CANCELLED or session.cancelled:
            log.debug("Action cancelled", action=action_name, steps_completed=session.steps_completed)
            return

        if self._session is session:
            self._session = None

        if result.outcome is StepOutcome.COMPLETED:
            session.phase = PlaybackPhase.COMPLETED
            log.info("Action finished", action=action_name, final_state=self._live.current_state)
            self._publish(ActionEndedEvent(action_name))
            return

        session.phase = PlaybackPhase.FAILED
        log.error("Action failed", action=action_name, error=str(result.error))
        self._publish(PlaybackErrorEvent(result.error))
        raise result.error

    def stop(self) -> None:
        """
        Cancel the active session, if any

        Halts the in-flight tween where it is and publishes exactly one
        action-ended notification. No-op when nothing is playing.
        """
        session = self._session
        if session is None:
            return

        self._session = None
        session.cancel()
        log.info("Action stopped", action=session.action_name, state=self._live.current_state)
        self._publish(ActionEndedEvent(session.action_name))

    def destroy(self) -> None:
        """Stop playback, restore the authored state groups, drop listeners"""
        self.stop()
        self._live.teardown()
        for event_type, _, wrapper in self._listeners:
            self.event_bus.unsubscribe(event_type, wrapper)
        self._listeners.clear()

    # ------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------

    def on(self, event: str, callback: Callable[[Any], Any]) -> 'PoseEngine':
        """
        Register a listener

        Args:
            event: "state_change" | "action_start" | "action_end" | "error"
            callback: Receives the state name, action name, or exception

        Returns:
            self, for chaining
        """
        event_type = self._event_type(event)

        if inspect.iscoroutinefunction(callback):
            async def wrapper(e: Event) -> None:
                await callback(e.payload())
        else:
            def wrapper(e: Event) -> None:
                callback(e.payload())

        wrapper.__name__ = getattr(callback, "__name__", "listener")
        self._listeners.append((event_type, callback, wrapper))
        self.event_bus.subscribe(event_type, wrapper)
        return self

    def off(self, event: str, callback: Callable[[Any], Any]) -> 'PoseEngine':
        """Remove every registration of callback for event"""
        event_type = self._event_type(event)
        remaining = []
        for entry in self._listeners:
            registered_type, registered_callback, wrapper = entry
            if registered_type is event_type and registered_callback == callback:
                self.event_bus.unsubscribe(event_type, wrapper)
            else:
                remaining.append(entry)
        self._listeners = remaining
        return self

    @staticmethod
    def _event_type(event: str) -> EventType:
        try:
            return LISTENER_EVENTS[event]
        except KeyError:
            raise ValueError(
                f"Unknown event {event!r}. Expected one of: {', '.join(LISTENER_EVENTS)}"
            ) from None

    def _publish(self, event: Event) -> None:
        self.event_bus.publish(event)
