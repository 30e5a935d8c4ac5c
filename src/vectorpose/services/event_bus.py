"""
Event Bus - Central event routing system

Implements pub-sub pattern:
- Publishers: publish(event)
- Subscribers: subscribe(event_type, handler, priority, filter_fn)
- Middleware: add_middleware(middleware_fn)

publish() is synchronous so lifecycle notifications (e.g. from stop()) are
delivered before the caller regains control. Coroutine handlers are
scheduled on the running loop instead of awaited.
"""

import asyncio
import inspect
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Set

from vectorpose.models.events import Event, EventType
from vectorpose.models.enums import LogCategory
from vectorpose.utils.logger import get_logger

log = get_logger().for_category(LogCategory.EVENT)


@dataclass
class EventHandler:
    """Event handler registration"""
    handler: Callable[[Event], Any]
    priority: int
    filter_fn: Optional[Callable[[Event], bool]]


class EventBus:
    """
    Central event bus for pub-sub event handling

    Features:
    - Priority-based handler execution (high priority first)
    - Per-handler filtering (fine-grained control)
    - Middleware pipeline (logging, blocking)
    - Async/sync handler support (auto-detected)
    - Fault tolerance (one handler crash doesn't stop others)

    Example:
        bus = EventBus()

        bus.subscribe(
            EventType.STATE_CHANGED,
            handler_fn,
            priority=10,
            filter_fn=lambda e: e.state != "idle"
        )

        bus.publish(StateChangedEvent("left"))
    """

    def __init__(self, history_limit: int = 100):
        # Handlers organized by event type
        self._handlers: Dict[EventType, List[EventHandler]] = {}

        # Middleware pipeline (applied in registration order)
        self._middleware: List[Callable[[Event], Optional[Event]]] = []

        # Event history (circular buffer for debugging)
        self._event_history: List[Event] = []
        self._history_limit = history_limit

        # Keeps scheduled coroutine handlers alive until they finish
        self._pending: Set[asyncio.Task] = set()

    def subscribe(
        self,
        event_type: EventType,
        handler: Callable[[Event], Any],
        priority: int = 0,
        filter_fn: Optional[Callable[[Event], bool]] = None
    ) -> None:
        """
        Subscribe to event type

        Args:
            event_type: Which events to listen for
            handler: Function to call (can be async or sync)
            priority: Execution priority (higher = called first, default: 0)
            filter_fn: Optional filter (return True = handle, False = skip)
        """
        handlers = self._handlers.setdefault(event_type, [])
        handlers.append(EventHandler(handler, priority, filter_fn))

        # Stable sort keeps registration order among equal priorities
        handlers.sort(key=lambda h: h.priority, reverse=True)

        log.debug(
            "Event handler subscribed",
            event_type=event_type.name,
            handler=getattr(handler, "__name__", repr(handler)),
            priority=priority
        )

    def unsubscribe(self, event_type: EventType, handler: Callable[[Event], Any]) -> bool:
        """
        Remove every registration of `handler` for `event_type`

        Returns:
            True if at least one registration was removed
        """
        handlers = self._handlers.get(event_type, [])
        remaining = [h for h in handlers if h.handler != handler]
        self._handlers[event_type] = remaining
        return len(remaining) != len(handlers)

    def add_middleware(self, middleware: Callable[[Event], Optional[Event]]) -> None:
        """
        Add middleware to event processing pipeline

        Middleware can modify events (return modified event), block events
        (return None) or just log/validate them. Runs in registration order.
        """
        self._middleware.append(middleware)
        log.debug("Middleware registered", middleware=getattr(middleware, "__name__", repr(middleware)))

    def publish(self, event: Event) -> None:
        """
        Publish event to all subscribers

        Flow:
        1. Apply middleware (can modify or block event)
        2. Save to event history
        3. Execute handlers by priority (high → low), honoring filters
        4. Catch and log handler exceptions (fault tolerance)
        """
        for middleware in self._middleware:
            processed_event = middleware(event)
            if processed_event is None:
                return
            event = processed_event

        self._event_history.append(event)
        if len(self._event_history) > self._history_limit:
            self._event_history.pop(0)

        handlers = list(self._handlers.get(event.type, []))
        if not handlers:
            return

        for handler_entry in handlers:
            if handler_entry.filter_fn and not handler_entry.filter_fn(event):
                continue

            handler_name = getattr(handler_entry.handler, "__name__", repr(handler_entry.handler))
            try:
                if inspect.iscoroutinefunction(handler_entry.handler):
                    self._schedule(handler_entry.handler(event), handler_name, event)
                else:
                    handler_entry.handler(event)
            except Exception as e:
                log.error(
                    f"Event handler failed: {handler_name} for {event.type.name}",
                    error=str(e),
                    error_type=type(e).__name__
                )

    def _schedule(self, coro, handler_name: str, event: Event) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            coro.close()
            log.warn(f"No running loop, async handler {handler_name} skipped", event_type=event.type.name)
            return

        task = loop.create_task(coro)
        self._pending.add(task)

        def on_done(t: asyncio.Task) -> None:
            self._pending.discard(t)
            if not t.cancelled() and t.exception() is not None:
                log.error(
                    f"Event handler failed: {handler_name} for {event.type.name}",
                    error=str(t.exception())
                )

        task.add_done_callback(on_done)

    def get_event_history(self, limit: int = 10) -> List[Event]:
        """Recent events, newest last"""
        return self._event_history[-limit:]

    def clear_history(self) -> None:
        self._event_history.clear()

    def clear(self) -> None:
        """Drop every handler and the history (middleware stays)"""
        self._handlers.clear()
        self._event_history.clear()
