"""
Middleware for EventBus

Middleware = pipeline functions that process events before handlers.
Can modify events, block events, or log/validate events.
"""

from vectorpose.models.events import Event
from vectorpose.models.enums import LogCategory
from vectorpose.utils.logger import get_logger

log = get_logger().for_category(LogCategory.EVENT)


def log_middleware(event: Event) -> Event:
    """
    Log all events for debugging

    Usage:
        event_bus.add_middleware(log_middleware)
    """
    source_str = event.source.name if event.source else None
    data_str = ", ".join(f"{k}={v}" for k, v in event.to_data().items())

    log.debug(f"Event: {event.type.name} from {source_str} | {data_str}")
    return event
