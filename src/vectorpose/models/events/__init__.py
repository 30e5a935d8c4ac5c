"""
Event system for pose playback

Lifecycle notifications published by the pose engine.
"""

from vectorpose.models.events.types import EventType
from vectorpose.models.events.base import Event
from vectorpose.models.events.sources import EventSource
from vectorpose.models.events.playback_events import (
    StateChangedEvent,
    ActionStartedEvent,
    ActionEndedEvent,
    PlaybackErrorEvent,
)

__all__ = [
    "EventType",
    "Event",
    "EventSource",
    "StateChangedEvent",
    "ActionStartedEvent",
    "ActionEndedEvent",
    "PlaybackErrorEvent",
]
