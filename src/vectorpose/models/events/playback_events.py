from dataclasses import dataclass

from vectorpose.models.events.base import Event
from vectorpose.models.events.types import EventType
from vectorpose.models.events.sources import EventSource


@dataclass(init=False)
class StateChangedEvent(Event):
    """Fired once a step has fully settled on its destination state"""
    state: str

    def __init__(self, state: str):
        super().__init__(type=EventType.STATE_CHANGED, source=EventSource.POSE_ENGINE)
        self.state = state


@dataclass(init=False)
class ActionStartedEvent(Event):
    action: str

    def __init__(self, action: str):
        super().__init__(type=EventType.ACTION_STARTED, source=EventSource.POSE_ENGINE)
        self.action = action


@dataclass(init=False)
class ActionEndedEvent(Event):
    """Fired on natural completion, stop(), and supersession by a new play()"""
    action: str

    def __init__(self, action: str):
        super().__init__(type=EventType.ACTION_ENDED, source=EventSource.POSE_ENGINE)
        self.action = action


@dataclass(init=False)
class PlaybackErrorEvent(Event):
    error: Exception

    def __init__(self, error: Exception):
        super().__init__(type=EventType.PLAYBACK_ERROR, source=EventSource.POSE_ENGINE)
        self.error = error
