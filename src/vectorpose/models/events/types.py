from enum import Enum, auto


class EventType(Enum):
    # Playback lifecycle
    STATE_CHANGED = auto()
    ACTION_STARTED = auto()
    ACTION_ENDED = auto()
    PLAYBACK_ERROR = auto()
