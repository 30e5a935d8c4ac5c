from enum import Enum, auto


class EventSource(Enum):
    """Event source identifiers"""
    POSE_ENGINE = auto()   # Playback scheduler
