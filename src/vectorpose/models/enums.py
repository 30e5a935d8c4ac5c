"""
Enums for the pose playback state machine
"""

from enum import Enum, auto


class ActionKind(Enum):
    """
    How an action's instruction list is executed

    SEQUENCE: Expand once and play through
    LOOP: Re-expand and play up to `count` times
    """
    SEQUENCE = auto()
    LOOP = auto()


class TraversalMode(Enum):
    """
    Expansion strategy for loop actions

    NORMAL: Visit every waypoint of the resolved route
    DIRECT: Jump straight to the last waypoint of the resolved route
    """
    NORMAL = auto()
    DIRECT = auto()


class PlaybackPhase(Enum):
    """Lifecycle of a single playback session"""
    STARTING = auto()
    STEP_RUNNING = auto()
    COMPLETED = auto()
    CANCELLED = auto()
    FAILED = auto()


class LogLevel(Enum):
    """Log severity levels"""
    DEBUG = auto()
    INFO = auto()
    WARN = auto()
    ERROR = auto()


class LogCategory(Enum):
    """Log categories for grouping related events"""
    CONFIG = auto()      # Configuration loading, validation
    MARKUP = auto()      # SVG discovery, live pose setup
    ROUTE = auto()       # Route resolution, step expansion
    PLAYBACK = auto()    # Action start/stop, sessions
    TWEEN = auto()       # Attribute interpolation
    EVENT = auto()       # Event bus events and handling
    SYSTEM = auto()      # Startup, shutdown, errors

    GENERAL = auto()    # Default general category
