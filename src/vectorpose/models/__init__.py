"""
Models package - Data models for pose playback
"""

from .enums import ActionKind, TraversalMode, PlaybackPhase, LogLevel, LogCategory
from .color import Color
from .transform import Transform
from .snapshot import PartSnapshot
from .step import Step, Expansion
from .session import PlaybackSession
from .config import RouteBlock, ActionConfig, PoseConfig
from .errors import (
    VectorPoseError,
    ConfigurationError,
    MarkupError,
    PartMismatchError,
    UnknownStateError,
    UnknownActionError,
    PlaybackCancelled,
)

__all__ = [
    'ActionKind',
    'TraversalMode',
    'PlaybackPhase',
    'LogLevel',
    'LogCategory',
    'Color',
    'Transform',
    'PartSnapshot',
    'Step',
    'Expansion',
    'PlaybackSession',
    'RouteBlock',
    'ActionConfig',
    'PoseConfig',
    'VectorPoseError',
    'ConfigurationError',
    'MarkupError',
    'PartMismatchError',
    'UnknownStateError',
    'UnknownActionError',
    'PlaybackCancelled',
]
