"""
vectorpose - route-driven pose transitions for SVG characters
"""

from vectorpose.engine import (
    PoseEngine,
    AsyncioTickSource,
    ImmediateTickSource,
    StepOutcome,
    StepResult,
)
from vectorpose.managers import ConfigManager, load_config
from vectorpose.models import (
    ActionConfig,
    ActionKind,
    ConfigurationError,
    Expansion,
    MarkupError,
    PartMismatchError,
    PlaybackCancelled,
    PoseConfig,
    RouteBlock,
    Step,
    TraversalMode,
    UnknownActionError,
    UnknownStateError,
    VectorPoseError,
)
from vectorpose.services import EventBus

__version__ = "0.3.0"

__all__ = [
    "PoseEngine",
    "AsyncioTickSource",
    "ImmediateTickSource",
    "StepOutcome",
    "StepResult",
    "ConfigManager",
    "load_config",
    "ActionConfig",
    "ActionKind",
    "ConfigurationError",
    "Expansion",
    "MarkupError",
    "PartMismatchError",
    "PlaybackCancelled",
    "PoseConfig",
    "RouteBlock",
    "Step",
    "TraversalMode",
    "UnknownActionError",
    "UnknownStateError",
    "VectorPoseError",
    "EventBus",
    "__version__",
]
