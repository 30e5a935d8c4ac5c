"""
Engine package - Route expansion, interpolation and playback
"""

from .routes import resolve_path, normalize_path, resolve_ms, route_ms_for
from .expander import expand_sequence, expand_direct, expand_action
from .tick_source import TickSource, TickHandle, AsyncioTickSource, ImmediateTickSource, default_tick_source
from .interpolation import StepTween, lerp, lerp_color
from .player import StepOutcome, StepResult, StepPlayer
from .pose_engine import PoseEngine

__all__ = [
    'resolve_path',
    'normalize_path',
    'resolve_ms',
    'route_ms_for',
    'expand_sequence',
    'expand_direct',
    'expand_action',
    'TickSource',
    'TickHandle',
    'AsyncioTickSource',
    'ImmediateTickSource',
    'default_tick_source',
    'StepTween',
    'lerp',
    'lerp_color',
    'StepOutcome',
    'StepResult',
    'StepPlayer',
    'PoseEngine',
]
