"""
Error taxonomy

Construction-time errors (ConfigurationError, MarkupError, PartMismatchError)
abort engine setup. Playback-time errors (UnknownStateError, UnknownActionError)
abort only the current session. PlaybackCancelled is control flow, never
reported as an error.
"""

from typing import Optional, Sequence


class VectorPoseError(Exception):
    """Base class for every error raised by vectorpose"""


class ConfigurationError(VectorPoseError):
    """Malformed or missing configuration fields"""


class MarkupError(ConfigurationError):
    """SVG document does not describe any usable states/parts"""


class PartMismatchError(VectorPoseError):
    """Two states declare different part name sets"""

    def __init__(
        self,
        reference_state: str,
        reference_parts: Sequence[str],
        state: str,
        parts: Sequence[str],
    ):
        self.reference_state = reference_state
        self.reference_parts = list(reference_parts)
        self.state = state
        self.parts = list(parts)
        super().__init__(
            f'Part mismatch between states. State "{reference_state}" has parts '
            f'[{",".join(self.reference_parts)}] but state "{state}" has parts '
            f'[{",".join(self.parts)}]'
        )


class UnknownStateError(VectorPoseError):
    """
    A state is named that the document does not define

    route_key is the instruction that resolved to it, or None when playback
    was handed a step with no recorded snapshot.
    """

    def __init__(self, route_key: Optional[str], state: str):
        self.route_key = route_key
        self.state = state
        if route_key is None:
            message = f'No snapshot recorded for state "{state}"'
        else:
            message = f'Route "{route_key}" resolves to unknown state "{state}"'
        super().__init__(message)


class UnknownActionError(VectorPoseError):
    """play() was called with an action name that is not configured"""

    def __init__(self, action_name: str):
        self.action_name = action_name
        super().__init__(f'Unknown action "{action_name}"')


class PlaybackCancelled(VectorPoseError):
    """Raised into a step's completion future when its session is cancelled"""
