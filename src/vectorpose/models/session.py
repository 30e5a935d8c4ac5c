"""
Playback session - bookkeeping for one in-progress play() call
"""

from dataclasses import dataclass, field
from typing import Optional, Protocol

from vectorpose.models.enums import PlaybackPhase


class Cancellable(Protocol):
    def cancel(self) -> None: ...


@dataclass(eq=False)
class PlaybackSession:
    """
    Mutable session state owned by the engine

    At most one session is active per engine. Cancelling flags the session
    and synchronously halts whatever tween it is currently awaiting.
    """
    action_name: str
    phase: PlaybackPhase = PlaybackPhase.STARTING
    step_index: int = -1
    steps_completed: int = 0
    cancelled: bool = False
    active_tween: Optional[Cancellable] = field(default=None, repr=False)

    def cancel(self) -> None:
        if self.cancelled:
            return
        self.cancelled = True
        self.phase = PlaybackPhase.CANCELLED
        if self.active_tween is not None:
            self.active_tween.cancel()
            self.active_tween = None
