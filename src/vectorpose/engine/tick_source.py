"""
Tick Sources

A tick source drives one duration-bounded tween: it calls `on_update` with
monotonic progress in [0, 1] and `on_complete` exactly once, and its handle
can be cancelled synchronously, after which no callback fires.

AsyncioTickSource is the real-time implementation (one asyncio task per
tween, paced by a target FPS). ImmediateTickSource completes synchronously
and is used for headless rendering of final poses.
"""

from __future__ import annotations

import asyncio
import time
from typing import Callable, Optional, Protocol

from vectorpose.models.enums import LogCategory
from vectorpose.utils.logger import get_logger

log = get_logger().for_category(LogCategory.TWEEN)

ProgressCallback = Callable[[float], None]
CompleteCallback = Callable[[], None]


class TickHandle(Protocol):
    @property
    def done(self) -> bool: ...

    def cancel(self) -> None: ...


class TickSource(Protocol):
    def start(
        self,
        duration_ms: float,
        on_update: ProgressCallback,
        on_complete: CompleteCallback,
    ) -> TickHandle: ...


class _FinishedHandle:
    """Handle for a run that completed before start() returned"""

    @property
    def done(self) -> bool:
        return True

    def cancel(self) -> None:
        pass


class _AsyncioTicker:
    def __init__(
        self,
        duration_ms: float,
        on_update: ProgressCallback,
        on_complete: CompleteCallback,
        frame_interval: float,
    ):
        self._duration = duration_ms / 1000
        self._on_update = on_update
        self._on_complete = on_complete
        self._frame_interval = frame_interval
        self._cancelled = False
        self._finished = False
        self._task: asyncio.Task = asyncio.get_running_loop().create_task(self._run())
        self._task.add_done_callback(self._report_failure)

    @property
    def done(self) -> bool:
        return self._finished or self._cancelled

    def cancel(self) -> None:
        if self.done:
            return
        self._cancelled = True
        self._task.cancel()

    async def _run(self) -> None:
        started = time.perf_counter()
        progress = 0.0
        while progress < 1.0:
            await asyncio.sleep(self._frame_interval)
            if self._cancelled:
                return
            elapsed = time.perf_counter() - started
            progress = min(1.0, elapsed / self._duration)
            self._on_update(progress)

        self._finished = True
        self._on_complete()

    def _report_failure(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            log.error("Tick callback failed", error=str(error), error_type=type(error).__name__)


class AsyncioTickSource:
    """
    Real-time tick source on the running asyncio loop

    Example:
        ticks = AsyncioTickSource(fps=60)
        handle = ticks.start(250, on_update=lambda t: ..., on_complete=lambda: ...)
        handle.cancel()  # no further callbacks
    """

    def __init__(self, fps: int = 60):
        """
        Args:
            fps: Target update frequency (1-240, default 60)
        """
        self.fps = max(1, min(fps, 240))

    @property
    def frame_interval(self) -> float:
        return 1.0 / self.fps

    def start(
        self,
        duration_ms: float,
        on_update: ProgressCallback,
        on_complete: CompleteCallback,
    ) -> TickHandle:
        if duration_ms <= 0:
            on_update(1.0)
            on_complete()
            return _FinishedHandle()
        return _AsyncioTicker(duration_ms, on_update, on_complete, self.frame_interval)


class ImmediateTickSource:
    """Completes every run synchronously at full progress"""

    def start(
        self,
        duration_ms: float,
        on_update: ProgressCallback,
        on_complete: CompleteCallback,
    ) -> TickHandle:
        on_update(1.0)
        on_complete()
        return _FinishedHandle()


def default_tick_source(fps: Optional[int] = None) -> TickSource:
    return AsyncioTickSource(fps=fps or 60)
