"""
Interpolation Engine

Animates every live part from its current attribute values towards a
precomputed target snapshot over one Step's duration.

Per part, up to two sub-animations run on the injected tick source:
- numeric: all changed numeric attributes in one batched ticker
- color/transform: fill/stroke colors and the decomposed transform in a
  second ticker

A part is done when all of its sub-animations are done; the Step is done
when every part is done. Cancelling halts every ticker in place (no snap
back, no snap forward) and fails the completion future with
PlaybackCancelled.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from vectorpose.engine.tick_source import TickHandle, TickSource
from vectorpose.markup.part import PartHandle
from vectorpose.models.color import Color
from vectorpose.models.enums import LogCategory
from vectorpose.models.errors import PlaybackCancelled
from vectorpose.models.snapshot import PartSnapshot
from vectorpose.models.transform import Transform
from vectorpose.utils.logger import get_logger

log = get_logger().for_category(LogCategory.TWEEN)


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation; exact `b` at t >= 1"""
    if t >= 1.0:
        return b
    return a + (b - a) * t


def lerp_color(a: Optional[str], b: Optional[str], t: float) -> Optional[str]:
    """
    Interpolate two color strings channel by channel

    Returns:
        "#rrggbb", or None when either endpoint is unparseable
    """
    start = Color.parse(a)
    end = Color.parse(b)
    if start is None or end is None:
        return None
    return start.lerp(end, t).to_hex()


@dataclass
class _ColorChannel:
    prop: str
    raw_from: str
    raw_to: str
    start: Optional[Color]
    end: Optional[Color]

    @property
    def parseable(self) -> bool:
        return self.start is not None and self.end is not None

    def value_at(self, t: float) -> Optional[str]:
        """Value to write at progress t; None means leave as is"""
        if t >= 1.0:
            return self.raw_to
        if self.parseable:
            return self.start.lerp(self.end, t).to_hex()
        return None


class _PartTween:
    """Sub-animations for one live part"""

    def __init__(self, part: PartHandle, target: PartSnapshot):
        self.part = part
        current = part.read_snapshot()

        self.numeric: Dict[str, Tuple[float, float]] = {}
        for attr, end in target.numeric.items():
            start = current.numeric.get(attr, end)
            if start != end:
                self.numeric[attr] = (start, end)

        self.colors: List[_ColorChannel] = []
        for prop, end_raw in target.colors.items():
            start_raw = current.colors.get(prop)
            if not start_raw:
                part.set_color(prop, end_raw)
                continue
            if start_raw == end_raw:
                continue
            channel = _ColorChannel(prop, start_raw, end_raw, Color.parse(start_raw), Color.parse(end_raw))
            if not channel.parseable:
                log.debug(
                    "Color not interpolatable, jumping at end of step",
                    part=part.name,
                    prop=prop,
                    color_from=start_raw,
                    color_to=end_raw,
                )
            self.colors.append(channel)

        self.transform: Optional[Tuple[Transform, Transform]] = None
        if target.transform or current.transform:
            start_t = current.parsed_transform
            end_t = target.parsed_transform
            if start_t != end_t:
                self.transform = (start_t, end_t)

    @property
    def has_numeric(self) -> bool:
        return bool(self.numeric)

    @property
    def has_color_or_transform(self) -> bool:
        return bool(self.colors) or self.transform is not None

    def apply_numeric(self, t: float) -> None:
        for attr, (start, end) in self.numeric.items():
            self.part.set_number(attr, lerp(start, end, t))

    def apply_color_and_transform(self, t: float) -> None:
        for channel in self.colors:
            value = channel.value_at(t)
            if value is not None:
                self.part.set_color(channel.prop, value)
        if self.transform is not None:
            start_t, end_t = self.transform
            self.part.set_transform(end_t if t >= 1.0 else start_t.lerp(end_t, t))


class StepTween:
    """
    One Step's worth of animation across the live pose

    Example:
        tween = StepTween(live_parts, snapshots["left"], 120, AsyncioTickSource())
        await tween.start()   # raises PlaybackCancelled if tween.cancel() is called
    """

    def __init__(
        self,
        live_parts: Mapping[str, PartHandle],
        target_snapshots: Mapping[str, PartSnapshot],
        ms: float,
        tick_source: TickSource,
        on_settled: Optional[Callable[[], None]] = None,
    ):
        self.live_parts = live_parts
        self.target_snapshots = target_snapshots
        self.ms = ms
        self.tick_source = tick_source
        # Called synchronously the moment the future resolves successfully
        self.on_settled = on_settled

        self._handles: List[TickHandle] = []
        self._pending_parts = 0
        self._future: Optional[asyncio.Future] = None

    @property
    def done(self) -> bool:
        return self._future is not None and self._future.done()

    def start(self) -> asyncio.Future:
        """
        Begin animating; returns the completion future

        Zero-part and zero-duration steps resolve before start() returns.
        """
        if self._future is not None:
            return self._future

        self._future = asyncio.get_running_loop().create_future()
        self._pending_parts = len(self.live_parts)

        if self._pending_parts == 0:
            self._settle()
            return self._future

        for part_name, part in self.live_parts.items():
            if self._future.done():
                break
            target = self.target_snapshots.get(part_name)
            if target is None:
                log.debug("No target snapshot for part, leaving it untouched", part=part_name)
                self._part_done()
                continue
            self._start_part(_PartTween(part, target))

        return self._future

    def cancel(self) -> None:
        """Halt every ticker where it is and fail the completion future"""
        self._halt()
        if self._future is not None and not self._future.done():
            self._future.set_exception(PlaybackCancelled())

    # ------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------

    def _start_part(self, tween: _PartTween) -> None:
        runs: List[Callable[[float], None]] = []
        if tween.has_numeric:
            runs.append(tween.apply_numeric)
        if tween.has_color_or_transform:
            runs.append(tween.apply_color_and_transform)

        if not runs:
            self._part_done()
            return

        remaining = [len(runs)]

        def on_complete() -> None:
            remaining[0] -= 1
            if remaining[0] == 0:
                self._part_done()

        for apply in runs:
            if self._future.done():
                return
            self._handles.append(
                self.tick_source.start(self.ms, self._guard(apply), self._guard_complete(on_complete))
            )

    def _part_done(self) -> None:
        self._pending_parts -= 1
        if self._pending_parts == 0 and not self._future.done():
            self._settle()

    def _settle(self) -> None:
        self._future.set_result(None)
        if self.on_settled is not None:
            self.on_settled()

    def _guard(self, apply: Callable[[float], None]) -> Callable[[float], None]:
        def on_update(t: float) -> None:
            if self._future.done():
                return
            try:
                apply(t)
            except Exception as e:
                self._fail(e)
        return on_update

    def _guard_complete(self, on_complete: Callable[[], None]) -> Callable[[], None]:
        def complete() -> None:
            if not self._future.done():
                on_complete()
        return complete

    def _fail(self, error: Exception) -> None:
        log.error("Step tween failed", error=str(error), error_type=type(error).__name__)
        self._halt()
        if not self._future.done():
            self._future.set_exception(error)

    def _halt(self) -> None:
        handles, self._handles = self._handles, []
        for handle in handles:
            handle.cancel()
