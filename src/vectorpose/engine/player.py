"""
Step Player

Runs expanded Steps against the live pose, one StepTween at a time, and
drives sequence/loop actions. Cancellation never escapes as an exception:
every run returns a StepResult tagged COMPLETED, CANCELLED or FAILED so the
engine can tell benign interruption from real failures.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum, auto
from typing import AbstractSet, Callable, Dict, Mapping, Optional, Sequence

from vectorpose.engine.expander import expand_action
from vectorpose.engine.interpolation import StepTween
from vectorpose.engine.tick_source import TickSource
from vectorpose.markup.part import PartHandle
from vectorpose.models.config import ActionConfig, RouteBlock
from vectorpose.models.enums import ActionKind, LogCategory, PlaybackPhase
from vectorpose.models.errors import PlaybackCancelled, UnknownStateError, VectorPoseError
from vectorpose.models.session import PlaybackSession
from vectorpose.models.snapshot import PartSnapshot
from vectorpose.models.step import Expansion, Step
from vectorpose.utils.logger import get_logger

log = get_logger().for_category(LogCategory.PLAYBACK)

StateCallback = Callable[[str], None]


class StepOutcome(Enum):
    COMPLETED = auto()
    CANCELLED = auto()
    FAILED = auto()


@dataclass(frozen=True)
class StepResult:
    """
    Outcome of running steps or a whole action

    final_state is the state of the last fully completed step (or the
    starting state when none completed).
    """
    outcome: StepOutcome
    final_state: str
    error: Optional[Exception] = None

    @property
    def completed(self) -> bool:
        return self.outcome is StepOutcome.COMPLETED


class StepPlayer:
    """
    Plays Steps against the live parts

    Args:
        live_parts: Part name → live element handle
        state_snapshots: State name → part name → target snapshot
        routes: Validated route table
        global_ms: Configured default duration
        valid_states: Known state names
        tick_source: Timing capability handed to every StepTween
    """

    def __init__(
        self,
        live_parts: Mapping[str, PartHandle],
        state_snapshots: Mapping[str, Mapping[str, PartSnapshot]],
        routes: Mapping[str, RouteBlock],
        global_ms: float,
        valid_states: AbstractSet[str],
        tick_source: TickSource,
    ):
        self.live_parts = live_parts
        self.state_snapshots = state_snapshots
        self.routes = routes
        self.global_ms = global_ms
        self.valid_states = valid_states
        self.tick_source = tick_source

    # ------------------------------------------------------------
    # Expansion
    # ------------------------------------------------------------

    def expand(self, action: ActionConfig, start_state: str) -> Expansion:
        """One iteration's worth of steps for `action` starting at `start_state`"""
        return expand_action(action, start_state, self.routes, self.global_ms, self.valid_states)

    def prepare(self, action: ActionConfig, start_state: str) -> Dict[str, Expansion]:
        """
        Expand every iteration `action` can reach from `start_state`

        Expansion is pure, so an iteration starting from an already seen
        state repeats an earlier one; at most one expansion per distinct
        start state is computed.

        Returns:
            Start state → Expansion

        Raises:
            UnknownStateError: Any reachable iteration references an unknown state
        """
        expansions: Dict[str, Expansion] = {}
        current = start_state
        for _ in range(action.iterations):
            if current in expansions:
                break
            expansion = self.expand(action, current)
            expansions[current] = expansion
            current = expansion.final_state
        return expansions

    # ------------------------------------------------------------
    # Playback
    # ------------------------------------------------------------

    async def run_steps(
        self,
        steps: Sequence[Step],
        start_state: str,
        session: PlaybackSession,
        on_state_change: Optional[StateCallback] = None,
    ) -> StepResult:
        """
        Play steps in order

        A step counts as reached the moment its tween resolves: the state is
        recorded and on_state_change fires synchronously from the tween's
        completion, so a stop() landing before this coroutine resumes still
        sees it. on_state_change never fires mid-tween.
        """
        current = start_state

        def settled(step: Step) -> None:
            nonlocal current
            current = step.state
            session.steps_completed += 1
            log.debug("Step settled", state=step.state, ms=step.ms, action=session.action_name)
            if on_state_change:
                on_state_change(step.state)

        for step in steps:
            if session.cancelled:
                return StepResult(StepOutcome.CANCELLED, current)

            targets = self.state_snapshots.get(step.state)
            if targets is None:
                return StepResult(StepOutcome.FAILED, current, UnknownStateError(None, step.state))

            session.step_index += 1
            session.phase = PlaybackPhase.STEP_RUNNING
            tween = StepTween(
                self.live_parts,
                targets,
                step.ms,
                self.tick_source,
                on_settled=lambda step=step: settled(step),
            )
            session.active_tween = tween

            try:
                await tween.start()
            except PlaybackCancelled:
                return StepResult(StepOutcome.CANCELLED, current)
            except VectorPoseError as e:
                return StepResult(StepOutcome.FAILED, current, e)
            finally:
                if session.active_tween is tween:
                    session.active_tween = None

            if session.cancelled:
                return StepResult(StepOutcome.CANCELLED, current)

        return StepResult(StepOutcome.COMPLETED, current)

    async def run_action(
        self,
        action: ActionConfig,
        start_state: str,
        session: PlaybackSession,
        on_state_change: Optional[StateCallback] = None,
    ) -> StepResult:
        """
        Run a sequence once, or a loop up to its iteration count

        Each loop iteration is expanded from wherever the previous one
        landed. All reachable iterations are expanded before the first step,
        so an expansion failure returns FAILED with the pose untouched.
        """
        current = start_state

        try:
            expansions = self.prepare(action, start_state)
        except VectorPoseError as e:
            return StepResult(StepOutcome.FAILED, current, e)

        for iteration in range(action.iterations):
            if session.cancelled:
                return StepResult(StepOutcome.CANCELLED, current)

            expansion = expansions[current]

            if action.kind is ActionKind.LOOP:
                log.debug(
                    "Loop iteration expanded",
                    action=session.action_name,
                    iteration=iteration + 1,
                    steps=len(expansion),
                )

            if not expansion.steps:
                # Nothing to animate this iteration; still yield so stop() can land
                await asyncio.sleep(0)
                continue

            result = await self.run_steps(expansion.steps, current, session, on_state_change)
            if not result.completed:
                return result
            current = result.final_state

        if session.cancelled:
            return StepResult(StepOutcome.CANCELLED, current)
        return StepResult(StepOutcome.COMPLETED, current)
