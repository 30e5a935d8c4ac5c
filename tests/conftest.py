import asyncio
from typing import Callable, List

import pytest

from vectorpose.engine.pose_engine import PoseEngine
from vectorpose.models.enums import LogLevel
from vectorpose.utils.logger import get_logger


class ManualRun:
    """One tween driven by ManualTickSource"""

    def __init__(self, duration_ms: float, on_update: Callable[[float], None], on_complete: Callable[[], None]):
        self.duration_ms = duration_ms
        self.on_update = on_update
        self.on_complete = on_complete
        self.progress = 0.0
        self.cancelled = False
        self.finished = False

    @property
    def done(self) -> bool:
        return self.finished or self.cancelled

    def cancel(self) -> None:
        self.cancelled = True


class ManualTickSource:
    """
    Deterministic tick source: nothing advances until the test says so

    Example:
        ticks = ManualTickSource()
        task = asyncio.create_task(engine.play("walk"))
        await asyncio.sleep(0)
        ticks.advance(0.5)   # every active run at 50%
        ticks.finish()       # every active run completes
    """

    def __init__(self):
        self.runs: List[ManualRun] = []

    def start(self, duration_ms, on_update, on_complete) -> ManualRun:
        run = ManualRun(duration_ms, on_update, on_complete)
        self.runs.append(run)
        return run

    @property
    def active(self) -> List[ManualRun]:
        return [run for run in self.runs if not run.done]

    def advance(self, progress: float) -> None:
        for run in self.active:
            run.progress = progress
            run.on_update(progress)

    def finish(self) -> None:
        for run in self.active:
            run.progress = 1.0
            run.on_update(1.0)
            run.finished = True
            run.on_complete()

    async def drive(self, task: "asyncio.Task", max_rounds: int = 1000) -> None:
        """Finish every tween the task starts until it returns"""
        for _ in range(max_rounds):
            if task.done():
                return
            self.finish()
            await asyncio.sleep(0)
        raise AssertionError("task did not finish")

    @staticmethod
    async def settle(rounds: int = 5) -> None:
        """Let pending callbacks and resumed coroutines run"""
        for _ in range(rounds):
            await asyncio.sleep(0)


# ------------------------------------------------------------
# Documents
# ------------------------------------------------------------

POSE_SVG = """<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 200 200">
  <g id="state_center">
    <rect data-part="body" x="80" y="40" width="40" height="100" style="fill:#336699"/>
    <circle data-part="head" cx="100" cy="25" r="15" fill="#ffcc99"/>
    <rect data-part="arm" x="95" y="60" width="10" height="50" fill="#336699"/>
  </g>
  <g id="state_left">
    <rect data-part="body" x="60" y="40" width="40" height="100" style="fill:#3366cc"/>
    <circle data-part="head" cx="80" cy="25" r="15" fill="#ffcc99"/>
    <rect data-part="arm" x="75" y="60" width="10" height="50" fill="#336699" transform="translate(-10,0) rotate(-20)"/>
  </g>
  <g id="state_right">
    <rect data-part="body" x="100" y="40" width="40" height="100" style="fill:#6633cc"/>
    <circle data-part="head" cx="120" cy="25" r="15" fill="#ffcc99"/>
    <rect data-part="arm" x="115" y="60" width="10" height="50" fill="#336699" transform="translate(10,0) rotate(20)"/>
  </g>
</svg>
"""


def scenario_routes() -> dict:
    return {
        "left": {"*": ["left"], "right": ["center", "left"]},
        "right": {"*": ["right"], "left": ["center", "right"]},
        "center": {"*": ["center"]},
    }


@pytest.fixture
def pose_svg():
    return POSE_SVG


@pytest.fixture
def config_dict():
    return {
        "name": "walker",
        "initial_state": "center",
        "ms": 120,
        "routes": scenario_routes(),
        "actions": {
            "go_left": {"order": ["left"]},
            "go_right": {"order": ["right"]},
            "sway": {"type": "sequence", "order": ["left", "right", "center"]},
            "shuffle": {"type": "loop", "mode": "direct", "order": ["left", "right"], "count": 2},
            "pace": {"type": "loop", "order": ["left", "right"], "count": 3},
            "stay": {"order": ["center"]},
            "noop": {"order": []},
            "lost": {"order": ["nowhere"]},
        },
    }


@pytest.fixture
def ticks():
    return ManualTickSource()


@pytest.fixture
def engine(pose_svg, config_dict, ticks):
    return PoseEngine(svg=pose_svg, config=config_dict, tick_source=ticks)


@pytest.fixture
def recorder(engine):
    """Records every lifecycle notification as (event, payload)"""
    events = []
    for name in ("state_change", "action_start", "action_end", "error"):
        engine.on(name, lambda payload, name=name: events.append((name, payload)))
    return events


@pytest.fixture
def log_records():
    """Captures log records through the logger sink"""
    records = []
    logger = get_logger()
    previous_level = logger.min_level
    logger.min_level = LogLevel.DEBUG
    logger.set_sink(lambda ts, level, category, message: records.append((level, category, message)))
    yield records
    logger.set_sink(None)
    logger.min_level = previous_level
