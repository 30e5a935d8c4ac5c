"""
Step models - concrete transitions produced by the step expander
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Step:
    """One atomic transition: animate every part to `state` over `ms`"""
    state: str
    ms: float


@dataclass(frozen=True)
class Expansion:
    """Ordered steps for an instruction list plus where they leave the pointer"""
    steps: Tuple[Step, ...]
    final_state: str

    def __len__(self) -> int:
        return len(self.steps)

    @property
    def states(self) -> Tuple[str, ...]:
        return tuple(step.state for step in self.steps)
