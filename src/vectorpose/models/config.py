"""
Configuration schema - Pydantic models for the declarative pose config

The raw document is loose key-value data (JSON or YAML). These models
validate it once at load time into strict, frozen shapes; nothing
downstream re-validates.

Raw shape:
    {
        "name": "walker",
        "initial_state": "center",
        "ms": 120,
        "routes": {
            "right": {"ms": 200, "*": ["center", "right"], "left": ["center", "right"]}
        },
        "actions": {
            "shuffle": {"type": "loop", "order": ["left", "right"], "count": 3, "mode": "direct"}
        }
    }
"""

import math
from typing import Any, Dict, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from vectorpose.models.enums import ActionKind, TraversalMode

DEFAULT_MS = 120
DEFAULT_LOOP_COUNT = 99999
WILDCARD = "*"


def positive_number(value: Any) -> Optional[float]:
    """Return value as float if it is a finite number > 0, else None"""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return float(value)


class RouteBlock(BaseModel):
    """
    Waypoint paths for reaching one route key

    paths maps a source state name (or "*" for the wildcard) to the ordered
    states to visit. An authored empty list is dropped, so every stored path
    is non-empty.
    """

    model_config = ConfigDict(frozen=True)

    ms: Optional[float] = Field(None, description="Duration override for steps landing on this key")
    paths: Dict[str, Tuple[str, ...]] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def split_raw_block(cls, data: Any) -> Any:
        if isinstance(data, RouteBlock):
            return data
        if not isinstance(data, dict):
            raise ValueError("route block must be an object")
        if isinstance(data.get("paths"), dict) and set(data) <= {"ms", "paths"}:
            return data

        block: Dict[str, Any] = {"paths": {}}
        for key, value in data.items():
            if key == "ms":
                if isinstance(value, bool) or not isinstance(value, (int, float)):
                    raise ValueError('"ms" must be a number')
                block["ms"] = value
                continue
            if not isinstance(value, (list, tuple)) or not all(isinstance(s, str) for s in value):
                raise ValueError(f'"{key}" must be an array of strings')
            if value:
                block["paths"][key] = tuple(value)
        return block

    def path_for(self, source: str) -> Optional[Tuple[str, ...]]:
        """Source-specific path, never the wildcard"""
        if source == WILDCARD:
            return None
        return self.paths.get(source)

    @property
    def wildcard(self) -> Optional[Tuple[str, ...]]:
        return self.paths.get(WILDCARD)


class ActionConfig(BaseModel):
    """
    Named, user-triggerable instruction list

    Normalization mirrors what authors expect from the raw document:
    unknown `type` → sequence, non-positive `ms` → absent, non-positive
    `count` → effectively unbounded, `mode` other than "direct" → normal.
    A missing or empty `order` makes the action an explicit no-op.
    """

    model_config = ConfigDict(frozen=True)

    kind: ActionKind = ActionKind.SEQUENCE
    order: Tuple[str, ...] = ()
    ms: Optional[float] = None
    count: Optional[int] = None
    mode: TraversalMode = TraversalMode.NORMAL

    @model_validator(mode="before")
    @classmethod
    def normalize_raw_action(cls, data: Any) -> Any:
        if isinstance(data, ActionConfig):
            return data
        if not isinstance(data, dict):
            raise ValueError("action must be an object")
        if isinstance(data.get("kind"), ActionKind):
            return data

        kind = ActionKind.LOOP if data.get("type") == "loop" else ActionKind.SEQUENCE

        order = data.get("order")
        if not isinstance(order, (list, tuple)) or len(order) == 0:
            return {"kind": kind, "order": ()}
        if not all(isinstance(entry, str) for entry in order):
            raise ValueError('"order" must be an array of strings')

        action: Dict[str, Any] = {
            "kind": kind,
            "order": tuple(order),
            "ms": positive_number(data.get("ms")),
        }
        if kind is ActionKind.LOOP:
            count = data.get("count")
            if isinstance(count, bool) or not isinstance(count, (int, float)) or count <= 0:
                count = DEFAULT_LOOP_COUNT
            action["count"] = int(count)
            action["mode"] = TraversalMode.DIRECT if data.get("mode") == "direct" else TraversalMode.NORMAL
        return action

    @property
    def is_noop(self) -> bool:
        return len(self.order) == 0

    @property
    def iterations(self) -> int:
        """Number of times the order is played (1 for sequences)"""
        if self.kind is ActionKind.SEQUENCE:
            return 1
        return self.count or DEFAULT_LOOP_COUNT


class PoseConfig(BaseModel):
    """Validated top-level configuration"""

    model_config = ConfigDict(frozen=True)

    name: str = "untitled"
    initial_state: str = Field(min_length=1)
    ms: float = DEFAULT_MS
    routes: Dict[str, RouteBlock]
    actions: Dict[str, ActionConfig]

    @field_validator("name", mode="before")
    @classmethod
    def default_name(cls, v: Any) -> Any:
        return v or "untitled"

    @field_validator("initial_state", mode="before")
    @classmethod
    def require_string_state(cls, v: Any) -> Any:
        if not isinstance(v, str) or not v:
            raise ValueError('"initial_state" must be a non-empty string')
        return v

    @field_validator("ms", mode="before")
    @classmethod
    def normalize_global_ms(cls, v: Any) -> float:
        return positive_number(v) or float(DEFAULT_MS)

    @field_validator("routes", "actions", mode="before")
    @classmethod
    def require_mapping(cls, v: Any, info: ValidationInfo) -> Any:
        if not isinstance(v, Mapping):
            raise ValueError(f'"{info.field_name}" must be an object')
        return v

    def action(self, action_name: str) -> Optional[ActionConfig]:
        return self.actions.get(action_name)
