"""Core data contracts shared by the policy and the simulation driver."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    model_validator,
)

from gridchase.sim.coords import Coordinate
from gridchase.sim.grid import OUT_OF_BOUNDS


class Direction(str, Enum):
    UP = "UP"
    DOWN = "DOWN"
    LEFT = "LEFT"
    RIGHT = "RIGHT"

    @property
    def delta(self) -> tuple[int, int]:
        return _DIRECTION_DELTAS[self]


# UP grows y, matching the game server's board orientation.
_DIRECTION_DELTAS: dict[Direction, tuple[int, int]] = {
    Direction.UP: (0, 1),
    Direction.DOWN: (0, -1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}

SCAN_ORDER: tuple[Direction, ...] = (
    Direction.UP,
    Direction.LEFT,
    Direction.DOWN,
    Direction.RIGHT,
)


class DecisionState(str, Enum):
    ESCAPE = "ESCAPE"
    CHASE = "CHASE"
    SEEK_BONUS = "SEEK_BONUS"
    COLLECT = "COLLECT"


class GameStatus(str, Enum):
    RUNNING = "RUNNING"
    WON = "WON"
    LOST = "LOST"


class CategoryConfig(BaseModel):
    """Which cell categories carry meaning for the policy."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    obstacle: int = 1
    collectible: int = 2
    bonus: int = 3

    @model_validator(mode="after")
    def validate_categories(self) -> "CategoryConfig":
        values = [self.obstacle, self.collectible, self.bonus]
        if len(set(values)) != len(values):
            raise ValueError("obstacle, collectible and bonus must be distinct")
        if OUT_OF_BOUNDS in values:
            raise ValueError(f"{OUT_OF_BOUNDS} is reserved for out-of-bounds reads")
        return self


class TacticsConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    danger_threshold: int = Field(default=3, ge=0)
    chase_threshold: int = Field(default=10, ge=0)
    bonus_lookahead: int = Field(default=3, ge=0)
    spawn_radius: int = Field(default=3, ge=0)
    vulnerable_threshold: float = Field(default=0.0, ge=0.0)


class AdversaryView(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    position: Coordinate
    vulnerable_time: float = 0.0

    def is_vulnerable(self, threshold: float = 0.0) -> bool:
        return self.vulnerable_time > threshold


class TickInput(BaseModel):
    """Everything the policy sees for one decision."""

    model_config = ConfigDict(extra="forbid")

    grid: list[list[int]]
    cyclic: bool = False
    position: Coordinate
    adversaries: list[AdversaryView] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_grid(self) -> "TickInput":
        widths = {len(row) for row in self.grid}
        if len(widths) > 1:
            raise ValueError("grid rows must all have the same width")
        return self


class Decision(BaseModel):
    model_config = ConfigDict(extra="forbid")

    direction: Direction
    state: DecisionState
    target: Coordinate | None = None
    fallback: bool = False


class Event(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kind: str
    payload: dict[str, Any] = Field(default_factory=dict)


class TickPayload(BaseModel):
    model_config = ConfigDict(extra="forbid")

    tick: int
    status: GameStatus
    score: int
    position: Coordinate
    adversaries: list[AdversaryView] = Field(default_factory=list)
    grid: list[list[int]] = Field(default_factory=list)
    decision: Decision | None = None
    events: list[Event] | None = None


def coerce_direction(raw: Any) -> Direction | None:
    """Validate a raw direction value or return None."""
    if isinstance(raw, Direction):
        return raw
    try:
        return Direction(str(raw).upper())
    except ValueError:
        return None


def coerce_tick_input(raw: Any) -> TickInput | None:
    try:
        return TickInput.model_validate(raw)
    except ValidationError:
        return None
