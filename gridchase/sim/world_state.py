"""Authoritative game state owned by the simulation driver."""

from __future__ import annotations

from dataclasses import dataclass

from gridchase.sim.contracts import AdversaryView, CategoryConfig, GameStatus, TickInput
from gridchase.sim.coords import Coordinate
from gridchase.sim.grid import Grid
from gridchase.sim.world_tiles import EMPTY, LEVEL_CATEGORIES


@dataclass(frozen=True)
class SimConfig:
    seed: int | None = None
    difficulty: int = 0
    adversary_start_delay: int = 50
    adversary_move_probability: float = 0.3
    vulnerable_duration: float = 100.0
    dot_score: int = 10
    pellet_score: int = 50
    adversary_score: int = 200

    def __post_init__(self) -> None:
        if not 0 <= self.difficulty <= 4:
            raise ValueError(f"difficulty must be between 0 and 4, got {self.difficulty}")

    @property
    def pursuit_probability(self) -> float:
        return 0.05 + self.difficulty * 0.05


@dataclass
class AdversaryState:
    adversary_id: str
    position: Coordinate
    start: Coordinate

    def reset(self) -> None:
        self.position = self.start


@dataclass
class WorldState:
    grid: Grid
    position: Coordinate
    adversaries: dict[str, AdversaryState]
    categories: CategoryConfig = LEVEL_CATEGORIES
    empty: int = EMPTY
    score: int = 0
    tick: int = 0
    vulnerable_time: float = 0.0
    status: GameStatus = GameStatus.RUNNING
    level_name: str | None = None

    def adversary_views(self) -> list[AdversaryView]:
        return [
            AdversaryView(position=adversary.position, vulnerable_time=self.vulnerable_time)
            for adversary in self.adversaries.values()
        ]

    def adversaries_at(self, position: Coordinate) -> list[AdversaryState]:
        return [a for a in self.adversaries.values() if a.position == position]

    def remaining_collectibles(self) -> int:
        return self.grid.count(self.categories.collectible)

    def to_tick_input(self) -> TickInput:
        return TickInput(
            grid=self.grid.rows(),
            cyclic=self.grid.cyclic,
            position=self.position,
            adversaries=self.adversary_views(),
        )


def build_default_world(*, cyclic: bool | None = None) -> WorldState:
    from gridchase.sim.world_loader import load_level

    return load_level("classic", cyclic=cyclic)
