"""Priority-ordered tactical policy: escape, chase, seek bonus, collect."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Iterable, Protocol

from gridchase.sim.contracts import (
    AdversaryView,
    CategoryConfig,
    Decision,
    DecisionState,
    Direction,
    TacticsConfig,
    TickInput,
)
from gridchase.sim.coords import Coordinate
from gridchase.sim.grid import UNREACHED, Grid
from gridchase.sim.movement import direction_between, is_passable, step, valid_moves

logger = logging.getLogger(__name__)

DEFAULT_DIRECTION = Direction.UP


@dataclass(frozen=True)
class Situation:
    """One tick's read-only view: the board, the actors and the entity's field."""

    grid: Grid
    position: Coordinate
    adversaries: tuple[AdversaryView, ...]
    field: Grid
    categories: CategoryConfig
    tuning: TacticsConfig

    @property
    def obstacle(self) -> int:
        return self.categories.obstacle

    def distance_to(self, target: Coordinate) -> int:
        return self.field.get_at(target)

    def dangerous(self) -> list[AdversaryView]:
        threshold = self.tuning.vulnerable_threshold
        return [a for a in self.adversaries if not a.is_vulnerable(threshold)]

    def vulnerable(self) -> list[AdversaryView]:
        threshold = self.tuning.vulnerable_threshold
        return [a for a in self.adversaries if a.is_vulnerable(threshold)]

    def in_spawn_zone(self, position: Coordinate) -> bool:
        center_x = self.grid.width // 2
        center_y = self.grid.height // 2
        radius = self.tuning.spawn_radius
        return abs(position.x - center_x) <= radius and abs(position.y - center_y) <= radius


def build_situation(
    grid: Grid,
    position: Coordinate,
    adversaries: Iterable[AdversaryView],
    *,
    categories: CategoryConfig,
    tuning: TacticsConfig,
) -> Situation:
    return Situation(
        grid=grid,
        position=position,
        adversaries=tuple(adversaries),
        field=grid.all_distances(position, categories.obstacle),
        categories=categories,
        tuning=tuning,
    )


def classify_state(situation: Situation) -> DecisionState:
    tuning = situation.tuning

    for adversary in situation.dangerous():
        if _within(situation.distance_to(adversary.position), tuning.danger_threshold):
            return DecisionState.ESCAPE

    for adversary in situation.vulnerable():
        if situation.in_spawn_zone(adversary.position):
            continue
        if _within(situation.distance_to(adversary.position), tuning.chase_threshold):
            return DecisionState.CHASE

    if situation.grid.count(situation.categories.bonus) > 0:
        horizon = tuning.danger_threshold + tuning.bonus_lookahead
        for adversary in situation.dangerous():
            if situation.in_spawn_zone(adversary.position):
                continue
            distance = situation.distance_to(adversary.position)
            if tuning.danger_threshold < distance <= horizon:
                return DecisionState.SEEK_BONUS

    return DecisionState.COLLECT


def escape(situation: Situation) -> Decision | None:
    """Step to the neighbor whose nearest dangerous adversary is farthest away."""
    dangerous = situation.dangerous()
    collectibles = situation.grid.find_all(situation.categories.collectible)
    best: tuple[tuple[float, float, float, int], Direction, Coordinate] | None = None
    seen: set[Coordinate] = set()

    for index, (direction, neighbor) in enumerate(
        valid_moves(situation.grid, situation.position, situation.obstacle)
    ):
        if neighbor in seen:
            continue
        seen.add(neighbor)
        field = situation.grid.all_distances(neighbor, situation.obstacle)
        distances = [
            d for d in (field.get_at(a.position) for a in dangerous) if d != UNREACHED
        ]
        safety = min(distances) if distances else math.inf
        spread = sum(distances) / len(distances) if distances else math.inf
        food = _nearest_distance(field, collectibles)
        key = (safety, spread, -food, -index)
        if best is None or key > best[0]:
            best = (key, direction, neighbor)

    if best is None:
        return None
    _, direction, neighbor = best
    return Decision(direction=direction, state=DecisionState.ESCAPE, target=neighbor)


def chase(situation: Situation) -> Decision | None:
    tuning = situation.tuning
    target: Coordinate | None = None
    best_distance = math.inf
    for adversary in situation.vulnerable():
        if situation.in_spawn_zone(adversary.position):
            continue
        distance = situation.distance_to(adversary.position)
        if _within(distance, tuning.chase_threshold) and distance < best_distance:
            best_distance = distance
            target = adversary.position
    if target is None:
        return None
    return _toward(situation, target, DecisionState.CHASE)


def seek_bonus(situation: Situation) -> Decision | None:
    target = _nearest_of(situation, situation.categories.bonus)
    if target is None:
        return None
    return _toward(situation, target, DecisionState.SEEK_BONUS)


def collect(situation: Situation) -> Decision:
    target = _nearest_of(situation, situation.categories.collectible)
    if target is not None:
        decision = _toward(situation, target, DecisionState.COLLECT)
        if decision is not None:
            return decision

    moves = valid_moves(situation.grid, situation.position, situation.obstacle)
    if moves:
        direction, neighbor = moves[0]
        return Decision(
            direction=direction,
            state=DecisionState.COLLECT,
            target=neighbor,
            fallback=True,
        )
    return Decision(direction=DEFAULT_DIRECTION, state=DecisionState.COLLECT, fallback=True)


HANDLERS: dict[DecisionState, Callable[[Situation], Decision | None]] = {
    DecisionState.ESCAPE: escape,
    DecisionState.CHASE: chase,
    DecisionState.SEEK_BONUS: seek_bonus,
    DecisionState.COLLECT: collect,
}


def dispatch(state: DecisionState, situation: Situation) -> Decision:
    decision = HANDLERS[state](situation)
    if decision is not None:
        return decision
    logger.debug("%s found no move, falling back to COLLECT", state.value)
    return collect(situation).model_copy(update={"fallback": True})


class Policy(Protocol):
    def decide_tick(self, tick: TickInput) -> Decision:
        """Return the move for this tick."""


class TacticalPolicy:
    """Choose one move per tick from a fresh read of the board."""

    def __init__(
        self,
        *,
        categories: CategoryConfig | None = None,
        tuning: TacticsConfig | None = None,
    ) -> None:
        self.categories = categories or CategoryConfig()
        self.tuning = tuning or TacticsConfig()

    def decide(
        self,
        *,
        grid: Grid,
        position: Coordinate,
        adversaries: Iterable[AdversaryView],
    ) -> Decision:
        situation = build_situation(
            grid,
            position,
            adversaries,
            categories=self.categories,
            tuning=self.tuning,
        )
        state = classify_state(situation)
        decision = self._ensure_legal(situation, dispatch(state, situation))
        logger.debug(
            "state=%s direction=%s target=%s",
            decision.state.value,
            decision.direction.value,
            decision.target,
        )
        return decision

    def decide_tick(self, tick: TickInput) -> Decision:
        grid = Grid.from_rows(tick.grid, cyclic=tick.cyclic)
        return self.decide(grid=grid, position=tick.position, adversaries=tick.adversaries)

    def _ensure_legal(self, situation: Situation, decision: Decision) -> Decision:
        landing = step(situation.grid, situation.position, decision.direction)
        if is_passable(situation.grid, landing, situation.obstacle):
            return decision
        moves = valid_moves(situation.grid, situation.position, situation.obstacle)
        if not moves:
            return decision
        direction, neighbor = moves[0]
        logger.info(
            "Replacing illegal %s move from %s with %s",
            decision.direction.value,
            situation.position,
            direction.value,
        )
        return decision.model_copy(
            update={"direction": direction, "target": neighbor, "fallback": True}
        )


def _within(distance: float, threshold: int) -> bool:
    return 0 < distance <= threshold


def _nearest_of(situation: Situation, category: int) -> Coordinate | None:
    best: Coordinate | None = None
    best_distance = math.inf
    for cell in situation.grid.find_all(category):
        distance = situation.distance_to(cell)
        if 0 < distance < best_distance:
            best_distance = distance
            best = cell
    return best


def _nearest_distance(field: Grid, cells: list[Coordinate]) -> float:
    distances = [d for d in (field.get_at(cell) for cell in cells) if d != UNREACHED]
    return min(distances) if distances else math.inf


def _toward(
    situation: Situation, target: Coordinate, state: DecisionState
) -> Decision | None:
    path = situation.grid.shortest_path(situation.position, target, situation.obstacle)
    if path is None or len(path) < 2:
        return None
    direction = direction_between(situation.grid, path[0], path[1])
    return Decision(direction=direction, state=state, target=target)
