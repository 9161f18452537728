"""Tick loop orchestration for the pursuit simulator."""

from __future__ import annotations

import logging
import random
from typing import Iterable

from gridchase.sim.contracts import (
    Decision,
    Direction,
    Event,
    GameStatus,
    TickPayload,
)
from gridchase.sim.movement import is_passable, step
from gridchase.sim.tactics import Policy, TacticalPolicy
from gridchase.sim.world_state import AdversaryState, SimConfig, WorldState

logger = logging.getLogger(__name__)


def run_ticks(
    state: WorldState,
    ticks: int | None,
    *,
    policy: Policy | None = None,
    config: SimConfig | None = None,
    rng: random.Random | None = None,
) -> Iterable[TickPayload]:
    """Advance the game one decision at a time until it ends or ``ticks`` runs out."""
    sim_config = config or SimConfig()
    agent = policy or TacticalPolicy(categories=state.categories)
    random_source = rng or random.Random(sim_config.seed)
    step_count = 0
    while state.status == GameStatus.RUNNING and (ticks is None or step_count < ticks):
        decision = agent.decide_tick(state.to_tick_input())
        events: list[Event] = []

        apply_move(state, decision.direction, sim_config, events)
        resolve_collisions(state, sim_config, events)
        if state.status == GameStatus.RUNNING and state.remaining_collectibles() == 0:
            state.status = GameStatus.WON

        state.tick += 1
        state.vulnerable_time = max(0.0, state.vulnerable_time - 1.0)
        if state.status == GameStatus.RUNNING:
            move_adversaries(state, sim_config, random_source)
            resolve_collisions(state, sim_config, events)

        if state.status != GameStatus.RUNNING:
            logger.info(
                "Game over at tick %d: %s with score %d",
                state.tick,
                state.status.value,
                state.score,
            )
            events.append(
                Event(
                    kind="GAME_OVER",
                    payload={"status": state.status.value, "score": state.score},
                )
            )

        step_count += 1
        yield build_payload(state, decision=decision, events=events)


def apply_move(
    state: WorldState, direction: Direction, config: SimConfig, events: list[Event]
) -> None:
    """Move the entity unless the step is blocked, then collect what it lands on."""
    target = step(state.grid, state.position, direction)
    categories = state.categories
    if not is_passable(state.grid, target, categories.obstacle):
        return
    state.position = target

    cell = state.grid.get_at(target)
    if cell == categories.collectible:
        state.grid.set_at(target, state.empty)
        state.score += config.dot_score
    elif cell == categories.bonus:
        state.grid.set_at(target, state.empty)
        state.score += config.pellet_score
        state.vulnerable_time = config.vulnerable_duration
        logger.info("Power pellet eaten at %s", target)
        events.append(Event(kind="PELLET", payload={"position": str(target)}))


def resolve_collisions(state: WorldState, config: SimConfig, events: list[Event]) -> None:
    for adversary in state.adversaries_at(state.position):
        if state.vulnerable_time > 0:
            adversary.reset()
            state.score += config.adversary_score
            logger.info("Captured %s at %s", adversary.adversary_id, state.position)
            events.append(
                Event(
                    kind="CAPTURE",
                    payload={
                        "adversary_id": adversary.adversary_id,
                        "position": str(state.position),
                    },
                )
            )
        else:
            state.status = GameStatus.LOST
            logger.info("Caught by %s at %s", adversary.adversary_id, state.position)
            events.append(
                Event(
                    kind="CAUGHT",
                    payload={
                        "adversary_id": adversary.adversary_id,
                        "position": str(state.position),
                    },
                )
            )
            return


def move_adversaries(state: WorldState, config: SimConfig, rng: random.Random) -> None:
    if state.tick < config.adversary_start_delay:
        return
    for adversary_id in sorted(state.adversaries):
        adversary = state.adversaries[adversary_id]
        if rng.random() < config.pursuit_probability and _pursue(state, adversary):
            continue
        if rng.random() < config.adversary_move_probability:
            direction = rng.choice(list(Direction))
            target = step(state.grid, adversary.position, direction)
            if is_passable(state.grid, target, state.categories.obstacle):
                adversary.position = target


def build_payload(
    state: WorldState,
    *,
    decision: Decision | None = None,
    events: list[Event] | None = None,
) -> TickPayload:
    return TickPayload(
        tick=state.tick,
        status=state.status,
        score=state.score,
        position=state.position,
        adversaries=state.adversary_views(),
        grid=state.grid.rows(),
        decision=decision,
        events=events or None,
    )


def _pursue(state: WorldState, adversary: AdversaryState) -> bool:
    path = state.grid.shortest_path(
        adversary.position, state.position, state.categories.obstacle
    )
    if path is None or len(path) < 2:
        return False
    adversary.position = path[1]
    return True
