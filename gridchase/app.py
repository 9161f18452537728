"""Application entry for running the simulation loop."""

from __future__ import annotations

import logging
import os

from rich.logging import RichHandler

from gridchase.render.live_view import run_live_view
from gridchase.sim.contracts import TacticsConfig, TickPayload
from gridchase.sim.tactics import TacticalPolicy
from gridchase.sim.tick_loop import build_payload, run_ticks
from gridchase.sim.world_loader import load_level
from gridchase.sim.world_state import SimConfig

DEFAULT_LEVEL = "classic"
DEFAULT_LOG_LEVEL = "WARNING"


def run_simulation(
    *,
    ticks: int | None = 500,
    level: str | None = None,
    seed: int | None = None,
    difficulty: int = 0,
    cyclic: bool | None = None,
    tuning: TacticsConfig | None = None,
) -> TickPayload:
    """Run a headless game and return the last payload."""
    state = load_level(_resolve_level(level), cyclic=cyclic)
    policy = TacticalPolicy(categories=state.categories, tuning=tuning)
    config = SimConfig(seed=_resolve_seed(seed), difficulty=difficulty)
    last = build_payload(state)
    for payload in run_ticks(state, ticks=ticks, policy=policy, config=config):
        last = payload
    return last


def run_simulation_with_viewer(
    *,
    ticks: int | None = 500,
    level: str | None = None,
    seed: int | None = None,
    difficulty: int = 0,
    cyclic: bool | None = None,
    tuning: TacticsConfig | None = None,
    tick_delay: float = 0.1,
) -> TickPayload:
    state = load_level(_resolve_level(level), cyclic=cyclic)
    policy = TacticalPolicy(categories=state.categories, tuning=tuning)
    config = SimConfig(seed=_resolve_seed(seed), difficulty=difficulty)
    initial = build_payload(state)
    payloads = run_ticks(state, ticks=ticks, policy=policy, config=config)
    threshold = policy.tuning.vulnerable_threshold
    final = run_live_view(payloads, tick_delay=tick_delay, vulnerable_threshold=threshold)
    return final or initial


def configure_logging(level: str | None = None) -> None:
    name = (level or os.getenv("GRIDCHASE_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.WARNING),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
    )


def _resolve_level(level: str | None) -> str:
    return level or os.getenv("GRIDCHASE_LEVEL") or DEFAULT_LEVEL


def _resolve_seed(seed: int | None) -> int | None:
    if seed is not None:
        return seed
    raw = os.getenv("GRIDCHASE_SEED")
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"GRIDCHASE_SEED must be an integer, got {raw!r}") from exc
