"""Distance engine, tactical policy and simulation driver."""

from gridchase.sim.contracts import (
    AdversaryView,
    CategoryConfig,
    Decision,
    DecisionState,
    Direction,
    Event,
    GameStatus,
    TacticsConfig,
    TickInput,
    TickPayload,
    coerce_direction,
    coerce_tick_input,
)
from gridchase.sim.coords import Coordinate
from gridchase.sim.grid import OUT_OF_BOUNDS, UNREACHED, Grid
from gridchase.sim.movement import direction_between, step, valid_moves, valid_neighbors
from gridchase.sim.tactics import TacticalPolicy, classify_state
from gridchase.sim.tick_loop import run_ticks
from gridchase.sim.world_loader import load_level, parse_level
from gridchase.sim.world_state import SimConfig, WorldState, build_default_world

__all__ = [
    "AdversaryView",
    "CategoryConfig",
    "Coordinate",
    "Decision",
    "DecisionState",
    "Direction",
    "Event",
    "GameStatus",
    "Grid",
    "OUT_OF_BOUNDS",
    "SimConfig",
    "TacticalPolicy",
    "TacticsConfig",
    "TickInput",
    "TickPayload",
    "UNREACHED",
    "WorldState",
    "build_default_world",
    "classify_state",
    "coerce_direction",
    "coerce_tick_input",
    "direction_between",
    "load_level",
    "parse_level",
    "run_ticks",
    "step",
    "valid_moves",
    "valid_neighbors",
]
