"""Build world state from ASCII level layouts."""

from __future__ import annotations

from dataclasses import dataclass

from gridchase.sim.coords import Coordinate
from gridchase.sim.grid import Grid
from gridchase.sim.world_state import AdversaryState, WorldState
from gridchase.sim.world_tiles import (
    ADVERSARY_SYMBOL,
    EMPTY,
    LEVEL_CATEGORIES,
    PLAYER_SYMBOL,
    TILE_SYMBOLS,
)


@dataclass(frozen=True)
class LevelDef:
    name: str
    layout: str
    cyclic: bool = False


CLASSIC = """\
#####################
#o........#........o#
#.###.###.#.###.###.#
#...................#
#.###.#.#####.#.###.#
#.....#...#...#.....#
#####.###   ###.#####
#####.#  GGG  #.#####
#####.# ##### #.#####
..........P..........
#####.#.#####.#.#####
#o....#...#...#....o#
#.###.###.#.###.###.#
#...................#
#####################
"""

COURTYARD = """\
#########
#o.....o#
#.#.#.#.#
#...G...#
#.#.#.#.#
#o..P..o#
#########
"""

LEVELS: dict[str, LevelDef] = {
    "classic": LevelDef(name="classic", layout=CLASSIC, cyclic=True),
    "courtyard": LevelDef(name="courtyard", layout=COURTYARD),
}


def load_level(name: str, *, cyclic: bool | None = None) -> WorldState:
    level = LEVELS.get(name)
    if level is None:
        known = ", ".join(sorted(LEVELS))
        raise ValueError(f"Unknown level {name!r}; expected one of: {known}.")
    state = parse_level(level.layout, cyclic=level.cyclic if cyclic is None else cyclic)
    state.level_name = level.name
    return state


def parse_level(text: str, *, cyclic: bool = False) -> WorldState:
    """Parse an ASCII layout; the first text line is the top row (largest y)."""
    lines = [line for line in text.splitlines() if line]
    if not lines:
        raise ValueError("Level layout is empty.")
    width = len(lines[0])
    height = len(lines)

    grid = Grid(width, height, EMPTY, cyclic=cyclic)
    player: Coordinate | None = None
    adversaries: dict[str, AdversaryState] = {}

    for row, line in enumerate(lines):
        if len(line) != width:
            raise ValueError(
                f"Level line {row} has width {len(line)}, expected {width}."
            )
        y = height - 1 - row
        for x, symbol in enumerate(line):
            position = Coordinate(x, y)
            if symbol == PLAYER_SYMBOL:
                if player is not None:
                    raise ValueError(f"Level has more than one {PLAYER_SYMBOL!r} start.")
                player = position
                continue
            if symbol == ADVERSARY_SYMBOL:
                adversary_id = f"adversary_{len(adversaries)}"
                adversaries[adversary_id] = AdversaryState(
                    adversary_id=adversary_id, position=position, start=position
                )
                continue
            category = TILE_SYMBOLS.get(symbol)
            if category is None:
                raise ValueError(f"Unknown level symbol {symbol!r} at {position}.")
            grid.set_at(position, category)

    if player is None:
        raise ValueError(f"Level has no {PLAYER_SYMBOL!r} start.")
    return WorldState(
        grid=grid,
        position=player,
        adversaries=adversaries,
        categories=LEVEL_CATEGORIES,
        empty=EMPTY,
    )
