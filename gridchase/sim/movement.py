"""Direction and neighbor helpers for single-cell moves."""

from __future__ import annotations

from gridchase.sim.contracts import SCAN_ORDER, Direction
from gridchase.sim.coords import Coordinate
from gridchase.sim.grid import Grid

_DELTA_TO_DIRECTION: dict[tuple[int, int], Direction] = {
    direction.delta: direction for direction in Direction
}


def step(grid: Grid, position: Coordinate, direction: Direction) -> Coordinate:
    dx, dy = direction.delta
    return grid.wrap(position.x + dx, position.y + dy)


def is_passable(grid: Grid, position: Coordinate, obstacle: int) -> bool:
    return grid.contains(position) and grid.get_at(position) != obstacle


def valid_moves(
    grid: Grid, position: Coordinate, obstacle: int
) -> list[tuple[Direction, Coordinate]]:
    """Moves that leave the current cell for an in-bounds, non-obstacle one, in scan order."""
    moves: list[tuple[Direction, Coordinate]] = []
    for direction in SCAN_ORDER:
        target = step(grid, position, direction)
        if target != position and is_passable(grid, target, obstacle):
            moves.append((direction, target))
    return moves


def valid_neighbors(grid: Grid, position: Coordinate, obstacle: int) -> list[Coordinate]:
    seen: set[Coordinate] = set()
    neighbors: list[Coordinate] = []
    for _, target in valid_moves(grid, position, obstacle):
        if target in seen:
            continue
        seen.add(target)
        neighbors.append(target)
    return neighbors


def direction_between(grid: Grid, origin: Coordinate, target: Coordinate) -> Direction:
    """Return the direction of the single step from ``origin`` to ``target``.

    On a cyclic grid a delta longer than half the dimension is read as the
    shorter wrapped step, so (0, y) -> (width - 1, y) is LEFT.
    """
    dx = target.x - origin.x
    dy = target.y - origin.y
    if grid.cyclic:
        dx = _shorter_delta(dx, grid.width)
        dy = _shorter_delta(dy, grid.height)
    direction = _DELTA_TO_DIRECTION.get((dx, dy))
    if direction is None:
        raise ValueError(f"{origin} and {target} are not adjacent")
    return direction


def _shorter_delta(delta: int, size: int) -> int:
    if size and abs(delta) > size / 2:
        return delta - size if delta > 0 else delta + size
    return delta
