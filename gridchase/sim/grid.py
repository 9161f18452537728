"""Integer cell grid with BFS distance fields and shortest paths."""

from __future__ import annotations

from collections import deque
from typing import Iterable, Iterator

from gridchase.sim.coords import Coordinate

OUT_OF_BOUNDS = -1
UNREACHED = -1

# +y, -y, +x, -x
_STEPS: tuple[tuple[int, int], ...] = ((0, 1), (0, -1), (1, 0), (-1, 0))


class Grid:
    """A W x H matrix of cell categories.

    Cells are stored row-major (``cells[y][x]``). Reads outside the grid
    return ``OUT_OF_BOUNDS`` and writes outside it are ignored, so callers
    never need to bounds-check before querying. When ``cyclic`` is set,
    stepping off one edge lands on the opposite edge.
    """

    def __init__(
        self, width: int, height: int, fill: int = 0, *, cyclic: bool = False
    ) -> None:
        if width < 0 or height < 0:
            raise ValueError(f"Grid dimensions must be non-negative: {width}x{height}")
        self.width = width
        self.height = height
        self.cyclic = cyclic
        self._cells: list[list[int]] = [[fill] * width for _ in range(height)]

    @classmethod
    def from_rows(cls, rows: Iterable[Iterable[int]], *, cyclic: bool = False) -> Grid:
        copied = [list(row) for row in rows]
        width = len(copied[0]) if copied else 0
        for index, row in enumerate(copied):
            if len(row) != width:
                raise ValueError(
                    f"Row {index} has {len(row)} cells, expected {width}."
                )
        grid = cls(width, len(copied), cyclic=cyclic)
        grid._cells = copied
        return grid

    def rows(self) -> list[list[int]]:
        return [list(row) for row in self._cells]

    def is_cyclic(self) -> bool:
        return self.cyclic

    def set_cyclic(self, cyclic: bool) -> None:
        self.cyclic = cyclic

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def contains(self, p: Coordinate) -> bool:
        return self.in_bounds(p.x, p.y)

    def get(self, x: int, y: int) -> int:
        if not self.in_bounds(x, y):
            return OUT_OF_BOUNDS
        return self._cells[y][x]

    def get_at(self, p: Coordinate) -> int:
        return self.get(p.x, p.y)

    def set(self, x: int, y: int, category: int) -> None:
        if not self.in_bounds(x, y):
            return
        self._cells[y][x] = category

    def set_at(self, p: Coordinate, category: int) -> None:
        self.set(p.x, p.y, category)

    def cells(self) -> Iterator[tuple[Coordinate, int]]:
        for y, row in enumerate(self._cells):
            for x, value in enumerate(row):
                yield Coordinate(x, y), value

    def find_all(self, category: int) -> list[Coordinate]:
        return [p for p, value in self.cells() if value == category]

    def count(self, category: int) -> int:
        return sum(row.count(category) for row in self._cells)

    def wrap(self, x: int, y: int) -> Coordinate:
        """Map raw coordinates onto the grid when cyclic; identity otherwise."""
        if self.cyclic and self.width and self.height:
            return Coordinate(x % self.width, y % self.height)
        return Coordinate(x, y)

    def neighbors(self, p: Coordinate) -> list[Coordinate]:
        result: list[Coordinate] = []
        for dx, dy in _STEPS:
            candidate = self.wrap(p.x + dx, p.y + dy)
            if self.contains(candidate):
                result.append(candidate)
        return result

    def flood_fill(self, start: Coordinate, new_category: int) -> int:
        """Repaint the region connected to ``start`` and return its size."""
        if not self.contains(start):
            return 0
        original = self.get_at(start)
        if original == new_category:
            return 0

        filled = 0
        pending = [start]
        while pending:
            current = pending.pop()
            if self.get_at(current) != original:
                continue
            self.set_at(current, new_category)
            filled += 1
            for neighbor in self.neighbors(current):
                if self.get_at(neighbor) == original:
                    pending.append(neighbor)
        return filled

    def all_distances(self, start: Coordinate, obstacle: int) -> Grid:
        """Return the BFS hop count from ``start`` to every cell.

        Unreached cells (obstacles, disconnected regions) hold ``UNREACHED``.
        """
        field = Grid(self.width, self.height, UNREACHED, cyclic=self.cyclic)
        if not self.contains(start) or self.get_at(start) == obstacle:
            return field

        field.set_at(start, 0)
        queue: deque[Coordinate] = deque([start])
        while queue:
            current = queue.popleft()
            next_distance = field.get_at(current) + 1
            for neighbor in self.neighbors(current):
                if field.get_at(neighbor) != UNREACHED:
                    continue
                if self.get_at(neighbor) == obstacle:
                    continue
                field.set_at(neighbor, next_distance)
                queue.append(neighbor)
        return field

    def shortest_path(
        self, start: Coordinate, goal: Coordinate, obstacle: int
    ) -> list[Coordinate] | None:
        """Return the cells from ``start`` to ``goal`` inclusive, or None."""
        if not self.contains(start) or not self.contains(goal):
            return None

        queue: deque[Coordinate] = deque([start])
        came_from: dict[Coordinate, Coordinate | None] = {start: None}

        while queue:
            current = queue.popleft()
            if self.get_at(current) == obstacle:
                continue
            if current == goal:
                return self._reconstruct_path(came_from, current)
            for neighbor in self.neighbors(current):
                if neighbor in came_from:
                    continue
                came_from[neighbor] = current
                queue.append(neighbor)

        return None

    @staticmethod
    def _reconstruct_path(
        came_from: dict[Coordinate, Coordinate | None], current: Coordinate
    ) -> list[Coordinate]:
        path: list[Coordinate] = []
        node: Coordinate | None = current
        while node is not None:
            path.append(node)
            node = came_from[node]
        path.reverse()
        return path

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self.cyclic == other.cyclic and self._cells == other._cells

    def __repr__(self) -> str:
        return f"Grid({self.width}x{self.height}, cyclic={self.cyclic})"
