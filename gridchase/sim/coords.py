"""Integer grid coordinates."""

from __future__ import annotations

from dataclasses import dataclass
from math import hypot


@dataclass(frozen=True)
class Coordinate:
    x: int
    y: int

    def distance(self, other: Coordinate) -> float:
        return hypot(self.x - other.x, self.y - other.y)

    def offset(self, dx: int, dy: int) -> Coordinate:
        return Coordinate(self.x + dx, self.y + dy)

    def as_tuple(self) -> tuple[int, int]:
        return (self.x, self.y)

    def __str__(self) -> str:
        return f"{self.x},{self.y}"
