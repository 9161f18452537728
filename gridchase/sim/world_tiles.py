"""Cell categories and ASCII symbols used by the built-in levels."""

from __future__ import annotations

from gridchase.sim.contracts import CategoryConfig

EMPTY = 0
WALL = 1
DOT = 2
PELLET = 3

LEVEL_CATEGORIES = CategoryConfig(obstacle=WALL, collectible=DOT, bonus=PELLET)

TILE_SYMBOLS: dict[str, int] = {
    " ": EMPTY,
    "#": WALL,
    ".": DOT,
    "o": PELLET,
}

PLAYER_SYMBOL = "P"
ADVERSARY_SYMBOL = "G"

CATEGORY_GLYPHS: dict[int, str] = {
    category: symbol for symbol, category in TILE_SYMBOLS.items()
}
