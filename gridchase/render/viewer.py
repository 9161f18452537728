"""Rich viewer rendering for TickPayload."""

from __future__ import annotations

from rich.columns import Columns
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from gridchase.sim.contracts import TickPayload
from gridchase.sim.coords import Coordinate
from gridchase.sim.world_tiles import CATEGORY_GLYPHS, DOT, PELLET, WALL

TILE_STYLES = {
    WALL: "blue",
    DOT: "grey70",
    PELLET: "bright_green",
}

PLAYER_GLYPH = "C"
PLAYER_STYLE = "bold bright_yellow"
ADVERSARY_GLYPH = "G"
ADVERSARY_STYLE = "bold red"
VULNERABLE_GLYPH = "g"
VULNERABLE_STYLE = "bold bright_blue"


def render_tick(
    payload: TickPayload,
    *,
    max_events: int = 5,
    vulnerable_threshold: float = 0.0,
) -> RenderableType:
    header = Text(
        f"Tick {payload.tick}  Score {payload.score}  {payload.status.value}",
        style="bold",
    )
    board = Panel(
        render_board(payload, vulnerable_threshold=vulnerable_threshold), title="Board"
    )
    side = Group(_render_decision(payload), _render_events(payload, max_events=max_events))
    return Group(header, Columns([board, side]))


def render_board(payload: TickPayload, *, vulnerable_threshold: float = 0.0) -> Text:
    """Draw the board with the highest row first, since UP grows y.

    Pass the policy's ``vulnerable_threshold`` so `g` marks exactly the
    adversaries the policy treats as prey.
    """
    adversaries: dict[Coordinate, bool] = {}
    for adversary in payload.adversaries:
        vulnerable = adversary.is_vulnerable(vulnerable_threshold)
        adversaries[adversary.position] = adversaries.get(adversary.position, False) or vulnerable

    text = Text()
    height = len(payload.grid)
    for y in range(height - 1, -1, -1):
        for x, category in enumerate(payload.grid[y]):
            position = Coordinate(x, y)
            if position == payload.position:
                text.append(PLAYER_GLYPH, style=PLAYER_STYLE)
            elif position in adversaries:
                if adversaries[position]:
                    text.append(VULNERABLE_GLYPH, style=VULNERABLE_STYLE)
                else:
                    text.append(ADVERSARY_GLYPH, style=ADVERSARY_STYLE)
            else:
                text.append(
                    CATEGORY_GLYPHS.get(category, "?"),
                    style=TILE_STYLES.get(category, ""),
                )
        if y:
            text.append("\n")
    return text


def _render_decision(payload: TickPayload) -> RenderableType:
    table = Table(title="Decision", show_header=False)
    table.add_column("Field")
    table.add_column("Value")
    decision = payload.decision
    if decision is None:
        table.add_row("State", "None")
        return table
    table.add_row("State", decision.state.value)
    table.add_row("Direction", decision.direction.value)
    table.add_row("Target", str(decision.target) if decision.target else "-")
    table.add_row("Fallback", "yes" if decision.fallback else "no")
    return table


def _render_events(payload: TickPayload, *, max_events: int) -> RenderableType:
    table = Table(title="Recent Events", show_header=True, header_style="bold")
    table.add_column("Kind")
    table.add_column("Detail")
    events = payload.events or []
    for event in events[-max_events:]:
        table.add_row(event.kind, _format_payload(event.payload))
    if not events:
        table.add_row("-", "None")
    return table


def _format_payload(payload: dict) -> str:
    if not payload:
        return "-"
    return ", ".join(f"{key}={value}" for key, value in payload.items())
