"""Step a running simulation and render each tick (Textual)."""

from __future__ import annotations

from typing import Iterable, Iterator

from rich.panel import Panel
from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Vertical
from textual.screen import Screen
from textual.timer import Timer
from textual.widgets import Footer, Static

from gridchase.render.viewer import render_tick
from gridchase.sim.contracts import TickPayload


class LiveViewScreen(Screen):
    CSS = """
    Screen {
        layout: vertical;
    }
    #live-view {
        height: 1fr;
    }
    """

    BINDINGS = [("space", "toggle_pause", "Pause")]

    def __init__(
        self,
        payloads: Iterable[TickPayload],
        *,
        tick_delay: float = 0.1,
        vulnerable_threshold: float = 0.0,
    ) -> None:
        super().__init__()
        self._payloads: Iterator[TickPayload] = iter(payloads)
        self._tick_delay = max(tick_delay, 0.01)
        self._vulnerable_threshold = vulnerable_threshold
        self._view: Static | None = None
        self._timer: Timer | None = None
        self._paused = False
        self.last_payload: TickPayload | None = None

    def compose(self) -> ComposeResult:
        with Vertical(id="root"):
            yield Static(id="live-view")
        yield Footer()

    def on_mount(self) -> None:
        self._view = self.query_one("#live-view", Static)
        self._view.update(Panel(Text("Starting simulation..."), title="gridchase"))
        self._timer = self.set_interval(self._tick_delay, self._advance)

    def action_toggle_pause(self) -> None:
        if self._timer is None:
            return
        if self._paused:
            self._timer.resume()
        else:
            self._timer.pause()
        self._paused = not self._paused

    def _advance(self) -> None:
        payload = next(self._payloads, None)
        if payload is None:
            if self._timer is not None:
                self._timer.stop()
            return
        self.last_payload = payload
        if self._view:
            self._view.update(
                render_tick(payload, vulnerable_threshold=self._vulnerable_threshold)
            )


class LiveViewApp(App[None]):
    """Host the live view screen; `q` quits."""

    BINDINGS = [("q", "quit", "Quit")]

    def __init__(self, screen: LiveViewScreen, *, title: str = "gridchase") -> None:
        super().__init__()
        self._live_screen = screen
        self.title = title

    def on_mount(self) -> None:
        self.push_screen(self._live_screen)


def run_live_view(
    payloads: Iterable[TickPayload],
    *,
    tick_delay: float = 0.1,
    vulnerable_threshold: float = 0.0,
) -> TickPayload | None:
    screen = LiveViewScreen(
        payloads, tick_delay=tick_delay, vulnerable_threshold=vulnerable_threshold
    )
    app = LiveViewApp(screen, title="gridchase live")
    app.run()
    return screen.last_payload
