"""Main Textual app class."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.events import Key
from textual.screen import Screen
from textual.widgets import Static

from stregsystem_tui.backend import BackendClient, ParkingClient
from stregsystem_tui.controller import KeyController
from stregsystem_tui.event_loop import EventLoop, KeyPress
from stregsystem_tui.overlay import ModalOverlay
from stregsystem_tui.rendering import render_help, render_modal, render_products, render_title, render_user_panel
from stregsystem_tui.state import AppState

logger = logging.getLogger(__name__)


class TextualInput:
    """Input source fed by the app's key events.

    A ``get`` that is still waiting when a poll times out is kept for the next
    poll, so a key arriving at the timeout is not lost.
    """

    def __init__(self) -> None:
        self._keys: asyncio.Queue[KeyPress] = asyncio.Queue()
        self._pending: asyncio.Future[KeyPress] | None = None

    def push(self, key: KeyPress) -> None:
        self._keys.put_nowait(key)

    async def poll(self, timeout: float) -> KeyPress | None:
        if self._pending is None:
            try:
                return self._keys.get_nowait()
            except asyncio.QueueEmpty:
                self._pending = asyncio.ensure_future(self._keys.get())
        done, _ = await asyncio.wait({self._pending}, timeout=timeout)
        if not done:
            return None
        pending, self._pending = self._pending, None
        return pending.result()

    def close(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None


class TextualDisplay:
    """Display adapter: redraws the app's widgets and reports the terminal size."""

    def __init__(self, app: StregsystemApp) -> None:
        self.app = app

    def draw(self, state: AppState) -> None:
        self.app.refresh_view(state)

    def size(self) -> tuple[int, int]:
        return (self.app.size.width, self.app.size.height)


class StregsystemApp(App):
    """A Textual front end for browsing the catalog and buying from stregsystemet."""

    TITLE = "Stregsystemet"
    # ctrl+p belongs to the search modal.
    ENABLE_COMMAND_PALETTE = False

    CSS = """
    Screen {
        layout: vertical;
    }

    #title-bar {
        height: 3;
        border: round $primary;
        padding: 0 1;
    }

    #main-layout {
        height: 1fr;
    }

    #products-pane {
        width: 3fr;
        border: round $primary;
        padding: 0 1;
    }

    #user-pane {
        width: 2fr;
        border: round $secondary;
        padding: 0 1;
    }

    #products-list, #user-panel {
        height: 1fr;
    }

    #help-bar {
        height: 1;
        padding: 0 1;
    }

    .pane-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    def __init__(
        self,
        state: AppState,
        controller: KeyController,
        backend: BackendClient,
        parking: ParkingClient,
    ) -> None:
        super().__init__()
        self.state = state
        self.backend = backend
        self.parking = parking
        self.keys = TextualInput()
        self.event_loop = EventLoop(state, controller, self.keys, TextualDisplay(self))
        self._overlay: ModalOverlay | None = None
        self._main_screen: Screen | None = None

    def compose(self) -> ComposeResult:
        yield Static(id="title-bar")
        with Horizontal(id="main-layout"):
            with Vertical(id="products-pane"):
                yield Static("Products", classes="pane-title")
                yield Static(id="products-list")
            with Vertical(id="user-pane"):
                yield Static("User Info", classes="pane-title")
                yield Static(id="user-panel")
        yield Static(id="help-bar")

    def on_mount(self) -> None:
        self._main_screen = self.screen
        self.run_worker(self._run_event_loop(), name="event-loop", exclusive=True)

    async def _run_event_loop(self) -> None:
        try:
            await self.event_loop.run()
        finally:
            logger.info("app_shutdown ticks=%d", self.event_loop.ticks)
            self.keys.close()
            await self.backend.close()
            await self.parking.close()
            self.exit()

    def on_key(self, event: Key) -> None:
        self.enqueue_key(event)
        event.stop()
        event.prevent_default()

    def enqueue_key(self, event: Key) -> None:
        self.keys.push(KeyPress(key=event.key, character=event.character))

    def refresh_view(self, state: AppState) -> None:
        # Widgets live on the main screen, which may be covered by the overlay.
        screen = self._main_screen
        if screen is None:
            return
        try:
            title = screen.query_one("#title-bar", Static)
            products = screen.query_one("#products-list", Static)
            user = screen.query_one("#user-panel", Static)
            help_bar = screen.query_one("#help-bar", Static)
        except NoMatches:
            return

        title.update(render_title(datetime.now()))
        products.update(render_products(state, max(1, products.size.height)))
        user.update(render_user_panel(state, max(20, user.size.width)))
        help_bar.update(render_help(state))
        self._sync_overlay(state)

    def _sync_overlay(self, state: AppState) -> None:
        content = render_modal(state)
        if content is None:
            self._close_overlay()
            return

        if self._overlay is None:
            self._overlay = ModalOverlay(self.enqueue_key)
            self.push_screen(self._overlay)
        self._overlay.update_content(content)

    def _close_overlay(self) -> None:
        """Pop the overlay along with anything stacked on top of it."""
        overlay, self._overlay = self._overlay, None
        if overlay is None:
            return
        while overlay in self.screen_stack:
            self.pop_screen()
