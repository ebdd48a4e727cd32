"""Modal overlay screen."""

from __future__ import annotations

from typing import Callable

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.css.query import NoMatches
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static


class ModalOverlay(ModalScreen[None]):
    """Centered dialog showing whichever modal currently owns input.

    The screen keeps no state of its own: keys are handed to ``on_key_press``
    and the content is replaced on every redraw.
    """

    CSS = """
    ModalOverlay {
        align: center middle;
        background: $background 60%;
    }

    #modal-dialog {
        width: auto;
        min-width: 50;
        max-width: 100;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #modal-body {
        width: auto;
        color: white;
    }
    """

    def __init__(self, on_key_press: Callable[[Key], None]) -> None:
        super().__init__()
        self.on_key_press = on_key_press
        self._pending: Text | None = None

    def compose(self) -> ComposeResult:
        with Container(id="modal-dialog"):
            yield Static(id="modal-body")

    def on_mount(self) -> None:
        if self._pending is not None:
            self.query_one("#modal-body", Static).update(self._pending)

    def on_key(self, event: Key) -> None:
        self.on_key_press(event)
        event.stop()
        event.prevent_default()

    def update_content(self, content: Text) -> None:
        self._pending = content
        try:
            body = self.query_one("#modal-body", Static)
        except NoMatches:
            return
        body.update(content)
