"""Single-consumer event loop fed by a keyboard poller and a clock."""

from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from stregsystem_tui.config import CLOCK_TICK_SECONDS, EVENT_QUEUE_SIZE, INPUT_POLL_INTERVAL_SECONDS
from stregsystem_tui.modals.terminal_size import check_terminal_size
from stregsystem_tui.state import AppState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeyPress:
    """A key as reported by the terminal: ``key`` is the name, ``character`` the text."""

    key: str
    character: str | None = None

    @property
    def char(self) -> str | None:
        """The single printable character, or ``None`` for control/navigation keys."""
        if self.character is not None and len(self.character) == 1 and self.character.isprintable():
            return self.character
        return None


class EventKind(Enum):
    INPUT = "input"
    CLOCK_TICK = "clock_tick"


@dataclass(frozen=True)
class UIEvent:
    kind: EventKind
    key: KeyPress | None = None


class ShutdownFlag:
    """Boolean shared by the producers (readers) and the consumer (writer)."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value = False

    def set(self) -> None:
        with self._lock:
            self._value = True

    def is_set(self) -> bool:
        with self._lock:
            return self._value


class InputSource(Protocol):
    async def poll(self, timeout: float) -> KeyPress | None:
        """Wait up to ``timeout`` seconds for a key; ``None`` if none arrived."""


class Display(Protocol):
    def draw(self, state: AppState) -> None: ...

    def size(self) -> tuple[int, int]: ...


class KeyHandler(Protocol):
    async def startup(self, state: AppState) -> None: ...

    async def handle_key(self, state: AppState, key: KeyPress) -> None: ...


class EventLoop:
    """Merge keyboard input and clock ticks into one sequential consumer.

    The consumer handles one event at a time, awaiting the handler (and any
    backend call it makes) before redrawing and pulling the next event. The
    producers only ever put events on the queue and stop once the shutdown
    flag is set.
    """

    def __init__(
        self,
        state: AppState,
        handler: KeyHandler,
        input_source: InputSource,
        display: Display,
        *,
        poll_interval: float = INPUT_POLL_INTERVAL_SECONDS,
        tick_interval: float = CLOCK_TICK_SECONDS,
        shutdown: ShutdownFlag | None = None,
    ) -> None:
        self.state = state
        self.handler = handler
        self.input_source = input_source
        self.display = display
        self.poll_interval = poll_interval
        self.tick_interval = tick_interval
        self.shutdown = shutdown or ShutdownFlag()
        self.queue: asyncio.Queue[UIEvent] = asyncio.Queue(maxsize=EVENT_QUEUE_SIZE)
        self.ticks = 0

    async def run(self) -> None:
        self.redraw()
        await self.handler.startup(self.state)

        producers = [
            asyncio.create_task(self._poll_input(), name="input-poller"),
            asyncio.create_task(self._clock(), name="clock"),
        ]
        try:
            while True:
                self.redraw()
                event = await self.queue.get()
                await self._dispatch(event)
                if self.state.should_quit:
                    logger.info("event_loop_quit")
                    break
        finally:
            self.shutdown.set()
            for task in producers:
                task.cancel()
            await asyncio.gather(*producers, return_exceptions=True)

    def redraw(self) -> None:
        width, height = self.display.size()
        check_terminal_size(self.state, width, height)
        self.display.draw(self.state)

    async def _dispatch(self, event: UIEvent) -> None:
        if event.kind is EventKind.CLOCK_TICK:
            self.ticks += 1
            return
        if event.key is not None:
            await self.handler.handle_key(self.state, event.key)

    async def _poll_input(self) -> None:
        while not self.shutdown.is_set():
            key = await self.input_source.poll(self.poll_interval)
            if key is not None and not self.shutdown.is_set():
                await self.queue.put(UIEvent(EventKind.INPUT, key))

    async def _clock(self) -> None:
        while not self.shutdown.is_set():
            await asyncio.sleep(self.tick_interval)
            if self.shutdown.is_set():
                break
            await self.queue.put(UIEvent(EventKind.CLOCK_TICK))
