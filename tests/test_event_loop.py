"""Tests for the event loop, driven by fake input and display."""

import asyncio

import pytest

from stregsystem_tui.controller import KeyController
from stregsystem_tui.event_loop import EventLoop, KeyPress, ShutdownFlag
from stregsystem_tui.state import AppState, InputMode


class ScriptedInput:
    """Yields the scripted keys one per poll, after an optional initial delay."""

    def __init__(self, keys: list[KeyPress], delay: float = 0.0) -> None:
        self.keys = list(keys)
        self.delay = delay

    async def poll(self, timeout: float) -> KeyPress | None:
        if self.delay:
            await asyncio.sleep(self.delay)
            self.delay = 0.0
        if self.keys:
            return self.keys.pop(0)
        await asyncio.sleep(timeout)
        return None


class RecordingDisplay:
    def __init__(self, width: int = 160, height: int = 50) -> None:
        self.width = width
        self.height = height
        self.modes: list[InputMode] = []

    def draw(self, state: AppState) -> None:
        self.modes.append(state.mode)

    def size(self) -> tuple[int, int]:
        return (self.width, self.height)


class SlowHandler:
    """Records handler entry and exit to check events never overlap."""

    def __init__(self) -> None:
        self.log: list[str] = []
        self.started = False

    async def startup(self, state: AppState) -> None:
        self.started = True

    async def handle_key(self, state: AppState, key: KeyPress) -> None:
        self.log.append(f"start {key.key}")
        await asyncio.sleep(0.01)
        self.log.append(f"end {key.key}")
        if key.key == "q":
            state.should_quit = True


def keys(*names: str) -> list[KeyPress]:
    return [KeyPress(name, name if len(name) == 1 else None) for name in names]


def make_loop(state, handler, input_source, display=None) -> EventLoop:
    return EventLoop(
        state,
        handler,
        input_source,
        display or RecordingDisplay(),
        poll_interval=0.001,
        tick_interval=0.005,
        shutdown=ShutdownFlag(),
    )


def test_key_press_char() -> None:
    assert KeyPress("a", "a").char == "a"
    assert KeyPress("enter", "\r").char is None
    assert KeyPress("down").char is None


def test_shutdown_flag() -> None:
    flag = ShutdownFlag()
    assert not flag.is_set()
    flag.set()
    assert flag.is_set()


@pytest.mark.asyncio
async def test_events_are_handled_one_at_a_time(state: AppState) -> None:
    handler = SlowHandler()
    loop = make_loop(state, handler, ScriptedInput(keys("a", "b", "q")))

    await asyncio.wait_for(loop.run(), timeout=5)

    assert handler.started
    assert handler.log == ["start a", "end a", "start b", "end b", "start q", "end q"]
    assert loop.shutdown.is_set()


@pytest.mark.asyncio
async def test_clock_ticks_while_idle(state: AppState) -> None:
    loop = make_loop(state, SlowHandler(), ScriptedInput(keys("q"), delay=0.05))
    await asyncio.wait_for(loop.run(), timeout=5)
    assert loop.ticks >= 1


@pytest.mark.asyncio
async def test_quit_from_normal_mode(orchestrator, backend, state: AppState, store) -> None:
    display = RecordingDisplay()
    loop = make_loop(state, KeyController(orchestrator, store), ScriptedInput(keys("j", "j", "q")), display)

    await asyncio.wait_for(loop.run(), timeout=5)

    assert state.should_quit
    assert state.products.selected_index == 2
    assert state.user.member_id == 42
    assert display.modes


@pytest.mark.asyncio
async def test_small_terminal_blocks_input_until_quit(orchestrator, state: AppState, store) -> None:
    display = RecordingDisplay(width=80, height=24)
    loop = make_loop(state, KeyController(orchestrator, store), ScriptedInput(keys("j", "/", "q")), display)

    await asyncio.wait_for(loop.run(), timeout=5)

    assert InputMode.TERMINAL_TOO_SMALL in display.modes
    assert InputMode.SEARCH not in display.modes
    assert state.products.selected_index == 0
    assert state.should_quit


@pytest.mark.asyncio
async def test_terminal_overlay_clears_when_resized(state: AppState) -> None:
    display = RecordingDisplay(width=80, height=24)
    loop = make_loop(state, SlowHandler(), ScriptedInput([]), display)

    loop.redraw()
    assert state.mode is InputMode.TERMINAL_TOO_SMALL
    display.width, display.height = 200, 60
    loop.redraw()
    assert state.mode is InputMode.NORMAL
    assert display.modes == [InputMode.TERMINAL_TOO_SMALL, InputMode.NORMAL]
