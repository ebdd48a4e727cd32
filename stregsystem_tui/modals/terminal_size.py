"""Overlay shown while the terminal is smaller than the layout needs."""

from __future__ import annotations

from dataclasses import dataclass

from stregsystem_tui.config import MIN_TERMINAL_HEIGHT, MIN_TERMINAL_WIDTH
from stregsystem_tui.state import AppState, InputMode


@dataclass
class TerminalSizeModal:
    width: int
    height: int
    min_width: int = MIN_TERMINAL_WIDTH
    min_height: int = MIN_TERMINAL_HEIGHT


def show_terminal_size_modal(state: AppState, width: int, height: int) -> None:
    state.modals.terminal_size = TerminalSizeModal(width=width, height=height)
    state.enter_mode(InputMode.TERMINAL_TOO_SMALL)


def hide_terminal_size_modal(state: AppState) -> None:
    state.modals.terminal_size = None
    state.leave_mode()


def check_terminal_size(state: AppState, width: int, height: int) -> None:
    """Open or close the overlay to match the current terminal dimensions."""
    too_small = width < MIN_TERMINAL_WIDTH or height < MIN_TERMINAL_HEIGHT
    modal = state.modals.terminal_size
    if too_small and modal is None:
        show_terminal_size_modal(state, width, height)
    elif too_small and modal is not None:
        modal.width, modal.height = width, height
    elif not too_small and modal is not None:
        hide_terminal_size_modal(state)
