"""Blocking error message modal."""

from __future__ import annotations

from dataclasses import dataclass

from stregsystem_tui.formatters import format_error_message
from stregsystem_tui.state import AppState, InputMode


@dataclass
class ErrorModal:
    message: str
    title: str = "Error"


def show_error_modal(state: AppState, message: str, title: str | None = None) -> None:
    """Interrupt the current mode with an error that any key dismisses."""
    state.modals.error = ErrorModal(message=format_error_message(message), title=title or "Error")
    state.enter_mode(InputMode.ERROR_MODAL)


def hide_error_modal(state: AppState) -> None:
    state.modals.error = None
    state.leave_mode()
