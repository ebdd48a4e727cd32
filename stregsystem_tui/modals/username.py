"""Username change modal."""

from __future__ import annotations

from dataclasses import dataclass

from stregsystem_tui.errors import ConfigError, InputError, StorageError
from stregsystem_tui.settings import SettingsStore
from stregsystem_tui.state import AppState, InputMode


@dataclass
class UsernameModal:
    input: str = ""
    error: str | None = None


def show_username_modal(state: AppState) -> None:
    state.modals.username = UsernameModal(input=state.settings.username or "")
    state.enter_mode(InputMode.EDITING_USERNAME)


def hide_username_modal(state: AppState) -> None:
    state.modals.username = None
    state.leave_mode()


def clean_username(raw: str) -> str:
    username = raw.strip()
    if not username:
        raise InputError("Username cannot be empty")
    return username


def update_username(state: AppState, store: SettingsStore) -> str:
    """Validate and persist the typed username, then close the modal.

    Raises ``InputError`` for an empty name (the modal stays open) and
    ``StorageError``/``ConfigError`` if the settings cannot be written.
    """
    modal = state.modals.username
    if modal is None:
        raise InputError("Username editor is not open")
    username = clean_username(modal.input)
    previous = state.settings.username
    state.settings.username = username
    try:
        store.save(state.settings)
    except (ConfigError, StorageError):
        state.settings.username = previous
        raise
    hide_username_modal(state)
    return username
