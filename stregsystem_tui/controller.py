"""Keyboard handling for each input mode."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from stregsystem_tui.errors import AppError, InputError
from stregsystem_tui.event_loop import KeyPress
from stregsystem_tui.modals import error as error_modal
from stregsystem_tui.modals import parking, purchase, qr_payment, search, username
from stregsystem_tui.orchestrator import ActionOrchestrator
from stregsystem_tui.settings import SettingsStore
from stregsystem_tui.state import AppState, InputMode

logger = logging.getLogger(__name__)

ModeHandler = Callable[[AppState, KeyPress], Awaitable[None]]


class KeyController:
    """Dispatches each key to the handler of the mode that currently owns input."""

    def __init__(self, orchestrator: ActionOrchestrator, store: SettingsStore) -> None:
        self.orchestrator = orchestrator
        self.store = store
        self._handlers: dict[InputMode, ModeHandler] = {
            InputMode.NORMAL: self.handle_normal,
            InputMode.EDITING_INITIAL_USERNAME: self.handle_initial_username,
            InputMode.EDITING_USERNAME: self.handle_username,
            InputMode.BUY_CONFIRMATION: self.handle_buy_confirmation,
            InputMode.SEARCH: self.handle_search,
            InputMode.ERROR_MODAL: self.handle_error_modal,
            InputMode.PARKING_INPUT: self.handle_parking_input,
            InputMode.PARKING_CONFIRMATION: self.handle_parking_confirmation,
            InputMode.TERMINAL_TOO_SMALL: self.handle_terminal_too_small,
            InputMode.QR_AMOUNT_INPUT: self.handle_qr_amount,
            InputMode.QR_DISPLAY: self.handle_qr_display,
        }

    async def startup(self, state: AppState) -> None:
        await self.orchestrator.load_app_data(state)

    async def handle_key(self, state: AppState, key: KeyPress) -> None:
        logger.debug("key mode=%s key=%r char=%r", state.mode.value, key.key, key.character)
        await self._handlers[state.mode](state, key)

    async def handle_normal(self, state: AppState, key: KeyPress) -> None:
        char = key.char
        if char == "q":
            state.should_quit = True
        elif key.key == "escape":
            state.ui.number_prefix = ""
            state.ui.pending_g = False
        elif char == "j" or key.key == "down":
            state.move_selection_down(state.take_count_prefix())
            state.ui.pending_g = False
        elif char == "k" or key.key == "up":
            state.move_selection_up(state.take_count_prefix())
            state.ui.pending_g = False
        elif char == "g":
            if state.ui.pending_g:
                state.go_to_top()
            state.ui.pending_g = not state.ui.pending_g
        elif char == "G":
            state.go_to_bottom()
            state.ui.pending_g = False
        elif char is not None and char.isdigit():
            state.ui.number_prefix += char
            if not state.get_movement_target_indices():
                state.ui.number_prefix = ""
            state.ui.pending_g = False
        elif char == "u":
            if state.settings.username is not None:
                username.show_username_modal(state)
        elif char in ("/", "s"):
            search.show_search_modal(state)
        elif char == "p":
            parking.show_parking_modal(state)
        elif char == "m":
            qr_payment.show_qr_payment_modal(state)
        elif char == "r":
            await self.orchestrator.load_app_data(state)
        elif key.key == "enter":
            if state.settings.username is not None and state.products.items:
                purchase.show_purchase_modal(state)

    async def handle_initial_username(self, state: AppState, key: KeyPress) -> None:
        if key.key == "enter":
            try:
                name = username.clean_username(state.ui.input)
            except InputError as exc:
                state.ui.input_error = exc.message
                return
            previous = state.settings.username
            state.settings.username = name
            try:
                self.store.save(state.settings)
            except AppError as exc:
                state.settings.username = previous
                error_modal.show_error_modal(state, f"Could not save your username. {exc}", "Username Error")
                return
            state.ui.input = ""
            state.leave_mode()
            await self.orchestrator.load_account(state)
        elif key.key == "backspace":
            state.ui.input = state.ui.input[:-1]
            state.ui.input_error = None
        elif key.key == "escape":
            if state.settings.username is not None:
                state.leave_mode()
        elif key.char is not None:
            state.ui.input += key.char
            state.ui.input_error = None

    async def handle_username(self, state: AppState, key: KeyPress) -> None:
        modal = state.modals.username
        if modal is None:
            return
        if key.key == "enter":
            try:
                username.update_username(state, self.store)
            except InputError as exc:
                modal.error = exc.message
                return
            except AppError as exc:
                error_modal.show_error_modal(state, f"Error updating username: {exc}", "Username Update Error")
                return
            await self.orchestrator.load_account(state)
        elif key.key == "backspace":
            modal.input = modal.input[:-1]
            modal.error = None
        elif key.key == "escape":
            username.hide_username_modal(state)
        elif key.char is not None:
            modal.input += key.char
            modal.error = None

    async def handle_buy_confirmation(self, state: AppState, key: KeyPress) -> None:
        modal = state.modals.purchase
        if modal is None:
            return
        if modal.finished:
            purchase.hide_purchase_modal(state)
            return
        char = key.char
        if char == "y":
            await self.orchestrator.purchase(state)
        elif char == "n" or key.key == "escape":
            purchase.hide_purchase_modal(state)
        elif char in ("+", "=") or key.key == "right":
            purchase.increase_quantity(modal)
        elif char in ("-", "_") or key.key == "left":
            purchase.decrease_quantity(modal)

    async def handle_search(self, state: AppState, key: KeyPress) -> None:
        modal = state.modals.search
        if modal is None:
            return
        if key.key == "enter":
            search.select_product_from_search(state)
        elif key.key in ("down", "ctrl+n"):
            search.next_search_result(modal)
        elif key.key in ("up", "ctrl+p"):
            search.previous_search_result(modal)
        elif key.key == "backspace":
            search.delete_search_char(state)
        elif key.key == "escape":
            search.hide_search_modal(state)
        elif key.char is not None:
            search.type_search_char(state, key.char)

    async def handle_error_modal(self, state: AppState, key: KeyPress) -> None:
        error_modal.hide_error_modal(state)

    async def handle_parking_input(self, state: AppState, key: KeyPress) -> None:
        modal = state.modals.parking
        if modal is None:
            return
        if key.key == "enter":
            try:
                confirmed = parking.confirm_parking(state, self.store)
            except AppError as exc:
                error_modal.show_error_modal(state, f"Error confirming parking: {exc}", "Parking Error")
                return
            if confirmed:
                await self.orchestrator.lookup_vehicle(state)
        elif key.key in ("tab", "down"):
            parking.next_parking_field(modal)
        elif key.key in ("shift+tab", "up"):
            parking.prev_parking_field(modal)
        elif key.key == "backspace":
            parking.delete_parking_char(modal)
        elif key.key == "escape":
            parking.hide_parking_modal(state)
        elif key.char is not None:
            parking.type_parking_char(modal, key.char)

    async def handle_parking_confirmation(self, state: AppState, key: KeyPress) -> None:
        modal = state.modals.parking
        if modal is None:
            return
        if modal.finished:
            parking.hide_parking_modal(state)
            return
        if key.char == "y":
            await self.orchestrator.register_parking(state)
        elif key.char == "n" or key.key == "escape":
            parking.hide_parking_modal(state)

    async def handle_terminal_too_small(self, state: AppState, key: KeyPress) -> None:
        if key.char == "q":
            state.should_quit = True

    async def handle_qr_amount(self, state: AppState, key: KeyPress) -> None:
        modal = state.modals.qr_payment
        if modal is None:
            return
        if key.key == "enter":
            qr_payment.generate_qr_code(state)
        elif key.key == "backspace":
            qr_payment.delete_amount_char(modal)
        elif key.key == "escape":
            qr_payment.hide_qr_payment_modal(state)
        elif key.char is not None:
            qr_payment.type_amount_char(modal, key.char)

    async def handle_qr_display(self, state: AppState, key: KeyPress) -> None:
        if key.key == "backspace" or key.char == "b":
            qr_payment.back_to_amount_input(state)
        elif key.key == "escape" or key.char == "q":
            qr_payment.hide_qr_payment_modal(state)
