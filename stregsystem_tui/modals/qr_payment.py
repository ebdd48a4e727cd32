"""MobilePay top-up QR modal: amount entry followed by the QR display."""

from __future__ import annotations

from dataclasses import dataclass

from stregsystem_tui.config import QR_MIN_AMOUNT_ORE
from stregsystem_tui.errors import InputError
from stregsystem_tui.modals.error import show_error_modal
from stregsystem_tui.money import Money
from stregsystem_tui.qr import PaymentQrData
from stregsystem_tui.state import AppState, InputMode

AMOUNT_INPUT_MAX_LENGTH = 9


@dataclass
class QrPaymentModal:
    amount_input: str = ""
    error: str | None = None
    qr_data: PaymentQrData | None = None

    @property
    def showing_qr(self) -> bool:
        return self.qr_data is not None


def show_qr_payment_modal(state: AppState) -> None:
    if state.user.member_info is None:
        show_error_modal(state, "Invalid user account. Please log in with a valid username.", "Invalid User")
        return
    state.modals.qr_payment = QrPaymentModal()
    state.enter_mode(InputMode.QR_AMOUNT_INPUT)


def hide_qr_payment_modal(state: AppState) -> None:
    modal = state.modals.qr_payment
    if modal is not None and modal.showing_qr:
        state.leave_mode()
    state.modals.qr_payment = None
    state.leave_mode()


def type_amount_char(modal: QrPaymentModal, char: str) -> None:
    if len(modal.amount_input) >= AMOUNT_INPUT_MAX_LENGTH:
        return
    if char.isascii() and char.isdigit():
        modal.amount_input += char
    elif char in ",." and not any(sep in modal.amount_input for sep in ",."):
        modal.amount_input += char
    modal.error = None


def delete_amount_char(modal: QrPaymentModal) -> None:
    modal.amount_input = modal.amount_input[:-1]
    modal.error = None


def parse_amount(raw: str) -> Money:
    amount = Money.parse(raw)
    if amount < QR_MIN_AMOUNT_ORE:
        raise InputError(f"Amount must be at least {Money(QR_MIN_AMOUNT_ORE)}")
    return amount


def generate_qr_code(state: AppState) -> bool:
    """Build the payment QR for the typed amount and switch to the display step."""
    modal = state.modals.qr_payment
    member = state.user.member_info
    if modal is None or member is None:
        return False
    try:
        amount = parse_amount(modal.amount_input)
    except InputError as exc:
        modal.error = exc.message
        return False

    modal.qr_data = PaymentQrData.create(member.username, amount)
    modal.error = None
    state.enter_mode(InputMode.QR_DISPLAY)
    return True


def back_to_amount_input(state: AppState) -> None:
    modal = state.modals.qr_payment
    if modal is None or not modal.showing_qr:
        return
    modal.qr_data = None
    state.leave_mode()
