"""Parking registration modal: phone/plate entry followed by a confirmation step."""

from __future__ import annotations

from dataclasses import dataclass

from stregsystem_tui.config import PHONE_NUMBER_LENGTH
from stregsystem_tui.errors import ConfigError, InputError, StorageError
from stregsystem_tui.models import VehicleInfo
from stregsystem_tui.settings import SettingsStore
from stregsystem_tui.state import AppState, InputMode

PHONE_FIELD = 0
PLATE_FIELD = 1
PLATE_LENGTH = 7


@dataclass
class ParkingModal:
    phone_input: str = ""
    license_plate_input: str = ""
    current_field: int = PHONE_FIELD
    input_error: str | None = None
    confirming: bool = False
    success: bool = False
    error: str | None = None
    vehicle: VehicleInfo | None = None

    @property
    def finished(self) -> bool:
        return self.success or self.error is not None


def show_parking_modal(state: AppState) -> None:
    state.modals.parking = ParkingModal(
        phone_input=state.settings.phone_number or "",
        license_plate_input=state.settings.license_plate or "",
    )
    state.enter_mode(InputMode.PARKING_INPUT)


def hide_parking_modal(state: AppState) -> None:
    modal = state.modals.parking
    if modal is not None and modal.confirming:
        state.leave_mode()
    state.modals.parking = None
    state.leave_mode()


def next_parking_field(modal: ParkingModal) -> None:
    modal.current_field = (modal.current_field + 1) % 2


def prev_parking_field(modal: ParkingModal) -> None:
    modal.current_field = PLATE_FIELD if modal.current_field == PHONE_FIELD else PHONE_FIELD


def type_parking_char(modal: ParkingModal, char: str) -> None:
    if modal.current_field == PHONE_FIELD:
        if char.isascii() and char.isdigit() and len(modal.phone_input) < PHONE_NUMBER_LENGTH:
            modal.phone_input += char
    elif char.isascii() and char.isalnum():
        modal.license_plate_input += char.upper()
    modal.input_error = None


def delete_parking_char(modal: ParkingModal) -> None:
    if modal.current_field == PHONE_FIELD:
        modal.phone_input = modal.phone_input[:-1]
    else:
        modal.license_plate_input = modal.license_plate_input[:-1]
    modal.input_error = None


def validate_phone(raw: str) -> str:
    phone = raw.strip()
    if not phone:
        raise InputError("Phone number cannot be empty")
    if len(phone) != PHONE_NUMBER_LENGTH or not (phone.isascii() and phone.isdigit()):
        raise InputError(f"Phone number must be {PHONE_NUMBER_LENGTH} digits")
    return phone


def validate_plate(raw: str) -> str:
    """Danish plates: two letters followed by five digits, e.g. ``AB12345``."""
    plate = raw.strip().upper()
    if not plate:
        raise InputError("License plate cannot be empty")
    if len(plate) != PLATE_LENGTH:
        raise InputError(f"License plate must be exactly {PLATE_LENGTH} characters")
    letters, digits = plate[:2], plate[2:]
    if not (letters.isascii() and letters.isalpha()):
        raise InputError("License plate must start with 2 letters")
    if not (digits.isascii() and digits.isdigit()):
        raise InputError("License plate must end with 5 digits")
    return plate


def confirm_parking(state: AppState, store: SettingsStore) -> bool:
    """Validate the inputs and move to the confirmation step.

    Validation problems are stored on the modal and leave the mode unchanged.
    Saving the phone/plate may raise ``StorageError`` or ``ConfigError``, in
    which case the previous values are restored.
    """
    modal = state.modals.parking
    if modal is None:
        return False
    try:
        phone = validate_phone(modal.phone_input)
        plate = validate_plate(modal.license_plate_input)
    except InputError as exc:
        modal.input_error = exc.message
        return False

    previous = (state.settings.phone_number, state.settings.license_plate)
    state.settings.phone_number = phone
    state.settings.license_plate = plate
    try:
        store.save(state.settings)
    except (ConfigError, StorageError):
        state.settings.phone_number, state.settings.license_plate = previous
        raise

    modal.phone_input = phone
    modal.license_plate_input = plate
    modal.input_error = None
    modal.confirming = True
    state.enter_mode(InputMode.PARKING_CONFIRMATION)
    return True
