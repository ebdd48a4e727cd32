"""Application state: the input-mode stack, catalog, account and open modals."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from stregsystem_tui.models import MemberInfo, Product, Sale
from stregsystem_tui.settings import Settings

if TYPE_CHECKING:
    from stregsystem_tui.modals.error import ErrorModal
    from stregsystem_tui.modals.parking import ParkingModal
    from stregsystem_tui.modals.purchase import PurchaseModal
    from stregsystem_tui.modals.qr_payment import QrPaymentModal
    from stregsystem_tui.modals.search import SearchModal
    from stregsystem_tui.modals.terminal_size import TerminalSizeModal
    from stregsystem_tui.modals.username import UsernameModal

    Modal = (
        UsernameModal | PurchaseModal | SearchModal | ErrorModal | ParkingModal | TerminalSizeModal | QrPaymentModal
    )

logger = logging.getLogger(__name__)


class InputMode(Enum):
    """Which workflow currently owns keyboard input."""

    NORMAL = "normal"
    EDITING_INITIAL_USERNAME = "editing_initial_username"
    EDITING_USERNAME = "editing_username"
    BUY_CONFIRMATION = "buy_confirmation"
    SEARCH = "search"
    ERROR_MODAL = "error_modal"
    PARKING_INPUT = "parking_input"
    PARKING_CONFIRMATION = "parking_confirmation"
    TERMINAL_TOO_SMALL = "terminal_too_small"
    QR_AMOUNT_INPUT = "qr_amount_input"
    QR_DISPLAY = "qr_display"


class ModeStack:
    """Current input mode plus every mode it interrupted, most recent last."""

    def __init__(self, initial: InputMode = InputMode.NORMAL) -> None:
        self.current = initial
        self._previous: list[InputMode] = []

    def enter(self, mode: InputMode) -> None:
        logger.debug("mode_enter from=%s to=%s depth=%d", self.current.value, mode.value, len(self._previous) + 1)
        self._previous.append(self.current)
        self.current = mode

    def leave(self) -> InputMode:
        """Return to the interrupted mode, or Normal when nothing was interrupted."""
        left = self.current
        self.current = self._previous.pop() if self._previous else InputMode.NORMAL
        logger.debug("mode_leave from=%s to=%s depth=%d", left.value, self.current.value, len(self._previous))
        return self.current

    @property
    def depth(self) -> int:
        return len(self._previous)

    @property
    def previous(self) -> InputMode | None:
        return self._previous[-1] if self._previous else None

    def __contains__(self, mode: InputMode) -> bool:
        return mode == self.current or mode in self._previous


@dataclass
class UiState:
    """Free-text buffer for the first-run username prompt and vim-style motion state."""

    input: str = ""
    input_error: str | None = None
    number_prefix: str = ""
    pending_g: bool = False


@dataclass
class ProductsState:
    items: dict[str, Product] = field(default_factory=dict)
    selected_index: int = 0
    error: str | None = None
    named_products: dict[str, int] = field(default_factory=dict)
    named_products_error: str | None = None


@dataclass
class UserState:
    member_id: int | None = None
    member_info: MemberInfo | None = None
    latest_sales: list[Sale] = field(default_factory=list)
    error: str | None = None

    def reset(self) -> None:
        self.member_id = None
        self.member_info = None
        self.latest_sales = []
        self.error = None


@dataclass
class Modals:
    """One slot per modal kind; a slot holds a value only while that modal is open."""

    username: UsernameModal | None = None
    purchase: PurchaseModal | None = None
    search: SearchModal | None = None
    error: ErrorModal | None = None
    parking: ParkingModal | None = None
    terminal_size: TerminalSizeModal | None = None
    qr_payment: QrPaymentModal | None = None


_MODAL_SLOT_BY_MODE: dict[InputMode, str] = {
    InputMode.EDITING_USERNAME: "username",
    InputMode.BUY_CONFIRMATION: "purchase",
    InputMode.SEARCH: "search",
    InputMode.ERROR_MODAL: "error",
    InputMode.PARKING_INPUT: "parking",
    InputMode.PARKING_CONFIRMATION: "parking",
    InputMode.TERMINAL_TOO_SMALL: "terminal_size",
    InputMode.QR_AMOUNT_INPUT: "qr_payment",
    InputMode.QR_DISPLAY: "qr_payment",
}


class AppState:
    """Everything the UI shows, owned by the event loop's consumer."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        initial = InputMode.NORMAL if settings.username is not None else InputMode.EDITING_INITIAL_USERNAME
        self.modes = ModeStack(initial)
        self.ui = UiState()
        self.products = ProductsState()
        self.user = UserState()
        self.modals = Modals()
        self.should_quit = False

    @property
    def mode(self) -> InputMode:
        return self.modes.current

    def enter_mode(self, mode: InputMode) -> None:
        self.modes.enter(mode)

    def leave_mode(self) -> InputMode:
        return self.modes.leave()

    @property
    def active_modal(self) -> Modal | None:
        """The modal owning input in the current mode, if any."""
        slot = _MODAL_SLOT_BY_MODE.get(self.mode)
        if slot is None:
            return None
        return getattr(self.modals, slot)

    def sorted_products(self) -> list[Product]:
        return sorted(self.products.items.values(), key=Product.sort_key)

    def selected_product(self) -> Product | None:
        products = self.sorted_products()
        idx = self.products.selected_index
        if 0 <= idx < len(products):
            return products[idx]
        return None

    def select_product_id(self, product_id: str) -> bool:
        for idx, product in enumerate(self.sorted_products()):
            if product.id == product_id:
                self.products.selected_index = idx
                return True
        return False

    def clamp_selection(self) -> None:
        total = len(self.products.items)
        self.products.selected_index = min(max(0, self.products.selected_index), max(0, total - 1))

    def move_selection_down(self, count: int = 1) -> None:
        total = len(self.products.items)
        if total == 0:
            return
        current = self.products.selected_index
        target = current + count
        self.products.selected_index = target if target < total else min(current + 1, total - 1)

    def move_selection_up(self, count: int = 1) -> None:
        if not self.products.items:
            return
        current = self.products.selected_index
        self.products.selected_index = current - count if current >= count else max(0, current - 1)

    def go_to_top(self) -> None:
        self.products.selected_index = 0
        self.ui.number_prefix = ""

    def go_to_bottom(self) -> None:
        if self.products.items:
            self.products.selected_index = len(self.products.items) - 1
        self.ui.number_prefix = ""

    def take_count_prefix(self) -> int:
        """Consume the typed count prefix (``5j``), defaulting to 1."""
        prefix, self.ui.number_prefix = self.ui.number_prefix, ""
        return int(prefix) if prefix.isdigit() and int(prefix) > 0 else 1

    def get_movement_target_indices(self) -> list[int]:
        """Rows a ``<count>j`` / ``<count>k`` would land on, for highlighting."""
        if not self.ui.number_prefix.isdigit():
            return []
        distance = int(self.ui.number_prefix)
        if distance <= 0:
            return []
        current = self.products.selected_index
        targets = []
        if current >= distance:
            targets.append(current - distance)
        if current + distance < len(self.products.items):
            targets.append(current + distance)
        return targets

    def handle_invalid_username(self, error: str) -> None:
        self.user.reset()
        self.user.error = f"Username error: {error}"

    def validate_user_for_purchase(self) -> str | None:
        """Return why the current account cannot buy anything, or ``None``."""
        if self.user.error is not None:
            return f"Error: {self.user.error}"
        if self.user.member_id is None or self.user.member_info is None:
            return (
                "Please sign in with a valid username. "
                "The current username doesn't exist or couldn't be verified."
            )
        return None
