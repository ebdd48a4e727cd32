"""Purchase confirmation modal with quantity control."""

from __future__ import annotations

from dataclasses import dataclass

from stregsystem_tui.config import MAX_QUANTITY, MIN_QUANTITY
from stregsystem_tui.modals.error import show_error_modal
from stregsystem_tui.money import Money
from stregsystem_tui.state import AppState, InputMode


@dataclass
class PurchaseModal:
    """The pending purchase request plus the outcome once it was submitted."""

    product_id: str
    quantity: int = MIN_QUANTITY
    error: str | None = None
    success: bool = False

    @property
    def finished(self) -> bool:
        return self.success or self.error is not None


def show_purchase_modal(state: AppState) -> None:
    reason = state.validate_user_for_purchase()
    if reason is not None:
        show_error_modal(state, reason, "Invalid User")
        return

    product = state.selected_product()
    if product is None:
        return
    state.modals.purchase = PurchaseModal(product_id=product.id)
    state.enter_mode(InputMode.BUY_CONFIRMATION)


def hide_purchase_modal(state: AppState) -> None:
    state.modals.purchase = None
    state.leave_mode()


def increase_quantity(modal: PurchaseModal) -> None:
    if modal.quantity < MAX_QUANTITY:
        modal.quantity += 1


def decrease_quantity(modal: PurchaseModal) -> None:
    if modal.quantity > MIN_QUANTITY:
        modal.quantity -= 1


def total_cost(state: AppState) -> Money | None:
    modal = state.modals.purchase
    if modal is None:
        return None
    product = state.products.items.get(modal.product_id)
    if product is None:
        return None
    return product.price * modal.quantity


def has_sufficient_balance(state: AppState) -> bool:
    cost = total_cost(state)
    member = state.user.member_info
    if cost is None or member is None:
        return False
    return member.balance >= cost


def buy_string(state: AppState) -> str | None:
    """The ``"<username> <product id>:<quantity>"`` order line the API expects."""
    modal = state.modals.purchase
    member = state.user.member_info
    if modal is None or member is None:
        return None
    return f"{member.username} {modal.product_id}:{modal.quantity}"
