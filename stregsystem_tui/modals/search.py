"""Product search modal."""

from __future__ import annotations

from dataclasses import dataclass, field

from stregsystem_tui.models import Product
from stregsystem_tui.search import normalize_query, rank_products
from stregsystem_tui.state import AppState, InputMode


@dataclass
class SearchModal:
    input: str = ""
    results: list[Product] = field(default_factory=list)
    selected_index: int = 0


def show_search_modal(state: AppState) -> None:
    state.modals.search = SearchModal()
    state.enter_mode(InputMode.SEARCH)


def hide_search_modal(state: AppState) -> None:
    state.modals.search = None
    state.leave_mode()


def update_search_results(state: AppState) -> None:
    modal = state.modals.search
    if modal is None:
        return
    modal.results = rank_products(
        normalize_query(modal.input),
        state.products.items,
        state.products.named_products,
    )
    if modal.results:
        modal.selected_index = 0


def type_search_char(state: AppState, char: str) -> None:
    if state.modals.search is None:
        return
    state.modals.search.input += char
    update_search_results(state)


def delete_search_char(state: AppState) -> None:
    if state.modals.search is None:
        return
    state.modals.search.input = state.modals.search.input[:-1]
    update_search_results(state)


def next_search_result(modal: SearchModal) -> None:
    if modal.results:
        modal.selected_index = (modal.selected_index + 1) % len(modal.results)


def previous_search_result(modal: SearchModal) -> None:
    if modal.results:
        modal.selected_index = (modal.selected_index - 1) % len(modal.results)


def selected_search_result(modal: SearchModal) -> Product | None:
    if 0 <= modal.selected_index < len(modal.results):
        return modal.results[modal.selected_index]
    return None


def select_product_from_search(state: AppState) -> None:
    """Jump the catalog cursor to the highlighted result and close the modal."""
    modal = state.modals.search
    if modal is None:
        return
    product = selected_search_result(modal)
    if product is None:
        return
    if state.select_product_id(product.id):
        hide_search_modal(state)
