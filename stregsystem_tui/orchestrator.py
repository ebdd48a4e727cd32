"""Domain operations against the backend, applied to the one owned AppState."""

from __future__ import annotations

import asyncio
import logging

from stregsystem_tui.backend import BackendClient, ParkingClient
from stregsystem_tui.errors import AppError
from stregsystem_tui.modals.error import show_error_modal
from stregsystem_tui.modals.purchase import buy_string, has_sufficient_balance, total_cost
from stregsystem_tui.models import VehicleInfo
from stregsystem_tui.state import AppState

logger = logging.getLogger(__name__)


class ActionOrchestrator:
    """Runs catalog, account, purchase and parking operations.

    Every operation receives the application state and updates it in place, so
    there is exactly one copy of what the UI shows. Network and API failures
    are turned into messages on the relevant part of the state; only
    programming errors escape.
    """

    def __init__(self, backend: BackendClient, parking: ParkingClient) -> None:
        self.backend = backend
        self.parking = parking

    async def load_app_data(self, state: AppState) -> None:
        await self.load_catalog(state)
        if state.settings.username is not None:
            await self.load_account(state)

    async def load_catalog(self, state: AppState) -> None:
        try:
            state.products.items = await self.backend.fetch_products()
            state.products.error = None
        except AppError as exc:
            logger.warning("catalog_load_failed error=%s", exc)
            state.products.items = {}
            state.products.error = str(exc)
        state.clamp_selection()

        try:
            state.products.named_products = await self.backend.fetch_named_products()
            state.products.named_products_error = None
        except AppError as exc:
            logger.warning("aliases_load_failed error=%s", exc)
            state.products.named_products = {}
            state.products.named_products_error = str(exc)

    async def load_account(self, state: AppState) -> None:
        """Resolve the configured username and fetch balance and recent sales.

        Member info and sales are requested together and both awaited. If both
        fail, the member info error is the one kept.
        """
        state.user.reset()
        username = state.settings.username
        if username is None:
            return

        try:
            member_id = await self.backend.fetch_member_id(username)
        except AppError as exc:
            logger.warning("member_lookup_failed username=%s error=%s", username, exc)
            state.user.error = f"Failed to load user data: {exc}"
            return
        if member_id is None:
            state.user.error = f"Username '{username}' does not exist"
            return

        state.user.member_id = member_id
        info_result, sales_result = await asyncio.gather(
            self.backend.fetch_member_info(member_id),
            self.backend.fetch_latest_sales(member_id),
            return_exceptions=True,
        )

        if isinstance(info_result, AppError):
            logger.warning("member_info_failed member_id=%s error=%s", member_id, info_result)
            state.user.error = f"Failed to fetch member info: {info_result}"
        elif isinstance(info_result, BaseException):
            raise info_result
        else:
            state.user.member_info = info_result

        if isinstance(sales_result, AppError):
            logger.warning("sales_failed member_id=%s error=%s", member_id, sales_result)
            if state.user.error is None:
                state.user.error = f"Failed to fetch sales: {sales_result}"
        elif isinstance(sales_result, BaseException):
            raise sales_result
        else:
            state.user.latest_sales = sales_result

    async def purchase(self, state: AppState) -> None:
        """Submit the open purchase request after checking it locally."""
        modal = state.modals.purchase
        if modal is None:
            return

        reason = state.validate_user_for_purchase()
        if reason is not None:
            show_error_modal(state, reason, "Invalid User")
            return

        if not has_sufficient_balance(state):
            cost = total_cost(state)
            modal.error = (
                f"Insufficient balance. This purchase requires {cost}"
                if cost is not None
                else "Insufficient balance for this purchase"
            )
            return

        order = buy_string(state)
        member_id = state.user.member_id
        if order is None or member_id is None:
            show_error_modal(state, "Unable to process purchase: missing required information", "Purchase Error")
            return

        modal.error = None
        modal.success = False
        try:
            await self.backend.make_purchase(member_id, order)
        except AppError as exc:
            logger.warning("purchase_failed buystring=%r error=%s", order, exc)
            modal.error = f"Purchase failed: {exc}"
            return

        modal.success = True
        # The purchase stands even if the refresh fails; the account panel shows that error.
        await self.load_account(state)
        if state.user.error is not None:
            logger.warning("post_purchase_refresh_failed error=%s", state.user.error)

    async def register_parking(self, state: AppState) -> None:
        modal = state.modals.parking
        if modal is None:
            return
        try:
            await self.parking.register_parking(modal.license_plate_input, modal.phone_input)
        except AppError as exc:
            logger.warning("parking_failed plate=%s error=%s", modal.license_plate_input, exc)
            modal.success = False
            modal.error = f"Failed to register parking: {exc}"
            return
        modal.success = True
        modal.error = None

    async def lookup_vehicle(self, state: AppState) -> None:
        """Describe the confirmed plate; lookup failures just leave it undescribed."""
        modal = state.modals.parking
        if modal is None:
            return
        try:
            modal.vehicle = await self.parking.fetch_vehicle_info(modal.license_plate_input)
        except AppError as exc:
            logger.info("vehicle_lookup_failed plate=%s error=%s", modal.license_plate_input, exc)
            modal.vehicle = VehicleInfo()
