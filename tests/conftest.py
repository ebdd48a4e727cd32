"""Shared fakes and fixtures."""

from __future__ import annotations

import asyncio

import pytest

from stregsystem_tui.errors import AppError
from stregsystem_tui.models import MemberInfo, Product, Sale, VehicleInfo
from stregsystem_tui.money import Money
from stregsystem_tui.orchestrator import ActionOrchestrator
from stregsystem_tui.settings import Settings, SettingsStore
from stregsystem_tui.state import AppState


def make_catalog() -> dict[str, Product]:
    return {
        "12": Product("12", "Cocio", Money(1200)),
        "14": Product("14", "Fanta", Money(1000)),
        "120": Product("120", "Cocio Light", Money(1300)),
        "1337": Product("1337", "Monster Energy", Money(2000)),
        "7": Product("7", "Coffee", Money(500)),
    }


class FakeBackend:
    """In-memory stand-in for BackendClient.

    Set ``errors[<method name>]`` to an AppError to make that call fail.
    """

    def __init__(self) -> None:
        self.products = make_catalog()
        self.named_products = {"cola": 12, "energy": 1337, "kaffe": 7}
        self.member_ids: dict[str, int] = {"alice": 42}
        self.members: dict[int, MemberInfo] = {42: MemberInfo("alice", "Alice A.", Money(10000))}
        self.sales: dict[int, list[Sale]] = {
            42: [Sale("2024-03-01T12:30:00+01:00", "Cocio", Money(1200))],
        }
        self.errors: dict[str, AppError] = {}
        self.calls: list[tuple] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def _call(self, name: str, *args):
        self.calls.append((name, *args))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            if name in self.errors:
                raise self.errors[name]
        finally:
            self.in_flight -= 1

    async def fetch_products(self) -> dict[str, Product]:
        await self._call("fetch_products")
        return dict(self.products)

    async def fetch_named_products(self) -> dict[str, int]:
        await self._call("fetch_named_products")
        return dict(self.named_products)

    async def fetch_member_id(self, username: str) -> int | None:
        await self._call("fetch_member_id", username)
        return self.member_ids.get(username)

    async def fetch_member_info(self, member_id: int) -> MemberInfo:
        await self._call("fetch_member_info", member_id)
        return self.members[member_id]

    async def fetch_latest_sales(self, member_id: int) -> list[Sale]:
        await self._call("fetch_latest_sales", member_id)
        return list(self.sales.get(member_id, []))

    async def make_purchase(self, member_id: int, buystring: str) -> None:
        await self._call("make_purchase", member_id, buystring)
        username, order = buystring.split(" ")
        product_id, quantity = order.split(":")
        member = self.members[member_id]
        cost = self.products[product_id].price * int(quantity)
        self.members[member_id] = MemberInfo(member.username, member.name, member.balance - cost)

    async def close(self) -> None:
        self.calls.append(("close",))


class FakeParking:
    def __init__(self) -> None:
        self.registrations: list[tuple[str, str]] = []
        self.error: AppError | None = None
        self.vehicle = VehicleInfo(brand="Toyota", model="Yaris", variant="1.0")
        self.vehicle_error: AppError | None = None
        self.closed = False

    async def register_parking(self, plate: str, phone_number: str) -> None:
        if self.error is not None:
            raise self.error
        self.registrations.append((plate, phone_number))

    async def fetch_vehicle_info(self, plate: str) -> VehicleInfo:
        if self.vehicle_error is not None:
            raise self.vehicle_error
        return self.vehicle

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def parking_service() -> FakeParking:
    return FakeParking()


@pytest.fixture
def orchestrator(backend: FakeBackend, parking_service: FakeParking) -> ActionOrchestrator:
    return ActionOrchestrator(backend, parking_service)  # type: ignore[arg-type]


@pytest.fixture
def store(tmp_path) -> SettingsStore:
    return SettingsStore(directory=tmp_path)


@pytest.fixture
def state() -> AppState:
    return AppState(Settings(username="alice"))


@pytest.fixture
def loaded_state(state: AppState) -> AppState:
    """State with the fake catalog and alice's account already in place."""
    state.products.items = make_catalog()
    state.products.named_products = {"cola": 12, "energy": 1337, "kaffe": 7}
    state.user.member_id = 42
    state.user.member_info = MemberInfo("alice", "Alice A.", Money(10000))
    return state
