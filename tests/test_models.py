"""Tests for API payload parsing."""

import pytest

from stregsystem_tui.errors import ApiError
from stregsystem_tui.models import MemberInfo, Product, Sale, VehicleInfo
from stregsystem_tui.money import Money


def test_product_from_json() -> None:
    product = Product.from_json("12", {"name": "Cocio", "price": 1200})
    assert product == Product("12", "Cocio", Money(1200))


@pytest.mark.parametrize(
    "payload",
    [None, [], {"name": "x"}, {"name": 3, "price": 100}, {"name": "x", "price": 1.5}, {"name": "x", "price": True}],
)
def test_product_rejects_malformed_payloads(payload) -> None:
    with pytest.raises(ApiError):
        Product.from_json("1", payload)


def test_product_sort_key_puts_numeric_ids_first() -> None:
    products = [Product(pid, pid, Money(0)) for pid in ["b", "100", "9", "a10"]]
    assert [p.id for p in sorted(products, key=Product.sort_key)] == ["9", "100", "a10", "b"]


def test_member_info_from_json() -> None:
    member = MemberInfo.from_json({"username": "alice", "name": "Alice", "balance": -250, "active": True})
    assert member.balance == Money(-250)


def test_sale_timestamp_formatting() -> None:
    assert Sale("2024-03-01T12:30:00+01:00", "Cocio", Money(1200)).formatted_timestamp() == "01/03/2024 12:30"
    assert Sale("2024-03-01T12:30:00Z", "Cocio", Money(1200)).formatted_timestamp() == "01/03/2024 12:30"
    assert Sale("yesterday", "Cocio", Money(1200)).formatted_timestamp() == "Invalid date"


def test_vehicle_describe_skips_missing_parts() -> None:
    assert VehicleInfo("Toyota", None, "1.0").describe() == "Toyota 1.0"
    assert VehicleInfo().describe() == ""


def test_product_sort_key_treats_non_ascii_digits_as_text() -> None:
    products = [Product(pid, pid, Money(0)) for pid in ["²", "12", "٣", "3"]]
    assert [p.id for p in sorted(products, key=Product.sort_key)] == ["3", "12", "²", "٣"]


def test_sales_list_from_json() -> None:
    sales = Sale.list_from_json({"sales": [{"timestamp": "2024-03-01T12:30:00Z", "product": "Cocio", "price": 1200}]})
    assert sales == [Sale("2024-03-01T12:30:00Z", "Cocio", Money(1200))]


@pytest.mark.parametrize("payload", [[], {"sales": "x"}, {"sales": [{"product": "Cocio", "price": 1200}]}])
def test_malformed_sales_raise_api_error(payload) -> None:
    with pytest.raises(ApiError) as excinfo:
        Sale.list_from_json(payload)
    assert excinfo.value.message.startswith("Malformed sales:")


def test_member_info_rejects_string_balance() -> None:
    with pytest.raises(ApiError):
        MemberInfo.from_json({"username": "alice", "name": "Alice", "balance": "10"})
