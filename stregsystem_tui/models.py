"""Domain models for stregsystem-tui."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, TypeVar

from pydantic import BaseModel, StrictInt, StrictStr, TypeAdapter, ValidationError

from stregsystem_tui.config import BALANCE_HIGH_THRESHOLD, BALANCE_MID_THRESHOLD
from stregsystem_tui.errors import ApiError
from stregsystem_tui.formatters import sanitize_html
from stregsystem_tui.money import Money

T = TypeVar("T")


# Wire payloads. Amounts arrive as integer øre.


class ProductPayload(BaseModel):
    name: StrictStr
    price: StrictInt


class MemberIdPayload(BaseModel):
    member_id: StrictInt | None = None


class MemberInfoPayload(BaseModel):
    username: StrictStr
    name: StrictStr
    balance: StrictInt


class SalePayload(BaseModel):
    timestamp: StrictStr
    product: StrictStr
    price: StrictInt


class SalesPayload(BaseModel):
    sales: list[SalePayload]


PRODUCT_ADAPTER = TypeAdapter(ProductPayload)
PRODUCTS_ADAPTER = TypeAdapter(dict[str, ProductPayload])
NAMED_PRODUCTS_ADAPTER = TypeAdapter(dict[str, StrictInt])
MEMBER_ID_ADAPTER = TypeAdapter(MemberIdPayload)
MEMBER_INFO_ADAPTER = TypeAdapter(MemberInfoPayload)
SALES_ADAPTER = TypeAdapter(SalesPayload)


def describe_validation_error(exc: ValidationError) -> str:
    """The first problem in a pydantic error, as ``field: message``."""
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    return f"{location}: {first['msg']}" if location else first["msg"]


def parse_payload(adapter: TypeAdapter[T], payload: Any, what: str) -> T:
    try:
        return adapter.validate_python(payload)
    except ValidationError as exc:
        raise ApiError(f"Malformed {what}: {describe_validation_error(exc)}") from exc


@dataclass(frozen=True)
class Product:
    """A purchasable product from the active catalog, name already stripped of markup."""

    id: str
    name: str
    price: Money

    @classmethod
    def from_payload(cls, product_id: str, payload: ProductPayload) -> Product:
        return cls(id=product_id, name=sanitize_html(payload.name), price=Money(payload.price))

    @classmethod
    def from_json(cls, product_id: str, payload: Any) -> Product:
        return cls.from_payload(product_id, parse_payload(PRODUCT_ADAPTER, payload, "product"))

    def sort_key(self) -> tuple[int, int, str]:
        """Numeric ids first in numeric order, then the rest lexically."""
        if self.id.isascii() and self.id.isdigit():
            return (0, int(self.id), self.id)
        return (1, 0, self.id)


class BalanceTier(Enum):
    """Colour band for a member balance."""

    HIGH = "high"
    MID = "mid"
    LOW = "low"


def balance_tier(balance: Money) -> BalanceTier:
    if balance >= BALANCE_HIGH_THRESHOLD:
        return BalanceTier.HIGH
    if balance >= BALANCE_MID_THRESHOLD:
        return BalanceTier.MID
    return BalanceTier.LOW


@dataclass(frozen=True)
class MemberInfo:
    """A resolved member account."""

    username: str
    name: str
    balance: Money

    @classmethod
    def from_json(cls, payload: Any) -> MemberInfo:
        parsed = parse_payload(MEMBER_INFO_ADAPTER, payload, "member info")
        return cls(username=parsed.username, name=parsed.name, balance=Money(parsed.balance))

    @property
    def tier(self) -> BalanceTier:
        return balance_tier(self.balance)


@dataclass(frozen=True)
class Sale:
    """One line of the member's recent purchase history."""

    timestamp: str
    product: str
    price: Money

    @classmethod
    def from_payload(cls, payload: SalePayload) -> Sale:
        return cls(timestamp=payload.timestamp, product=payload.product, price=Money(payload.price))

    @classmethod
    def list_from_json(cls, payload: Any) -> list[Sale]:
        parsed = parse_payload(SALES_ADAPTER, payload, "sales")
        return [cls.from_payload(sale) for sale in parsed.sales]

    def formatted_timestamp(self) -> str:
        try:
            parsed = datetime.fromisoformat(self.timestamp.replace("Z", "+00:00"))
        except ValueError:
            return "Invalid date"
        return parsed.strftime("%d/%m/%Y %H:%M")


@dataclass(frozen=True)
class VehicleInfo:
    """Best-effort vehicle description for a licence plate."""

    brand: str | None = None
    model: str | None = None
    variant: str | None = None

    def describe(self) -> str:
        return " ".join(part for part in (self.brand, self.model, self.variant) if part)
