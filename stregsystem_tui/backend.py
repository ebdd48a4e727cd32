"""HTTP clients for the stregsystem API and the parking provider."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from stregsystem_tui.config import (
    API_URL,
    PARKING_AREA_ID,
    PARKING_AREA_KEY,
    PARKING_COUNTRY,
    PARKING_DURATION_MINUTES,
    PARKING_LANG,
    PARKING_PHONE_PREFIX,
    PARKING_UID,
    PARKING_URL,
    VEHICLE_LOOKUP_URL,
)
from stregsystem_tui.errors import ApiError, NetworkError
from stregsystem_tui.formatters import extract_element_text
from stregsystem_tui.models import (
    MEMBER_ID_ADAPTER,
    NAMED_PRODUCTS_ADAPTER,
    PRODUCTS_ADAPTER,
    MemberInfo,
    Product,
    Sale,
    VehicleInfo,
    parse_payload,
)

logger = logging.getLogger(__name__)

ACTIVE_PRODUCTS_ENDPOINT = "/products/active_products"
NAMED_PRODUCTS_ENDPOINT = "/products/named_products"
MEMBER_ID_ENDPOINT = "/member/get_id"
MEMBER_INFO_ENDPOINT = "/member"
SALES_ENDPOINT = "/member/sales"
PURCHASE_ENDPOINT = "/sale"


async def send_request(client: httpx.AsyncClient, method: str, url: str, what: str, **kwargs: Any) -> httpx.Response:
    """Send one request, turning every httpx failure into an ``AppError``.

    Connection problems become ``NetworkError``. Anything else httpx raises
    while sending or reading the response (bad content encoding, redirect
    loops) is an ``ApiError``.
    """
    try:
        return await client.request(method, url, **kwargs)
    except httpx.TransportError as exc:
        raise NetworkError(f"Could not reach the server while trying to {what}: {exc}") from exc
    except httpx.RequestError as exc:
        raise ApiError(f"Failed to {what}: {exc}") from exc


class BackendClient:
    """Async client for the stregsystem REST API.

    Every method issues exactly one request. Transport failures raise
    ``NetworkError``; non-2xx answers and unusable bodies raise ``ApiError``.
    """

    def __init__(
        self,
        room_id: int,
        api_url: str = API_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.room_id = room_id
        self.api_url = api_url.rstrip("/")
        self.client = httpx.AsyncClient(base_url=self.api_url, transport=transport)

    async def __aenter__(self) -> BackendClient:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.client.aclose()

    async def close(self) -> None:
        await self.client.aclose()

    async def _request(self, method: str, path: str, what: str, **kwargs: Any) -> httpx.Response:
        logger.debug("backend_request method=%s path=%s", method, path)
        response = await send_request(self.client, method, path, what, **kwargs)
        if not response.is_success:
            raise ApiError(
                f"Failed to {what}: HTTP status {response.status_code}",
                status_code=response.status_code,
            )
        return response

    @staticmethod
    def _json(response: httpx.Response, what: str) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise ApiError(f"Failed to {what}: response was not valid JSON") from exc

    async def fetch_products(self) -> dict[str, Product]:
        what = "fetch products"
        response = await self._request("GET", ACTIVE_PRODUCTS_ENDPOINT, what, params={"room_id": self.room_id})
        payload = parse_payload(PRODUCTS_ADAPTER, self._json(response, what), "product list")
        return {product_id: Product.from_payload(product_id, raw) for product_id, raw in payload.items()}

    async def fetch_named_products(self) -> dict[str, int]:
        what = "fetch named products"
        response = await self._request("GET", NAMED_PRODUCTS_ENDPOINT, what)
        return parse_payload(NAMED_PRODUCTS_ADAPTER, self._json(response, what), "named products")

    async def fetch_member_id(self, username: str) -> int | None:
        """Resolve a username, returning ``None`` when the server does not know it."""
        what = "fetch member ID"
        try:
            response = await self._request("GET", MEMBER_ID_ENDPOINT, what, params={"username": username})
        except ApiError as exc:
            if exc.status_code == 404:
                return None
            raise
        return parse_payload(MEMBER_ID_ADAPTER, self._json(response, what), "member ID").member_id

    async def fetch_member_info(self, member_id: int) -> MemberInfo:
        what = "fetch member info"
        response = await self._request("GET", MEMBER_INFO_ENDPOINT, what, params={"member_id": member_id})
        return MemberInfo.from_json(self._json(response, what))

    async def fetch_latest_sales(self, member_id: int) -> list[Sale]:
        what = "fetch sales"
        response = await self._request("GET", SALES_ENDPOINT, what, params={"member_id": member_id})
        return Sale.list_from_json(self._json(response, what))

    async def make_purchase(self, member_id: int, buystring: str) -> None:
        body = {"member_id": member_id, "buystring": buystring, "room": self.room_id}
        await self._request("POST", PURCHASE_ENDPOINT, "make purchase", json=body)
        logger.info("purchase_submitted member_id=%s buystring=%r", member_id, buystring)


class ParkingClient:
    """Client for the mobile-parking.eu permit endpoint and the plate lookup site."""

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.client = httpx.AsyncClient(transport=transport, follow_redirects=True)

    async def close(self) -> None:
        await self.client.aclose()

    @staticmethod
    def build_payload(plate: str, phone_number: str) -> dict[str, Any]:
        return {
            "email": "",
            "PhoneNumber": f"{PARKING_PHONE_PREFIX}{phone_number}",
            "VehicleRegistrationCountry": PARKING_COUNTRY,
            "Duration": PARKING_DURATION_MINUTES,
            "VehicleRegistration": plate,
            "parkingAreas": [{"ParkingAreaId": PARKING_AREA_ID, "ParkingAreaKey": PARKING_AREA_KEY}],
            "UId": PARKING_UID,
            "Lang": PARKING_LANG,
        }

    async def register_parking(self, plate: str, phone_number: str) -> None:
        response = await send_request(
            self.client, "POST", PARKING_URL, "register parking", json=self.build_payload(plate, phone_number)
        )
        if not response.is_success:
            raise ApiError(
                f"Parking registration failed: {response.status_code} - {response.text}",
                status_code=response.status_code,
            )
        logger.info("parking_registered plate=%s", plate)

    async def fetch_vehicle_info(self, plate: str) -> VehicleInfo:
        """Scrape brand/model/variant for a plate; unknown plates give an empty result."""
        response = await send_request(self.client, "GET", VEHICLE_LOOKUP_URL.format(plate=plate), "look up the vehicle")
        if not response.is_success:
            return VehicleInfo()
        html = response.text
        return VehicleInfo(
            brand=extract_element_text(html, "maerke"),
            model=extract_element_text(html, "model"),
            variant=extract_element_text(html, "variant"),
        )
