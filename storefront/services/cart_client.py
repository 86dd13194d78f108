"""
Storefront Cart Client

HTTP client for the cart API that keeps the last cart the server returned as
a local cache. Every response replaces the cache wholesale; the client never
patches totals itself.
"""

import logging
from typing import Any, Optional

import httpx

from cart_core import ERRORS_BY_CODE, CartError, PersistenceError

logger = logging.getLogger(__name__)

DEFAULT_GUEST_SESSION_HEADER = "X-Guest-Session"


class CartClient:
    """
    Client for the storefront cart endpoints.

    With an access token it talks to the signed-in cart; without one it uses
    the guest cart and remembers the session id the server hands out.

    Usage:
        async with CartClient("http://localhost:8001") as client:
            await client.add_item("perf-001", "50ml", quantity=2)
            print(client.cart["totalPrice"])
    """

    def __init__(
        self,
        base_url: str,
        access_token: Optional[str] = None,
        guest_session: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 30.0,
        guest_session_header: str = DEFAULT_GUEST_SESSION_HEADER,
    ):
        """
        Initialize cart client.

        Args:
            base_url: Base URL of the storefront API
            access_token: Bearer token for the signed-in cart
            guest_session: Existing guest session id, if any
            transport: Custom httpx transport (e.g. ASGI in tests)
            timeout: Request timeout in seconds
            guest_session_header: Header carrying the guest session id (server setting)
        """
        self.base_url = base_url.rstrip("/")
        self.access_token = access_token
        self.guest_session = guest_session
        self.guest_session_header = guest_session_header
        self.cart: Optional[dict[str, Any]] = None
        self._http_client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "CartClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        """Close HTTP client"""
        await self._http_client.aclose()

    @property
    def cart_path(self) -> str:
        return "/api/cart" if self.access_token else "/api/guest/cart"

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        if self.guest_session:
            headers[self.guest_session_header] = self.guest_session
        return headers

    def _raise_for_error(self, response: httpx.Response) -> None:
        """Turn an error response back into the cart error it came from"""
        try:
            body = response.json()
        except ValueError:
            body = {}
        detail = body.get("detail") if isinstance(body, dict) else None
        message = detail if isinstance(detail, str) else response.text or response.reason_phrase

        logger.error(f"Request failed: {response.status_code} - {message}")
        error_type = ERRORS_BY_CODE.get(body.get("error")) if isinstance(body, dict) else None
        if error_type:
            raise error_type(message)
        if response.status_code >= 500:
            raise PersistenceError(message)
        raise CartError(f"HTTP {response.status_code}: {message}")

    async def _request(self, method: str, path: str, body: Optional[dict] = None) -> dict[str, Any]:
        """Make a request and refresh the cart cache from the response"""
        try:
            response = await self._http_client.request(
                method,
                path,
                headers=self._headers(),
                json=body,
            )
        except httpx.TransportError as exc:
            logger.error(f"Request to {path} failed: {exc}")
            raise PersistenceError(f"Storefront unreachable: {exc}") from exc

        if not self.access_token and response.headers.get(self.guest_session_header):
            self.guest_session = response.headers[self.guest_session_header]

        if response.status_code >= 400:
            self._raise_for_error(response)

        try:
            data = response.json()
        except ValueError as exc:
            logger.error(f"Unreadable response from {path}: {exc}")
            raise PersistenceError(f"Storefront returned an unreadable response: {exc}") from exc
        if isinstance(data, dict) and "cart" in data:
            self.cart = data["cart"]
        return data

    # ==================== Cache helpers ====================

    def find_item(self, product_id: str, size: str) -> Optional[dict[str, Any]]:
        """Cached line item for a product size"""
        for item in (self.cart or {}).get("items", []):
            if item["productId"] == product_id and item["size"] == size:
                return item
        return None

    def find_bundle(self, collection_id: str) -> Optional[dict[str, Any]]:
        for bundle in (self.cart or {}).get("bundleItems", []):
            if bundle["bundleId"] == collection_id:
                return bundle
        return None

    @property
    def total_items(self) -> int:
        return (self.cart or {}).get("totalItems", 0)

    # ==================== Cart APIs ====================

    async def get_cart(self) -> dict:
        """Fetch the cart"""
        return (await self._request("GET", self.cart_path))["cart"]

    async def add_item(self, product_id: str, size: Optional[str] = None, quantity: int = 1) -> dict:
        """Add a product size to the cart"""
        body = {"productId": product_id, "quantity": quantity}
        if size:
            body["size"] = size
        return (await self._request("POST", f"{self.cart_path}/items", body=body))["cart"]

    async def add_bundle(
        self,
        collection_id: str,
        quantity: int = 1,
        products: Optional[list[dict]] = None,
    ) -> dict:
        """Add a collection to the cart"""
        body: dict[str, Any] = {"collectionId": collection_id, "quantity": quantity}
        if products is not None:
            body["products"] = products
        return (await self._request("POST", f"{self.cart_path}/bundles", body=body))["cart"]

    async def set_quantity(self, item_id: str, quantity: int) -> dict:
        """Set an entry's quantity (0 removes it)"""
        return (
            await self._request("PUT", f"{self.cart_path}/items/{item_id}", body={"quantity": quantity})
        )["cart"]

    async def increment(self, item_id: str) -> dict:
        return (await self._request("PUT", f"{self.cart_path}/items/{item_id}/increment"))["cart"]

    async def decrement(self, item_id: str) -> dict:
        return (await self._request("PUT", f"{self.cart_path}/items/{item_id}/decrement"))["cart"]

    async def remove_item(self, item_id: str) -> dict:
        return (await self._request("DELETE", f"{self.cart_path}/items/{item_id}"))["cart"]

    async def clear(self) -> dict:
        return (await self._request("DELETE", self.cart_path))["cart"]

    async def checkout(self) -> dict:
        """Hand the cart off as an order; returns the order summary"""
        return (await self._request("POST", f"{self.cart_path}/checkout"))["order"]

    async def merge_guest_cart(self, guest_session: Optional[str] = None) -> dict:
        """
        Fold a guest cart into the signed-in cart after login.

        Uses the remembered guest session unless one is given, and forgets it
        once the server confirms the merge. A failed merge keeps the session
        so the call can be retried.
        """
        if not self.access_token:
            raise CartError("Merging a guest cart requires an access token")
        session_id = guest_session or self.guest_session
        if not session_id:
            return await self.get_cart()

        self.guest_session = session_id
        data = await self._request("POST", "/api/cart/merge")
        self.guest_session = None
        logger.info(f"Merged guest session {session_id}: {data.get('message')}")
        return data["cart"]
