"""Client for the canteen backend REST API (menu, cart, auth, orders).
"""

from typing import Any, Dict, List, Optional
import logging
import httpx

from adapters.http_client import BaseClient
from app.exceptions import BackendError

logger = logging.getLogger("storefront.backend")

_client: Optional["CanteenBackendClient"] = None

# code of errors raised for {"success": false} answers
REJECTED = "BACKEND_REJECTED"


def expect_success(payload: Any, default_message: str) -> Any:
    """Raise when the backend answered ``{"success": false, ...}``."""
    if isinstance(payload, dict) and payload.get("success") is False:
        raise BackendError(payload.get("message") or default_message, code=REJECTED)
    return payload


def _data(payload: Any) -> Any:
    if isinstance(payload, dict):
        return payload.get("data")
    return payload


class CanteenBackendClient(BaseClient):
    service_name = "canteen backend"

    # ------------------ Menu ------------------
    def list_foods(self) -> List[Dict[str, Any]]:
        payload = self.request("GET", "/api/foods/allFoods")
        expect_success(payload, "Error fetching food list")
        return _data(payload) or []

    def get_menu(self) -> List[Dict[str, Any]]:
        """Raw menu listing; the endpoint returns either a list or ``{data: [...]}``."""
        payload = self.request("GET", "/api/menu/getMenu")
        if isinstance(payload, list):
            return payload
        return _data(payload) or []

    # ------------------ Auth ------------------
    def register(self, username: str, email: str, password: str, role: str) -> Dict[str, Any]:
        payload = self.request(
            "POST",
            "/api/user/register",
            json={"username": username, "email": email, "password": password, "role": role},
        )
        return expect_success(payload, "Registration failed")

    def login(self, email: str, password: str) -> Dict[str, Any]:
        payload = self.request(
            "POST", "/api/user/login", json={"email": email, "password": password}
        )
        return expect_success(payload, "Login failed")

    def google_auth_url(self) -> str:
        return self.url("/api/user/auth/google")

    # ------------------ Cart ------------------
    def cart_add(self, token: str, item_id: str, notes: Optional[str] = None) -> Any:
        body: Dict[str, Any] = {"itemId": item_id}
        if notes is not None:
            body["notes"] = notes
        payload = self.request("POST", "/api/cart/add", token=token, json=body)
        return expect_success(payload, "Could not add item to cart")

    def cart_remove(self, token: str, item_id: str) -> Any:
        payload = self.request(
            "POST", "/api/cart/remove", token=token, json={"itemId": item_id}
        )
        return expect_success(payload, "Could not remove item from cart")

    def cart_get(self, token: str) -> Dict[str, int]:
        """Server-side cart as ``{food_id: quantity}``."""
        payload = self.request("POST", "/api/cart/get", token=token, json={})
        expect_success(payload, "Could not load cart")
        data = payload.get("cartData") if isinstance(payload, dict) else None
        if data is None:
            data = _data(payload)
        return data or {}

    # ------------------ Orders ------------------
    def create_order(self, token: str, order: Dict[str, Any]) -> Dict[str, Any]:
        payload = self.request("POST", "/api/order/createOrder", bearer=token, json=order)
        return expect_success(payload, "Something went wrong!")

    def all_orders(self, token: str) -> List[Dict[str, Any]]:
        payload = self.request("GET", "/api/order/allOrders", bearer=token)
        expect_success(payload, "Error fetching orders")
        data = _data(payload)
        return data if isinstance(data, list) else []

    def user_orders(self, token: str) -> List[Dict[str, Any]]:
        payload = self.request("POST", "/api/order/userorders", token=token, json={})
        expect_success(payload, "Error fetching orders")
        return _data(payload) or []

    def order_status(self, token: str, order_id: str) -> Optional[Dict[str, Any]]:
        payload = self.request("GET", f"/api/order/status/{order_id}", bearer=token)
        if isinstance(payload, dict) and payload.get("success") is False:
            logger.info("Order %s not found: %s", order_id, payload.get("message"))
            return None
        return _data(payload)

    def admin_orders(self, token: str) -> List[Dict[str, Any]]:
        payload = self.request("GET", "/api/order/all", token=token)
        expect_success(payload, "Failed to fetch orders")
        return _data(payload) or []

    def update_order_status(self, token: str, order_id: str, status: str) -> Any:
        payload = self.request(
            "POST",
            "/api/order/update-status",
            token=token,
            json={"orderId": order_id, "status": status},
        )
        return expect_success(payload, "Failed to update order status")


# ------------------ Connection ------------------
def connect(base_url: str, timeout: float = 20.0, transport: Optional[httpx.BaseTransport] = None) -> CanteenBackendClient:
    global _client
    close()
    _client = CanteenBackendClient(base_url, timeout=timeout, transport=transport)
    logger.info("Canteen backend client ready for %s", base_url)
    return _client


def get_client() -> CanteenBackendClient:
    """Lazy init using application settings."""
    global _client
    if _client is None:
        from app.config import settings

        _client = CanteenBackendClient(settings.backend_url, timeout=settings.http_timeout_sec)
    return _client


def close():
    global _client
    try:
        if _client is not None:
            _client.close()
            logger.info("Canteen backend client closed")
    finally:
        _client = None
