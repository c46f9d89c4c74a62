"""Recommendation service client with menu-derived fallbacks.

The recommendation service is optional for the storefront: when it is not
reachable (or in development, where it is never called) popular and similar
items are synthesised from the backend menu.
"""

from typing import Any, Callable, Dict, List, Optional
import logging
import httpx

from adapters.http_client import BaseClient
from adapters import backend_client
from app.exceptions import BackendError
from domain.schemas.recommendation_schemas import Result

logger = logging.getLogger("storefront.recommendations")

# Upstream statuses for which the menu-derived fallback is used.
FALLBACK_STATUSES = {400, 401, 403, 404, 500, 502, 503}

_client: Optional["RecommendationClient"] = None
_special_client: Optional[BaseClient] = None


def _item_name(item: Dict[str, Any]) -> str:
    return (item or {}).get("name") or (item or {}).get("item_name") or ""


def build_popular_from_menu(menu: List[Dict[str, Any]], limit: int = 5) -> List[Dict[str, Any]]:
    """First ``limit`` menu entries in the shape of the popular endpoint."""
    items = (menu or [])[: max(0, limit)]
    return [
        {
            "item_name": _item_name(it) or f"Item {idx + 1}",
            "order_count": it.get("order_count") or it.get("count") or 0,
        }
        for idx, it in enumerate(items)
    ]


def build_similar_from_menu(
    menu: List[Dict[str, Any]], base_name: str = "", limit: int = 6
) -> List[Dict[str, Any]]:
    """Name-based similarity: +2 when the name contains the base name, +1 when first letters match."""
    normalized = (base_name or "").lower()
    scored = []
    for it in menu or []:
        name = _item_name(it).lower()
        score = 0
        if normalized in name:
            score += 2
        if normalized and name[:1] == normalized[:1]:
            score += 1
        scored.append((score, it))
    # sorted() is stable, ties keep menu order
    scored = sorted(scored, key=lambda pair: pair[0], reverse=True)
    return [
        {"item_name": _item_name(it)}
        for score, it in scored
        if score > 0
    ][: max(0, limit)]


class RecommendationClient(BaseClient):
    service_name = "recommendation service"

    def __init__(
        self,
        base_url: str,
        timeout: float = 20.0,
        transport: Optional[httpx.BaseTransport] = None,
        synthesize_only: bool = False,
        menu_loader: Optional[Callable[[], List[Dict[str, Any]]]] = None,
    ):
        super().__init__(base_url, timeout=timeout, transport=transport)
        self.synthesize_only = synthesize_only
        self._menu_loader = menu_loader

    def _menu(self) -> List[Dict[str, Any]]:
        if self._menu_loader is not None:
            return self._menu_loader()
        return backend_client.get_client().get_menu()

    def _fallback(self, exc: BackendError, builder: Callable[[List[Dict[str, Any]]], List[Dict[str, Any]]], label: str) -> Optional[Result]:
        if exc.status_code not in FALLBACK_STATUSES:
            return None
        try:
            fallback = builder(self._menu())
        except BackendError as fallback_exc:
            logger.error("%s fallback failed: %s", label, fallback_exc)
            return None
        if fallback:
            logger.warning("Using fallback %s items from menu", label)
            return Result.ok(fallback)
        return None

    def fetch_popular(self, limit: int = 5, window_days: Optional[int] = None) -> Result:
        """Most ordered items, optionally within the last ``window_days`` days."""
        if window_days is not None and window_days < 1:
            return Result.fail("window_days must be at least 1")

        def builder(menu):
            return build_popular_from_menu(menu, limit)

        try:
            if self.synthesize_only:
                return Result.ok(builder(self._menu()))
            params: Dict[str, Any] = {"limit": limit}
            if window_days is not None:
                params["window_days"] = window_days
            logger.info("Requesting popular items: %s", self.url("/recommend/popular"))
            return Result.ok(self.request("GET", "/recommend/popular", params=params))
        except BackendError as exc:
            logger.error("Error fetching popular items: %s", exc)
            fallback = self._fallback(exc, builder, "popular")
            if fallback is not None:
                return fallback
            return Result.fail(exc.message or "Failed to fetch popular items.")

    def fetch_similar(self, item_name: str, limit: int = 6) -> Result:
        """Items similar to ``item_name``."""
        if not item_name:
            return Result.fail("item_name is required")

        def builder(menu):
            return build_similar_from_menu(menu, item_name, limit)

        try:
            if self.synthesize_only:
                return Result.ok(builder(self._menu()))
            logger.info("Fetching similar items for %r", item_name)
            return Result.ok(
                self.request(
                    "GET",
                    "/recommend/similar",
                    params={"item_name": item_name, "limit": limit},
                )
            )
        except BackendError as exc:
            logger.error("Error fetching similar items: %s", exc)
            fallback = self._fallback(exc, builder, "similar")
            if fallback is not None:
                return fallback
            if exc.status_code is None:
                return Result.fail("No response received. Network or CORS issue.")
            return Result.fail(f"Server error ({exc.status_code})")

    def fetch_menu(self) -> Result:
        """Full backend menu wrapped in a Result."""
        try:
            return Result.ok(self._menu())
        except BackendError as exc:
            logger.error("Error fetching menu: %s", exc)
            return Result.fail(exc.message or "Failed to fetch menu.")


def fetch_special_recommendations() -> List[str]:
    """Dish names the ML service suggests next to the special dish; empty on failure."""
    try:
        payload = get_special_client().request("GET", "/")
    except BackendError as exc:
        logger.error("Special recommendation API error: %s", exc)
        return []
    if isinstance(payload, dict):
        return list(payload.get("recommendations") or [])
    return []


# ------------------ Connection ------------------
def connect(
    base_url: str,
    special_url: str,
    timeout: float = 20.0,
    transport: Optional[httpx.BaseTransport] = None,
    synthesize_only: bool = False,
) -> RecommendationClient:
    global _client, _special_client
    close()
    _client = RecommendationClient(
        base_url, timeout=timeout, transport=transport, synthesize_only=synthesize_only
    )
    _special_client = BaseClient(special_url, timeout=timeout, transport=transport)
    _special_client.service_name = "special recommendation service"
    return _client


def get_client() -> RecommendationClient:
    global _client
    if _client is None:
        from app.config import settings

        _client = RecommendationClient(
            settings.recommendation_api_url,
            timeout=settings.http_timeout_sec,
            synthesize_only=settings.is_development(),
        )
    return _client


def get_special_client() -> BaseClient:
    global _special_client
    if _special_client is None:
        from app.config import settings

        _special_client = BaseClient(
            settings.special_recommendation_url, timeout=settings.http_timeout_sec
        )
        _special_client.service_name = "special recommendation service"
    return _special_client


def close():
    global _client, _special_client
    try:
        if _client is not None:
            _client.close()
        if _special_client is not None:
            _special_client.close()
    finally:
        _client = None
        _special_client = None
