"""Client for the canteen chat assistant service.
"""

from typing import Dict, List, Optional
import logging
import httpx

from adapters.http_client import BaseClient
from app.exceptions import BackendError
from domain.schemas.recommendation_schemas import Result

logger = logging.getLogger("storefront.chat")

_client: Optional["ChatClient"] = None


class ChatClient(BaseClient):
    service_name = "chat assistant"

    def send_message(self, new_message: str, history: List[Dict[str, str]]) -> Result:
        """
        Send one user turn with the prior conversation.

        Error answers from the assistant become a failed Result; transport
        failures (no response at all) raise BackendError.
        """
        try:
            payload = self.request(
                "POST", "/chat", json={"new_message": new_message, "history": history}
            )
        except BackendError as exc:
            if exc.status_code is None:
                raise
            logger.error("Chat request failed: %s", exc)
            return Result.fail(exc.message)
        return Result.ok(payload)


def connect(base_url: str, timeout: float = 20.0, transport: Optional[httpx.BaseTransport] = None) -> ChatClient:
    global _client
    close()
    _client = ChatClient(base_url, timeout=timeout, transport=transport)
    return _client


def get_client() -> ChatClient:
    global _client
    if _client is None:
        from app.config import settings

        _client = ChatClient(settings.chat_api_url, timeout=settings.http_timeout_sec)
    return _client


def close():
    global _client
    try:
        if _client is not None:
            _client.close()
    finally:
        _client = None
