"""Shared httpx plumbing for the remote services the storefront talks to."""

from typing import Any, Optional
import logging
import httpx

from app.exceptions import BackendError

logger = logging.getLogger("storefront.http")

NO_RESPONSE_MESSAGE = "No response received. Possible CORS or network issue."


def error_message(response: httpx.Response) -> str:
    """Message to show for an unsuccessful response: the body's message or the status."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"Server error ({response.status_code})"


class BaseClient:
    """Thin wrapper over ``httpx.Client`` that raises BackendError on failure."""

    service_name = "remote service"

    def __init__(
        self,
        base_url: str,
        timeout: float = 20.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(
            base_url=self.base_url, timeout=timeout, transport=transport
        )

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def request(
        self,
        method: str,
        path: str,
        *,
        token: Optional[str] = None,
        bearer: Optional[str] = None,
        **kwargs,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        ``token`` is sent in the raw ``token`` header, ``bearer`` as an
        ``Authorization: Bearer`` header; backend routes differ in which they read.
        """
        headers = dict(kwargs.pop("headers", None) or {})
        if token:
            headers["token"] = token
        if bearer:
            headers["Authorization"] = f"Bearer {bearer}"

        logger.debug("%s %s %s", self.service_name, method, path)
        try:
            response = self._client.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("%s %s %s failed: %s", self.service_name, method, path, exc)
            raise BackendError(NO_RESPONSE_MESSAGE) from exc

        if response.status_code >= 400:
            message = error_message(response)
            logger.warning(
                "%s %s %s returned %d: %s",
                self.service_name,
                method,
                path,
                response.status_code,
                message,
            )
            raise BackendError(message, status_code=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise BackendError(
                f"Unreadable response from {self.service_name}",
                status_code=response.status_code,
            ) from exc

    def close(self):
        self._client.close()
