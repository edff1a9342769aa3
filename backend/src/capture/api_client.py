"""HTTP client for the Bookmarks API, shared by the web and extension coordinators."""
import logging
from typing import Any

import httpx

from capture.config import ClientSettings
from capture.errors import (
    INVALID_RESPONSE_MESSAGE,
    ApiError,
    AuthenticationError,
    StorageError,
    TransportError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    """Pull the server's error message out of a response, verbatim where possible."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("detail", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return response.reason_phrase or f"HTTP {response.status_code}"


def raise_for_api_error(response: httpx.Response) -> None:
    """Raise the matching ApiError subclass for an error response."""
    if response.is_success:
        return
    message = _error_message(response)
    status_code = response.status_code
    if status_code == 401:
        raise AuthenticationError(status_code, message)
    if status_code == 400:
        raise ValidationError(status_code, message)
    if status_code >= 500:
        raise StorageError(status_code, message)
    raise ApiError(status_code, message)


class BookmarksApiClient:
    """
    Thin async wrapper over the Bookmarks API.

    Error statuses become ApiError subclasses carrying the server's message;
    network failures become TransportError. Nothing is retried.
    """

    def __init__(self, client: httpx.AsyncClient, token: str | None = None) -> None:
        self._client = client
        self._token = token

    @classmethod
    def from_settings(cls, settings: ClientSettings) -> "BookmarksApiClient":
        """Create a client with its own connection pool from settings."""
        client = httpx.AsyncClient(
            base_url=settings.api_base_url,
            timeout=settings.request_timeout,
        )
        return cls(client, token=settings.api_token or None)

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._client.aclose()

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def _request(
        self, method: str, path: str, expected: type = dict, **kwargs: Any,
    ) -> Any:
        try:
            response = await self._client.request(method, path, headers=self._headers(), **kwargs)
        except httpx.RequestError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise TransportError() from e
        raise_for_api_error(response)
        try:
            body = response.json()
        except ValueError as e:
            logger.warning("%s %s returned a non-JSON body", method, path)
            raise ApiError(response.status_code, INVALID_RESPONSE_MESSAGE) from e
        if not isinstance(body, expected):
            logger.warning(
                "%s %s returned %s, expected %s",
                method, path, type(body).__name__, expected.__name__,
            )
            raise ApiError(response.status_code, INVALID_RESPONSE_MESSAGE)
        return body

    async def fetch_metadata(self, url: str) -> dict[str, Any]:
        """POST /fetch-metadata for a URL."""
        return await self._request("POST", "/fetch-metadata", json={"url": url})

    async def list_bookmarks(
        self,
        category: str | None = None,
        sort_by: str | None = None,
        sort_order: str | None = None,
    ) -> list[dict[str, Any]]:
        """GET /bookmarks. Also serves as the authentication check."""
        params = {
            key: value
            for key, value in (
                ("category", category), ("sort_by", sort_by), ("sort_order", sort_order),
            )
            if value is not None
        }
        return await self._request("GET", "/bookmarks", expected=list, params=params)

    async def create_bookmark(self, payload: dict[str, Any]) -> dict[str, Any]:
        """POST /bookmarks with a payload built by capture.draft.to_create_payload."""
        return await self._request("POST", "/bookmarks", json=payload)
