"""Async HTTP transport for the chat backend.

Thin wrapper over httpx.AsyncClient. No business logic, just I/O:
JSON in, decoded JSON out, with one error type for callers to handle.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import httpx

from src.client.config import ClientConfig, get_client_config

logger = logging.getLogger(__name__)


class HttpClientError(Exception):
    """Raised when a request fails to connect or returns an error status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class HttpClient:
    """JSON client bound to the chat backend base URL.

    Either builds its own httpx.AsyncClient from config, or wraps one that
    is passed in (tests pass a client mounted on an ASGI transport). Only an
    owned client is closed by aclose().
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config or get_client_config()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=self._config.api_base_url,
            timeout=self._config.request_timeout,
        )

    @property
    def config(self) -> ClientConfig:
        return self._config

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._config.api_token:
            headers["Authorization"] = f"Bearer {self._config.api_token}"
        return headers

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """Send a GET request and return the decoded body."""
        return await self._request("GET", path, params=params)

    async def post(self, path: str, json: Any = None) -> Any:
        """Send a POST request with a JSON body."""
        return await self._request("POST", path, json=json)

    async def put(self, path: str, json: Any = None) -> Any:
        """Send a PUT request with a JSON body."""
        return await self._request("PUT", path, json=json)

    async def delete(self, path: str) -> Any:
        """Send a DELETE request."""
        return await self._request("DELETE", path)

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send a request and decode the JSON response.

        Returns:
            Decoded JSON, or an empty dict for 204/empty responses.

        Raises:
            HttpClientError: On connection failure or status >= 400.
        """
        try:
            response = await self._client.request(
                method, path, headers=self._headers(), **kwargs
            )
        except httpx.RequestError as e:
            raise HttpClientError(f"Connection failed: {e}") from e

        if response.status_code >= 400:
            logger.warning(f"HTTP {method} {path} failed: {response.status_code}")
            raise HttpClientError(
                f"HTTP {method} {path} failed: {response.status_code}",
                status_code=response.status_code,
            )

        if response.status_code == 204 or not response.content:
            return {}
        return response.json()

    @asynccontextmanager
    async def stream(
        self, method: str, path: str, json: Any = None
    ) -> AsyncIterator[httpx.Response]:
        """Open a streaming response.

        Yields:
            The open response; the body is read by the caller.

        Raises:
            HttpClientError: On connection failure or status >= 400.
        """
        headers = self._headers()
        headers["Accept"] = "text/event-stream"
        try:
            async with self._client.stream(
                method,
                path,
                json=json,
                headers=headers,
                timeout=self._config.stream_timeout,
            ) as response:
                if response.status_code >= 400:
                    await response.aread()
                    raise HttpClientError(
                        f"HTTP {method} {path} failed: {response.status_code}",
                        status_code=response.status_code,
                    )
                yield response
        except httpx.RequestError as e:
            raise HttpClientError(f"Connection failed: {e}") from e

    async def aclose(self) -> None:
        """Close the underlying client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
