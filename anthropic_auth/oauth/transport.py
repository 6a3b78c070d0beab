"""Pluggable HTTP transports for the OAuth clients.

The flow engine only produces :class:`PreparedRequest` values and interprets
:class:`TransportResponse` values. Executing the POST is delegated to a
transport, blocking (:class:`HttpxTransport`) or suspending
(:class:`AsyncHttpxTransport`). Anything implementing :class:`SyncTransport`
or :class:`AsyncTransport` can be injected instead, which is how tests stub
the network.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

import httpx

from ..utils.errors import TransportError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class PreparedRequest:
    """A JSON POST request ready to be sent."""

    url: str
    json: dict[str, Any]
    headers: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class TransportResponse:
    """Status and body of a completed HTTP exchange."""

    status_code: int
    text: str

    @property
    def is_success(self) -> bool:
        """True for 2xx statuses."""
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        """Decode the body as JSON.

        Raises:
            TransportError: If the body is not valid JSON
        """
        try:
            return json.loads(self.text)
        except ValueError as e:
            raise TransportError(f"Invalid JSON in response body: {e}") from e


@runtime_checkable
class SyncTransport(Protocol):
    """Blocking transport capability."""

    def post(self, request: PreparedRequest) -> TransportResponse: ...


@runtime_checkable
class AsyncTransport(Protocol):
    """Suspending transport capability."""

    async def post(self, request: PreparedRequest) -> TransportResponse: ...


class HttpxTransport:
    """Blocking transport backed by :class:`httpx.Client`.

    Use as a context manager, or call :meth:`close`, to release the pool. A
    client passed in by the caller is left open.
    """

    def __init__(self, client: httpx.Client | None = None, timeout: float = DEFAULT_TIMEOUT):
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout)

    def post(self, request: PreparedRequest) -> TransportResponse:
        """Send the request and return its status and body.

        Raises:
            TransportError: On connection, timeout or protocol failures
        """
        try:
            response = self._client.post(request.url, json=request.json, headers=request.headers)
        except httpx.HTTPError as e:
            logger.error(f"Request to {request.url} failed: {e}")
            raise TransportError(f"Request to {request.url} failed: {e}") from e
        return TransportResponse(status_code=response.status_code, text=response.text)

    def close(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "HttpxTransport":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


class AsyncHttpxTransport:
    """Suspending transport backed by :class:`httpx.AsyncClient`."""

    def __init__(
        self, client: httpx.AsyncClient | None = None, timeout: float = DEFAULT_TIMEOUT
    ):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def post(self, request: PreparedRequest) -> TransportResponse:
        """Send the request and return its status and body.

        Raises:
            TransportError: On connection, timeout or protocol failures
        """
        try:
            response = await self._client.post(
                request.url, json=request.json, headers=request.headers
            )
        except httpx.HTTPError as e:
            logger.error(f"Request to {request.url} failed: {e}")
            raise TransportError(f"Request to {request.url} failed: {e}") from e
        return TransportResponse(status_code=response.status_code, text=response.text)

    async def aclose(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "AsyncHttpxTransport":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()
