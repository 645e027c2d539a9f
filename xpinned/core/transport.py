"""httpx-backed transport, the bottom of the request pipeline."""

from typing import Protocol

import httpx

from xpinned.exceptions import HttpError, TransportError


class Transport(Protocol):
    """Anything that turns a request into a response or raises TransportError."""

    async def send(self, request: httpx.Request) -> httpx.Response:
        ...


class HttpxTransport:
    """
    Sends requests through a shared httpx.AsyncClient.

    Status codes are not inspected here. Every httpx request failure,
    timeouts included, surfaces as TransportError.
    """

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    async def send(self, request: httpx.Request) -> httpx.Response:
        try:
            return await self.client.send(request)
        except httpx.TimeoutException as e:
            raise TransportError(f"Request timed out: {request.method} {request.url}") from e
        except httpx.RequestError as e:
            raise TransportError(f"Request failed: {request.method} {request.url}: {e}") from e


def raise_for_status(response: httpx.Response) -> None:
    """Raise HttpError for any non-2xx response."""
    if not response.is_success:
        raise HttpError(response.status_code, response.content)
