"""Guest token stage: authenticates requests with an anonymous guest token."""

import httpx
from pydantic import BaseModel, ValidationError

from xpinned.cache.base import TokenCache
from xpinned.cache.memory_cache import MemoryTokenCache
from xpinned.core.transport import Transport
from xpinned.exceptions import DecodeError, HttpError
from xpinned.logging import get_logger


ACTIVATE_URL = "https://api.twitter.com/1.1/guest/activate.json"
GUEST_TOKEN_HEADER = "x-guest-token"


class GuestActivation(BaseModel):
    """Body of the guest activation endpoint."""

    guest_token: str


class GuestTokenService:
    """
    Wraps a transport, adding identity, bearer and guest token headers.

    A missing guest token is activated on demand through the inner
    transport. Any 4xx response, from activation or from the wrapped
    request, resets the shared cache so the next call activates a new
    token. Non-2xx responses raise HttpError; nothing is retried here.

    Example:
        service = GuestTokenService(HttpxTransport(client), user_agent, bearer)
        response = await service.send(httpx.Request("POST", url))
    """

    def __init__(
        self,
        transport: Transport,
        user_agent: str,
        bearer_token: str,
        cache: TokenCache | None = None,
    ):
        """
        Args:
            transport: Inner transport
            user_agent: User-Agent header sent on every request
            bearer_token: Static application bearer token
            cache: Token cache shared by every caller of this service
        """
        self.transport = transport
        self.cache = cache if cache is not None else MemoryTokenCache()
        self._static_headers = {
            "User-Agent": user_agent,
            "Authorization": f"Bearer {bearer_token}",
        }
        self._log = get_logger("guest_token")

    async def send(self, request: httpx.Request) -> httpx.Response:
        """
        Send request with a guest token attached.

        Raises:
            HttpError: Activation or the request itself returned non-2xx
            DecodeError: Activation response was not a guest token record
            TransportError: Network failure in the inner transport
        """
        token = await self.cache.get()
        if token is None:
            token = await self._activate()

        request.headers.update(self._static_headers)
        request.headers[GUEST_TOKEN_HEADER] = token

        response = await self.transport.send(request)
        if not response.is_success:
            await self._reject(request, response)

        return response

    async def _activate(self) -> str:
        """Activate a new guest token and store it in the cache."""
        request = httpx.Request("POST", ACTIVATE_URL, headers=self._static_headers)
        response = await self.transport.send(request)

        if not response.is_success:
            await self._reject(request, response)

        try:
            token = GuestActivation.model_validate_json(response.content).guest_token
        except ValidationError as e:
            raise DecodeError(f"failed to parse guest activation response: {e}") from e

        await self.cache.set(token)
        self._log.info("guest_token_fetched")
        return token

    async def _reject(self, request: httpx.Request, response: httpx.Response) -> None:
        """Invalidate the token on 4xx, then raise HttpError."""
        error = HttpError(response.status_code, response.content)
        if error.is_client_error:
            await self.cache.invalidate()
            self._log.info("guest_token_invalidated", status_code=error.status_code, url=str(request.url))
        raise error
