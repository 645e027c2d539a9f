"""In-process guest token cache."""

import asyncio

from xpinned.cache.base import TokenCache


class MemoryTokenCache(TokenCache):
    """
    Lock-guarded optional token living for the lifetime of the process.

    The lock only covers reading or writing the value. Activation requests
    happen outside of it, so two cold-start callers may both activate a
    token; the last write wins and both tokens are usable.
    """

    def __init__(self, token: str | None = None):
        self._token = token
        self._lock = asyncio.Lock()

    async def get(self) -> str | None:
        async with self._lock:
            return self._token

    async def set(self, token: str) -> None:
        async with self._lock:
            self._token = token

    async def invalidate(self) -> None:
        async with self._lock:
            self._token = None

    async def close(self) -> None:
        pass
