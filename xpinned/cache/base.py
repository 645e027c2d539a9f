"""Abstract guest token cache interface."""

from abc import ABC, abstractmethod


class TokenCache(ABC):
    """
    Holds the anonymous guest token shared by every request of a fetcher.

    The token is either absent (must be fetched) or present (usable, but
    possibly stale). A stale token is detected when the API rejects it, and
    the caller invalidates it. Only the persistent backend bounds reuse
    across runs with a TTL.
    """

    @abstractmethod
    async def get(self) -> str | None:
        """
        Return the current guest token.

        Returns:
            The token, or None if absent
        """
        ...

    @abstractmethod
    async def set(self, token: str) -> None:
        """
        Store a freshly activated guest token, replacing any previous one.

        Args:
            token: Guest token returned by the activation endpoint
        """
        ...

    @abstractmethod
    async def invalidate(self) -> None:
        """Reset the token to absent."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Cleanup connections and resources."""
        ...

    async def __aenter__(self) -> "TokenCache":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit - cleanup."""
        await self.close()
