"""Guest token cache implementations."""

from xpinned.cache.base import TokenCache
from xpinned.cache.memory_cache import MemoryTokenCache
from xpinned.cache.sqlite_cache import SQLiteTokenCache
from xpinned.config import CacheBackend, FetcherConfig


def create_token_cache(config: FetcherConfig) -> TokenCache:
    """Build the token cache selected by config.cache_backend."""
    if config.cache_backend == CacheBackend.SQLITE:
        return SQLiteTokenCache(config.sqlite_path, config.token_ttl_seconds)
    return MemoryTokenCache()


__all__ = ["TokenCache", "MemoryTokenCache", "SQLiteTokenCache", "create_token_cache"]
