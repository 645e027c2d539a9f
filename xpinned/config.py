"""Configuration management using Pydantic Settings."""

from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/94.0.4606.71 Safari/537.36"
)

# Public bearer token of the X/Twitter web app
DEFAULT_BEARER_TOKEN = (
    "AAAAAAAAAAAAAAAAAAAAANRILgAAAAAAnNwIzUejRCOuH5E6I8xnZz4puTs"
    "%3D1Zv7ttfk8LF81IUq16cHjhLTvJu4FA33AGWWjCpTnA"
)


class CacheBackend(str, Enum):
    """Guest token cache backend."""
    MEMORY = "memory"
    SQLITE = "sqlite"


class LogFormat(str, Enum):
    """Log output format."""
    JSON = "json"
    CONSOLE = "console"


class FetcherConfig(BaseSettings):
    """Configuration for the pinned tweet fetcher."""

    # Identity sent with every request
    user_agent: str = DEFAULT_USER_AGENT
    bearer_token: str = DEFAULT_BEARER_TOKEN

    # Network
    timeout_seconds: float = Field(default=30.0, gt=0)

    # Concurrency
    max_concurrency: int = Field(default=10, ge=1)

    # Retry settings (HTTP errors only)
    max_retries: int = Field(default=0, ge=0)
    retry_backoff_seconds: float = Field(default=0.0, ge=0)

    # Aggregation: raise on the first failed user, or report failures alongside successes
    fail_fast: bool = True

    # Guest token cache
    cache_backend: CacheBackend = CacheBackend.MEMORY
    sqlite_path: str = ".xpinned_cache.db"
    token_ttl_seconds: int = Field(default=3600, gt=0)

    # Logging
    log_level: str = "WARNING"
    log_format: LogFormat = LogFormat.CONSOLE

    model_config = {
        "env_prefix": "XPINNED_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }
