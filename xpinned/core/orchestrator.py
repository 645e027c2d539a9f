"""Pipeline orchestrator - composes the request stages and fans out over users."""

import asyncio
from datetime import datetime

import httpx

from xpinned.cache import TokenCache, create_token_cache
from xpinned.config import FetcherConfig
from xpinned.core.guest_token import GuestTokenService
from xpinned.core.pinned_tweet import PinnedTweetService
from xpinned.core.retry import RetryOnHttpError
from xpinned.core.transport import HttpxTransport, Transport
from xpinned.exceptions import PinnedTweetError, XpinnedError
from xpinned.logging import configure_logging, get_logger
from xpinned.models.result import FetchFailure, FetchReport
from xpinned.models.tweet import PinnedTweet


class PinnedTweetFetcher:
    """
    High-level interface: fetch pinned tweets for user ids.

    All users fetched by one instance share a single guest token cache.

    Example:
        async with PinnedTweetFetcher() as fetcher:
            report = await fetcher.fetch_many([44196397, 783214])
            print([t.text for t in report.tweets])
    """

    def __init__(
        self,
        config: FetcherConfig | None = None,
        transport: Transport | None = None,
        cache: TokenCache | None = None,
    ):
        """
        Initialize fetcher with optional configuration.

        Args:
            config: FetcherConfig instance, uses defaults if None
            transport: Transport override, an httpx client is opened if None
            cache: Token cache override, built from config if None
        """
        self.config = config or FetcherConfig()
        self._transport = transport
        self._cache = cache
        self._owns_cache = False
        self._client: httpx.AsyncClient | None = None
        self._service: RetryOnHttpError | None = None
        self._log = get_logger("fetcher")

    async def __aenter__(self) -> "PinnedTweetFetcher":
        """Async context manager entry - initialize resources."""
        configure_logging(self.config)
        # Rebind now that structlog writes to stderr
        self._log = get_logger("fetcher")

        if self._transport is None:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.config.timeout_seconds))
            self._transport = HttpxTransport(self._client)

        if self._cache is None:
            self._cache = create_token_cache(self.config)
            self._owns_cache = True

        self._service = self.build_pipeline(self._transport, self._cache)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit - cleanup resources."""
        # A caller-supplied cache stays open, like a caller-supplied transport
        if self._owns_cache:
            await self._cache.close()
            self._cache = None
            self._owns_cache = False
        if self._client:
            await self._client.aclose()
            self._client = None
            self._transport = None

    def build_pipeline(self, transport: Transport, cache: TokenCache) -> RetryOnHttpError:
        """Compose retry -> query -> guest token -> transport."""
        auth = GuestTokenService(
            transport,
            user_agent=self.config.user_agent,
            bearer_token=self.config.bearer_token,
            cache=cache,
        )
        return RetryOnHttpError(
            PinnedTweetService(auth),
            retries=self.config.max_retries,
            backoff_seconds=self.config.retry_backoff_seconds,
        )

    async def fetch(self, user_id: int | str) -> PinnedTweet | None:
        """
        Fetch one user's pinned tweet.

        Args:
            user_id: Numeric X/Twitter user id

        Returns:
            PinnedTweet, or None if the user has no pinned tweet

        Raises:
            PinnedTweetError: Wrapping the transport, HTTP or decode error
        """
        if self._service is None:
            raise RuntimeError("PinnedTweetFetcher must be used as an async context manager")

        user_id = str(user_id)
        self._log.info("fetch_start", user_id=user_id)
        try:
            tweet = await self._service.send(user_id)
        except XpinnedError as e:
            self._log.error("fetch_failed", user_id=user_id, error=str(e), error_type=type(e).__name__)
            raise PinnedTweetError(user_id, e) from e

        self._log.info("fetch_complete", user_id=user_id, pinned=tweet is not None)
        return tweet

    async def fetch_many(self, user_ids: list[int | str]) -> FetchReport:
        """
        Fetch pinned tweets for several users concurrently.

        Every request is awaited before anything is reported; one user's
        failure does not cancel the others.

        Args:
            user_ids: X/Twitter user ids

        Returns:
            FetchReport with tweets in input order, users without a pinned
            tweet, and (when fail_fast is off) the failures

        Raises:
            PinnedTweetError: The first failure in input order, when
                config.fail_fast is set
        """
        start = datetime.now()
        semaphore = asyncio.Semaphore(self.config.max_concurrency)

        async def bounded(user_id: int | str) -> PinnedTweet | None:
            async with semaphore:
                return await self.fetch(user_id)

        outcomes = await asyncio.gather(
            *(bounded(user_id) for user_id in user_ids),
            return_exceptions=True,
        )

        report = FetchReport()
        for user_id, outcome in zip(user_ids, outcomes):
            if isinstance(outcome, PinnedTweetError):
                if self.config.fail_fast:
                    raise outcome
                report.failures.append(FetchFailure(
                    user_id=outcome.user_id,
                    error_type=type(outcome.cause).__name__,
                    message=str(outcome.cause),
                ))
            elif isinstance(outcome, BaseException):
                raise outcome
            elif outcome is None:
                report.missing.append(str(user_id))
            else:
                report.tweets.append(outcome)

        report.duration_ms = (datetime.now() - start).total_seconds() * 1000
        self._log.info(
            "fetch_many_complete",
            users=len(user_ids),
            tweets=len(report.tweets),
            missing=len(report.missing),
            failures=len(report.failures),
            duration_ms=report.duration_ms,
        )
        return report
