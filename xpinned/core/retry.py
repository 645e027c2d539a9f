"""Retry stage: reissues a user's query after HTTP errors."""

import asyncio
from typing import Protocol

from xpinned.exceptions import HttpError
from xpinned.logging import get_logger
from xpinned.models.tweet import PinnedTweet


class PinnedTweetSender(Protocol):
    async def send(self, user_id: int | str) -> PinnedTweet | None:
        ...


def should_retry(error: BaseException, retries_remaining: int) -> bool:
    """
    Only HTTP errors are retried: rate limits and revoked guest tokens clear
    up on their own. Transport and decode errors are final.
    """
    return retries_remaining > 0 and isinstance(error, HttpError)


class RetryOnHttpError:
    """
    Wraps the query stage with a per-call retry budget.

    Every send() starts with `retries` attempts left. A retryable error
    consumes one and the same user id is sent again, strictly after the
    previous attempt finished.

    Example:
        service = RetryOnHttpError(PinnedTweetService(auth), retries=3)
        tweet = await service.send(44196397)
    """

    def __init__(
        self,
        service: PinnedTweetSender,
        retries: int = 0,
        backoff_seconds: float = 0.0,
    ):
        """
        Args:
            service: Stage to retry
            retries: Maximum number of reattempts per call
            backoff_seconds: Base delay, doubled after each reattempt (0 disables)
        """
        self.service = service
        self.retries = retries
        self.backoff_seconds = backoff_seconds
        self._log = get_logger("retry")

    async def send(self, user_id: int | str) -> PinnedTweet | None:
        retries_remaining = self.retries
        attempt = 0

        while True:
            try:
                return await self.service.send(user_id)
            except HttpError as error:
                if not should_retry(error, retries_remaining):
                    raise
                self._log.warning(
                    "retrying_request",
                    user_id=str(user_id),
                    error=str(error),
                    retries_remaining=retries_remaining,
                )

            if self.backoff_seconds > 0:
                await asyncio.sleep(self.backoff_seconds * (2 ** attempt))
            retries_remaining -= 1
            attempt += 1
