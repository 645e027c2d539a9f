"""Batch fetch result wrapper model."""

from pydantic import BaseModel

from xpinned.models.tweet import PinnedTweet


class FetchFailure(BaseModel):
    """One user whose pinned tweet could not be fetched."""

    user_id: str
    error_type: str
    message: str


class FetchReport(BaseModel):
    """Outcome of fetching pinned tweets for several users."""

    tweets: list[PinnedTweet] = []
    missing: list[str] = []
    failures: list[FetchFailure] = []
    duration_ms: float = 0.0

    @property
    def success(self) -> bool:
        return not self.failures
