"""Pinned tweet data model."""

from pydantic import BaseModel


class Image(BaseModel):
    """Image attached to a tweet, "large" size variant."""

    model_config = {"frozen": True}

    url: str
    width: int
    height: int


class PinnedTweet(BaseModel):
    """Represents a user's pinned tweet."""

    model_config = {"frozen": True}

    screen_name: str
    # Kept verbatim, e.g. "Wed Oct 10 20:19:24 +0000 2018"
    created_at: str
    tweet_id: str
    user_id: str
    text: str
    images: list[Image] = []
