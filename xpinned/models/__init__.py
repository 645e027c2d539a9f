"""Pydantic models for xpinned."""

from xpinned.models.tweet import Image, PinnedTweet
from xpinned.models.result import FetchFailure, FetchReport

__all__ = [
    "Image",
    "PinnedTweet",
    "FetchFailure",
    "FetchReport",
]
