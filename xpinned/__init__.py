"""xpinned - X/Twitter pinned tweet fetcher."""

from xpinned.models.tweet import Image, PinnedTweet
from xpinned.models.result import FetchFailure, FetchReport
from xpinned.config import FetcherConfig
from xpinned.core.orchestrator import PinnedTweetFetcher
from xpinned.core.exporter import to_json, to_dicts, save_json, load_json
from xpinned.exceptions import (
    XpinnedError,
    TransportError,
    HttpError,
    DecodeError,
    PinnedTweetError,
)

__version__ = "0.1.0"

__all__ = [
    # Main interface
    "PinnedTweetFetcher",
    "FetcherConfig",
    # Models
    "PinnedTweet",
    "Image",
    "FetchReport",
    "FetchFailure",
    # Errors
    "XpinnedError",
    "TransportError",
    "HttpError",
    "DecodeError",
    "PinnedTweetError",
    # Export utilities
    "to_json",
    "to_dicts",
    "save_json",
    "load_json",
    "__version__",
]
