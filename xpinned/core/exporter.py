"""Export utilities for pinned tweets."""

import json
from pathlib import Path

from pydantic import TypeAdapter

from xpinned.models.tweet import PinnedTweet


_TWEETS_ADAPTER = TypeAdapter(list[PinnedTweet])


def to_dicts(tweets: list[PinnedTweet]) -> list[dict]:
    """
    Convert pinned tweets to plain dictionaries.

    Args:
        tweets: PinnedTweets to convert

    Returns:
        List of JSON-compatible dicts
    """
    return _TWEETS_ADAPTER.dump_python(tweets, mode="json")


def to_json(tweets: list[PinnedTweet], pretty: bool = False) -> str:
    """
    Serialize pinned tweets to a JSON array.

    Args:
        tweets: PinnedTweets to serialize
        pretty: Indent with two spaces instead of the compact form

    Returns:
        JSON string
    """
    if pretty:
        return json.dumps(to_dicts(tweets), indent=2, ensure_ascii=False)
    return _TWEETS_ADAPTER.dump_json(tweets).decode("utf-8")


def save_json(
    tweets: list[PinnedTweet],
    filepath: str | Path,
    pretty: bool = True,
) -> Path:
    """
    Save pinned tweets to a JSON file.

    Args:
        tweets: PinnedTweets to save
        filepath: Output file path
        pretty: Indent the output

    Returns:
        Path to saved file
    """
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(to_json(tweets, pretty=pretty), encoding="utf-8")
    return path


def load_json(filepath: str | Path) -> list[PinnedTweet]:
    """
    Load pinned tweets from a JSON file written by save_json.

    Args:
        filepath: Path to JSON file

    Returns:
        List of PinnedTweets
    """
    path = Path(filepath)
    return _TWEETS_ADAPTER.validate_json(path.read_text(encoding="utf-8"))
