"""Pinned tweet query stage: UserTweets GraphQL request and response extraction."""

import json
from typing import Any, Protocol

import httpx
from pydantic import BaseModel, Field, StrictInt, StrictStr, ValidationError

from xpinned.core.transport import raise_for_status
from xpinned.exceptions import DecodeError
from xpinned.models.tweet import Image, PinnedTweet


USER_TWEETS_URL = "https://api.twitter.com/graphql/urVlCWe1DTfZQbYRlTzxNA/UserTweets"

PIN_ENTRY_TYPE = "TimelinePinEntry"

# JSON paths, centralized for easy updates when X changes the response shape
INSTRUCTIONS_PATH = ("data", "user", "result", "timeline", "timeline", "instructions")
TWEET_RESULT_PATH = ("entry", "content", "itemContent", "tweet_results", "result")
SCREEN_NAME_PATH = ("core", "user", "legacy", "screen_name")

# Feature flags sent with every query, all disabled
USER_TWEETS_FEATURES = {
    "withTweetQuoteCount": False,
    "includePromotedContent": False,
    "withSuperFollowsUserFields": False,
    "withUserResults": False,
    "withBirdwatchPivots": False,
    "withReactionsMetadata": False,
    "withReactionsPerspective": False,
    "withSuperFollowsTweetFields": False,
    "withVoice": False,
}


class RequestSender(Protocol):
    """Inner stage: the guest token service, or anything sending authenticated requests."""

    async def send(self, request: httpx.Request) -> httpx.Response:
        ...


# Shape of the "legacy" tweet object, only the fields we read.
# Strict types: a mistyped field is a decode error, never coerced.
class Size(BaseModel):
    w: StrictInt = Field(ge=0)
    h: StrictInt = Field(ge=0)


class Sizes(BaseModel):
    large: Size


class Media(BaseModel):
    media_url_https: StrictStr
    sizes: Sizes


class Entities(BaseModel):
    media: list[Media] | None = None


class Legacy(BaseModel):
    id_str: StrictStr
    user_id_str: StrictStr
    full_text: StrictStr
    created_at: StrictStr
    entities: Entities = Entities()


def build_variables(user_id: int | str) -> str:
    """Compact JSON for the "variables" query parameter."""
    variables = {"userId": str(user_id), "count": 1, **USER_TWEETS_FEATURES}
    return json.dumps(variables, separators=(",", ":"))


def build_query_url(user_id: int | str) -> httpx.URL:
    """
    Build the UserTweets URL for a user.

    Args:
        user_id: Numeric X/Twitter user id

    Returns:
        URL with a single URL-encoded "variables" parameter
    """
    return httpx.URL(USER_TWEETS_URL, params={"variables": build_variables(user_id)})


def _lookup(value: Any, path: tuple[str, ...]) -> Any:
    """Follow path through nested dicts, None if any segment is missing."""
    for key in path:
        if not isinstance(value, dict) or key not in value:
            return None
        value = value[key]
    return value


def _find_pinned_result(instructions: list) -> dict | None:
    """First pin entry carrying a tweet result, in instruction order."""
    for instruction in instructions:
        if not isinstance(instruction, dict) or instruction.get("type") != PIN_ENTRY_TYPE:
            continue
        result = _lookup(instruction, TWEET_RESULT_PATH)
        if isinstance(result, dict):
            return result
    return None


def extract_pinned_tweet(payload: Any) -> PinnedTweet | None:
    """
    Extract the pinned tweet from a decoded UserTweets response.

    Args:
        payload: Decoded JSON body

    Returns:
        PinnedTweet, or None if the user has no pinned tweet

    Raises:
        DecodeError: The instruction list or a required tweet field is
            missing or has the wrong type
    """
    instructions = _lookup(payload, INSTRUCTIONS_PATH)
    if instructions is None:
        raise DecodeError("failed to get timeline instructions")
    if not isinstance(instructions, list):
        raise DecodeError("failed to parse instructions as array")

    result = _find_pinned_result(instructions)
    if result is None:
        return None

    if "legacy" not in result:
        raise DecodeError("failed to find legacy field")
    try:
        legacy = Legacy.model_validate(result["legacy"])
    except ValidationError as e:
        raise DecodeError(f"failed to parse pinned tweet: {e}") from e

    screen_name = _lookup(result, SCREEN_NAME_PATH)
    if not isinstance(screen_name, str):
        raise DecodeError("failed to find screen_name in pinned tweet")

    return PinnedTweet(
        screen_name=screen_name,
        created_at=legacy.created_at,
        tweet_id=legacy.id_str,
        user_id=legacy.user_id_str,
        text=legacy.full_text,
        images=[
            Image(
                url=media.media_url_https,
                width=media.sizes.large.w,
                height=media.sizes.large.h,
            )
            for media in legacy.entities.media or []
        ],
    )


class PinnedTweetService:
    """
    Turns a user id into that user's pinned tweet.

    Builds the UserTweets query, sends it through the inner stage and
    extracts the pinned entry. HTTP and transport errors from the inner
    stage propagate unchanged.
    """

    def __init__(self, service: RequestSender):
        self.service = service

    async def send(self, user_id: int | str) -> PinnedTweet | None:
        request = httpx.Request("POST", build_query_url(user_id))
        response = await self.service.send(request)
        raise_for_status(response)

        try:
            payload = json.loads(response.content)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DecodeError(f"failed to decode UserTweets response: {e}") from e

        return extract_pinned_tweet(payload)
