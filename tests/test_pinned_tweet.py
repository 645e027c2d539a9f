"""Unit tests for the UserTweets query stage - canned payloads, no internet."""

import json

import httpx
import pytest

from conftest import load_fixture, pin_entry, pinned_payload
from xpinned.core.pinned_tweet import (
    PinnedTweetService,
    USER_TWEETS_URL,
    build_query_url,
    build_variables,
    extract_pinned_tweet,
)
from xpinned.exceptions import DecodeError, HttpError
from xpinned.models.tweet import Image, PinnedTweet


EXPECTED_ROUND_TRIP = {
    "screen_name": "alice",
    "created_at": "2021-01-01",
    "tweet_id": "100",
    "user_id": "200",
    "text": "hello",
    "images": [],
}

OTHER_INSTRUCTIONS = [
    {"type": "TimelineClearCache"},
    {"type": "TimelineAddEntries", "entries": []},
    {"type": "TimelineTerminateTimeline", "direction": "Top"},
]


class StubInner:
    """Inner stage returning a fixed response."""

    def __init__(self, response: httpx.Response):
        self.response = response
        self.requests: list[httpx.Request] = []

    async def send(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.response


class TestBuildQuery:
    """Test UserTweets request construction."""

    def test_variables_content(self):
        variables = json.loads(build_variables(44196397))
        assert variables["userId"] == "44196397"
        assert variables["count"] == 1

    def test_nine_feature_flags_all_disabled(self):
        variables = json.loads(build_variables("1"))
        flags = {k: v for k, v in variables.items() if k not in ("userId", "count")}
        assert len(flags) == 9
        assert all(v is False for v in flags.values())

    def test_variables_are_compact(self):
        assert " " not in build_variables(1)

    def test_url_has_single_variables_param(self):
        url = build_query_url(783214)
        assert str(url).startswith(USER_TWEETS_URL + "?variables=")
        assert list(url.params.keys()) == ["variables"]
        assert json.loads(url.params["variables"])["userId"] == "783214"

    def test_url_is_encoded(self):
        url = build_query_url(1)
        assert "%22userId%22" in str(url)


class TestExtractPinnedTweet:
    """Test extraction from the instruction list."""

    def test_round_trip_record(self):
        tweet = extract_pinned_tweet(pinned_payload([pin_entry()]))
        assert tweet is not None
        assert tweet.model_dump() == EXPECTED_ROUND_TRIP

    def test_fixture_with_media(self):
        tweet = extract_pinned_tweet(load_fixture("user_tweets_pinned"))

        assert tweet == PinnedTweet(
            screen_name="Twitter",
            created_at="Tue Oct 26 20:30:00 +0000 2021",
            tweet_id="1453094215934472192",
            user_id="783214",
            text="Pinned with two photos https://t.co/abc",
            images=[
                Image(url="https://pbs.twimg.com/media/FCphotoOne.jpg", width=1920, height=1080),
                Image(url="https://pbs.twimg.com/media/FCphotoTwo.png", width=800, height=1200),
            ],
        )

    @pytest.mark.parametrize("position", [0, 1, 2, 3])
    def test_position_does_not_matter(self, position):
        instructions = list(OTHER_INSTRUCTIONS)
        instructions.insert(position, pin_entry())
        tweet = extract_pinned_tweet(pinned_payload(instructions))
        assert tweet.model_dump() == EXPECTED_ROUND_TRIP

    def test_first_pin_entry_wins(self):
        payload = pinned_payload([pin_entry(tweet_id="1"), pin_entry(tweet_id="2")])
        assert extract_pinned_tweet(payload).tweet_id == "1"

    def test_pin_entry_without_tweet_result_is_skipped(self):
        payload = pinned_payload([
            {"type": "TimelinePinEntry", "entry": {"content": {}}},
            pin_entry(tweet_id="2"),
        ])
        assert extract_pinned_tweet(payload).tweet_id == "2"

    def test_no_pin_entry_returns_none(self):
        assert extract_pinned_tweet(load_fixture("user_tweets_no_pin")) is None

    def test_empty_instructions_returns_none(self):
        assert extract_pinned_tweet(pinned_payload([])) is None

    def test_non_object_instructions_are_ignored(self):
        assert extract_pinned_tweet(pinned_payload(["junk", 3, None])) is None

    def test_missing_entities_means_no_images(self):
        tweet = extract_pinned_tweet(pinned_payload([pin_entry()]))
        assert tweet.images == []

    def test_empty_media_list(self):
        tweet = extract_pinned_tweet(pinned_payload([pin_entry(media=[])]))
        assert tweet.images == []

    def test_created_at_kept_verbatim(self):
        raw = "Wed Oct 10 20:19:24 +0000 2018"
        tweet = extract_pinned_tweet(pinned_payload([pin_entry(created_at=raw)]))
        assert tweet.created_at == raw


class TestExtractErrors:
    """Malformed structure is a DecodeError, never "no pinned tweet"."""

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"data": {}},
            {"data": {"user": {"result": {}}}},
            {"data": {"user": {"result": {"timeline": {"timeline": {}}}}}},
            {"data": {"user": "not an object"}},
            [],
            None,
        ],
    )
    def test_missing_instructions_path(self, payload):
        with pytest.raises(DecodeError, match="timeline instructions"):
            extract_pinned_tweet(payload)

    @pytest.mark.parametrize("instructions", [{}, "TimelinePinEntry", 42])
    def test_instructions_not_array(self, instructions):
        with pytest.raises(DecodeError, match="as array"):
            extract_pinned_tweet(pinned_payload(instructions))

    def test_missing_legacy(self):
        entry = pin_entry()
        del entry["entry"]["content"]["itemContent"]["tweet_results"]["result"]["legacy"]
        with pytest.raises(DecodeError, match="legacy"):
            extract_pinned_tweet(pinned_payload([entry]))

    def test_legacy_missing_field(self):
        entry = pin_entry()
        del entry["entry"]["content"]["itemContent"]["tweet_results"]["result"]["legacy"]["full_text"]
        with pytest.raises(DecodeError, match="failed to parse pinned tweet"):
            extract_pinned_tweet(pinned_payload([entry]))

    def test_legacy_wrong_type(self):
        entry = pin_entry()
        entry["entry"]["content"]["itemContent"]["tweet_results"]["result"]["legacy"]["id_str"] = ["100"]
        with pytest.raises(DecodeError):
            extract_pinned_tweet(pinned_payload([entry]))

    def test_media_without_large_size(self):
        media = [{"media_url_https": "https://pbs.twimg.com/media/x.jpg", "sizes": {"small": {"w": 1, "h": 1}}}]
        with pytest.raises(DecodeError):
            extract_pinned_tweet(pinned_payload([pin_entry(media=media)]))

    @pytest.mark.parametrize("width", ["1920", 1920.0, True, -5, None])
    def test_media_size_not_coerced(self, width):
        media = [{"media_url_https": "https://pbs.twimg.com/media/x.jpg", "sizes": {"large": {"w": width, "h": 10}}}]
        with pytest.raises(DecodeError, match="failed to parse pinned tweet"):
            extract_pinned_tweet(pinned_payload([pin_entry(media=media)]))

    def test_media_url_wrong_type(self):
        media = [{"media_url_https": 7, "sizes": {"large": {"w": 1, "h": 1}}}]
        with pytest.raises(DecodeError):
            extract_pinned_tweet(pinned_payload([pin_entry(media=media)]))

    def test_numeric_id_str_not_coerced(self):
        entry = pin_entry()
        entry["entry"]["content"]["itemContent"]["tweet_results"]["result"]["legacy"]["id_str"] = 100
        with pytest.raises(DecodeError):
            extract_pinned_tweet(pinned_payload([entry]))

    def test_missing_screen_name(self):
        entry = pin_entry()
        del entry["entry"]["content"]["itemContent"]["tweet_results"]["result"]["core"]
        with pytest.raises(DecodeError, match="screen_name"):
            extract_pinned_tweet(pinned_payload([entry]))

    def test_screen_name_wrong_type(self):
        entry = pin_entry()
        result = entry["entry"]["content"]["itemContent"]["tweet_results"]["result"]
        result["core"]["user"]["legacy"]["screen_name"] = 12345
        with pytest.raises(DecodeError, match="screen_name"):
            extract_pinned_tweet(pinned_payload([entry]))


class TestPinnedTweetService:
    """Test the stage end to end against a stub inner stage."""

    @pytest.mark.asyncio
    async def test_sends_post_without_body(self):
        inner = StubInner(httpx.Response(200, json=pinned_payload([pin_entry()])))
        service = PinnedTweetService(inner)

        tweet = await service.send(200)

        assert tweet.model_dump() == EXPECTED_ROUND_TRIP
        request = inner.requests[0]
        assert request.method == "POST"
        assert request.content == b""
        assert json.loads(request.url.params["variables"])["userId"] == "200"

    @pytest.mark.asyncio
    async def test_no_pinned_tweet(self):
        inner = StubInner(httpx.Response(200, json=load_fixture("user_tweets_no_pin")))
        assert await PinnedTweetService(inner).send(1) is None

    @pytest.mark.asyncio
    async def test_invalid_json_is_decode_error(self):
        inner = StubInner(httpx.Response(200, content=b"<html>rate limited</html>"))
        with pytest.raises(DecodeError):
            await PinnedTweetService(inner).send(1)

    @pytest.mark.asyncio
    async def test_non_success_status_is_http_error(self):
        inner = StubInner(httpx.Response(503, content=b"over capacity"))
        with pytest.raises(HttpError) as exc_info:
            await PinnedTweetService(inner).send(1)
        assert exc_info.value.status_code == 503
        assert exc_info.value.body == b"over capacity"
