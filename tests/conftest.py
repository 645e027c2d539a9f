"""Shared fixtures: canned API payloads and an httpx mock of the X/Twitter API."""

import json
from pathlib import Path

import httpx
import pytest
import structlog


FIXTURES_DIR = Path(__file__).parent / "fixtures"


def load_fixture(name: str) -> dict:
    """Load a JSON fixture by file stem."""
    return json.loads((FIXTURES_DIR / f"{name}.json").read_text(encoding="utf-8"))


def pinned_payload(instructions: list) -> dict:
    """Wrap instructions in the UserTweets response envelope."""
    return {"data": {"user": {"result": {"timeline": {"timeline": {"instructions": instructions}}}}}}


def pin_entry(
    tweet_id: str = "100",
    user_id: str = "200",
    text: str = "hello",
    created_at: str = "2021-01-01",
    screen_name: str = "alice",
    media: list | None = None,
) -> dict:
    """A TimelinePinEntry instruction."""
    legacy = {
        "id_str": tweet_id,
        "user_id_str": user_id,
        "full_text": text,
        "created_at": created_at,
    }
    if media is not None:
        legacy["entities"] = {"media": media}
    return {
        "type": "TimelinePinEntry",
        "entry": {
            "content": {
                "itemContent": {
                    "tweet_results": {
                        "result": {
                            "core": {"user": {"legacy": {"screen_name": screen_name}}},
                            "legacy": legacy,
                        }
                    }
                }
            }
        },
    }


class FakeTwitterAPI:
    """
    Routes requests to guest activation and UserTweets handlers.

    Replies are queued per endpoint as (status, body) pairs, where body is a
    dict (sent as JSON) or bytes. A callable item is called with the request
    and returns such a pair; an exception instance is raised instead.
    The last reply repeats once the queue is down to one item. Every request
    is recorded.
    """

    def __init__(self, activations: list | None = None, queries: list | None = None):
        self.activations = list(activations or [(200, {"guest_token": "T1"})])
        self.queries = list(queries or [(200, pinned_payload([pin_entry()]))])
        self.requests: list[httpx.Request] = []

    @property
    def activation_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.endswith("/guest/activate.json")]

    @property
    def query_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if "/graphql/" in r.url.path]

    def _next(self, queue: list, request: httpx.Request) -> httpx.Response:
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        if callable(item):
            item = item(request)
        status, body = item
        if isinstance(body, bytes):
            return httpx.Response(status, content=body)
        return httpx.Response(status, json=body)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path.endswith("/guest/activate.json"):
            return self._next(self.activations, request)
        return self._next(self.queries, request)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture(autouse=True)
def reset_structlog():
    """Drop logging config between tests so no logger holds a closed stream."""
    yield
    structlog.reset_defaults()
