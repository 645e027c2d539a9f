"""Custom exception hierarchy for xpinned."""


class XpinnedError(Exception):
    """Base exception for all xpinned errors."""


class TransportError(XpinnedError):
    """The network layer failed before a response was received (DNS, connect, timeout)."""


class HttpError(XpinnedError):
    """Non-2xx response, carrying the status code and the raw body."""

    def __init__(self, status_code: int, body: bytes = b""):
        self.status_code = status_code
        self.body = body
        super().__init__(self._describe())

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500

    def _describe(self) -> str:
        try:
            text = self.body.decode("utf-8")
        except UnicodeDecodeError:
            return f"HTTP error {self.status_code} (could not read body as UTF-8)"
        if not text:
            return f"HTTP error {self.status_code} with empty body"
        return f"HTTP error {self.status_code} with body {text}"


class DecodeError(XpinnedError):
    """Response body could not be parsed into the expected structure."""


class PinnedTweetError(XpinnedError):
    """Fetching the pinned tweet of one user failed."""

    def __init__(self, user_id: str, cause: Exception):
        self.user_id = user_id
        self.cause = cause
        super().__init__(f"failed to get pinned tweet for user {user_id}: {cause}")
