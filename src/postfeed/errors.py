"""Errors raised while fetching posts."""


class FetchError(Exception):
    """Base class for every failure of a post fetch."""

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class NetworkFailure(FetchError):
    """The endpoint could not be reached."""


class HttpStatusError(FetchError):
    """The endpoint answered with a non-success status."""

    def __init__(self, status: int, status_text: str, url: str | None = None) -> None:
        super().__init__(f"HTTP {status} {status_text}".rstrip(), url=url)
        self.status = status
        self.status_text = status_text


class ParseError(FetchError):
    """The response body did not have the expected record shape."""
