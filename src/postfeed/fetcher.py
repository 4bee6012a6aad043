"""Post fetching with a cache in front of the publication API."""

import logging
from typing import Any
from urllib.parse import quote

import httpx

from postfeed.cache import TtlCache
from postfeed.errors import HttpStatusError, NetworkFailure, ParseError
from postfeed.models import Post
from postfeed.ordering import sort_posts

logger = logging.getLogger(__name__)

BASE_URL = "https://example.substack.com"

REQUEST_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "application/json",
}

LIST_KEY = "list"


def item_key(slug: str) -> str:
    """Cache key for a single post."""
    return f"item:{slug}"


class PostFetcher:
    """Serves posts from the cache when fresh, otherwise from the API.

    Nothing is written to the cache unless a response was fully received
    and normalized, so a failed fetch leaves earlier entries untouched.
    """

    def __init__(self, cache: TtlCache, base_url: str = BASE_URL, timeout: float = 10) -> None:
        self.cache = cache
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def list_url(self) -> str:
        return f"{self.base_url}/api/v1/posts"

    def item_url(self, slug: str) -> str:
        return f"{self.base_url}/api/v1/posts/{quote(slug, safe='')}"

    def post_url(self, slug: str) -> str:
        """Public page of a post, for opening or copying."""
        return f"{self.base_url}/p/{slug}"

    def fetch_list(self) -> list[Post]:
        """Return every post, most recent first."""
        cached = self.cache.read(LIST_KEY)
        if cached is not None:
            try:
                return [Post.from_record(record) for record in cached]
            except (ParseError, TypeError) as exc:
                logger.warning("cached post list unreadable, refetching: %s", exc)

        url = self.list_url()
        payload = self._get_json(url)
        if not isinstance(payload, list):
            raise ParseError(f"expected a list of posts, got {type(payload).__name__}", url=url)
        posts = sort_posts([self._parse(record, url) for record in payload])

        self.cache.write(LIST_KEY, [post.to_record() for post in posts])
        return posts

    def fetch_item(self, slug: str) -> Post:
        """Return a single post with its full body."""
        key = item_key(slug)
        cached = self.cache.read(key)
        if cached is not None:
            try:
                return Post.from_record(cached)
            except ParseError as exc:
                logger.warning("cached post %s unreadable, refetching: %s", slug, exc)

        url = self.item_url(slug)
        post = self._parse(self._get_json(url), url)

        self.cache.write(key, post.to_record())
        return post

    def invalidate_all(self) -> None:
        """Drop every cached entry so the next fetch goes to the network."""
        self.cache.clear()

    def _get_json(self, url: str) -> Any:
        logger.debug("GET %s", url)
        try:
            resp = httpx.get(
                url, timeout=self.timeout, follow_redirects=True, headers=REQUEST_HEADERS
            )
        except httpx.HTTPError as exc:
            raise NetworkFailure(f"could not reach {url}: {exc}", url=url) from exc

        logger.debug("%s -> %s", url, resp.status_code)
        if not resp.is_success:
            raise HttpStatusError(resp.status_code, resp.reason_phrase, url=url)
        try:
            return resp.json()
        except ValueError as exc:
            raise ParseError(f"response from {url} is not JSON", url=url) from exc

    @staticmethod
    def _parse(record: Any, url: str) -> Post:
        try:
            return Post.from_record(record)
        except ParseError as exc:
            exc.url = url
            raise
