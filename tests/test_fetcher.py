"""Tests for postfeed.fetcher — cached post fetching."""

import httpx
import pytest

from postfeed.cache import DEFAULT_TTL, TtlCache
from postfeed.errors import HttpStatusError, NetworkFailure, ParseError
from postfeed.fetcher import BASE_URL, LIST_KEY, REQUEST_HEADERS, PostFetcher, item_key
from postfeed.store import FileStore

BASE = "https://pub.example.com"


class TestUrls:
    def test_list_url(self, fetcher):
        assert fetcher.list_url() == f"{BASE}/api/v1/posts"

    def test_item_url(self, fetcher):
        assert fetcher.item_url("my-post") == f"{BASE}/api/v1/posts/my-post"

    def test_post_url(self, fetcher):
        assert fetcher.post_url("my-post") == f"{BASE}/p/my-post"

    def test_trailing_slash_trimmed(self, store):
        f = PostFetcher(TtlCache(store), base_url=f"{BASE}/")
        assert f.list_url() == f"{BASE}/api/v1/posts"

    def test_default_base(self, store):
        assert PostFetcher(TtlCache(store)).base_url == BASE_URL

    def test_key_families_disjoint(self):
        assert item_key("list") != LIST_KEY
        assert item_key("a") == "item:a"


class TestFetchList:
    def test_orders_most_recent_first(self, fetcher, mock_http, make_record):
        mock_http.respond(json=[
            make_record(1, post_date="2024-01-01T00:00:00Z"),
            make_record(2, post_date="2024-03-01T00:00:00Z"),
        ])
        posts = fetcher.fetch_list()
        assert [p.id for p in posts] == [2, 1]

    def test_second_call_served_from_cache(self, fetcher, mock_http, make_record):
        mock_http.respond(json=[make_record(1), make_record(2)])
        first = fetcher.fetch_list()
        second = fetcher.fetch_list()
        assert second == first
        assert len(mock_http) == 1

    def test_cached_list_is_ordered(self, fetcher, store, mock_http, make_record):
        mock_http.respond(json=[
            make_record(1, post_date="2024-01-01T00:00:00Z"),
            make_record(2, post_date="2024-03-01T00:00:00Z"),
        ])
        fetcher.fetch_list()
        cached = fetcher.cache.read(LIST_KEY)
        assert [r["id"] for r in cached] == [2, 1]

    def test_stale_cache_refetches(self, fetcher, mock_http, make_record, monkeypatch):
        mock_http.respond(json=[make_record(1)])
        mock_http.respond(json=[make_record(1), make_record(2)])
        fetcher.fetch_list()

        import time
        later = time.time() + DEFAULT_TTL + 1
        monkeypatch.setattr("postfeed.cache.time.time", lambda: later)
        assert len(fetcher.fetch_list()) == 2
        assert len(mock_http) == 2

    def test_invalidate_all_forces_network(self, fetcher, mock_http, make_record):
        mock_http.respond(json=[make_record(1)])
        mock_http.respond(json=[make_record(1)])
        fetcher.fetch_list()
        fetcher.invalidate_all()
        fetcher.fetch_list()
        assert len(mock_http) == 2

    def test_sends_browser_headers(self, fetcher, monkeypatch, make_record):
        seen = {}

        def fake_get(url, **kwargs):
            seen.update(kwargs)
            return httpx.Response(200, json=[], request=httpx.Request("GET", url))

        monkeypatch.setattr("postfeed.fetcher.httpx.get", fake_get)
        fetcher.fetch_list()
        assert seen["headers"] == REQUEST_HEADERS
        assert seen["headers"]["Accept"] == "application/json"
        assert seen["headers"]["User-Agent"].startswith("Mozilla/5.0")

    def test_http_error_raises_status(self, fetcher, mock_http):
        mock_http.respond(status_code=503)
        with pytest.raises(HttpStatusError) as excinfo:
            fetcher.fetch_list()
        assert excinfo.value.status == 503
        assert excinfo.value.status_text == "Service Unavailable"
        assert fetcher.cache.read(LIST_KEY) is None

    def test_non_list_body_is_parse_error(self, fetcher, mock_http):
        mock_http.respond(json={"posts": []})
        with pytest.raises(ParseError):
            fetcher.fetch_list()

    def test_bad_record_is_parse_error(self, fetcher, mock_http, make_record):
        mock_http.respond(json=[make_record(1), {"id": 2}])
        with pytest.raises(ParseError) as excinfo:
            fetcher.fetch_list()
        assert excinfo.value.url == fetcher.list_url()
        assert fetcher.cache.read(LIST_KEY) is None

    def test_invalid_json_is_parse_error(self, fetcher, mock_http):
        mock_http.respond(text="<html>oops</html>")
        with pytest.raises(ParseError):
            fetcher.fetch_list()

    def test_corrupt_cached_list_refetches(self, fetcher, mock_http, make_record):
        fetcher.cache.write(LIST_KEY, [{"id": "broken"}])
        mock_http.respond(json=[make_record(1)])
        assert [p.id for p in fetcher.fetch_list()] == [1]
        assert len(mock_http) == 1


class TestFetchItem:
    def test_fetches_and_caches(self, fetcher, mock_http, make_record):
        mock_http.respond(json=make_record(4, slug="hello"))
        post = fetcher.fetch_item("hello")
        assert post.slug == "hello"
        assert mock_http == [f"{BASE}/api/v1/posts/hello"]
        assert fetcher.cache.read(item_key("hello"))["id"] == 4

    def test_cache_hit_skips_http(self, fetcher, mock_http, make_record):
        mock_http.respond(json=make_record(4, slug="hello"))
        first = fetcher.fetch_item("hello")
        assert fetcher.fetch_item("hello") == first
        assert len(mock_http) == 1

    def test_items_cached_per_slug(self, fetcher, mock_http, make_record):
        mock_http.respond(json=make_record(1, slug="a"))
        mock_http.respond(json=make_record(2, slug="b"))
        assert fetcher.fetch_item("a").id == 1
        assert fetcher.fetch_item("b").id == 2
        assert len(mock_http) == 2

    def test_500_leaves_cache_untouched(self, fetcher, store, mock_http):
        mock_http.respond(status_code=500)
        before = store.get(item_key("x"))
        with pytest.raises(HttpStatusError) as excinfo:
            fetcher.fetch_item("x")
        assert excinfo.value.status == 500
        assert store.get(item_key("x")) == before

    def test_failure_keeps_stale_entry(self, fetcher, store, mock_http, make_record, monkeypatch):
        fetcher.cache.write(item_key("x"), make_record(1, slug="x"))
        stored = store.get(item_key("x"))

        import time
        later = time.time() + DEFAULT_TTL + 1
        monkeypatch.setattr("postfeed.cache.time.time", lambda: later)
        mock_http.respond(status_code=500)
        with pytest.raises(HttpStatusError):
            fetcher.fetch_item("x")
        assert store.get(item_key("x")) == stored

    def test_404(self, fetcher, mock_http):
        mock_http.respond(status_code=404)
        with pytest.raises(HttpStatusError) as excinfo:
            fetcher.fetch_item("missing")
        assert excinfo.value.status == 404
        assert excinfo.value.url == f"{BASE}/api/v1/posts/missing"

    def test_network_failure(self, fetcher, monkeypatch):
        def raise_connect(*a, **kw):
            raise httpx.ConnectError("connection refused")

        monkeypatch.setattr("postfeed.fetcher.httpx.get", raise_connect)
        with pytest.raises(NetworkFailure) as excinfo:
            fetcher.fetch_item("x")
        assert isinstance(excinfo.value.__cause__, httpx.ConnectError)

    def test_timeout_is_network_failure(self, fetcher, monkeypatch):
        def raise_timeout(*a, **kw):
            raise httpx.ReadTimeout("timeout")

        monkeypatch.setattr("postfeed.fetcher.httpx.get", raise_timeout)
        with pytest.raises(NetworkFailure):
            fetcher.fetch_item("x")

    def test_slug_is_quoted(self, fetcher):
        assert fetcher.item_url("a/b") == f"{BASE}/api/v1/posts/a%2Fb"


class TestOnDisk:
    def test_second_process_reuses_cache(self, tmp_path, mock_http, make_record):
        mock_http.respond(json=[make_record(1)])
        PostFetcher(TtlCache(FileStore(tmp_path)), base_url=BASE).fetch_list()

        again = PostFetcher(TtlCache(FileStore(tmp_path)), base_url=BASE).fetch_list()
        assert [p.id for p in again] == [1]
        assert len(mock_http) == 1
