"""Shared fixtures for postfeed tests."""

import httpx
import pytest

from postfeed.cache import TtlCache
from postfeed.fetcher import PostFetcher
from postfeed.store import MemoryStore

BASE = "https://pub.example.com"


@pytest.fixture()
def make_record():
    """Factory fixture: one API post record, fields overridable by keyword."""

    def _make(id: int = 1, **overrides) -> dict:
        record = {
            "id": id,
            "title": f"Post {id}",
            "slug": f"post-{id}",
            "subtitle": f"Subtitle {id}",
            "post_date": "2024-01-01T00:00:00Z",
            "canonical_url": f"{BASE}/p/post-{id}",
            "cover_image": None,
            "description": f"Description {id}",
            "body_html": "<p>Hello <strong>world</strong></p>",
            "likes": 10,
            "comment_count": 2,
            "restacks": 1,
            "audience": "everyone",
            "wordcount": 1234,
            "reading_time": 5,
        }
        record.update(overrides)
        return record

    return _make


@pytest.fixture()
def store():
    return MemoryStore()


@pytest.fixture()
def fetcher(store):
    return PostFetcher(TtlCache(store), base_url=BASE)


@pytest.fixture()
def mock_http(monkeypatch):
    """Route postfeed.fetcher.httpx.get through a queue of canned responses.

    Returns the list of requested URLs; push responses with `.respond(...)`.
    """

    class Recorder(list):
        def __init__(self):
            super().__init__()
            self.responses = []

        def respond(self, status_code=200, json=None, text=None):
            self.responses.append((status_code, json, text))

    recorder = Recorder()

    def fake_get(url, **kwargs):
        recorder.append(url)
        status_code, payload, text = recorder.responses.pop(0)
        request = httpx.Request("GET", url)
        if text is not None:
            return httpx.Response(status_code, text=text, request=request)
        return httpx.Response(status_code, json=payload, request=request)

    monkeypatch.setattr("postfeed.fetcher.httpx.get", fake_get)
    return recorder
