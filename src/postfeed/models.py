"""Post records as returned by the publication API."""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from postfeed.errors import ParseError


class AccessTier(str, Enum):
    """Who may read a post's full content."""

    OPEN = "everyone"
    PAID = "only_paid"
    FOUNDING = "founding"


_COUNTERS = ("likes", "comment_count", "restacks", "wordcount", "reading_time")


def _require_str(record: dict, name: str) -> str:
    value = record.get(name)
    if not isinstance(value, str) or not value:
        raise ParseError(f"field {name!r} must be a non-empty string, got {value!r}")
    return value


def _optional_str(record: dict, name: str) -> str | None:
    value = record.get(name)
    if value is None or isinstance(value, str):
        return value
    raise ParseError(f"field {name!r} must be a string or null, got {value!r}")


def _counter(record: dict, name: str) -> int:
    value = record.get(name)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ParseError(f"field {name!r} must be a non-negative integer, got {value!r}")
    return value


def _parse_date(value: Any) -> datetime:
    if not isinstance(value, str):
        raise ParseError(f"field 'post_date' must be an ISO-8601 string, got {value!r}")
    try:
        dt = datetime.fromisoformat(value)
    except ValueError as exc:
        raise ParseError(f"unparseable post_date {value!r}") from exc
    # Naive timestamps are taken as UTC so every post compares.
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


@dataclass(frozen=True)
class Post:
    id: int
    slug: str
    title: str
    subtitle: str | None
    published_at: datetime
    canonical_url: str
    cover_image: str | None
    description: str | None
    body_html: str
    likes: int
    comment_count: int
    restacks: int
    audience: AccessTier
    wordcount: int
    reading_time: int

    @classmethod
    def from_record(cls, record: Any) -> "Post":
        """Normalize one API record, raising ParseError on a malformed shape."""
        if not isinstance(record, dict):
            raise ParseError(f"expected a post object, got {type(record).__name__}")

        post_id = record.get("id")
        if isinstance(post_id, bool) or not isinstance(post_id, int):
            raise ParseError(f"field 'id' must be an integer, got {post_id!r}")

        audience = record.get("audience") or AccessTier.OPEN.value
        try:
            tier = AccessTier(audience)
        except ValueError as exc:
            raise ParseError(f"unknown audience {audience!r}") from exc

        counters = {name: _counter(record, name) for name in _COUNTERS}
        return cls(
            id=post_id,
            slug=_require_str(record, "slug"),
            title=_require_str(record, "title"),
            subtitle=_optional_str(record, "subtitle"),
            published_at=_parse_date(record.get("post_date")),
            canonical_url=_require_str(record, "canonical_url"),
            cover_image=_optional_str(record, "cover_image"),
            description=_optional_str(record, "description"),
            body_html=_optional_str(record, "body_html") or "",
            audience=tier,
            **counters,
        )

    def to_record(self) -> dict:
        """Return the API-shaped dict for this post."""
        return {
            "id": self.id,
            "slug": self.slug,
            "title": self.title,
            "subtitle": self.subtitle,
            "post_date": self.published_at.isoformat(),
            "canonical_url": self.canonical_url,
            "cover_image": self.cover_image,
            "description": self.description,
            "body_html": self.body_html,
            "likes": self.likes,
            "comment_count": self.comment_count,
            "restacks": self.restacks,
            "audience": self.audience.value,
            "wordcount": self.wordcount,
            "reading_time": self.reading_time,
        }
