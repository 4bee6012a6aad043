"""Display ordering for post lists."""

from postfeed.models import Post


def sort_posts(posts: list[Post]) -> list[Post]:
    """Return posts most recent first; equal dates keep their original order."""
    # sorted() stays stable with reverse=True
    return sorted(posts, key=lambda p: p.published_at, reverse=True)
