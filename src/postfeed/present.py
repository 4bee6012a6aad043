"""Assemble a post into a Markdown document and a metadata summary."""

from postfeed.markup import to_markdown
from postfeed.models import AccessTier, Post


def access_label(tier: AccessTier) -> str:
    """Collapse the access tier to the two labels shown to readers.

    Paid and founding posts both display as "Paid".
    """
    return "Free" if tier is AccessTier.OPEN else "Paid"


def long_date(post: Post) -> str:
    dt = post.published_at
    return f"{dt:%B} {dt.day}, {dt.year}"


def build_document(post: Post) -> str:
    """Title heading, optional italic subtitle with a rule, then the converted body."""
    parts = [f"# {post.title}"]
    if post.subtitle:
        parts.append(f"*{post.subtitle}*")
        parts.append("---")
    body = to_markdown(post.body_html)
    if body:
        parts.append(body)
    return "\n\n".join(parts)


def build_summary(post: Post) -> list[tuple[str, str]]:
    """Ordered (label, value) pairs describing a post."""
    return [
        ("Published", long_date(post)),
        ("Reading Time", f"{post.reading_time} min"),
        ("Words", f"{post.wordcount:,}"),
        ("Likes", f"{post.likes:,}"),
        ("Comments", f"{post.comment_count:,}"),
        ("Restacks", f"{post.restacks:,}"),
        ("Access", access_label(post.audience)),
        ("URL", post.canonical_url),
    ]
