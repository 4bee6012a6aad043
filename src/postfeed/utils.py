"""Utility functions — relative time formatting, text truncation."""

import time
from datetime import datetime


def time_ago(published: datetime | None) -> str:
    """Convert a publication datetime to a human-readable 'time ago' format."""
    if published is None:
        return ""
    diff = time.time() - published.timestamp()

    if diff < 60:
        return "just now"
    elif diff < 3600:
        mins = int(diff / 60)
        return f"{mins}m ago"
    elif diff < 86400:
        hours = int(diff / 3600)
        return f"{hours}h ago"
    else:
        days = int(diff / 86400)
        return f"{days}d ago"


def truncate(text: str, max_len: int = 200) -> str:
    """Truncate text to max_len characters, adding ellipsis if needed."""
    if len(text) <= max_len:
        return text
    return text[: max_len - 1].rsplit(" ", 1)[0] + "…"
