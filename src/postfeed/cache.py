"""JSON envelope cache with a fixed freshness window."""

import json
import logging
import time
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_TTL = 86400  # one day


def is_fresh(now: float, written_at: float, ttl: float) -> bool:
    """Return True while an entry written at `written_at` is younger than `ttl` seconds."""
    return now - written_at < ttl


class TtlCache:
    """Wraps a key/value store, stamping each value with its write time.

    Staleness is decided lazily on read; stale entries stay in the store
    until the next write for that key overwrites them.
    """

    def __init__(self, store, ttl: float = DEFAULT_TTL) -> None:
        self.store = store
        self.ttl = ttl

    def read(self, key: str) -> Any | None:
        """Return the cached value for `key` if present and fresh, else None."""
        raw = self.store.get(key)
        if raw is None:
            logger.debug("cache miss: %s", key)
            return None
        try:
            envelope = json.loads(raw)
            value = envelope["data"]
            written_at = envelope["timestamp"] / 1000
        except (json.JSONDecodeError, KeyError, TypeError) as exc:
            logger.warning("ignoring undecodable cache entry %s: %s", key, exc)
            return None
        if not is_fresh(time.time(), written_at, self.ttl):
            logger.debug("cache stale: %s", key)
            return None
        logger.debug("cache hit: %s", key)
        return value

    def write(self, key: str, value: Any) -> None:
        """Store `value` under `key`, overwriting any previous entry."""
        envelope = {"data": value, "timestamp": int(time.time() * 1000)}
        self.store.set(key, json.dumps(envelope, ensure_ascii=False))

    def clear(self) -> None:
        self.store.clear()

    def clear_key(self, key: str) -> None:
        self.store.delete(key)
