"""Process-local TTL cache for provider responses.

Entries are (value, fetched_at) pairs; expiry is checked on read, so a
stale entry is never served and never needs a sweeper. Writes replace the
whole entry, so readers see either the old list or the new one.
"""

import logging
import time
from collections.abc import Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TTLCache(Generic[T]):
    def __init__(
        self,
        ttl_seconds: float,
        name: str = "cache",
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        self._ttl = ttl_seconds
        self._name = name
        self._clock = clock
        self._entries: dict[str, tuple[T, float]] = {}

    def get(self, key: str) -> T | None:
        entry = self._entries.get(key)
        if entry is None:
            logger.debug("%s miss: key=%s", self._name, key)
            return None
        value, fetched_at = entry
        if self._clock() - fetched_at >= self._ttl:
            logger.debug("%s expired: key=%s", self._name, key)
            return None
        logger.debug("%s hit: key=%s", self._name, key)
        return value

    def set(self, key: str, value: T) -> None:
        self._entries[key] = (value, self._clock())

    def invalidate(self, key: str | None = None) -> None:
        if key is None:
            self._entries.clear()
        else:
            self._entries.pop(key, None)
