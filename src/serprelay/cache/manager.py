"""Cache Manager — In-memory TTL cache for resolved SERP responses.

Entries expire lazily: an expired entry is treated as absent on lookup but is
not removed until it is overwritten, evicted, or the cache is cleared. There
is no background eviction thread.

By default the cache is unbounded, which suits short-lived or periodically
recycled processes. Long-lived deployments should set
``cache.max_entries`` to enable least-recently-used eviction.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from serprelay.config.settings import CacheSettings
from serprelay.models.query import CacheKey
from serprelay.models.response import SearchResponse

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    """A stored response and its absolute expiry time (clock seconds)."""

    value: SearchResponse
    expires_at: float


class ResponseCache:
    """Process-local TTL cache keyed by ``SearchQuery.cache_key``.

    Thread-safe: all access to the entry map goes through a lock. Values are
    copied on the way in and out so callers can never mutate a cached
    response in place.

    Attributes:
        settings: Cache configuration.
    """

    def __init__(
        self,
        settings: CacheSettings | None = None,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.settings = settings or CacheSettings()
        self._clock = clock
        self._entries: OrderedDict[CacheKey, CacheEntry] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: CacheKey) -> SearchResponse | None:
        """Retrieve a live response from cache.

        Args:
            key: Cache key.

        Returns:
            A copy of the cached response, or None if missing or expired.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() >= entry.expires_at:
                logger.debug("Cache entry expired: %s", key)
                return None
            if self.settings.max_entries:
                self._entries.move_to_end(key)
            return entry.value.model_copy(deep=True)

    def set(self, key: CacheKey, value: SearchResponse, ttl: int | None = None) -> None:
        """Store a response in cache.

        Args:
            key: Cache key.
            value: Response to cache.
            ttl: Time-to-live in seconds (defaults to ``settings.ttl_seconds``).
        """
        expires_at = self._clock() + (ttl if ttl is not None else self.settings.ttl_seconds)
        with self._lock:
            self._entries[key] = CacheEntry(value=value.model_copy(deep=True), expires_at=expires_at)
            self._entries.move_to_end(key)
            max_entries = self.settings.max_entries
            while max_entries and len(self._entries) > max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Cache evicted (max_entries=%d): %s", max_entries, evicted)

    def delete(self, key: CacheKey) -> bool:
        """Delete a value from cache.

        Returns:
            True if an entry was removed.
        """
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> int:
        """Drop every entry, live or expired.

        Returns:
            Number of entries removed.
        """
        with self._lock:
            cleared = len(self._entries)
            self._entries.clear()
        logger.info("Cache cleared (%d entries)", cleared)
        return cleared

    def stats(self) -> dict[str, Any]:
        """Entry counts and limits, for diagnostics."""
        now = self._clock()
        with self._lock:
            total = len(self._entries)
            live = sum(1 for entry in self._entries.values() if now < entry.expires_at)
        return {
            "entries": total,
            "live_entries": live,
            "ttl_seconds": self.settings.ttl_seconds,
            "max_entries": self.settings.max_entries,
        }

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
