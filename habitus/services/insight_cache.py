"""Per-property insight memoization with time-to-live freshness."""

import threading
from typing import Callable, Optional
from datetime import datetime, timezone
from habitus.models.insight import CachedInsight
from habitus.utils.config import DEFAULT_CACHE_TTL_SECONDS

CACHE_KEY_PREFIX = "insight_"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def cache_key_for(property_id: str) -> str:
    """Deterministic cache key for a property's insight."""
    return f"{CACHE_KEY_PREFIX}{property_id}"


class InsightCache:
    """
    Map of cache key -> CachedInsight guarded by a single lock.

    Expired entries are never swept: they stay in place until a successful
    regeneration overwrites them, so a failed call keeps the stale content.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._entries: dict[str, CachedInsight] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, property_id: str) -> bool:
        with self._lock:
            return cache_key_for(property_id) in self._entries

    def peek(self, property_id: str) -> Optional[CachedInsight]:
        """Return the stored entry regardless of age."""
        with self._lock:
            return self._entries.get(cache_key_for(property_id))

    def get_fresh(self, property_id: str) -> Optional[str]:
        """Return cached content if younger than the TTL, otherwise None."""
        entry = self.peek(property_id)
        if entry is None or not entry.is_fresh(self.clock(), self.ttl_seconds):
            return None
        return entry.content

    def store(self, property_id: str, content: str) -> CachedInsight:
        """Replace the entry for this property, stamped with the current time."""
        entry = CachedInsight(content=content, generated_at=self.clock())
        with self._lock:
            self._entries[cache_key_for(property_id)] = entry
        return entry
