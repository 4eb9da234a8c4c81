# ABOUTME: In-memory LRU cache store for generated answers with per-entry TTL
# ABOUTME: Bounded by entry count; expired entries are dropped lazily on lookup or by explicit sweep

import logging
import threading
import time
from collections import OrderedDict
from typing import Callable, List, Optional

from models import CacheEntry

logger = logging.getLogger(__name__)


class LRUCacheStore:
    """In-memory LRU cache with TTL support for generated answers.

    Recency is the order of the underlying ``OrderedDict``: the first item is
    the least recently used, the last the most recently used. Expiry is lazy;
    ``size()`` may count stale entries until ``get()`` touches them or
    ``cleanup_expired()`` is called.
    """

    def __init__(
        self,
        capacity: int,
        ttl_seconds: float,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize store with entry capacity and TTL."""
        if capacity <= 0:
            raise ValueError("Cache capacity must be positive")
        if ttl_seconds <= 0:
            raise ValueError("Cache TTL must be positive")

        self.capacity = capacity
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self.evictions = 0
        self.expirations = 0
        self._lock = threading.RLock()

    def get(self, key: str) -> Optional[str]:
        """Retrieve answer from cache if present and not expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None

            if entry.is_expired(self._clock(), self.ttl_seconds):
                del self._entries[key]
                self.expirations += 1
                logger.debug(f"Expired cache entry {key}")
                return None

            # Move to end (most recently used)
            self._entries.move_to_end(key)
            return entry.answer

    def put(self, key: str, answer: str) -> None:
        """Store answer as the most recently used entry."""
        with self._lock:
            entry = CacheEntry(key=key, answer=answer, created_at=self._clock())

            # Replacing drops the old position so the new entry lands last
            self._entries.pop(key, None)
            self._entries[key] = entry

            self._evict_if_needed()

    def _evict_if_needed(self) -> None:
        """Evict the least recently used entry if over capacity."""
        if len(self._entries) > self.capacity:
            oldest_key, _ = self._entries.popitem(last=False)
            self.evictions += 1
            logger.debug(f"Evicted least recently used entry {oldest_key}")

    def size(self) -> int:
        """Return resident entry count without forcing expiry."""
        with self._lock:
            return len(self._entries)

    def clear(self) -> None:
        """Clear all cached entries."""
        with self._lock:
            self._entries.clear()

    def cleanup_expired(self) -> int:
        """Remove expired entries and return count removed."""
        with self._lock:
            now = self._clock()
            expired_keys = [
                key
                for key, entry in self._entries.items()
                if entry.is_expired(now, self.ttl_seconds)
            ]

            for key in expired_keys:
                del self._entries[key]

            self.expirations += len(expired_keys)
            return len(expired_keys)

    def peek(self, key: str) -> Optional[CacheEntry]:
        """Return the raw entry without touching recency or expiry."""
        with self._lock:
            return self._entries.get(key)

    def keys(self) -> List[str]:
        """Return keys ordered from least to most recently used."""
        with self._lock:
            return list(self._entries.keys())

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries
