"""In-process TTL cache shared by all provider chains."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    key: str
    payload: Any
    stored_at: float


class TTLCache:
    """
    Key/value store whose entries are valid for a fixed TTL after being set.

    Expired entries are reported as misses but are not removed; they are
    overwritten by the next ``set``. There is no other eviction, so the store
    grows with the number of distinct keys for the lifetime of the instance.
    Writes to the same key are last-write-wins without locking.
    """

    def __init__(self, ttl_seconds: float = 30 * 60, clock: Optional[Callable[[], float]] = None) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.ttl_seconds = ttl_seconds
        self._clock = clock or time.monotonic
        self._entries: Dict[str, CacheEntry] = {}
        self._hits = 0
        self._misses = 0

    def _is_expired(self, entry: CacheEntry, now: Optional[float] = None) -> bool:
        check_time = self._clock() if now is None else now
        return check_time - entry.stored_at >= self.ttl_seconds

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None or self._is_expired(entry):
            self._misses += 1
            return None
        self._hits += 1
        logger.debug("Cache hit: %s", key)
        return entry.payload

    def set(self, key: str, payload: Any) -> None:
        self._entries[key] = CacheEntry(key=key, payload=payload, stored_at=self._clock())

    def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        self._entries.clear()
        self._hits = 0
        self._misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        entry = self._entries.get(key)
        return entry is not None and not self._is_expired(entry)

    def get_stats(self) -> Dict[str, Any]:
        now = self._clock()
        live = sum(1 for entry in self._entries.values() if not self._is_expired(entry, now))
        lookups = self._hits + self._misses
        return {
            "entries": len(self._entries),
            "live_entries": live,
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(self._hits / lookups * 100, 2) if lookups else 0.0,
            "ttl_seconds": self.ttl_seconds,
        }

    def stats(self) -> Dict[str, Any]:
        return self.get_stats()
