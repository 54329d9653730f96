"""
In-memory TTL cache shared by every resource view of one aws-tui process.

Entries are keyed by strings built with KeyBuilder. An entry whose expiry has
passed is invisible to get() but stays in the map until clean_expired() runs,
usually from the ExpirySweeper.
"""

import threading
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Callable, Dict, Tuple

from .base import CacheBackend, TTL
from ..utils.logging_utils import get_logger

logger = get_logger(__name__)


def _ttl_seconds(ttl: TTL) -> float:
    if isinstance(ttl, timedelta):
        return ttl.total_seconds()
    return float(ttl)


@dataclass(frozen=True)
class CacheEntry:
    """Cached value with its absolute expiry"""
    value: Any
    expires_at: float
    updated_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class CacheStore(CacheBackend):
    """
    Thread-safe TTL cache.

    One lock guards the entry map and is only held for the map read/write.
    No operation performs I/O.

    Args:
        clock: Monotonic time source in seconds (injectable for tests)
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, key: str) -> Tuple[Any, bool]:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
        if entry is None or entry.is_expired(now):
            return None, False
        return entry.value, True

    def set(self, key: str, value: Any, ttl: TTL) -> None:
        now = self._clock()
        entry = CacheEntry(value=value, expires_at=now + _ttl_seconds(ttl), updated_at=now)
        with self._lock:
            self._entries[key] = entry

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def delete_prefix(self, prefix: str) -> int:
        with self._lock:
            doomed = [key for key in self._entries if key.startswith(prefix)]
            for key in doomed:
                del self._entries[key]
        if doomed:
            logger.debug("Invalidated %d cache entries under %r", len(doomed), prefix)
        return len(doomed)

    def clean_expired(self) -> int:
        """Physically drop expired entries. Returns how many were removed."""
        now = self._clock()
        with self._lock:
            doomed = [key for key, entry in self._entries.items() if entry.is_expired(now)]
            for key in doomed:
                del self._entries[key]
        return len(doomed)

    def clear(self) -> None:
        with self._lock:
            self._entries = {}

    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def __len__(self) -> int:
        return self.size()

    def get_age(self, key: str) -> Tuple[float, bool]:
        """Seconds since a live entry was last set"""
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
        if entry is None or entry.is_expired(now):
            return 0.0, False
        return now - entry.updated_at, True

    def stats(self) -> Dict[str, int]:
        now = self._clock()
        with self._lock:
            total = len(self._entries)
            expired = sum(1 for entry in self._entries.values() if entry.is_expired(now))
        return {
            "entries": total,
            "live": total - expired,
            "expired": expired,
        }
