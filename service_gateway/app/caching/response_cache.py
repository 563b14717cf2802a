"""
In-memory, time-windowed cache for raw provider payloads.
"""

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional


Clock = Callable[[], float]


@dataclass(frozen=True)
class CacheEntry:
    """A raw provider payload and the moment it was stored."""

    cache_key: str
    payload: Any
    stored_at: float


class ResponseCache:
    """Cache of successful provider responses keyed by resolved request URL.

    Entries are never deleted. Expiry is checked when reading, and an
    expired entry is replaced by the next ``set`` for the same key. The cache
    is used from a single event loop; nothing here awaits, so reads and
    writes need no locking.
    """

    def __init__(self, duration_seconds: float, *, clock: Clock = time.monotonic):
        self.duration_seconds = duration_seconds
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    @property
    def enabled(self) -> bool:
        return self.duration_seconds > 0

    def lookup(self, cache_key: str) -> Optional[CacheEntry]:
        """Return the entry for ``cache_key`` if it is still inside the window."""
        entry = self._entries.get(cache_key)
        if entry is None:
            return None
        if self._clock() - entry.stored_at < self.duration_seconds:
            return entry
        return None

    def set(self, cache_key: str, payload: Any) -> CacheEntry:
        """Insert or overwrite the entry for ``cache_key``."""
        entry = CacheEntry(cache_key=cache_key, payload=payload, stored_at=self._clock())
        self._entries[cache_key] = entry
        return entry

    def __len__(self) -> int:
        return len(self._entries)
