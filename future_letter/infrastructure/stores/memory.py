"""Process-local key-value store with TTL and LRU bounds"""

import threading
import time
from collections import OrderedDict
from typing import Any, Callable, Generic, Optional, Protocol, TypeVar

V = TypeVar("V")


class KeyValueStore(Protocol[V]):
    """Store interface shared by the polish cache and rate-limit buckets"""

    def get(self, key: str) -> Optional[V]: ...

    def set(self, key: str, value: V) -> None: ...

    def prune(self, max_age_seconds: Optional[float] = None) -> int: ...


class InMemoryStore(Generic[V]):
    """
    Thread-safe dict with per-entry age and a size cap.

    - Entries older than ttl_seconds are dropped on read and on prune()
    - Past max_entries the least recently used entry is evicted
    - A shared store (e.g. Redis) can replace this behind KeyValueStore
    """

    def __init__(
        self,
        ttl_seconds: Optional[float] = None,
        max_entries: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: "OrderedDict[str, tuple[float, Any]]" = OrderedDict()

    def _expired(self, stored_at: float, now: float, max_age: Optional[float]) -> bool:
        return max_age is not None and now - stored_at >= max_age

    def get(self, key: str) -> Optional[V]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, value = entry
            if self._expired(stored_at, self._clock(), self.ttl_seconds):
                del self._entries[key]
                return None
            self._entries.move_to_end(key)
            return value

    def set(self, key: str, value: V) -> None:
        with self._lock:
            self._entries[key] = (self._clock(), value)
            self._entries.move_to_end(key)
            if self.max_entries is not None:
                while len(self._entries) > self.max_entries:
                    self._entries.popitem(last=False)

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def prune(self, max_age_seconds: Optional[float] = None) -> int:
        """Drop entries older than max_age_seconds (default: ttl). Returns count removed."""
        max_age = self.ttl_seconds if max_age_seconds is None else max_age_seconds
        if max_age is None:
            return 0
        now = self._clock()
        with self._lock:
            stale = [k for k, (stored_at, _) in self._entries.items() if self._expired(stored_at, now, max_age)]
            for key in stale:
                del self._entries[key]
        return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
