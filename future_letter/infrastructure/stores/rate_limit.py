"""Sliding-window rate limiter keyed by client IP"""

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, List
from future_letter.infrastructure.stores.memory import InMemoryStore, KeyValueStore


@dataclass
class RateLimitDecision:
    allowed: bool
    retry_after: int
    remaining: int


class SlidingWindowRateLimiter:
    """
    Allow at most `limit` requests per `window_seconds` for each key.

    Timestamps per key live in an injected store; a rejected request is not
    recorded. Retry-After is measured from the oldest retained timestamp.
    """

    def __init__(
        self,
        limit: int = 3,
        window_seconds: float = 60.0,
        store: KeyValueStore[List[float]] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self.store = store if store is not None else InMemoryStore(ttl_seconds=window_seconds, clock=clock)
        self._lock = threading.Lock()

    def check(self, key: str) -> RateLimitDecision:
        now = self._clock()
        with self._lock:
            existing = self.store.get(key) or []
            recent = [ts for ts in existing if now - ts < self.window_seconds]

            if len(recent) >= self.limit:
                oldest = recent[0]
                retry_after_seconds = self.window_seconds - (now - oldest)
                self.store.set(key, recent)
                return RateLimitDecision(
                    allowed=False,
                    retry_after=max(1, math.ceil(retry_after_seconds)),
                    remaining=0,
                )

            updated = recent + [now]
            self.store.set(key, updated)
            return RateLimitDecision(
                allowed=True,
                retry_after=0,
                remaining=max(0, self.limit - len(updated)),
            )
