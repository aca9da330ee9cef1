"""Unit tests for the in-memory store and the sliding-window rate limiter"""

from future_letter.infrastructure.stores.memory import InMemoryStore
from future_letter.infrastructure.stores.rate_limit import SlidingWindowRateLimiter


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def test_store_get_and_set():
    store = InMemoryStore()
    store.set("a", 1)

    assert store.get("a") == 1
    assert store.get("missing") is None
    assert len(store) == 1


def test_store_entries_expire():
    clock = FakeClock()
    store = InMemoryStore(ttl_seconds=10, clock=clock)
    store.set("a", 1)

    clock.advance(9)
    assert store.get("a") == 1

    clock.advance(1)
    assert store.get("a") is None
    assert len(store) == 0


def test_store_evicts_least_recently_used():
    store = InMemoryStore(max_entries=2)
    store.set("a", 1)
    store.set("b", 2)
    store.get("a")
    store.set("c", 3)

    assert store.get("a") == 1
    assert store.get("b") is None
    assert store.get("c") == 3


def test_store_prune_removes_stale_entries():
    clock = FakeClock()
    store = InMemoryStore(ttl_seconds=60, clock=clock)
    store.set("old", 1)
    clock.advance(30)
    store.set("new", 2)
    clock.advance(31)

    assert store.prune() == 1
    assert store.get("new") == 2
    assert store.prune(max_age_seconds=10) == 1
    assert len(store) == 0


def test_store_prune_without_ttl_is_noop():
    store = InMemoryStore()
    store.set("a", 1)
    assert store.prune() == 0


def test_store_delete_and_clear():
    store = InMemoryStore()
    store.set("a", 1)
    store.set("b", 2)

    store.delete("a")
    store.delete("missing")
    assert store.get("a") is None

    store.clear()
    assert len(store) == 0


def test_rate_limiter_allows_up_to_limit():
    limiter = SlidingWindowRateLimiter(limit=3, window_seconds=60, clock=FakeClock())

    decisions = [limiter.check("1.2.3.4") for _ in range(3)]

    assert all(d.allowed for d in decisions)
    assert [d.remaining for d in decisions] == [2, 1, 0]


def test_rate_limiter_rejects_fourth_request_with_retry_after():
    clock = FakeClock()
    limiter = SlidingWindowRateLimiter(limit=3, window_seconds=60, clock=clock)
    for _ in range(3):
        limiter.check("1.2.3.4")
        clock.advance(10)

    decision = limiter.check("1.2.3.4")

    assert not decision.allowed
    # Oldest request was 30s ago
    assert decision.retry_after == 30
    assert decision.remaining == 0


def test_rate_limiter_retry_after_is_at_least_one_second():
    clock = FakeClock()
    limiter = SlidingWindowRateLimiter(limit=1, window_seconds=60, clock=clock)
    limiter.check("ip")
    clock.advance(59.9)

    assert limiter.check("ip").retry_after == 1


def test_rate_limiter_window_slides():
    clock = FakeClock()
    limiter = SlidingWindowRateLimiter(limit=3, window_seconds=60, clock=clock)
    limiter.check("ip")
    clock.advance(30)
    limiter.check("ip")
    limiter.check("ip")
    assert not limiter.check("ip").allowed

    # First request leaves the window; one slot frees up
    clock.advance(30)
    assert limiter.check("ip").allowed
    assert not limiter.check("ip").allowed


def test_rejected_requests_are_not_recorded():
    clock = FakeClock()
    limiter = SlidingWindowRateLimiter(limit=1, window_seconds=60, clock=clock)
    limiter.check("ip")
    for _ in range(5):
        clock.advance(10)
        limiter.check("ip")

    # Only the first request counts, so the window reopens 60s after it
    clock.advance(10)
    assert limiter.check("ip").allowed


def test_rate_limiter_keys_are_independent():
    limiter = SlidingWindowRateLimiter(limit=1, window_seconds=60, clock=FakeClock())

    assert limiter.check("a").allowed
    assert not limiter.check("a").allowed
    assert limiter.check("b").allowed


def test_rate_limiter_uses_injected_store():
    clock = FakeClock()
    store = InMemoryStore(ttl_seconds=60, max_entries=1, clock=clock)
    limiter = SlidingWindowRateLimiter(limit=1, window_seconds=60, store=store, clock=clock)

    limiter.check("a")
    limiter.check("b")

    # Bucket for "a" was evicted by the size cap
    assert store.get("a") is None
    assert limiter.check("a").allowed
