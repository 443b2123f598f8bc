"""
Tests for Rate Limiting.

Tests the fixed-window limiter and its in-memory store.
"""

import pytest

from icia_landing.api.rate_limiting import (
    FixedWindowRateLimiter,
    InMemoryRateLimitStore,
    get_client_id,
)


WINDOW = 600


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, now: float = 1_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> InMemoryRateLimitStore:
    return InMemoryRateLimitStore(window_seconds=WINDOW, sweep_interval_seconds=300, clock=clock)


@pytest.fixture
def limiter(store: InMemoryRateLimitStore, clock: FakeClock) -> FixedWindowRateLimiter:
    return FixedWindowRateLimiter(store, max_requests=5, clock=clock)


class TestInMemoryRateLimitStore:
    """Tests for InMemoryRateLimitStore."""

    def test_first_increment_opens_window(self, store, clock):
        entry = store.increment("1.2.3.4")

        assert entry.count == 1
        assert entry.reset_at == clock.now + WINDOW

    def test_increment_within_window_counts_up(self, store, clock):
        store.increment("1.2.3.4")
        clock.advance(10)

        entry = store.increment("1.2.3.4")

        assert entry.count == 2
        assert entry.reset_at == clock.now - 10 + WINDOW

    def test_expired_window_restarts(self, store, clock):
        store.increment("1.2.3.4")
        clock.advance(WINDOW)

        assert store.increment("1.2.3.4").count == 1

    def test_sweep_removes_only_expired(self, store, clock):
        store.increment("old")
        clock.advance(WINDOW - 1)
        store.increment("fresh")
        clock.advance(1)

        removed = store.sweep_expired()

        assert removed == 1
        assert len(store) == 1

    def test_increment_sweeps_after_interval(self, store, clock):
        store.increment("old")
        clock.advance(WINDOW)

        store.increment("new")

        assert len(store) == 1


class TestFixedWindowRateLimiter:
    """Tests for FixedWindowRateLimiter."""

    def test_sixth_request_is_rejected(self, limiter):
        results = [limiter.is_allowed("1.2.3.4")[0] for _ in range(6)]

        assert results == [True, True, True, True, True, False]

    def test_window_does_not_reset_early(self, limiter, clock):
        for _ in range(6):
            limiter.is_allowed("1.2.3.4")
        clock.advance(WINDOW - 1)

        allowed, retry_after = limiter.is_allowed("1.2.3.4")

        assert allowed is False
        assert retry_after == 1

    def test_new_window_after_expiry_allows(self, limiter, clock):
        for _ in range(6):
            limiter.is_allowed("1.2.3.4")
        clock.advance(WINDOW)

        assert limiter.is_allowed("1.2.3.4") == (True, 0)

    def test_retry_after_counts_down_to_reset(self, limiter, clock):
        for _ in range(5):
            limiter.is_allowed("1.2.3.4")
        clock.advance(100)

        allowed, retry_after = limiter.is_allowed("1.2.3.4")

        assert allowed is False
        assert retry_after == WINDOW - 100

    def test_clients_are_independent(self, limiter):
        for _ in range(6):
            limiter.is_allowed("a")

        assert limiter.is_allowed("b") == (True, 0)


class TestClientId:
    """Tests for client address extraction."""

    @pytest.mark.parametrize("headers,expected", [
        ({"X-Forwarded-For": "203.0.113.7, 10.0.0.1"}, "203.0.113.7"),
        ({"X-Forwarded-For": " , 10.0.0.1", "X-Real-IP": "198.51.100.4"}, "198.51.100.4"),
        ({"X-Real-IP": " 198.51.100.4 "}, "198.51.100.4"),
        ({}, "unknown"),
    ])
    def test_client_id_from_headers(self, app, headers, expected):
        with app.test_request_context("/api/contact", headers=headers):
            assert get_client_id() == expected
