"""
Rate Limiter Tests - Unit Tests for Command Rate Limiting

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- divisas.shared.rate_limiter (RateLimiter, RateLimitConfig, RATE_LIMITS)
"""
from divisas.shared.rate_limiter import RATE_LIMITS, RateLimitConfig, RateLimiter  # Limiter under test


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class TestRateLimiter:
    def test_allows_up_to_limit_then_blocks(self):
        clock = FakeClock()
        limiter = RateLimiter(clock=clock)
        config = RateLimitConfig(max_requests=2, time_window=60, block_duration=30)

        assert limiter.is_allowed("fetch_rates:chat:1", config) is True
        assert limiter.is_allowed("fetch_rates:chat:1", config) is True
        assert limiter.is_allowed("fetch_rates:chat:1", config) is False
        assert limiter.get_retry_after("fetch_rates:chat:1", config) == 30

    def test_block_expires(self):
        clock = FakeClock()
        limiter = RateLimiter(clock=clock)
        config = RateLimitConfig(max_requests=1, time_window=10, block_duration=30)

        assert limiter.is_allowed("a", config) is True
        assert limiter.is_allowed("a", config) is False

        clock.now += 31
        assert limiter.is_allowed("a", config) is True

    def test_identifiers_are_independent(self):
        limiter = RateLimiter(clock=FakeClock())
        config = RateLimitConfig(max_requests=1, time_window=60)

        assert limiter.is_allowed("user_command:chat:1", config) is True
        assert limiter.is_allowed("user_command:chat:2", config) is True

    def test_remaining_requests_and_window(self):
        clock = FakeClock()
        limiter = RateLimiter(clock=clock)
        config = RateLimitConfig(max_requests=3, time_window=60)

        assert limiter.get_remaining_requests("a", config) == 3
        limiter.is_allowed("a", config)
        assert limiter.get_remaining_requests("a", config) == 2
        assert limiter.get_retry_after("a", config) is None

        clock.now += 60
        assert limiter.get_remaining_requests("a", config) == 3

    def test_fetch_budget_is_tighter_than_edits(self):
        assert RATE_LIMITS["fetch_rates"].max_requests < RATE_LIMITS["user_command"].max_requests

    def test_idle_identifiers_are_forgotten(self):
        clock = FakeClock()
        limiter = RateLimiter(clock=clock)
        config = RateLimitConfig(max_requests=1, time_window=10, block_duration=30)

        limiter.is_allowed("user_command:chat:1", config)
        limiter.is_allowed("user_command:chat:2", config)
        limiter.is_allowed("user_command:chat:2", config)
        assert limiter.tracked_identifiers() == 2

        clock.now += 31
        assert limiter.get_retry_after("user_command:chat:1", config) is None
        assert limiter.get_retry_after("user_command:chat:2", config) is None
        assert limiter.tracked_identifiers() == 0

    def test_unknown_identifier_is_not_stored(self):
        limiter = RateLimiter(clock=FakeClock())
        config = RateLimitConfig(max_requests=3, time_window=60)

        assert limiter.get_remaining_requests("fetch_rates:chat:9", config) == 3
        assert limiter.tracked_identifiers() == 0
