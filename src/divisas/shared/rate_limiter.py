"""
Rate Limiter - Abuse Prevention for Bot Commands

Sliding-window, in-memory limiter keyed by an identifier such as
"fetch:chat:123". The AI rate lookup costs money per call, so it gets a much
tighter budget than field edits.

Files that USE this module:
- divisas.adapters.telegram.handlers (checks RATE_LIMITS before handling updates)
- tests.test_rate_limiter (unit tests)

Files that this module USES:
- None (pure utility implementation)
"""
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, Optional


@dataclass(frozen=True)
class RateLimitConfig:
    """Configuration for rate limiting."""
    max_requests: int
    time_window: int  # in seconds
    block_duration: int = 60


class RateLimiter:
    """
    Simple in-memory rate limiter.

    Identifiers with no request left in their window and no active block
    are forgotten, so memory stays bounded by the recently active chats.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._requests: Dict[str, Deque[float]] = {}
        self._blocked_until: Dict[str, float] = {}

    def _prune(self, identifier: str, config: RateLimitConfig, now: float) -> Deque[float]:
        requests = self._requests.get(identifier)
        if requests is None:
            return deque()
        cutoff = now - config.time_window
        while requests and requests[0] <= cutoff:
            requests.popleft()
        if not requests:
            del self._requests[identifier]
        return requests

    def _active_block(self, identifier: str, now: float) -> Optional[float]:
        blocked_until = self._blocked_until.get(identifier)
        if blocked_until is None:
            return None
        if now < blocked_until:
            return blocked_until
        del self._blocked_until[identifier]
        return None

    def is_allowed(self, identifier: str, config: RateLimitConfig) -> bool:
        """
        Record a request and tell whether it is allowed.

        Exceeding the window blocks the identifier for config.block_duration.
        """
        now = self._clock()
        if self._active_block(identifier, now) is not None:
            return False

        requests = self._prune(identifier, config, now)
        if len(requests) >= config.max_requests:
            self._blocked_until[identifier] = now + config.block_duration
            return False

        requests.append(now)
        self._requests[identifier] = requests
        return True

    def get_remaining_requests(self, identifier: str, config: RateLimitConfig) -> int:
        """Number of requests still available in the current window."""
        requests = self._prune(identifier, config, self._clock())
        return max(0, config.max_requests - len(requests))

    def get_retry_after(self, identifier: str, config: RateLimitConfig) -> Optional[float]:
        """
        Seconds until the identifier may send again.

        Returns:
            Seconds to wait, or None if a request would be allowed now
        """
        now = self._clock()
        blocked_until = self._active_block(identifier, now)
        if blocked_until is not None:
            return blocked_until - now

        requests = self._prune(identifier, config, now)
        if len(requests) < config.max_requests:
            return None
        return requests[0] + config.time_window - now

    def tracked_identifiers(self) -> int:
        """Number of identifiers currently holding requests or a block."""
        return len(set(self._requests) | set(self._blocked_until))


# Global rate limiter instance
rate_limiter = RateLimiter()

# Predefined rate limit configurations
RATE_LIMITS = {
    "user_command": RateLimitConfig(max_requests=30, time_window=60),  # field edits, reset, start
    "fetch_rates": RateLimitConfig(max_requests=5, time_window=60, block_duration=120),  # AI lookups
}
