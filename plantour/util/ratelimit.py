"""Fixed-window rate limiting.

State lives in process memory, so limits apply per worker. That is enough
to blunt invitation spam from a single session.
"""

import math
import time
from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitDecision:
    """Result of counting one request against a key."""

    allowed: bool
    limit: int
    remaining: int
    reset_at: float  # epoch seconds
    retry_after: int  # whole seconds, 0 when allowed


class FixedWindowRateLimiter:
    """Allows ``max_requests`` per ``window_seconds`` for each key."""

    def __init__(
        self,
        max_requests: int,
        window_seconds: int,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if window_seconds < 1:
            raise ValueError("window_seconds must be at least 1")
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, tuple[int, float]] = {}

    def hit(self, key: str) -> RateLimitDecision:
        """Count a request for ``key`` and decide whether it may proceed."""
        now = self._clock()
        self._prune(now)

        count, reset_at = self._windows.get(key, (0, now + self.window_seconds))
        if count >= self.max_requests:
            return RateLimitDecision(
                allowed=False,
                limit=self.max_requests,
                remaining=0,
                reset_at=reset_at,
                retry_after=max(1, math.ceil(reset_at - now)),
            )

        count += 1
        self._windows[key] = (count, reset_at)
        return RateLimitDecision(
            allowed=True,
            limit=self.max_requests,
            remaining=self.max_requests - count,
            reset_at=reset_at,
            retry_after=0,
        )

    def reset(self, key: str | None = None) -> None:
        """Forget one key, or every key."""
        if key is None:
            self._windows.clear()
        else:
            self._windows.pop(key, None)

    def _prune(self, now: float) -> None:
        expired = [k for k, (_, reset_at) in self._windows.items() if reset_at <= now]
        for k in expired:
            del self._windows[k]


@dataclass(frozen=True)
class RateLimiters:
    """Application-wide limiters, one budget per endpoint class."""

    invitations: FixedWindowRateLimiter
    api: FixedWindowRateLimiter
    enabled: bool = True
