"""Token bucket rate limiter shared by all requests of a TrelloClient."""

from __future__ import annotations

import threading
import time
from typing import Any, Callable


class RateLimiter:
    """Token bucket rate limiter for API requests

    Tokens refill continuously at ``requests_per_second`` up to
    ``burst_allowance``; each request consumes one. Safe to share between
    threads.
    """

    def __init__(
        self,
        requests_per_second: float,
        burst_allowance: int = 5,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Args:
            requests_per_second: Sustained refill rate
            burst_allowance: Bucket capacity (maximum burst)
            clock: Monotonic time source, injectable for tests
            sleep: Sleep function used while waiting for a token
        """
        if requests_per_second <= 0:
            raise ValueError("requests_per_second must be positive")
        if burst_allowance < 1:
            raise ValueError("burst_allowance must be at least 1")

        self.rate = requests_per_second
        self.burst_allowance = burst_allowance
        self.tokens = float(burst_allowance)
        self._clock = clock
        self._sleep = sleep
        self.last_update = clock()
        self._lock = threading.Lock()

    def _refill(self) -> None:
        now = self._clock()
        elapsed = now - self.last_update
        self.tokens = min(float(self.burst_allowance), self.tokens + elapsed * self.rate)
        self.last_update = now

    def acquire(self, timeout: float = 5.0) -> bool:
        """
        Take one token, waiting up to ``timeout`` seconds for the bucket to refill

        Returns:
            True if a token was taken, False on timeout
        """
        deadline = self._clock() + timeout

        while True:
            with self._lock:
                self._refill()
                if self.tokens >= 1.0:
                    self.tokens -= 1.0
                    return True
                wait = (1.0 - self.tokens) / self.rate

            remaining = deadline - self._clock()
            if remaining <= 0:
                return False
            self._sleep(min(wait, remaining, 0.05))

    def get_status(self) -> dict[str, Any]:
        """Get current rate limiter status for debugging"""
        with self._lock:
            return {
                "available_tokens": self.tokens,
                "max_tokens": self.burst_allowance,
                "rate_per_second": self.rate,
                "utilization_percent": (1 - self.tokens / self.burst_allowance) * 100,
            }
