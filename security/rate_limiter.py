"""
Sliding-window rate limiting keyed by operation name.

Each key keeps the timestamps (ms) of its allowed requests inside the trailing
window. Stale timestamps are pruned lazily on every check; keys that have gone
quiet are swept at most once per window so the amortized cost stays low.
"""

import time
from collections import deque
from typing import Callable, Deque, Dict, Optional

import showlog

# Violations per key before the warning escalates to an error line
CRITICAL_VIOLATIONS = 10


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class RateLimiter:
    """Counts requests per key over a trailing time window."""

    def __init__(self,
                 max_requests: int = 100,
                 window_ms: float = 60000,
                 clock: Optional[Callable[[], float]] = None):
        """
        Create a new rate limiter.

        Args:
            max_requests: Maximum requests allowed per key inside the window
            window_ms: Window length in milliseconds
            clock: Callable returning the current time in milliseconds
                   (defaults to a monotonic clock)
        """
        if max_requests < 0:
            raise ValueError(f"max_requests must be >= 0, got {max_requests}")
        if window_ms <= 0:
            raise ValueError(f"window_ms must be > 0, got {window_ms}")

        self.max_requests = int(max_requests)
        self.window_ms = float(window_ms)
        self._clock = clock or _monotonic_ms
        self._requests: Dict[str, Deque[float]] = {}
        self._violations: Dict[str, int] = {}
        self._last_sweep = self._clock()

    def is_allowed(self, key: str) -> bool:
        """
        Check whether an operation is allowed and record it if so.

        A timestamp exactly window_ms old still counts against the key.

        Args:
            key: Operation identifier (e.g. "register", "draw")

        Returns:
            True if the request fits in the window (and was recorded)
        """
        now = self._clock()
        self._sweep(now)

        window = self._requests.get(key)
        if window is None:
            window = deque()
            self._requests[key] = window
        self._prune(window, now)

        if len(window) >= self.max_requests:
            self._log_violation(key)
            return False

        window.append(now)
        return True

    def violations(self, key: str) -> int:
        """Number of rejected requests recorded for key."""
        return self._violations.get(key, 0)

    def pending(self, key: str) -> int:
        """Number of timestamps currently held for key (not pruned)."""
        window = self._requests.get(key)
        return len(window) if window else 0

    def reset(self, key: Optional[str] = None) -> None:
        """Forget history for one key, or for every key when None."""
        if key is None:
            self._requests.clear()
            self._violations.clear()
        else:
            self._requests.pop(key, None)
            self._violations.pop(key, None)

    def _prune(self, window: Deque[float], now: float) -> None:
        while window and now - window[0] > self.window_ms:
            window.popleft()

    def _sweep(self, now: float) -> None:
        """Drop keys whose windows have fully expired (at most once per window)."""
        if now - self._last_sweep <= self.window_ms:
            return
        for key in list(self._requests):
            window = self._requests[key]
            self._prune(window, now)
            if not window:
                del self._requests[key]
        self._last_sweep = now

    def _log_violation(self, key: str) -> None:
        count = self._violations.get(key, 0) + 1
        self._violations[key] = count

        showlog.warn(f"[RATE] Rate limit exceeded for key: {key} (Violation #{count})")
        if count > CRITICAL_VIOLATIONS:
            showlog.error(f"[RATE] Critical: multiple rate limit violations for {key}")
