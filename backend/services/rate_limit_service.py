"""Failed-login tracking per client. State lives in memory and is lost on restart."""

from __future__ import annotations

import time
from collections import deque
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


class LoginAttemptLimiter:
    """Sliding window of failed password attempts keyed by client.

    Safe under asyncio's single-threaded model: no method awaits between
    reading and mutating the window.
    """

    def __init__(
        self,
        max_failures: int,
        window_seconds: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_failures = max_failures
        self.window_seconds = window_seconds
        self._clock = clock
        self._failures: dict[str, deque[float]] = {}

    def _window(self, key: str) -> deque[float] | None:
        failures = self._failures.get(key)
        if failures is None:
            return None
        cutoff = self._clock() - self.window_seconds
        while failures and failures[0] <= cutoff:
            failures.popleft()
        if not failures:
            del self._failures[key]
            return None
        return failures

    def retry_after(self, key: str) -> int:
        """Seconds until ``key`` may try again; 0 when it is not blocked."""
        failures = self._window(key)
        if failures is None or len(failures) < self.max_failures:
            return 0
        remaining = failures[0] + self.window_seconds - self._clock()
        return max(int(remaining) + 1, 1)

    def record_failure(self, key: str) -> None:
        self._window(key)
        self._failures.setdefault(key, deque()).append(self._clock())

    def reset(self, key: str) -> None:
        self._failures.pop(key, None)
