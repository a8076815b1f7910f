"""Sliding-window rate limiting for incoming commands."""

from __future__ import annotations

import time
from collections import deque
from typing import Callable


class RateLimiter:
    """Allows at most ``max_commands`` events within any ``window`` seconds.

    Events older than the window are forgotten; an event arriving exactly one
    window after an earlier one still counts that earlier event.
    """

    __slots__ = ("_max_commands", "_window", "_clock", "_timestamps")

    def __init__(
        self,
        max_commands: int,
        window: float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_commands < 0:
            raise ValueError(f"max_commands must not be negative, got {max_commands}")
        if window < 0:
            raise ValueError(f"window must not be negative, got {window}")
        self._max_commands = max_commands
        self._window = float(window)
        self._clock = clock
        self._timestamps: deque[float] = deque()

    @property
    def max_commands(self) -> int:
        """Maximum number of events allowed inside one window."""
        return self._max_commands

    @property
    def window(self) -> float:
        """Window length in seconds."""
        return self._window

    def check(self) -> bool:
        """Record an event if allowed; return False when the limit is reached."""
        now = self._clock()
        while self._timestamps and now - self._timestamps[0] > self._window:
            self._timestamps.popleft()
        if len(self._timestamps) < self._max_commands:
            self._timestamps.append(now)
            return True
        return False

    def current_count(self) -> int:
        """Number of events recorded in the current window."""
        return len(self._timestamps)

    def __repr__(self) -> str:
        return (
            f"RateLimiter(max_commands={self._max_commands}, "
            f"window={self._window}, count={len(self._timestamps)})"
        )