"""
clock.py
--------
Monotonic time sources for the timer scheduler and update loop.

The host reads time only through a clock object so tests can advance it
deterministically instead of sleeping.
"""

import time


class MonotonicClock:
    """Wall-clock backed monotonic source (seconds since creation)."""

    def __init__(self):
        self._origin = time.monotonic()

    def now(self) -> float:
        return time.monotonic() - self._origin


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, start: float = 0.0):
        self._now = float(start)

    def now(self) -> float:
        return self._now

    def advance(self, seconds: float) -> float:
        """
        Move time forward.

        Args:
            seconds: Amount to advance; negative values are ignored

        Returns:
            The new current time
        """
        if seconds > 0:
            self._now += seconds
        return self._now

    def set(self, now: float):
        """Jump to an absolute time (never backwards)."""
        self._now = max(self._now, float(now))
