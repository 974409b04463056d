"""
timer_scheduler.py
------------------
One-shot and repeating timers driven by an external tick.

Responsibilities
----------------
- Queue timers ordered by (fire_at, id) so ties resolve deterministically.
- Hand out cancellable handles before a timer can ever fire.
- Fire every due timer on tick, checking cancellation right before each call.
- Re-arm tickers until their iteration count runs out.
"""

import heapq
import itertools
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from addon_host.core.debug.debug_logger import DebugLogger


@dataclass
class PendingTimer:
    """A scheduled callback."""
    id: int
    fire_at: float
    callback: Callable
    interval: Optional[float] = None  # None = one-shot
    remaining: Optional[int] = None  # None = unbounded
    cancelled: bool = False


class TimerHandle:
    """Script-facing handle returned by new_timer/new_ticker."""

    __slots__ = ("_scheduler", "id", "_cancelled")

    def __init__(self, scheduler: "TimerScheduler", timer_id: int):
        self._scheduler = scheduler
        self.id = timer_id
        self._cancelled = False

    def cancel(self):
        """Stop the timer; takes effect even for a timer due in the current tick."""
        self._cancelled = True
        self._scheduler.cancel(self.id)

    def is_cancelled(self) -> bool:
        return self._cancelled

    def __repr__(self):
        return f"TimerHandle(id={self.id}, cancelled={self._cancelled})"


class TimerScheduler:
    """Priority queue of pending timers."""

    def __init__(self, clock):
        """
        Args:
            clock: Time source with a ``now()`` method (seconds)
        """
        self.clock = clock
        self._timers: Dict[int, PendingTimer] = {}
        # Handles of live timers, so clear() can flag them
        self._handles: Dict[int, TimerHandle] = {}
        self._heap: List[Tuple[float, int]] = []
        self._ids = itertools.count(1)
        DebugLogger.init_entry("TimerScheduler")

    # ===========================================================
    # Scheduling
    # ===========================================================

    def after(self, delay: float, callback: Callable) -> None:
        """One-shot timer with no handle."""
        if not self._check_callback(callback):
            return None
        self._push(PendingTimer(next(self._ids), self._due_in(delay), callback))
        return None

    def new_timer(self, delay: float, callback: Callable) -> Optional[TimerHandle]:
        """One-shot timer with a cancellable handle."""
        if not self._check_callback(callback):
            return None
        timer_id = next(self._ids)
        handle = TimerHandle(self, timer_id)
        self._handles[timer_id] = handle
        self._push(PendingTimer(timer_id, self._due_in(delay), callback))
        return handle

    def new_ticker(self, interval: float, callback: Callable,
                   iterations: Optional[int] = None) -> Optional[TimerHandle]:
        """
        Repeating timer.

        Args:
            interval: Seconds between firings
            callback: Called with no arguments on each firing
            iterations: Total firings; None or a non-positive count repeats forever

        Returns:
            Cancellable handle
        """
        if not self._check_callback(callback):
            return None
        interval = max(0.0, float(interval))
        remaining = iterations if iterations is not None and iterations > 0 else None
        timer_id = next(self._ids)
        handle = TimerHandle(self, timer_id)
        self._handles[timer_id] = handle
        self._push(PendingTimer(timer_id, self._due_in(interval), callback,
                                interval=interval, remaining=remaining))
        return handle

    def cancel(self, timer_id: int) -> bool:
        """Flag a timer as cancelled. Returns False if it is no longer pending."""
        timer = self._retire(timer_id)
        if timer is None:
            return False
        timer.cancelled = True
        DebugLogger.trace(f"Cancelled timer {timer_id}", category="timer")
        return True

    # ===========================================================
    # Tick
    # ===========================================================

    def tick(self, ctx, now: Optional[float] = None) -> int:
        """
        Fire every timer due at ``now``.

        The due set is taken up front in (fire_at, id) order; tickers re-armed
        during this call wait for the next tick.

        Args:
            ctx: DispatchContext used to contain callback failures
            now: Current time; defaults to the scheduler's clock

        Returns:
            Number of callbacks invoked
        """
        if now is None:
            now = self.clock.now()

        batch: List[PendingTimer] = []
        while self._heap and self._heap[0][0] <= now:
            _, timer_id = heapq.heappop(self._heap)
            timer = self._timers.get(timer_id)
            if timer is not None:
                batch.append(timer)

        fired = 0
        for timer in batch:
            # A callback earlier in this batch may have cancelled it
            if timer.cancelled:
                self._retire(timer.id)
                continue

            ctx.invoke(timer.callback, source=f"Timer {timer.id} callback", category="timer")
            fired += 1

            if self._should_repeat(timer):
                timer.fire_at += timer.interval
                heapq.heappush(self._heap, (timer.fire_at, timer.id))
            else:
                self._retire(timer.id)

        return fired

    @staticmethod
    def _should_repeat(timer: PendingTimer) -> bool:
        """Decrement a bounded ticker; True if it fires again."""
        if timer.interval is None or timer.cancelled:
            return False
        if timer.remaining is None:
            return True
        timer.remaining -= 1
        return timer.remaining > 0

    # ===========================================================
    # State
    # ===========================================================

    def has_pending_timers(self) -> bool:
        return bool(self._timers)

    @property
    def pending_count(self) -> int:
        return len(self._timers)

    def next_fire_time(self) -> Optional[float]:
        """Earliest fire_at among live timers."""
        live = [t.fire_at for t in self._timers.values()]
        return min(live) if live else None

    def clear(self):
        """Cancel everything, including the handles scripts still hold."""
        for timer in self._timers.values():
            timer.cancelled = True
        for handle in self._handles.values():
            handle._cancelled = True
        self._timers.clear()
        self._handles.clear()
        self._heap.clear()

    # ===========================================================
    # Internals
    # ===========================================================

    def _due_in(self, delay: float) -> float:
        return self.clock.now() + max(0.0, float(delay))

    def _push(self, timer: PendingTimer):
        self._timers[timer.id] = timer
        heapq.heappush(self._heap, (timer.fire_at, timer.id))

    def _retire(self, timer_id: int) -> Optional[PendingTimer]:
        self._handles.pop(timer_id, None)
        return self._timers.pop(timer_id, None)

    @staticmethod
    def _check_callback(callback) -> bool:
        if callable(callback):
            return True
        DebugLogger.warn(f"Ignored timer with non-callable callback {callback!r}", category="timer")
        return False
