"""
test_timer_scheduler.py
-----------------------
Unit tests for one-shot timers, tickers and cancellation.

Responsibilities
----------------
- Verify firing times and (fire_at, id) ordering.
- Verify ticker iteration counts and re-arming.
- Verify cancellation from inside callbacks of the same batch.
- Verify failing callbacks never abort the batch.
"""

import pytest

from addon_host.systems.timers.timer_scheduler import TimerHandle, TimerScheduler


# ===========================================================
# Fixtures
# ===========================================================

@pytest.fixture
def timers(clock):
    return TimerScheduler(clock)


# ===========================================================
# One-shot Timers
# ===========================================================

def test_after_zero_fires_on_next_tick(timers, ctx, recorder):
    assert timers.after(0, recorder.make("now")) is None

    assert timers.tick(ctx, 0.0) == 1
    assert recorder.calls == [("now", ())]
    assert not timers.has_pending_timers()


def test_timer_waits_until_due(timers, ctx, clock, recorder):
    timers.new_timer(1.5, recorder.make("t"))

    clock.advance(1.0)
    assert timers.tick(ctx) == 0
    clock.advance(0.5)
    assert timers.tick(ctx) == 1
    assert timers.tick(ctx) == 0


def test_due_timers_fire_in_time_then_id_order(timers, ctx, recorder):
    timers.after(2.0, recorder.make("late"))
    timers.after(1.0, recorder.make("tie-a"))
    timers.after(1.0, recorder.make("tie-b"))

    timers.tick(ctx, 5.0)

    assert recorder.tags == ["tie-a", "tie-b", "late"]


def test_negative_delay_treated_as_zero(timers, ctx, recorder):
    timers.after(-3, recorder.make("neg"))
    assert timers.tick(ctx, 0.0) == 1


def test_non_callable_is_ignored(timers):
    assert timers.new_timer(1, "not a function") is None
    assert timers.pending_count == 0


# ===========================================================
# Tickers
# ===========================================================

def test_bounded_ticker_fires_exact_count(timers, ctx, clock, recorder):
    timers.new_ticker(1.0, recorder.make("tick"), iterations=3)

    for _ in range(5):
        clock.advance(1.0)
        timers.tick(ctx)

    assert len(recorder.calls) == 3
    assert not timers.has_pending_timers()


def test_unbounded_ticker_keeps_running(timers, ctx, clock, recorder):
    handle = timers.new_ticker(0.5, recorder.make("tick"))

    for _ in range(10):
        clock.advance(0.5)
        timers.tick(ctx)

    assert len(recorder.calls) == 10
    assert timers.has_pending_timers()
    handle.cancel()
    assert not timers.has_pending_timers()


@pytest.mark.parametrize("iterations", [None, 0, -1])
def test_non_positive_iterations_mean_forever(timers, ctx, clock, recorder, iterations):
    timers.new_ticker(1.0, recorder.make("tick"), iterations)
    for _ in range(4):
        clock.advance(1.0)
        timers.tick(ctx)
    assert len(recorder.calls) == 4


def test_rearmed_ticker_waits_for_next_tick(timers, ctx, recorder):
    timers.new_ticker(1.0, recorder.make("tick"), iterations=5)

    assert timers.tick(ctx, 10.0) == 1
    assert timers.tick(ctx, 10.0) == 1
    assert len(recorder.calls) == 2


# ===========================================================
# Cancellation
# ===========================================================

def test_cancel_before_due(timers, ctx, recorder):
    handle = timers.new_timer(1.0, recorder.make("t"))
    handle.cancel()

    assert handle.is_cancelled()
    assert timers.tick(ctx, 2.0) == 0
    assert recorder.calls == []


def test_ticker_cancels_itself(timers, ctx, clock):
    fired = []
    holder = {}

    def callback():
        fired.append(clock.now())
        if len(fired) == 2:
            holder["handle"].cancel()

    holder["handle"] = timers.new_ticker(1.0, callback)
    for _ in range(5):
        clock.advance(1.0)
        timers.tick(ctx)

    assert fired == [1.0, 2.0]
    assert holder["handle"].is_cancelled()


def test_callback_cancels_sibling_due_same_tick(timers, ctx, recorder):
    handles = {}

    def first():
        recorder.calls.append(("first", ()))
        handles["second"].cancel()

    timers.new_timer(1.0, first)
    handles["second"] = timers.new_timer(1.0, recorder.make("second"))

    assert timers.tick(ctx, 1.0) == 1
    assert recorder.tags == ["first"]


def test_cancel_unknown_id(timers):
    assert timers.cancel(123456) is False


def test_handle_repr_and_cancel_after_fire(timers, ctx):
    handle = timers.new_timer(0, lambda: None)
    timers.tick(ctx, 0.0)

    handle.cancel()

    assert isinstance(handle, TimerHandle)
    assert handle.is_cancelled()
    assert "cancelled=True" in repr(handle)


# ===========================================================
# Failures & State
# ===========================================================

def test_failing_callback_does_not_abort_batch(timers, ctx, recorder):
    timers.after(1.0, lambda: 1 / 0)
    timers.after(1.0, recorder.make("after"))

    assert timers.tick(ctx, 1.0) == 2
    assert recorder.tags == ["after"]
    assert ctx.error_count == 1


def test_failing_ticker_keeps_ticking(timers, ctx, clock):
    timers.new_ticker(1.0, lambda: 1 / 0, iterations=2)
    clock.advance(1.0)
    timers.tick(ctx)
    clock.advance(1.0)
    timers.tick(ctx)

    assert ctx.error_count == 2
    assert not timers.has_pending_timers()


def test_pending_count_and_clear(timers, ctx):
    timers.after(1, lambda: None)
    timers.new_ticker(2, lambda: None)

    assert timers.pending_count == 2
    assert timers.next_fire_time() == 1.0

    timers.clear()
    assert timers.pending_count == 0
    assert timers.next_fire_time() is None
    assert timers.tick(ctx, 100.0) == 0


def test_clear_marks_live_handles_cancelled(timers, ctx):
    finished = timers.new_timer(0, lambda: None)
    timers.tick(ctx, 0.0)
    ticker = timers.new_ticker(1.0, lambda: None)
    timer = timers.new_timer(5.0, lambda: None)

    timers.clear()

    assert ticker.is_cancelled()
    assert timer.is_cancelled()
    assert not finished.is_cancelled()
