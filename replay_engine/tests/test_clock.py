"""
Tests for the playback clock and schedulers.
"""

import asyncio
import threading
import time

import pytest

from replay_engine.core.clock import (
    AsyncioScheduler,
    ManualScheduler,
    PlaybackClock,
    ThreadingScheduler,
    tick_delay_ms,
)
from replay_engine.core.types import ReplaySpeed


@pytest.mark.parametrize(
    "speed,expected",
    [
        (ReplaySpeed.HALF, 2000),
        (ReplaySpeed.NORMAL, 1000),
        (ReplaySpeed.ONE_AND_HALF, 667),
        (ReplaySpeed.DOUBLE, 500),
        (ReplaySpeed.QUADRUPLE, 250),
    ],
)
def test_tick_delay_per_speed(speed, expected):
    assert tick_delay_ms(speed, 1000) == pytest.approx(expected)


def test_manual_scheduler_fires_in_due_order():
    scheduler = ManualScheduler()
    fired = []
    scheduler.call_later(300, lambda: fired.append("c"))
    scheduler.call_later(100, lambda: fired.append("a"))
    scheduler.call_later(200, lambda: fired.append("b"))

    assert scheduler.advance(250) == 2
    assert fired == ["a", "b"]
    assert scheduler.now_ms == 250
    assert scheduler.run_next() is True
    assert fired == ["a", "b", "c"]
    assert scheduler.run_next() is False


def test_manual_scheduler_skips_cancelled():
    scheduler = ManualScheduler()
    fired = []
    handle = scheduler.call_later(100, lambda: fired.append("x"))
    handle.cancel()

    assert scheduler.pending == 0
    assert scheduler.advance(1000) == 0
    assert fired == []


def test_clock_holds_single_pending_tick():
    """arm() replaces whatever was pending."""
    scheduler = ManualScheduler()
    clock = PlaybackClock(scheduler)
    fired = []

    clock.arm(100, lambda: fired.append("first"))
    clock.arm(500, lambda: fired.append("second"))

    scheduler.advance(1000)
    assert fired == ["second"]
    assert clock.armed is False


def test_clock_cancel_is_idempotent():
    scheduler = ManualScheduler()
    clock = PlaybackClock(scheduler)

    clock.cancel()
    clock.arm(100, lambda: pytest.fail("cancelled tick fired"))
    clock.cancel()
    clock.cancel()

    scheduler.advance(1000)
    assert clock.armed is False


def test_stale_callback_is_dropped():
    """A scheduler that fires a superseded callback anyway must not reach the target."""

    class LeakyScheduler(ManualScheduler):
        def call_later(self, delay_ms, callback):
            handle = super().call_later(delay_ms, callback)
            handle.cancel = lambda: None  # ignores cancellation
            return handle

    scheduler = LeakyScheduler()
    clock = PlaybackClock(scheduler)
    fired = []

    clock.arm(100, lambda: fired.append("stale"))
    clock.cancel()
    clock.arm(200, lambda: fired.append("fresh"))

    scheduler.advance(1000)
    assert fired == ["fresh"]


def test_callback_can_rearm_clock():
    scheduler = ManualScheduler()
    clock = PlaybackClock(scheduler)
    ticks = []

    def tick():
        ticks.append(scheduler.now_ms)
        if len(ticks) < 3:
            clock.arm(100, tick)

    clock.arm(100, tick)
    scheduler.advance(1000)
    assert ticks == [100, 200, 300]


def test_threading_scheduler_fires_and_cancels():
    clock = PlaybackClock(ThreadingScheduler())
    fired = threading.Event()

    clock.arm(20, fired.set)
    assert fired.wait(timeout=2.0)

    never = threading.Event()
    clock.arm(50, never.set)
    clock.cancel()
    time.sleep(0.15)
    assert not never.is_set()


def test_asyncio_scheduler_fires_on_running_loop():
    fired = []

    async def main():
        clock = PlaybackClock(AsyncioScheduler())
        done = asyncio.Event()
        clock.arm(10, done.set)
        await asyncio.wait_for(done.wait(), timeout=2.0)

        clock.arm(20, lambda: fired.append("cancelled"))
        clock.cancel()
        await asyncio.sleep(0.05)

    asyncio.run(main())
    assert fired == []
