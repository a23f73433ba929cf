"""
Playback clock: a single cancellable timer over a pluggable scheduler.

Schedulers:
- ThreadingScheduler: real time, one threading.Timer per pending tick
- AsyncioScheduler: real time on an asyncio event loop
- ManualScheduler: virtual time, advanced explicitly (tests, headless tools)

The clock only decides *when* a tick fires. What a tick does belongs to the
controller.
"""

import asyncio
import heapq
import itertools
import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Tuple

from .types import ReplaySpeed

logger = logging.getLogger(__name__)

DEFAULT_BASE_DELAY_MS = 1000

Callback = Callable[[], None]


def tick_delay_ms(speed: ReplaySpeed, base_delay_ms: float = DEFAULT_BASE_DELAY_MS) -> float:
    """Delay between two auto-advance ticks at the given speed."""
    return base_delay_ms * speed.delay_multiplier


class TimerHandle(ABC):
    @abstractmethod
    def cancel(self) -> None:
        ...


class Scheduler(ABC):
    """
    Source of delayed callbacks.

    Implementations must not run the callback synchronously inside
    call_later().
    """

    @abstractmethod
    def call_later(self, delay_ms: float, callback: Callback) -> TimerHandle:
        ...


class _ThreadTimerHandle(TimerHandle):
    def __init__(self, timer: threading.Timer) -> None:
        self._timer = timer

    def cancel(self) -> None:
        self._timer.cancel()


class ThreadingScheduler(Scheduler):
    """Real-time scheduler backed by daemon threading.Timer instances."""

    def call_later(self, delay_ms: float, callback: Callback) -> TimerHandle:
        timer = threading.Timer(max(delay_ms, 0) / 1000.0, callback)
        timer.daemon = True
        timer.name = "PlaybackClock"
        timer.start()
        return _ThreadTimerHandle(timer)


class _AsyncioTimerHandle(TimerHandle):
    def __init__(self, handle: asyncio.TimerHandle) -> None:
        self._handle = handle

    def cancel(self) -> None:
        self._handle.cancel()


class AsyncioScheduler(Scheduler):
    """
    Scheduler for an asyncio event loop.

    Must be used from the loop's own thread; ticks then run cooperatively
    between other callbacks on that loop.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def call_later(self, delay_ms: float, callback: Callback) -> TimerHandle:
        return _AsyncioTimerHandle(self.loop.call_later(max(delay_ms, 0) / 1000.0, callback))


class _ManualHandle(TimerHandle):
    def __init__(self, due_ms: float, callback: Callback) -> None:
        self.due_ms = due_ms
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler(Scheduler):
    """
    Virtual-time scheduler.

    Time only moves when advance() or run_next() is called; due callbacks run
    on the caller's thread in due-time order.

    Usage:
        scheduler = ManualScheduler()
        controller = PlaybackController(record, scheduler=scheduler)
        controller.play()
        scheduler.advance(1000)   # exactly one tick at 1x
    """

    def __init__(self) -> None:
        self.now_ms: float = 0.0
        self._queue: List[Tuple[float, int, _ManualHandle]] = []
        self._seq = itertools.count()

    def call_later(self, delay_ms: float, callback: Callback) -> TimerHandle:
        handle = _ManualHandle(self.now_ms + max(delay_ms, 0), callback)
        heapq.heappush(self._queue, (handle.due_ms, next(self._seq), handle))
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for _, _, h in self._queue if not h.cancelled)

    def next_due_ms(self) -> Optional[float]:
        self._drop_cancelled()
        return self._queue[0][0] if self._queue else None

    def advance(self, delta_ms: float) -> int:
        """
        Move virtual time forward, firing every callback that becomes due.

        Callbacks scheduled while advancing fire too if they fall inside the
        window.

        Returns:
            Number of callbacks fired
        """
        target = self.now_ms + delta_ms
        fired = 0
        while True:
            self._drop_cancelled()
            if not self._queue or self._queue[0][0] > target:
                break
            due, _, handle = heapq.heappop(self._queue)
            self.now_ms = due
            handle.callback()
            fired += 1
        self.now_ms = target
        return fired

    def run_next(self) -> bool:
        """Jump to the next pending callback and fire it. False if none pending."""
        due = self.next_due_ms()
        if due is None:
            return False
        self.advance(due - self.now_ms)
        return True

    def _drop_cancelled(self) -> None:
        while self._queue and self._queue[0][2].cancelled:
            heapq.heappop(self._queue)


class PlaybackClock:
    """
    Holds at most one pending tick.

    arm() replaces whatever is pending; cancel() is idempotent. Each armed
    callback carries a generation number checked under the shared lock, so a
    tick that lost the race against cancel() or a newer arm() is dropped
    instead of running.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        lock: Optional[threading.RLock] = None,
    ) -> None:
        self._scheduler = scheduler
        self._lock = lock or threading.RLock()
        self._handle: Optional[TimerHandle] = None
        self._generation = 0

    @property
    def armed(self) -> bool:
        with self._lock:
            return self._handle is not None

    def arm(self, delay_ms: float, callback: Callback) -> None:
        with self._lock:
            self._cancel_locked()
            generation = self._generation

            def fire() -> None:
                with self._lock:
                    if generation != self._generation:
                        return
                    self._handle = None
                    callback()

            self._handle = self._scheduler.call_later(delay_ms, fire)
            logger.debug("Clock armed: %.0fms (generation %d)", delay_ms, generation)

    def cancel(self) -> None:
        with self._lock:
            self._cancel_locked()

    def _cancel_locked(self) -> None:
        self._generation += 1
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
