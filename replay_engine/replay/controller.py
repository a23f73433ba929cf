"""
Playback controller: the replay state machine.

One controller owns one replay position and one clock. Control operations and
clock ticks are serialised by a single re-entrant lock, so each runs to
completion before the next is processed. Every mutation rebuilds the board
from the move log via reconstruct() and publishes a fresh snapshot.

Usage:
    controller = PlaybackController(record)
    controller.subscribe(render)
    controller.on_complete(lambda state: print("done"))
    controller.play()
"""

import threading
from typing import Callable, List, Optional

from ..board.reconstruct import BoardFrame, reconstruct
from ..config import ReplayConfig
from ..core.clock import PlaybackClock, Scheduler, ThreadingScheduler, tick_delay_ms
from ..core.errors import SessionDisposedError
from ..core.records import GameRecord
from ..core.types import ReplaySpeed
from ..logging_config import get_logger
from .state import ReplayState

Listener = Callable[[ReplayState], None]


class PlaybackController:
    """
    Replay state machine over one GameRecord.

    Phases (stopped, paused, playing, complete) are derived from the snapshot.
    Invariants held after every operation:
    - 0 <= current_move <= N
    - is_complete iff current_move == N, and complete implies not playing
    - board always equals reconstruct(record, current_move)
    """

    def __init__(
        self,
        record: GameRecord,
        scheduler: Optional[Scheduler] = None,
        config: Optional[ReplayConfig] = None,
        session_id: Optional[str] = None,
    ) -> None:
        self._record = record
        self._config = config or ReplayConfig()
        self._lock = threading.RLock()
        self._clock = PlaybackClock(scheduler or ThreadingScheduler(), lock=self._lock)
        self._log = get_logger(__name__, session_id=session_id)

        self._listeners: List[Listener] = []
        self._complete_listeners: List[Listener] = []
        self._disposed = False

        self._speed = self._config.default_speed
        self._playing = False
        self._current = 0
        self._frame: BoardFrame = self._reconstruct(0)
        self._snapshot = self._build_snapshot()

    @property
    def record(self) -> GameRecord:
        return self._record

    @property
    def total_moves(self) -> int:
        return self._record.total_moves

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def tick_armed(self) -> bool:
        return self._clock.armed

    # ------------------------------------------------------------------ controls

    def play(self) -> ReplayState:
        """Start auto-advance. No-op when complete or already playing."""
        with self._lock:
            self._ensure_live()
            if self._complete or self._playing:
                return self._snapshot
            self._playing = True
            self._arm()
            self._log.debug("Play from move %d at %s", self._current, self._speed.value)
            return self._commit()

    def pause(self) -> ReplayState:
        with self._lock:
            self._ensure_live()
            self._clock.cancel()
            self._playing = False
            return self._commit()

    def toggle(self) -> ReplayState:
        """Play/pause toggle for a single control button."""
        with self._lock:
            return self.pause() if self._playing else self.play()

    def stop(self) -> ReplayState:
        """Cancel playback and rewind to the empty board."""
        with self._lock:
            self._ensure_live()
            self._clock.cancel()
            self._playing = False
            self._move_to(0)
            return self._commit()

    def seek(self, target: int) -> ReplayState:
        """
        Jump to position target, clamped to [0, N].

        Seeking keeps playback running unless the target is the end.
        """
        with self._lock:
            self._ensure_live()
            was_playing = self._playing
            self._clock.cancel()
            self._move_to(target)
            if was_playing and not self._complete:
                self._arm()
            return self._commit()

    def next(self) -> ReplayState:
        return self._step(1)

    def previous(self) -> ReplayState:
        return self._step(-1)

    def first(self) -> ReplayState:
        return self.seek(0)

    def last(self) -> ReplayState:
        return self.seek(self.total_moves)

    def set_speed(self, speed: ReplaySpeed) -> ReplayState:
        """
        Change speed. While playing, the pending tick is re-armed with the new
        delay; the position is unchanged.
        """
        speed = ReplaySpeed(speed)
        with self._lock:
            self._ensure_live()
            self._speed = speed
            if self._playing:
                self._arm()
            return self._commit()

    def speed_up(self) -> ReplayState:
        with self._lock:
            return self.set_speed(self._speed.faster())

    def speed_down(self) -> ReplayState:
        with self._lock:
            return self.set_speed(self._speed.slower())

    def get_state(self) -> ReplayState:
        with self._lock:
            return self._snapshot

    # ----------------------------------------------------------------- listeners

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Call listener with every new snapshot.

        Returns:
            Callable that removes the listener
        """
        return self._add_listener(self._listeners, listener)

    def on_complete(self, listener: Listener) -> Callable[[], None]:
        """Call listener each time the replay transitions into the complete state."""
        return self._add_listener(self._complete_listeners, listener)

    def dispose(self) -> None:
        """Cancel the clock and detach listeners. Safe to call twice."""
        with self._lock:
            if self._disposed:
                return
            self._clock.cancel()
            self._playing = False
            self._disposed = True
            self._snapshot = self._build_snapshot()
            self._listeners.clear()
            self._complete_listeners.clear()
            self._log.debug("Controller disposed at move %d", self._current)

    # ------------------------------------------------------------------ internals

    @property
    def _complete(self) -> bool:
        return self._current == self.total_moves

    def _ensure_live(self) -> None:
        if self._disposed:
            raise SessionDisposedError(f"Replay of game {self._record.id} was disposed")

    def _step(self, delta: int) -> ReplayState:
        with self._lock:
            if not self._config.step_pauses:
                return self.seek(self._current + delta)
            self._ensure_live()
            self._clock.cancel()
            self._playing = False
            self._move_to(self._current + delta)
            return self._commit()

    def _move_to(self, target: int) -> None:
        self._current = max(0, min(int(target), self.total_moves))
        self._frame = self._reconstruct(self._current)
        if self._complete:
            self._playing = False

    def _reconstruct(self, k: int) -> BoardFrame:
        return reconstruct(self._record, k, self._config.show_intermediate_wins)

    def _arm(self) -> None:
        self._clock.arm(tick_delay_ms(self._speed, self._config.base_delay_ms), self._on_tick)

    def _on_tick(self) -> None:
        # Runs under self._lock (shared with the clock).
        if self._disposed or not self._playing:
            return
        self._move_to(self._current + 1)
        if not self._complete:
            self._arm()
        self._commit()

    def _build_snapshot(self) -> ReplayState:
        return ReplayState(
            current_move=self._current,
            total_moves=self.total_moves,
            is_playing=self._playing,
            is_complete=self._complete,
            speed=self._speed,
            board=self._frame.board,
            last_move=self._frame.last_move,
            winning_line=self._frame.winning_line,
        )

    def _commit(self) -> ReplayState:
        previous = self._snapshot
        snapshot = self._snapshot = self._build_snapshot()
        if snapshot == previous:
            return snapshot

        self._emit(self._listeners, snapshot)
        if snapshot.is_complete and not previous.is_complete:
            self._log.info("Replay complete after %d moves", snapshot.total_moves)
            self._emit(self._complete_listeners, snapshot)
        return snapshot

    def _emit(self, listeners: List[Listener], snapshot: ReplayState) -> None:
        for listener in list(listeners):
            try:
                listener(snapshot)
            except Exception:
                self._log.exception("Replay listener %r failed", listener)

    def _add_listener(self, bucket: List[Listener], listener: Listener) -> Callable[[], None]:
        with self._lock:
            self._ensure_live()
            bucket.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in bucket:
                    bucket.remove(listener)

        return unsubscribe
