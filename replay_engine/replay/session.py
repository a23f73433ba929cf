"""
Replay session: one game record bound to one playback controller.
"""

import time
from datetime import datetime, timezone
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from ..config import ReplayConfig
from ..core.clock import Scheduler
from ..core.ids import stable_id
from ..core.records import GameRecord, Move
from ..core.types import ReplaySpeed
from .controller import Listener, PlaybackController
from .state import ReplayState


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class MoveEvent:
    """One entry of a session timeline: the move at move_index and when it was made."""
    id: str
    move_index: int
    elapsed_ms: int
    move: Move

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": "MOVE",
            "move_index": self.move_index,
            "elapsed_ms": self.elapsed_ms,
            "move": self.move.to_dict(),
        }


class ReplaySession:
    """
    Viewer-facing replay handle.

    The record is shared read-only; the controller (and with it the position
    and clock) belongs to this session alone. Control calls refresh
    last_accessed, which the service uses for expiry.

    Usage:
        with ReplaySession(record) as session:
            session.play()
            ...
    """

    def __init__(
        self,
        record: GameRecord,
        scheduler: Optional[Scheduler] = None,
        config: Optional[ReplayConfig] = None,
        session_id: Optional[str] = None,
    ) -> None:
        self.id = session_id or stable_id("replay", record.id, str(time.time_ns()))
        self.metadata = record
        self.created_at = _now()
        self._last_accessed = time.monotonic()
        self.controller = PlaybackController(
            record, scheduler=scheduler, config=config, session_id=self.id
        )

    @property
    def game_id(self) -> str:
        return self.metadata.id

    @property
    def state(self) -> ReplayState:
        return self.controller.get_state()

    @property
    def idle_seconds(self) -> float:
        return time.monotonic() - self._last_accessed

    def touch(self) -> None:
        self._last_accessed = time.monotonic()

    def is_expired(self, timeout_seconds: float) -> bool:
        return self.idle_seconds > timeout_seconds

    # Control surface: one method per UI control.

    def play(self) -> ReplayState:
        self.touch()
        return self.controller.play()

    def pause(self) -> ReplayState:
        self.touch()
        return self.controller.pause()

    def toggle(self) -> ReplayState:
        self.touch()
        return self.controller.toggle()

    def stop(self) -> ReplayState:
        self.touch()
        return self.controller.stop()

    def seek(self, target: int) -> ReplayState:
        self.touch()
        return self.controller.seek(target)

    def next(self) -> ReplayState:
        self.touch()
        return self.controller.next()

    def previous(self) -> ReplayState:
        self.touch()
        return self.controller.previous()

    def first(self) -> ReplayState:
        self.touch()
        return self.controller.first()

    def last(self) -> ReplayState:
        self.touch()
        return self.controller.last()

    def set_speed(self, speed: ReplaySpeed) -> ReplayState:
        self.touch()
        return self.controller.set_speed(speed)

    def get_state(self) -> ReplayState:
        return self.controller.get_state()

    def events(self) -> Tuple[MoveEvent, ...]:
        """Timeline of the recorded moves, in play order."""
        return tuple(
            MoveEvent(id=f"move_{idx}", move_index=idx, elapsed_ms=move.elapsed_ms, move=move)
            for idx, move in enumerate(self.metadata.moves)
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        return self.controller.subscribe(listener)

    def on_complete(self, listener: Listener) -> Callable[[], None]:
        return self.controller.on_complete(listener)

    @property
    def disposed(self) -> bool:
        return self.controller.disposed

    def dispose(self) -> None:
        self.controller.dispose()

    def __enter__(self) -> "ReplaySession":
        return self

    def __exit__(self, *exc) -> None:
        self.dispose()

    def __repr__(self) -> str:
        s = self.state
        return (
            f"ReplaySession(id={self.id!r}, game={self.game_id!r}, "
            f"move={s.current_move}/{s.total_moves}, phase={s.phase.value})"
        )
