"""
Replay service: registry of live replay sessions.

Keeps at most `max_sessions` sessions, expires idle ones, aggregates usage
stats and moves sessions in and out as JSON.
"""

import itertools
import json
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from ..config import ReplayConfig
from ..core.canonical import canonicalize
from ..core.clock import Scheduler, ThreadingScheduler
from ..core.errors import RecordFormatError, SessionLimitError, SessionNotFoundError
from ..core.ids import stable_id
from ..core.records import GameRecord
from ..core.types import ReplaySpeed
from ..logging_config import get_logger
from .session import ReplaySession

EXPORT_VERSION = "1.0"

logger = get_logger(__name__)


@dataclass(frozen=True)
class ReplayStats:
    total_sessions: int
    active_sessions: int
    completed_sessions: int
    average_session_duration_ms: float
    popular_speeds: Dict[ReplaySpeed, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_sessions": self.total_sessions,
            "active_sessions": self.active_sessions,
            "completed_sessions": self.completed_sessions,
            "average_session_duration_ms": self.average_session_duration_ms,
            "popular_speeds": {s.value: n for s, n in self.popular_speeds.items()},
        }


class ReplayService:
    """
    Session registry.

    Removing a session from the registry (delete, clear, expiry) disposes it,
    which cancels its clock. Sessions leave the registry under the registry
    lock and are disposed only after it is released.
    """

    def __init__(
        self,
        config: Optional[ReplayConfig] = None,
        scheduler_factory: Callable[[], Scheduler] = ThreadingScheduler,
    ) -> None:
        self.config = config or ReplayConfig.from_env()
        self._scheduler_factory = scheduler_factory
        self._sessions: Dict[str, ReplaySession] = {}
        self._lock = threading.Lock()
        self._seq = itertools.count(1)

    def create_session(self, record: GameRecord) -> ReplaySession:
        """
        Open a new replay of record.

        Raises:
            SessionLimitError: If the registry is still full after expiring idle sessions
        """
        expired: List[ReplaySession] = []
        try:
            with self._lock:
                if len(self._sessions) >= self.config.max_sessions:
                    expired = self._pop_expired_locked()
                if len(self._sessions) >= self.config.max_sessions:
                    raise SessionLimitError(
                        f"{len(self._sessions)} replay sessions open (max {self.config.max_sessions})"
                    )
                session = ReplaySession(
                    record,
                    scheduler=self._scheduler_factory(),
                    config=self.config,
                    session_id=stable_id("replay", record.id, str(next(self._seq))),
                )
                self._sessions[session.id] = session
        finally:
            self._dispose(expired)

        logger.info("Replay session %s opened for game %s (%d moves)",
                    session.id, record.id, record.total_moves)
        return session

    def get_session(self, session_id: str) -> Optional[ReplaySession]:
        """Live session by id; None if unknown or expired."""
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            if not session.is_expired(self.config.session_timeout_seconds):
                session.touch()
                return session
            del self._sessions[session_id]

        self._dispose([session])
        return None

    def require_session(self, session_id: str) -> ReplaySession:
        session = self.get_session(session_id)
        if session is None:
            raise SessionNotFoundError(f"Replay session not found: {session_id}")
        return session

    def list_sessions(self) -> List[ReplaySession]:
        self.cleanup_expired()
        with self._lock:
            return list(self._sessions.values())

    def delete_session(self, session_id: str) -> bool:
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        self._dispose([session])
        return True

    def clear_sessions(self) -> None:
        with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
        self._dispose(sessions)

    def cleanup_expired(self) -> int:
        with self._lock:
            expired = self._pop_expired_locked()
        self._dispose(expired)
        return len(expired)

    def stats(self) -> ReplayStats:
        with self._lock:
            sessions = list(self._sessions.values())

        now = datetime.now(timezone.utc)
        states = [s.state for s in sessions]
        popular = {speed: 0 for speed in ReplaySpeed}
        for st in states:
            popular[st.speed] += 1

        durations = [(now - s.created_at).total_seconds() * 1000.0 for s in sessions]
        return ReplayStats(
            total_sessions=len(sessions),
            active_sessions=sum(1 for st in states if st.is_playing),
            completed_sessions=sum(1 for st in states if st.is_complete),
            average_session_duration_ms=sum(durations) / len(durations) if durations else 0.0,
            popular_speeds=popular,
        )

    def export_session(self, session_id: str) -> str:
        """
        Serialize a session to pretty JSON.

        Raises:
            SessionNotFoundError: If the session is unknown or expired
        """
        session = self.require_session(session_id)
        payload = {
            "session_id": session.id,
            "game_id": session.game_id,
            "current_state": session.state.to_dict(),
            "game_data": session.metadata.to_dict(),
            "exported_at": datetime.now(timezone.utc).isoformat(),
            "version": EXPORT_VERSION,
        }
        return json.dumps(canonicalize(payload), indent=2, sort_keys=True, ensure_ascii=False)

    def import_session(self, data: str) -> ReplaySession:
        """
        Open a new session from export_session() output.

        Position and speed are restored; playback starts paused.

        Raises:
            RecordFormatError: If the payload is not a valid export
        """
        try:
            payload = json.loads(data)
        except json.JSONDecodeError as e:
            raise RecordFormatError(f"Replay import is not valid JSON: {e}") from e

        game_data = payload.get("game_data") if isinstance(payload, dict) else None
        if not isinstance(game_data, dict) or not game_data.get("id"):
            raise RecordFormatError("Invalid import data format: missing game_data.id")

        record = GameRecord.from_dict(game_data)
        state = payload.get("current_state") or {}
        if not isinstance(state, dict):
            raise RecordFormatError("Invalid import data format: current_state must be an object")
        try:
            speed = ReplaySpeed(state.get("speed") or self.config.default_speed)
            position = int(state.get("current_move") or 0)
        except (TypeError, ValueError) as e:
            raise RecordFormatError(f"Invalid current_state in import: {e}") from e

        session = self.create_session(record)
        session.set_speed(speed)
        session.seek(position)
        return session

    def _pop_expired_locked(self) -> List[ReplaySession]:
        timeout = self.config.session_timeout_seconds
        expired = [s for s in self._sessions.values() if s.is_expired(timeout)]
        for session in expired:
            del self._sessions[session.id]
        if expired:
            logger.info("Replay service: cleaned up %d expired sessions", len(expired))
        return expired

    def _dispose(self, sessions: List[ReplaySession]) -> None:
        # Must run without self._lock held.
        for session in sessions:
            session.dispose()
            logger.debug("Replay session %s removed", session.id)
