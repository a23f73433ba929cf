"""
Replay state snapshot.

A ReplayState is what consumers see: a frozen view of one controller at one
instant. Controllers build a new snapshot after every mutation; nothing ever
edits one in place.
"""

import hashlib
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..board.grid import Board
from ..board.reconstruct import WinningLine, cells_of
from ..core.canonical import canonical_json_bytes
from ..core.clock import DEFAULT_BASE_DELAY_MS, tick_delay_ms
from ..core.records import Move
from ..core.types import PlaybackPhase, ReplaySpeed


@dataclass(frozen=True)
class ReplayState:
    """
    Immutable replay snapshot.

    Fields:
        current_move: Replay position in [0, total_moves]
        total_moves: Length of the move log (N)
        is_playing: Auto-advance armed
        is_complete: current_move == total_moves
        speed: Playback speed
        board: Grid after current_move moves
        last_move: moves[current_move - 1], or None at position 0
        winning_line: Deciding line cells, or None
    """
    current_move: int
    total_moves: int
    is_playing: bool
    is_complete: bool
    speed: ReplaySpeed
    board: Board
    last_move: Optional[Move] = None
    winning_line: Optional[WinningLine] = None

    @property
    def phase(self) -> PlaybackPhase:
        """
        Derived phase. Not playing at move 0 reports STOPPED, including after
        a pause() there.
        """
        if self.is_complete:
            return PlaybackPhase.COMPLETE
        if self.is_playing:
            return PlaybackPhase.PLAYING
        if self.current_move == 0:
            return PlaybackPhase.STOPPED
        return PlaybackPhase.PAUSED

    @property
    def remaining_moves(self) -> int:
        return self.total_moves - self.current_move

    @property
    def progress(self) -> float:
        """Percent of the move log replayed."""
        if self.total_moves == 0:
            return 100.0
        return min(100.0, self.current_move * 100.0 / self.total_moves)

    def estimated_remaining_ms(self, base_delay_ms: float = DEFAULT_BASE_DELAY_MS) -> float:
        return self.remaining_moves * tick_delay_ms(self.speed, base_delay_ms)

    def to_render_props(self) -> Dict[str, Any]:
        """Read-only board props for a renderer."""
        return {
            "grid": self.board.to_lists(),
            "last_move": (
                {"row": self.last_move.row, "col": self.last_move.col}
                if self.last_move else None
            ),
            "winning_line": cells_of(self.winning_line),
            "disabled": True,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current_move": self.current_move,
            "total_moves": self.total_moves,
            "is_playing": self.is_playing,
            "is_complete": self.is_complete,
            "speed": self.speed.value,
            "phase": self.phase.value,
            "board": self.board.to_lists(),
            "last_move": self.last_move.to_dict() if self.last_move else None,
            "winning_line": cells_of(self.winning_line),
        }

    def digest(self) -> str:
        """SHA-256 of the canonical position (board, last move, line, counters)."""
        data = self.to_dict()
        # Playback flags describe the controller, not the position.
        for key in ("is_playing", "phase", "speed"):
            data.pop(key)
        return hashlib.sha256(canonical_json_bytes(data)).hexdigest()
