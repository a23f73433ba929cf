"""
Game record model: the immutable move log a replay is built from.

Records are produced by the external game engine / history store. The replay
engine reads them and never mutates them.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from .errors import RecordFormatError
from .types import Difficulty, DiscColor, GameStatus, Player, Winner

DEFAULT_BOARD_ROWS = 6
DEFAULT_BOARD_COLS = 7


@dataclass(frozen=True)
class Move:
    """
    One recorded disc placement.

    Fields:
        player: Who placed the disc
        row: Resolved board row (gravity already applied at record time)
        col: Board column
        elapsed_ms: Offset from game start when the move was made
    """
    player: Player
    row: int
    col: int
    elapsed_ms: int = 0

    @property
    def cell(self) -> Tuple[int, int]:
        return (self.row, self.col)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player": self.player.value,
            "row": self.row,
            "col": self.col,
            "elapsed_ms": self.elapsed_ms,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Move":
        if not isinstance(data, dict):
            raise RecordFormatError(f"Invalid move entry: {data!r}")
        # History entries nest the cell under "position" and call the offset "timestamp".
        pos = data.get("position") or data
        try:
            return Move(
                player=Player(data["player"]),
                row=int(pos["row"]),
                col=int(pos["col"]),
                elapsed_ms=int(data.get("elapsed_ms", data.get("timestamp", 0)) or 0),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise RecordFormatError(f"Invalid move entry: {data!r}") from e


@dataclass(frozen=True)
class PlayerInfo:
    """Seat description for two-player records."""
    id: str
    name: str
    disc: DiscColor
    player: Player

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "disc": self.disc.value,
            "player": self.player.value,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "PlayerInfo":
        if not isinstance(data, dict):
            raise RecordFormatError(f"Invalid player entry: {data!r}")
        try:
            return PlayerInfo(
                id=str(data["id"]),
                name=str(data.get("name", data["id"])),
                disc=DiscColor(data.get("disc") or data["discColor"]),
                player=Player(data.get("player") or data["type"]),
            )
        except (KeyError, ValueError) as e:
            raise RecordFormatError(f"Invalid player entry: {data!r}") from e


@dataclass(frozen=True)
class GameRecord:
    """
    Immutable record of a complete (or partial) game.

    len(moves) is the single source of truth for replay length.
    """
    id: str
    moves: Tuple[Move, ...] = ()
    board_rows: int = DEFAULT_BOARD_ROWS
    board_cols: int = DEFAULT_BOARD_COLS
    player_disc: DiscColor = DiscColor.RED
    ai_disc: DiscColor = DiscColor.YELLOW
    difficulty: Optional[Difficulty] = Difficulty.MEDIUM
    winner: Optional[Winner] = None
    status: GameStatus = GameStatus.IN_PROGRESS
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    total_duration_ms: int = 0
    players: Tuple[PlayerInfo, ...] = field(default_factory=tuple)

    @property
    def total_moves(self) -> int:
        return len(self.moves)

    @property
    def is_multiplayer(self) -> bool:
        return bool(self.players) or any(
            m.player in (Player.PLAYER_1, Player.PLAYER_2) for m in self.moves
        )

    def disc_for(self, player: Player) -> DiscColor:
        """
        Resolve the disc colour a player placed.

        Two-player seats resolve through `players`, defaulting to red for
        PLAYER_1 and yellow for PLAYER_2.
        """
        if player is Player.HUMAN:
            return self.player_disc
        if player is Player.AI:
            return self.ai_disc
        for info in self.players:
            if info.player is player:
                return info.disc
        return DiscColor.RED if player is Player.PLAYER_1 else DiscColor.YELLOW

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "moves": [m.to_dict() for m in self.moves],
            "board_rows": self.board_rows,
            "board_cols": self.board_cols,
            "player_disc": self.player_disc.value,
            "ai_disc": self.ai_disc.value,
            "difficulty": self.difficulty.value if self.difficulty else None,
            "winner": self.winner.value if self.winner else None,
            "status": self.status.value,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "total_duration_ms": self.total_duration_ms,
            "players": [p.to_dict() for p in self.players],
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "GameRecord":
        """
        Build a record from a plain dict (JSON-decoded).

        Raises:
            RecordFormatError: If required fields are missing or invalid
        """
        if not isinstance(data, dict) or not data.get("id"):
            raise RecordFormatError("Game record requires a non-empty 'id'")

        try:
            player_disc = DiscColor(data.get("player_disc", data.get("playerDisc", "red")))
            ai_raw = data.get("ai_disc", data.get("aiDisc"))
            ai_disc = DiscColor(ai_raw) if ai_raw else player_disc.opposite()
            difficulty_raw = data.get("difficulty")
            winner_raw = data.get("winner")
            return GameRecord(
                id=str(data["id"]),
                moves=tuple(Move.from_dict(m) for m in data.get("moves") or []),
                board_rows=int(data.get("board_rows", DEFAULT_BOARD_ROWS)),
                board_cols=int(data.get("board_cols", DEFAULT_BOARD_COLS)),
                player_disc=player_disc,
                ai_disc=ai_disc,
                difficulty=Difficulty(difficulty_raw) if difficulty_raw else None,
                winner=Winner(winner_raw) if winner_raw else None,
                status=GameStatus(data.get("status", GameStatus.IN_PROGRESS.value)),
                created_at=_parse_dt(data.get("created_at", data.get("createdAt"))),
                completed_at=_parse_dt(data.get("completed_at", data.get("completedAt"))),
                total_duration_ms=int(
                    data.get("total_duration_ms", data.get("duration", 0)) or 0
                ),
                players=tuple(PlayerInfo.from_dict(p) for p in data.get("players") or []),
            )
        except (TypeError, ValueError) as e:
            if isinstance(e, RecordFormatError):
                raise
            raise RecordFormatError(f"Invalid game record {data.get('id')!r}: {e}") from e


def _parse_dt(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    text = str(value)
    # fromisoformat only accepts a "Z" suffix from Python 3.11 on.
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def load_record(path: str) -> GameRecord:
    """
    Read one game record from a JSON file.

    Raises:
        FileNotFoundError: If path does not exist
        RecordFormatError: If the file is not a valid record
    """
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise RecordFormatError(f"{path}: not valid JSON ({e})") from e
    return GameRecord.from_dict(data)
