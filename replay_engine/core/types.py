"""
Closed enumerations for the replay domain.

Speed, status and outcome values are enums so call sites branch on members,
never on raw strings.
"""

from enum import Enum
from typing import Dict, Tuple


class Player(str, Enum):
    """Who placed a disc."""
    HUMAN = "HUMAN"
    AI = "AI"
    PLAYER_1 = "PLAYER_1"
    PLAYER_2 = "PLAYER_2"


class Winner(str, Enum):
    """Final outcome of a game. Unfinished games carry None instead."""
    HUMAN = "HUMAN"
    AI = "AI"
    PLAYER_1 = "PLAYER_1"
    PLAYER_2 = "PLAYER_2"
    DRAW = "DRAW"

    @property
    def holds_disc(self) -> bool:
        return self is not Winner.DRAW


class GameStatus(str, Enum):
    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    HUMAN_WIN = "HUMAN_WIN"
    AI_WIN = "AI_WIN"
    PLAYER_1_WON = "PLAYER_1_WON"
    PLAYER_2_WON = "PLAYER_2_WON"
    DRAW = "DRAW"
    PAUSED = "PAUSED"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class DiscColor(str, Enum):
    RED = "red"
    YELLOW = "yellow"

    def opposite(self) -> "DiscColor":
        return DiscColor.YELLOW if self is DiscColor.RED else DiscColor.RED


class ReplaySpeed(str, Enum):
    """
    Playback speed ladder.

    The delay multiplier scales the base per-move delay: slower speeds wait
    longer between auto-advance ticks.
    """
    HALF = "0.5x"
    NORMAL = "1x"
    ONE_AND_HALF = "1.5x"
    DOUBLE = "2x"
    QUADRUPLE = "4x"

    @property
    def delay_multiplier(self) -> float:
        return _DELAY_MULTIPLIERS[self]

    @classmethod
    def ladder(cls) -> Tuple["ReplaySpeed", ...]:
        """Speeds ordered slowest to fastest."""
        return tuple(cls)

    def faster(self) -> "ReplaySpeed":
        ladder = self.ladder()
        idx = ladder.index(self)
        return ladder[min(idx + 1, len(ladder) - 1)]

    def slower(self) -> "ReplaySpeed":
        ladder = self.ladder()
        idx = ladder.index(self)
        return ladder[max(idx - 1, 0)]


_DELAY_MULTIPLIERS: Dict[ReplaySpeed, float] = {
    ReplaySpeed.HALF: 2.0,
    ReplaySpeed.NORMAL: 1.0,
    ReplaySpeed.ONE_AND_HALF: 0.667,
    ReplaySpeed.DOUBLE: 0.5,
    ReplaySpeed.QUADRUPLE: 0.25,
}


class PlaybackPhase(str, Enum):
    """
    Controller phase, derived from a state snapshot rather than stored.
    """
    STOPPED = "stopped"
    PAUSED = "paused"
    PLAYING = "playing"
    COMPLETE = "complete"
