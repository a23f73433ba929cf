"""
Core replay primitives.

This module provides the foundational abstractions for replay:
- Types: Closed enums for players, outcomes and playback speed
- Records: Immutable moves and game records
- Clock: Single cancellable playback timer over pluggable schedulers
- Canonical: Deterministic serialization
- IDs: Stable identifier generation
"""

from .types import (
    Difficulty,
    DiscColor,
    GameStatus,
    PlaybackPhase,
    Player,
    ReplaySpeed,
    Winner,
)
from .records import GameRecord, Move, PlayerInfo, load_record
from .canonical import canonicalize, canonical_json_bytes, canonical_json_str
from .clock import (
    AsyncioScheduler,
    ManualScheduler,
    PlaybackClock,
    Scheduler,
    ThreadingScheduler,
    tick_delay_ms,
)
from .ids import stable_id
from .errors import (
    RecordFormatError,
    ReplayError,
    SessionDisposedError,
    SessionLimitError,
    SessionNotFoundError,
)

__all__ = [
    "Difficulty",
    "DiscColor",
    "GameStatus",
    "PlaybackPhase",
    "Player",
    "ReplaySpeed",
    "Winner",
    "GameRecord",
    "Move",
    "PlayerInfo",
    "load_record",
    "canonicalize",
    "canonical_json_bytes",
    "canonical_json_str",
    "AsyncioScheduler",
    "ManualScheduler",
    "PlaybackClock",
    "Scheduler",
    "ThreadingScheduler",
    "tick_delay_ms",
    "stable_id",
    "RecordFormatError",
    "ReplayError",
    "SessionDisposedError",
    "SessionLimitError",
    "SessionNotFoundError",
]
