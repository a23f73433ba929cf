"""
Replay playback: controller state machine, sessions and the session registry.
"""

from .state import ReplayState
from .controller import Listener, PlaybackController
from .session import MoveEvent, ReplaySession
from .service import EXPORT_VERSION, ReplayService, ReplayStats

__all__ = [
    "ReplayState",
    "Listener",
    "PlaybackController",
    "MoveEvent",
    "ReplaySession",
    "EXPORT_VERSION",
    "ReplayService",
    "ReplayStats",
]
