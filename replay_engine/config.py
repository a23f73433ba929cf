"""
Replay configuration.

Environment Variables:
    REPLAY_BASE_DELAY_MS: Delay between auto-advance ticks at 1x - default: 1000
    REPLAY_DEFAULT_SPEED: Initial speed (0.5x, 1x, 1.5x, 2x, 4x) - default: 1x
    REPLAY_MAX_SESSIONS: Concurrent sessions kept by the service - default: 10
    REPLAY_SESSION_TIMEOUT_SECONDS: Inactivity before a session expires - default: 1800
    REPLAY_STEP_PAUSES: 1 if next/previous pause auto-play - default: 1
    REPLAY_SHOW_INTERMEDIATE_WINS: 1 to highlight lines before the final move - default: 0
"""

import logging
import os
from dataclasses import dataclass

from .core.clock import DEFAULT_BASE_DELAY_MS
from .core.types import ReplaySpeed

logger = logging.getLogger(__name__)


def _env_int(key: str, default: int) -> int:
    val = os.getenv(key)
    if not val:
        return default
    try:
        parsed = int(val)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r", key, val)
        return default
    return parsed if parsed > 0 else default


def _env_flag(key: str, default: bool) -> bool:
    val = os.getenv(key)
    if val is None or val == "":
        return default
    return val.strip().lower() in ("1", "true", "yes", "on")


def _env_speed(key: str, default: ReplaySpeed) -> ReplaySpeed:
    val = os.getenv(key)
    if not val:
        return default
    try:
        return ReplaySpeed(val)
    except ValueError:
        logger.warning("Ignoring unknown %s=%r", key, val)
        return default


@dataclass(frozen=True)
class ReplayConfig:
    base_delay_ms: int = DEFAULT_BASE_DELAY_MS
    default_speed: ReplaySpeed = ReplaySpeed.NORMAL
    max_sessions: int = 10
    session_timeout_seconds: int = 30 * 60
    step_pauses: bool = True
    show_intermediate_wins: bool = False

    @staticmethod
    def from_env() -> "ReplayConfig":
        return ReplayConfig(
            base_delay_ms=_env_int("REPLAY_BASE_DELAY_MS", DEFAULT_BASE_DELAY_MS),
            default_speed=_env_speed("REPLAY_DEFAULT_SPEED", ReplaySpeed.NORMAL),
            max_sessions=_env_int("REPLAY_MAX_SESSIONS", 10),
            session_timeout_seconds=_env_int("REPLAY_SESSION_TIMEOUT_SECONDS", 30 * 60),
            step_pauses=_env_flag("REPLAY_STEP_PAUSES", True),
            show_intermediate_wins=_env_flag("REPLAY_SHOW_INTERMEDIATE_WINS", False),
        )
