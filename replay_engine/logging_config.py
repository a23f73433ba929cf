"""
Structured logging configuration for the replay engine.

Provides JSON-formatted logs with session_id support for correlating
everything a single replay session does.

Environment Variables:
    REPLAY_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR) - default: INFO
    REPLAY_LOG_FORMAT: Log format (json, text) - default: json

Usage:
    from replay_engine.logging_config import setup_logging, get_logger

    setup_logging()
    logger = get_logger(__name__, session_id="replay_9f1c...")
    logger.info("Seek", extra={"target": 12})
"""

import logging
import os
import sys
from typing import Optional

from pythonjsonlogger import jsonlogger


def setup_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """
    Configure root logger with structured logging.

    Arguments override the environment:
    - REPLAY_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
    - REPLAY_LOG_FORMAT: json, text (default: json)
    """
    log_level = (level or os.getenv("REPLAY_LOG_LEVEL", "INFO")).upper()
    fmt = (log_format or os.getenv("REPLAY_LOG_FORMAT", "json")).lower()

    level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    resolved = level_map.get(log_level, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(resolved)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # stderr keeps stdout free for CLI output
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(resolved)
    handler.addFilter(SessionIdFilter())

    if fmt == "json":
        formatter = jsonlogger.JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s %(session_id)s",
            rename_fields={
                "asctime": "timestamp",
                "name": "logger",
                "levelname": "level",
            },
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s [session_id=%(session_id)s]",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)


def get_logger(name: str, session_id: Optional[str] = None) -> logging.LoggerAdapter:
    """
    Get a logger with optional session_id for correlation.

    Example:
        logger = get_logger(__name__, session_id="replay_9f1c")
        logger.info("Replay complete")
        # Output (JSON): {"timestamp": "...", "level": "INFO", "message": "Replay complete", "session_id": "replay_9f1c"}
    """
    logger = logging.getLogger(name)
    return logging.LoggerAdapter(logger, {"session_id": session_id or "N/A"})


class SessionIdFilter(logging.Filter):
    """
    Logging filter that adds session_id to records logged without an adapter.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "session_id"):
            record.session_id = "N/A"  # type: ignore
        return True
