"""
Tests for environment configuration and structured logging.
"""

import json
import logging

import pytest

from replay_engine.config import ReplayConfig
from replay_engine.core.types import ReplaySpeed
from replay_engine.logging_config import get_logger, setup_logging


def test_defaults_without_environment(monkeypatch):
    for key in (
        "REPLAY_BASE_DELAY_MS",
        "REPLAY_DEFAULT_SPEED",
        "REPLAY_MAX_SESSIONS",
        "REPLAY_SESSION_TIMEOUT_SECONDS",
        "REPLAY_STEP_PAUSES",
        "REPLAY_SHOW_INTERMEDIATE_WINS",
    ):
        monkeypatch.delenv(key, raising=False)

    assert ReplayConfig.from_env() == ReplayConfig()
    assert ReplayConfig().base_delay_ms == 1000
    assert ReplayConfig().max_sessions == 10


def test_from_env_reads_overrides(monkeypatch):
    monkeypatch.setenv("REPLAY_BASE_DELAY_MS", "250")
    monkeypatch.setenv("REPLAY_DEFAULT_SPEED", "2x")
    monkeypatch.setenv("REPLAY_MAX_SESSIONS", "3")
    monkeypatch.setenv("REPLAY_STEP_PAUSES", "0")
    monkeypatch.setenv("REPLAY_SHOW_INTERMEDIATE_WINS", "true")

    config = ReplayConfig.from_env()
    assert config.base_delay_ms == 250
    assert config.default_speed is ReplaySpeed.DOUBLE
    assert config.max_sessions == 3
    assert config.step_pauses is False
    assert config.show_intermediate_wins is True


def test_from_env_ignores_invalid_values(monkeypatch):
    monkeypatch.setenv("REPLAY_BASE_DELAY_MS", "fast")
    monkeypatch.setenv("REPLAY_DEFAULT_SPEED", "3x")
    monkeypatch.setenv("REPLAY_MAX_SESSIONS", "-4")

    config = ReplayConfig.from_env()
    assert config.base_delay_ms == 1000
    assert config.default_speed is ReplaySpeed.NORMAL
    assert config.max_sessions == 10


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_json_logs_carry_session_id(capsys, restore_root_logger):
    setup_logging(level="INFO", log_format="json")
    get_logger("replay.test", session_id="replay_abc").info("Seek")
    logging.getLogger("replay.plain").warning("No adapter")

    lines = [json.loads(line) for line in capsys.readouterr().err.strip().splitlines()]
    assert lines[0]["message"] == "Seek"
    assert lines[0]["session_id"] == "replay_abc"
    assert lines[0]["level"] == "INFO"
    assert lines[1]["session_id"] == "N/A"


def test_text_logs(capsys, restore_root_logger):
    setup_logging(level="DEBUG", log_format="text")
    get_logger("replay.test", session_id="replay_xyz").debug("Tick")

    err = capsys.readouterr().err
    assert "Tick" in err
    assert "[session_id=replay_xyz]" in err
