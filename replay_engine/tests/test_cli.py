"""
Tests for the replay command-line tool.
"""

import json
import logging

import pytest
from typer.testing import CliRunner

from replay_cli.main import app
from replay_engine.tests.helpers import horizontal_win_record

runner = CliRunner()


@pytest.fixture(autouse=True)
def restore_root_logger():
    # The CLI callback installs its own handler on the root logger.
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def record_path(tmp_path):
    path = tmp_path / "game.json"
    path.write_text(json.dumps(horizontal_win_record().to_dict()))
    return str(path)


def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert "Replay CLI" in result.stdout


def test_inspect_json(record_path):
    result = runner.invoke(app, ["inspect", record_path, "--json"])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["id"] == "game-1"
    assert len(data["moves"]) == 7


def test_inspect_table(record_path):
    result = runner.invoke(app, ["inspect", record_path])
    assert result.exit_code == 0
    assert "Human won" in result.stdout
    assert "Move History" in result.stdout


def test_show_clamps_position(record_path):
    result = runner.invoke(app, ["show", record_path, "--move", "99", "--json"])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["current_move"] == 7
    assert data["is_complete"] is True
    assert data["winning_line"] == [
        {"row": 5, "col": 0},
        {"row": 5, "col": 1},
        {"row": 5, "col": 2},
        {"row": 5, "col": 3},
    ]


def test_show_digest_matches_for_same_position(record_path):
    first = runner.invoke(app, ["show", record_path, "-m", "3", "--json"])
    second = runner.invoke(app, ["show", record_path, "-m", "3", "--json"])
    assert json.loads(first.stdout)["digest"] == json.loads(second.stdout)["digest"]


def test_play_runs_to_completion(record_path):
    result = runner.invoke(
        app, ["play", record_path, "--speed", "4x", "--base-delay-ms", "4", "--no-board"]
    )
    assert result.exit_code == 0
    assert "Move 7 of 7" in result.stdout
    assert "Replay complete" in result.stdout


def test_missing_record_exits_with_usage_error(tmp_path):
    missing = str(tmp_path / "missing.json")

    result = runner.invoke(app, ["show", missing, "--json"])
    assert result.exit_code == 2
    assert json.loads(result.stdout)["error"] == "Record file not found"

    assert runner.invoke(app, ["play", missing]).exit_code == 2


def test_malformed_record(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"id": "x", "moves": [{"player": "NOBODY"}]}))

    result = runner.invoke(app, ["inspect", str(path)])
    assert result.exit_code == 2
    assert "Error" in result.stdout


def test_non_object_move_entry_is_a_format_error(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"id": "x", "moves": ["e4"]}))

    result = runner.invoke(app, ["show", str(path), "--json"])
    assert result.exit_code == 2
    assert "Invalid move entry" in json.loads(result.stdout)["error"]
