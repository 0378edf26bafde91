"""
Minimal smoke tests for the liftlog CLI.

Tests basic functionality:
- App runs without errors
- State file is created
- Lifts can be logged, listed and removed
- Analysis commands produce JSON
"""

import json
from datetime import datetime, timedelta
from pathlib import Path

import pytest
from typer.testing import CliRunner

from liftlog.cli.main import app
from liftlog.core.config_loader import get_reference_tables


runner = CliRunner()


@pytest.fixture
def state_file(tmp_path: Path, monkeypatch) -> Path:
    """State path in a temp dir, with HOME pointed away from real user tables."""
    monkeypatch.setenv("HOME", str(tmp_path))
    get_reference_tables.cache_clear()
    path = tmp_path / "state.json"
    result = runner.invoke(app, ["init", "--state-path", str(path)])
    assert result.exit_code == 0
    yield path
    get_reference_tables.cache_clear()


def _days_ago(n: int) -> str:
    return (datetime.now() - timedelta(days=n)).strftime("%Y-%m-%d")


def _invoke(*args: str):
    return runner.invoke(app, list(args))


class TestCLISmoke:
    """Basic smoke tests for CLI commands."""

    def test_app_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "liftlog" in result.output or "progression" in result.output.lower()

    def test_init_creates_state(self, state_file):
        assert state_file.exists()
        data = json.loads(state_file.read_text())
        assert data["liftHistory"] == {}

    def test_command_without_init_fails(self, tmp_path):
        result = _invoke("history", "Leg Press", "--state-path", str(tmp_path / "none.json"))
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_log_writes_entry(self, state_file):
        result = _invoke(
            "log", "Barbell Bench Press", "--sets", "185x5, 185x5, 175x8",
            "--date", _days_ago(1), "--state-path", str(state_file),
        )
        assert result.exit_code == 0
        assert "Logged 3 sets" in result.output

        data = json.loads(state_file.read_text())
        entry = data["liftHistory"]["Barbell Bench Press"][0]
        assert entry["estimated1RM"] == 217

    def test_log_json_reports_pr(self, state_file):
        base = ["--state-path", str(state_file), "--json"]
        first = _invoke("log", "Leg Press", "--sets", "300x10x3", "--date", _days_ago(2), *base)
        assert first.exit_code == 0
        assert json.loads(first.output)["is_pr"] is True

        second = _invoke("log", "Leg Press", "--sets", "280x10", "--date", _days_ago(1), *base)
        out = json.loads(second.output)
        assert out["is_pr"] is False
        assert out["previous_best"]["estimated1RM"] == 400

    def test_log_rejects_bad_sets(self, state_file):
        result = _invoke("log", "Leg Press", "--sets", "heavy", "--state-path", str(state_file))
        assert result.exit_code == 1
        assert "Invalid set format" in result.output

    def test_log_rejects_bad_date(self, state_file):
        result = _invoke(
            "log", "Leg Press", "--sets", "300x10", "--date", "2026-13-01",
            "--state-path", str(state_file),
        )
        assert result.exit_code == 1

    def test_history_and_remove(self, state_file):
        day = _days_ago(3)
        _invoke("log", "Leg Press", "--sets", "300x10", "--date", day, "--state-path", str(state_file))

        listed = _invoke("history", "Leg Press", "--json", "--state-path", str(state_file))
        assert [e["date"] for e in json.loads(listed.output)] == [day]

        removed = _invoke("remove", "Leg Press", "--date", day, "--force", "--state-path", str(state_file))
        assert removed.exit_code == 0
        listed = _invoke("history", "Leg Press", "--json", "--state-path", str(state_file))
        assert json.loads(listed.output) == []

    def test_pr_table(self, state_file):
        _invoke("log", "Leg Press", "--sets", "300x10", "--state-path", str(state_file))
        result = _invoke("pr", "--state-path", str(state_file))
        assert result.exit_code == 0
        assert "Leg Press" in result.output


class TestAnalysisCommands:
    def _log(self, state_file: Path, exercise: str, sets: str, days_ago: int = 0) -> None:
        result = _invoke(
            "log", exercise, "--sets", sets, "--date", _days_ago(days_ago),
            "--state-path", str(state_file),
        )
        assert result.exit_code == 0, result.output

    def test_volume_json(self, state_file):
        self._log(state_file, "Barbell Bench Press", "135x10x4", days_ago=1)
        result = _invoke("volume", "--json", "--state-path", str(state_file))
        assert result.exit_code == 0
        out = json.loads(result.output)
        assert out["chest"]["sets"] == 4
        assert out["chest"]["landmarks"] == {"MEV": 8, "MAV": 14, "MRV": 20}

    def test_stats_json(self, state_file):
        self._log(state_file, "Barbell Bench Press", "100x10x3", days_ago=1)
        result = _invoke("stats", "--json", "--state-path", str(state_file))
        out = json.loads(result.output)
        assert out["total_sets"] == 3
        assert out["sessions"] == 1

    def test_suggest_json(self, state_file):
        self._log(state_file, "Barbell Bench Press", "185x12x3", days_ago=2)
        result = _invoke("suggest", "Barbell Bench Press", "--json", "--state-path", str(state_file))
        out = json.loads(result.output)["suggestion"]
        assert out["weight"] == 190
        assert (out["reps"], out["reps_max"]) == (6, 8)

    def test_suggest_unknown_exercise(self, state_file):
        result = _invoke("suggest", "Cable Flyes", "--json", "--state-path", str(state_file))
        assert json.loads(result.output)["suggestion"] is None

    def test_deload_complete(self, state_file):
        self._log(state_file, "Leg Press", "300x10", days_ago=30)
        self._log(state_file, "Leg Press", "300x10", days_ago=0)
        status = json.loads(_invoke("deload", "--json", "--state-path", str(state_file)).output)
        assert status["recommended"] is True
        assert status["weeks_since_deload"] == 4

        done = _invoke("deload", "--complete", "--state-path", str(state_file))
        assert done.exit_code == 0
        status = json.loads(_invoke("deload", "--json", "--state-path", str(state_file)).output)
        assert status["recommended"] is False

    def test_recovery_json(self, state_file):
        self._log(state_file, "Barbell Bench Press", "135x10x18", days_ago=1)
        result = _invoke("recovery", "--json", "--limit", "1", "--state-path", str(state_file))
        top = json.loads(result.output)
        assert len(top) == 1
        assert top[0]["area"] == "Chest"
        assert top[0]["reason"] == "CHEST at 90% MRV - needs recovery"

    def test_status_runs(self, state_file):
        self._log(state_file, "Barbell Bench Press", "135x10x3", days_ago=1)
        result = _invoke("status", "--state-path", str(state_file))
        assert result.exit_code == 0
        assert "Current status" in result.output

    def test_swap_and_alternatives(self, state_file):
        alt = _invoke("alternatives", "Dumbbell Rows", "--json")
        assert "Machine Row" in json.loads(alt.output)["alternatives"]

        swapped = _invoke("swap", "Dumbbell Rows", "Machine Row", "--state-path", str(state_file))
        assert swapped.exit_code == 0
        data = json.loads(state_file.read_text())
        assert list(data["exerciseSwaps"].values()) == [{"Dumbbell Rows": "Machine Row"}]
