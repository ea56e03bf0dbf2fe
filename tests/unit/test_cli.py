from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from pragma_bench import main as cli
from pragma_bench.config import get_settings

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path: Path):
    monkeypatch.setenv("BENCHMARK_RESULTS_DIR", str(tmp_path / "results"))
    monkeypatch.setattr(cli, "configure_logging", lambda **kwargs: None)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_strategies_marks_defaults():
    result = runner.invoke(cli.app, ["strategies"])

    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert "* insert" in lines
    assert "  search_with_table" in lines


def test_info_shows_combination_count(monkeypatch):
    monkeypatch.setenv("BENCHMARK_PRAGMAS", '["PRAGMA synchronous = OFF", "PRAGMA temp_store = MEMORY"]')

    result = runner.invoke(cli.app, ["info"])

    assert result.exit_code == 0
    assert "pragmas (4 combinations):" in result.output
    assert "  PRAGMA temp_store = MEMORY" in result.output


def test_run_prints_leaderboard(tmp_path: Path):
    data_dir = tmp_path / "data"

    result = runner.invoke(
        cli.app,
        ["run", "-n", "5", "-c", "3", "--no-pragmas", "-s", "insert", "-s", "insert_all", "-d", str(data_dir)],
    )

    assert result.exit_code == 0, result.output
    assert "Configuration 1/1 (none)" in result.output
    assert "Fastest operations" in result.output
    assert "insert_all" in result.output
    assert len(list(data_dir.glob("*.db"))) == 1


def test_run_rejects_unknown_strategy(tmp_path: Path):
    result = runner.invoke(cli.app, ["run", "-s", "bogus", "-d", str(tmp_path / "data")])

    assert result.exit_code == 2
    assert "Unknown strategy 'bogus'" in result.output


def test_run_errors_are_not_reported_as_bad_options(tmp_path: Path, monkeypatch):
    def fail(config, **kwargs):
        raise ValueError("row failed validation")

    monkeypatch.setattr(cli, "run_experiments", fail)

    result = runner.invoke(cli.app, ["run", "--strict", "-s", "insert", "-d", str(tmp_path / "data")])

    assert result.exit_code != 2
    assert isinstance(result.exception, ValueError)
