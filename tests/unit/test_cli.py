from __future__ import annotations

import errno
import json

import pytest
from typer.testing import CliRunner

from logflood import __version__, main
from logflood.config import get_settings
from logflood.main import app
from logflood.padding import minimum_record_size

runner = CliRunner()


def _records(stdout: str) -> list[str]:
    return stdout.splitlines()


def test_version() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.stdout.strip() == f"logflood {__version__}"


def test_run_writes_fixed_size_records() -> None:
    result = runner.invoke(
        app,
        ["run", "--records-per-second", "20", "--duration", "100ms", "--record-size", "200", "--run-id", "cli"],
    )

    assert result.exit_code == 0, result.output
    lines = _records(result.stdout)
    assert 1 <= len(lines) <= 2
    assert all(len(line.encode("utf-8")) == 200 for line in lines)
    first = json.loads(lines[0])
    assert first["run_id"] == "cli"
    assert first["seq"] == "000001"


def test_run_zero_duration_exits_cleanly() -> None:
    result = runner.invoke(app, ["run", "-r", "1", "-d", "0s"])

    assert result.exit_code == 0, result.output
    assert result.stdout == ""


def test_run_uses_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOGFLOOD_RECORD_SIZE", "300")
    monkeypatch.setenv("LOGFLOOD_DURATION", "100ms")
    monkeypatch.setenv("LOGFLOOD_RUN_ID", "from-env")
    get_settings.cache_clear()

    result = runner.invoke(app, ["run", "-r", "20"])

    assert result.exit_code == 0, result.output
    lines = _records(result.stdout)
    assert lines
    assert all(len(line) == 300 for line in lines)
    assert json.loads(lines[0])["run_id"] == "from-env"


def test_run_record_size_too_small_fails() -> None:
    too_small = minimum_record_size() - 1
    result = runner.invoke(app, ["run", "-r", "10", "-d", "1s", "-s", str(too_small)])

    assert result.exit_code == 1
    assert f"less than minimum size of {minimum_record_size()} bytes" in result.output
    assert '"seq"' not in result.output


def test_run_requires_rate() -> None:
    result = runner.invoke(app, ["run", "-d", "1s"])
    assert result.exit_code == 2


def test_run_rejects_zero_rate() -> None:
    result = runner.invoke(app, ["run", "-r", "0"])
    assert result.exit_code == 2


@pytest.mark.parametrize("option", [["--record-size", "12XB"], ["--duration", "soon"]])
def test_run_rejects_bad_units(option: list[str]) -> None:
    result = runner.invoke(app, ["run", "-r", "10", *option])
    assert result.exit_code == 2


def test_run_summary_table(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("COLUMNS", "200")
    result = runner.invoke(app, ["run", "-r", "20", "-d", "100ms", "--summary"])

    assert result.exit_code == 0, result.output
    assert "Records" in result.output
    assert "Dropped Ticks" in result.output


def test_info_reports_minimum_size() -> None:
    result = runner.invoke(app, ["info", "--run-id", "test"])

    assert result.exit_code == 0, result.output
    assert f"minimum_record_size={minimum_record_size('test')}" in result.stdout
    assert "record_size=1024" in result.stdout


def test_info_flags_unreachable_size() -> None:
    result = runner.invoke(app, ["info", "--record-size", "10"])
    assert result.exit_code == 1


def test_run_broken_pipe_exits_one(monkeypatch: pytest.MonkeyPatch) -> None:
    def _closed_reader(config, *args, **kwargs):
        raise BrokenPipeError(errno.EPIPE, "Broken pipe")

    monkeypatch.setattr(main, "run_profiled", _closed_reader)

    result = runner.invoke(app, ["run", "-r", "10", "-d", "1s"])

    assert result.exit_code == 1
    assert "Record sink closed by reader" in result.output


def test_run_interrupted_exits_130(monkeypatch: pytest.MonkeyPatch) -> None:
    def _interrupted(config, *args, **kwargs):
        raise KeyboardInterrupt

    monkeypatch.setattr(main, "run_profiled", _interrupted)

    result = runner.invoke(app, ["run", "-r", "10", "--forever"])

    assert result.exit_code == 130
    assert "Cancelled by user." in result.output
