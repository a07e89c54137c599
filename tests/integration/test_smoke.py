"""
End-to-end checks against the real clock and a real process.

These take a fraction of a second each; timing assertions leave room for
scheduler jitter.
"""

from __future__ import annotations

import io
import json
import os
import subprocess
import sys
from datetime import timedelta
from pathlib import Path

from logflood.controller import RunController
from logflood.domain.models import RunConfig

RECORD_SIZE = 128
PROJECT_ROOT = Path(__file__).resolve().parents[2]


def _cli_env() -> dict[str, str]:
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(PROJECT_ROOT), env.get("PYTHONPATH")]))
    env["LOGFLOOD_LOG_LEVEL"] = "INFO"
    return env


def test_real_clock_rate_and_deadline() -> None:
    sink = io.StringIO()
    config = RunConfig(
        record_size=RECORD_SIZE,
        records_per_second=50,
        duration=timedelta(milliseconds=400),
    )

    result = RunController(config, sink=sink).run()

    lines = sink.getvalue().splitlines()
    assert 10 <= len(lines) <= 20
    assert result["records"] == len(lines)
    assert all(len(line.encode("utf-8")) == RECORD_SIZE for line in lines)
    assert result["duration_seconds"] >= 0.4


def test_cli_process_exit_code_and_output() -> None:
    completed = subprocess.run(
        [
            sys.executable,
            "-m",
            "logflood.main",
            "run",
            "--records-per-second",
            "10",
            "--duration",
            "300ms",
            "--record-size",
            str(RECORD_SIZE),
            "--run-id",
            "smoke",
        ],
        capture_output=True,
        text=True,
        timeout=30,
        check=False,
        env=_cli_env(),
    )

    assert completed.returncode == 0, completed.stderr
    lines = completed.stdout.splitlines()
    assert 1 <= len(lines) <= 3
    for expected_seq, line in enumerate(lines, start=1):
        record = json.loads(line)
        assert len(line) == RECORD_SIZE
        assert record["seq"] == f"{expected_seq:06d}"
        assert record["run_id"] == "smoke"
    assert "[RUN START]" in completed.stderr


def test_cli_process_rejects_small_record() -> None:
    completed = subprocess.run(
        [sys.executable, "-m", "logflood.main", "run", "-r", "10", "-s", "10"],
        capture_output=True,
        text=True,
        timeout=30,
        check=False,
        env=_cli_env(),
    )

    assert completed.returncode == 1
    assert completed.stdout == ""
    assert "minimum size" in completed.stderr


def test_cli_process_exits_one_when_reader_goes_away() -> None:
    process = subprocess.Popen(
        [sys.executable, "-m", "logflood.main", "run", "-r", "200", "-d", "2s", "-s", "200"],
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        env=_cli_env(),
    )
    try:
        first = process.stdout.readline()
        process.stdout.close()
        returncode = process.wait(timeout=30)
        stderr = process.stderr.read()
    finally:
        if process.poll() is None:
            process.kill()
        process.stderr.close()

    assert len(first.rstrip("\n")) == 200
    assert returncode == 1
    assert "Record sink closed by reader" in stderr
