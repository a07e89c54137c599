"""
Pytest configuration for logflood.

Provides fixtures for:
- A deterministic fake clock driving the rate source and record timestamps
- Settings isolated from the developer's environment and `.env` files
- Resetting root logging between tests
"""

from __future__ import annotations

import io
import logging
from datetime import timezone
from typing import Callable, Generator, List, Optional

import pytest

from logflood.config import get_settings
from logflood.controller import RunController
from logflood.domain.models import RunConfig

# 2023-11-14T22:13:20Z
WALL_START_NS = 1_700_000_000_000_000_000
MS = 1_000_000

_SETTINGS_ENV = (
    "LOGFLOOD_RECORD_SIZE",
    "LOGFLOOD_DURATION",
    "LOGFLOOD_RUN_ID",
    "LOGFLOOD_LOG_LEVEL",
    "LOGFLOOD_JSON_LOGS",
)


class FakeClock:
    """
    Clock that only moves when slept on (or advanced explicitly).
    """

    def __init__(self, start_ns: int = 0, wall_start_ns: int = WALL_START_NS) -> None:
        self.now_ns = start_ns
        self._wall_offset_ns = wall_start_ns - start_ns
        self.sleeps: List[int] = []

    def monotonic_ns(self) -> int:
        return self.now_ns

    def wall_ns(self) -> int:
        return self.now_ns + self._wall_offset_ns

    def sleep_ns(self, duration_ns: int) -> None:
        self.sleeps.append(duration_ns)
        self.now_ns += duration_ns

    def advance(self, duration_ns: int) -> None:
        self.now_ns += duration_ns


class SlowSink(io.StringIO):
    """In-memory sink whose writes take `write_ns` of fake time."""

    def __init__(self, clock: FakeClock, write_ns: int) -> None:
        super().__init__()
        self._clock = clock
        self._write_ns = write_ns

    def write(self, s: str) -> int:
        self._clock.advance(self._write_ns)
        return super().write(s)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_controller(
    fake_clock: FakeClock,
) -> Callable[..., RunController]:
    """
    Factory for controllers wired to the fake clock, a StringIO sink and UTC.
    """

    def _make(sink: Optional[io.StringIO] = None, **config_fields) -> RunController:
        config_fields.setdefault("record_size", 256)
        config_fields.setdefault("records_per_second", 10)
        return RunController(
            RunConfig(**config_fields),
            sink=sink if sink is not None else io.StringIO(),
            clock=fake_clock,
            tz=timezone.utc,
        )

    return _make


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Generator[None, None, None]:
    """
    Keep settings independent of the host environment.

    Diagnostics are raised to WARNING so CLI tests see clean stdout.
    """
    for name in _SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("LOGFLOOD_LOG_LEVEL", "WARNING")
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    yield
    # Handlers installed by configure_logging; pytest's own capture handlers are subclasses.
    root = logging.getLogger()
    for handler in root.handlers[:]:
        if type(handler) is logging.StreamHandler:
            root.removeHandler(handler)
