"""
Rate source.

Turns a records-per-second target into a schedule of tick instants spaced
``1s / rate`` apart, the first one a full interval after activation. The
schedule is fixed relative to the start, so slow ticks do not accumulate
drift. A consumer that falls more than one interval behind does not get a
burst of catch-up ticks: the missed ones are dropped and only the most recent
is delivered.

Time is read through a `Clock` so the schedule can be driven by a fake clock
in tests.
"""

from __future__ import annotations

import time
from typing import Iterator, Optional, Protocol, runtime_checkable

from logflood.formatter import NANOS_PER_SECOND


@runtime_checkable
class Clock(Protocol):
    """
    Time source used by the rate source and the run controller.

    `monotonic_ns` drives scheduling; `wall_ns` is what ends up in records.
    """

    def monotonic_ns(self) -> int:
        ...

    def wall_ns(self) -> int:
        ...

    def sleep_ns(self, duration_ns: int) -> None:
        ...


class SystemClock:
    """Clock backed by the operating system."""

    def monotonic_ns(self) -> int:
        return time.monotonic_ns()

    def wall_ns(self) -> int:
        return time.time_ns()

    def sleep_ns(self, duration_ns: int) -> None:
        if duration_ns > 0:
            time.sleep(duration_ns / NANOS_PER_SECOND)


class RateSource:
    """
    Periodic tick schedule for a target rate.

    Attributes
    ----------
    interval_ns : int
        Spacing between ticks.
    dropped_ticks : int
        Ticks skipped because the consumer fell behind.
    """

    def __init__(self, records_per_second: int, clock: Optional[Clock] = None) -> None:
        if records_per_second <= 0:
            raise ValueError(f"records_per_second must be positive, got {records_per_second}")
        self.records_per_second = records_per_second
        self.interval_ns = max(1, NANOS_PER_SECOND // records_per_second)
        self.clock = clock or SystemClock()
        self.dropped_ticks = 0

    def ticks(self, start_ns: int) -> Iterator[int]:
        """
        Yield scheduled tick instants after ``start_ns``, indefinitely.

        Instants are yielded before they are due; call `wait_until` to block
        until one arrives.
        """
        tick = 1
        while True:
            latest = (self.clock.monotonic_ns() - start_ns) // self.interval_ns
            if latest > tick:
                self.dropped_ticks += latest - tick
                tick = latest
            yield start_ns + tick * self.interval_ns
            tick += 1

    def wait_until(self, instant_ns: int) -> None:
        """Block until the monotonic clock reaches ``instant_ns``."""
        while True:
            remaining = instant_ns - self.clock.monotonic_ns()
            if remaining <= 0:
                return
            self.clock.sleep_ns(remaining)


__all__ = ["Clock", "RateSource", "SystemClock"]
