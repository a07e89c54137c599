"""
Run controller: emits padded records at the configured rate until the deadline.

Usage (example from CLI):
    from logflood.controller import run_profiled
    from logflood.domain import RunConfig

    config = RunConfig(record_size=1024, records_per_second=100)
    result = run_profiled(config)
    print(result["records"])

Lifecycle of a controller:
- INITIALIZING: the filler is computed once; a record size below the minimum
  raises `RecordSizeTooSmallError` from the constructor and nothing is written.
- RUNNING: one record per tick, each followed by a newline and a flush.
- TERMINATED: the deadline passed (or the sink failed); `run()` returns.

Sequence numbers start at 1 and wrap from 999999 to 0.

Write errors are not retried: any exception raised by the sink propagates out
of `run()` after the controller has moved to TERMINATED.
"""

from __future__ import annotations

import sys
from datetime import tzinfo
from enum import Enum
from typing import Optional, TextIO, TypedDict

from logflood.domain.models import Record, RunConfig
from logflood.formatter import NANOS_PER_SECOND, SEQ_MODULUS, encoded_length, format_timestamp
from logflood.padding import compute_padding
from logflood.rate import Clock, RateSource, SystemClock
from logflood.utils.logging import get_logger
from logflood.utils.profiler import ProfileStats, profile_block

log = get_logger(__name__)

FIRST_SEQ = 1
RECORD_DELIMITER = "\n"


class RunState(str, Enum):
    INITIALIZING = "initializing"
    RUNNING = "running"
    TERMINATED = "terminated"


class RunResult(TypedDict, total=False):
    """
    Metrics describing a finished run.

    Profiling fields are only filled in by `run_profiled`.
    """

    records: int
    bytes_written: int
    dropped_ticks: int
    last_seq: Optional[int]
    duration_seconds: float
    records_per_sec: float
    peak_rss_bytes: Optional[int]
    cpu_percent: Optional[float]


class RunController:
    """
    Drives a single bounded (or unbounded) run.

    Parameters
    ----------
    config : RunConfig
        Run parameters.
    sink : TextIO, optional
        Destination for records. Defaults to stdout.
    clock : Clock, optional
        Time source. Defaults to the system clock.
    tz : tzinfo, optional
        Zone used for record timestamps. Defaults to the local zone.
    """

    def __init__(
        self,
        config: RunConfig,
        sink: Optional[TextIO] = None,
        clock: Optional[Clock] = None,
        tz: Optional[tzinfo] = None,
    ) -> None:
        self.state = RunState.INITIALIZING
        self.config = config
        self.sink = sink if sink is not None else sys.stdout
        self.clock = clock or SystemClock()
        self.tz = tz
        self.filler = compute_padding(config.record_size, config.run_id)
        self.rate_source = RateSource(config.records_per_second, self.clock)
        self.seq = FIRST_SEQ

        log.debug(
            "Controller initialized",
            extra={
                "record_size": config.record_size,
                "filler_bytes": len(self.filler),
                "interval_ns": self.rate_source.interval_ns,
            },
        )

    def _next_record(self) -> Record:
        # Fields are already known to be valid; skip per-tick validation.
        return Record.model_construct(
            timestamp=format_timestamp(self.clock.wall_ns(), self.tz),
            run_id=self.config.run_id,
            seq=self.seq,
            data=self.filler,
        )

    def run(self) -> RunResult:
        """
        Emit records until the deadline and return run metrics.

        A record is started only for a tick scheduled at or before the
        deadline, and only while the clock has not passed the deadline. A
        write already in progress when the deadline passes is completed. When
        the next tick lies past the deadline the controller sleeps until the
        deadline and stops.
        """
        if self.state is not RunState.INITIALIZING:
            raise RuntimeError(f"Controller cannot run from state '{self.state.value}'")
        self.state = RunState.RUNNING

        start_ns = self.clock.monotonic_ns()
        duration_ns = self.config.duration_ns
        deadline_ns = None if duration_ns is None else start_ns + duration_ns
        records = 0
        bytes_written = 0
        last_seq: Optional[int] = None
        progress_every = self.config.records_per_second

        log.info(
            "[RUN START]",
            extra={
                "run_id": self.config.run_id,
                "record_size": self.config.record_size,
                "records_per_second": self.config.records_per_second,
                "duration_seconds": None if duration_ns is None else duration_ns / NANOS_PER_SECOND,
            },
        )
        try:
            for due_ns in self.rate_source.ticks(start_ns):
                if deadline_ns is not None and due_ns > deadline_ns:
                    self.rate_source.wait_until(deadline_ns)
                    break
                self.rate_source.wait_until(due_ns)
                # A slow write can carry us past the deadline with a tick still due.
                if deadline_ns is not None and self.clock.monotonic_ns() > deadline_ns:
                    break

                line = self._next_record().render()
                self.sink.write(line + RECORD_DELIMITER)
                self.sink.flush()

                records += 1
                bytes_written += encoded_length(line)
                last_seq = self.seq
                self.seq = (self.seq + 1) % SEQ_MODULUS

                if self.config.debug and records % progress_every == 0:
                    log.debug(
                        "[PROGRESS]",
                        extra={"records": records, "dropped_ticks": self.rate_source.dropped_ticks},
                    )
        finally:
            self.state = RunState.TERMINATED

        elapsed = (self.clock.monotonic_ns() - start_ns) / NANOS_PER_SECOND
        result = RunResult(
            records=records,
            bytes_written=bytes_written,
            dropped_ticks=self.rate_source.dropped_ticks,
            last_seq=last_seq,
            duration_seconds=elapsed,
            records_per_sec=records / elapsed if elapsed > 0 else 0.0,
        )
        log.info(
            "[RUN COMPLETE]",
            extra={
                "records": records,
                "bytes_written": bytes_written,
                "dropped_ticks": result["dropped_ticks"],
            },
        )
        return result


def _round_float(value: float, decimals: int = 2) -> float:
    return round(value, decimals)


def _merge_result(result: RunResult, stats: ProfileStats) -> RunResult:
    """Attach profiler measurements to a run result, rounding floats for readability."""
    merged = RunResult(**result)
    merged["duration_seconds"] = _round_float(merged.get("duration_seconds", stats.duration_seconds))
    merged["records_per_sec"] = _round_float(merged.get("records_per_sec", 0.0))
    merged["peak_rss_bytes"] = stats.peak_rss_bytes
    merged["cpu_percent"] = (
        _round_float(stats.cpu_percent, 1) if stats.cpu_percent is not None else None
    )
    return merged


def run_profiled(
    config: RunConfig,
    sink: Optional[TextIO] = None,
    clock: Optional[Clock] = None,
) -> RunResult:
    """
    Build a controller for ``config``, run it, and return metrics with the
    generator's own CPU and memory usage.

    Raises
    ------
    RecordSizeTooSmallError
        Before anything is written, if ``config.record_size`` is unreachable.
    """
    controller = RunController(config, sink=sink, clock=clock)
    with profile_block("run") as stats:
        result = controller.run()
    return _merge_result(result, stats)


__all__ = [
    "FIRST_SEQ",
    "RunController",
    "RunResult",
    "RunState",
    "run_profiled",
]
