"""
logflood - fixed-size, rate-controlled log record generator.

Emits synthetic JSON log lines at a steady records-per-second rate for a
bounded duration, each line padded to an exact byte size. Point a log shipper
or indexing backend at its output to see how the pipeline copes with a known,
repeatable load:

- Exact record sizes, independent of run id and timestamp
- Fixed tick schedule derived from the target rate
- Wrapping six-digit sequence numbers for gap detection downstream
"""

from __future__ import annotations

__version__ = "0.1.0"

# Public API exports
from logflood.config import Settings, get_settings
from logflood.controller import RunController, RunResult, RunState, run_profiled
from logflood.domain.models import Record, RunConfig
from logflood.errors import ConfigurationError, RecordSizeTooSmallError
from logflood.formatter import format_timestamp, render
from logflood.padding import compute_padding, minimum_record_size
from logflood.rate import Clock, RateSource, SystemClock

__all__ = [
    # Version info
    "__version__",
    # Configuration
    "Settings",
    "get_settings",
    "RunConfig",
    # Core
    "compute_padding",
    "minimum_record_size",
    "format_timestamp",
    "render",
    "Record",
    "Clock",
    "RateSource",
    "SystemClock",
    "RunController",
    "RunResult",
    "RunState",
    "run_profiled",
    # Errors
    "ConfigurationError",
    "RecordSizeTooSmallError",
]
