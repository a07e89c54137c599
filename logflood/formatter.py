"""
Record formatter.

Renders one synthetic log record as a single line of compact JSON:

    {"ts":"2024-05-01T12:00:00.000000000+02:00","run_id":"test","seq":"000001","_data":"some data "}

Every field other than the filler has a fixed width for the lifetime of a run,
which is what lets the padding calculator measure a single example record and
trust the result for all of them.
"""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Dict, Optional

NANOS_PER_SECOND = 1_000_000_000

# %06d -> 10^6 distinct values
SEQ_WIDTH = 6
SEQ_MODULUS = 10**SEQ_WIDTH

TS_KEY = "ts"
RUN_ID_KEY = "run_id"
SEQ_KEY = "seq"
# Underscored so Elasticsearch-style backends leave it unanalysed.
DATA_KEY = "_data"


def _format_offset(offset: Optional[timedelta]) -> str:
    minutes = int((offset or timedelta(0)) // timedelta(minutes=1))
    sign = "-" if minutes < 0 else "+"
    hours, minutes = divmod(abs(minutes), 60)
    return f"{sign}{hours:02d}:{minutes:02d}"


def format_timestamp(epoch_ns: int, tz: Optional[tzinfo] = None) -> str:
    """
    Format nanoseconds since the epoch as ``YYYY-MM-DDTHH:MM:SS.nnnnnnnnn±HH:MM``.

    Close to RFC 3339 with nanoseconds, but trailing zeros of the fraction are
    kept so the width never changes. ``tz`` defaults to the local zone.
    """
    seconds, nanos = divmod(epoch_ns, NANOS_PER_SECOND)
    moment = datetime.fromtimestamp(seconds, tz=timezone.utc).astimezone(tz)
    return f"{moment:%Y-%m-%dT%H:%M:%S}.{nanos:09d}{_format_offset(moment.utcoffset())}"


def format_seq(seq: int) -> str:
    """Reduce ``seq`` into range and zero-pad it to six digits."""
    return f"{seq % SEQ_MODULUS:0{SEQ_WIDTH}d}"


def render(timestamp: str, run_id: Optional[str], seq: int, filler: str) -> str:
    """
    Render a record without its trailing newline.

    The run id key is left out entirely when ``run_id`` is None.
    """
    fields: Dict[str, str] = {TS_KEY: timestamp}
    if run_id is not None:
        fields[RUN_ID_KEY] = run_id
    fields[SEQ_KEY] = format_seq(seq)
    fields[DATA_KEY] = filler
    return json.dumps(fields, separators=(",", ":"))


def encoded_length(line: str) -> int:
    """Size of ``line`` in bytes as written to the sink."""
    return len(line.encode("utf-8"))


__all__ = [
    "DATA_KEY",
    "NANOS_PER_SECOND",
    "RUN_ID_KEY",
    "SEQ_KEY",
    "SEQ_MODULUS",
    "SEQ_WIDTH",
    "TS_KEY",
    "encoded_length",
    "format_seq",
    "format_timestamp",
    "render",
]
