"""
Padding calculator.

Works out, once per run, the filler string that brings every rendered record
to exactly the requested number of bytes (newline excluded).
"""

from __future__ import annotations

from datetime import timezone
from typing import Optional

from logflood.errors import RecordSizeTooSmallError
from logflood.formatter import encoded_length, format_timestamp, render

# Trailing space keeps the words separate, which is kinder to tokenizers.
FILLER_TOKEN = "some data "

# Real timestamps have the same width as this one.
PLACEHOLDER_TIMESTAMP = format_timestamp(0, timezone.utc)
BASELINE_SEQ = 1


def minimum_record_size(run_id: Optional[str] = None) -> int:
    """Byte length of a record with an empty filler."""
    return encoded_length(render(PLACEHOLDER_TIMESTAMP, run_id, BASELINE_SEQ, ""))


def compute_padding(desired_size: int, run_id: Optional[str] = None) -> str:
    """
    Build the filler for records of ``desired_size`` bytes.

    The filler is whole copies of FILLER_TOKEN followed by a prefix of it that
    takes up the remainder.

    Raises
    ------
    RecordSizeTooSmallError
        If even an empty filler produces a record longer than ``desired_size``.
    """
    size = minimum_record_size(run_id)
    if size > desired_size:
        raise RecordSizeTooSmallError(minimum_size=size, desired_size=desired_size)

    whole, remainder = divmod(desired_size - size, len(FILLER_TOKEN))
    return FILLER_TOKEN * whole + FILLER_TOKEN[:remainder]


__all__ = ["FILLER_TOKEN", "PLACEHOLDER_TIMESTAMP", "compute_padding", "minimum_record_size"]
