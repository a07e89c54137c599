"""
Domain models for logflood.

`RunConfig` is the single immutable description of a run, built once from CLI
options and settings and handed to every component. `Record` is one emitted
line; it lives for a single tick.
"""
from __future__ import annotations

from datetime import timedelta
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from logflood.formatter import NANOS_PER_SECOND, render


class RunConfig(BaseModel):
    """
    Parameters of a single generator run.
    """

    record_size: int = Field(..., ge=0, description="Exact byte size of each record, newline excluded.")
    records_per_second: int = Field(..., gt=0, description="Target emission rate.")
    duration: Optional[timedelta] = Field(
        timedelta(seconds=10), description="Run length; None runs until interrupted."
    )
    run_id: Optional[str] = Field(None, description="Identifier written as the run_id field.")
    debug: bool = Field(False, description="Verbose diagnostics on stderr.")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
    }

    @field_validator("duration")
    @classmethod
    def _non_negative_duration(cls, value: Optional[timedelta]) -> Optional[timedelta]:
        if value is not None and value < timedelta(0):
            raise ValueError("duration must not be negative")
        return value

    @property
    def duration_ns(self) -> Optional[int]:
        if self.duration is None:
            return None
        return (self.duration // timedelta(microseconds=1)) * (NANOS_PER_SECOND // 1_000_000)


class Record(BaseModel):
    """
    A single synthetic log line.
    """

    timestamp: str = Field(..., description="Fixed-width formatted timestamp.")
    run_id: Optional[str] = Field(None, description="Run identifier, omitted when None.")
    seq: int = Field(..., ge=0, description="Sequence number; rendered modulo 10^6.")
    data: str = Field("", description="Filler payload.")

    model_config = {
        "frozen": True,
    }

    def render(self) -> str:
        return render(self.timestamp, self.run_id, self.seq, self.data)


__all__ = ["Record", "RunConfig"]
