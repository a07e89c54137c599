"""
Parsing helpers for human-friendly sizes and durations.

Sizes are base-2 regardless of spelling, so ``1KB`` and ``1KiB`` both mean
1024 bytes. Durations use the compact ``1h2m3.5s`` notation; a bare number is
taken as seconds.

Usage:
    from logflood.utils.units import parse_byte_size, parse_duration

    parse_byte_size("1KiB")   # 1024
    parse_duration("1m30s")   # timedelta(seconds=90)
"""

from __future__ import annotations

import re
from datetime import timedelta
from typing import Dict

_SIZE_RE = re.compile(r"^\s*(\d+)\s*([A-Za-z]*)\s*$")
_DURATION_PART_RE = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")
_BARE_NUMBER_RE = re.compile(r"^\d+(?:\.\d*)?$|^\.\d+$")

_SIZE_UNITS: Dict[str, int] = {
    "": 1,
    "b": 1,
    "k": 1024,
    "kb": 1024,
    "kib": 1024,
    "m": 1024**2,
    "mb": 1024**2,
    "mib": 1024**2,
    "g": 1024**3,
    "gb": 1024**3,
    "gib": 1024**3,
}

# Seconds per unit.
_DURATION_UNITS: Dict[str, float] = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


class UnitParseError(ValueError):
    """Raised when a size or duration string cannot be parsed."""


def parse_byte_size(value: str | int) -> int:
    """
    Parse a byte count such as ``512``, ``1KiB`` or ``2MB`` into bytes.
    """
    if isinstance(value, int):
        if value < 0:
            raise UnitParseError(f"Byte size must not be negative: {value}")
        return value

    match = _SIZE_RE.match(value)
    if not match:
        raise UnitParseError(f"Invalid byte size '{value}'")
    number, unit = match.groups()
    multiplier = _SIZE_UNITS.get(unit.lower())
    if multiplier is None:
        raise UnitParseError(
            f"Unknown size unit '{unit}' in '{value}'. Use B, KiB, MiB or GiB."
        )
    return int(number) * multiplier


def parse_duration(value: str | int | float | timedelta) -> timedelta:
    """
    Parse a duration such as ``10s``, ``250ms`` or ``1h30m`` into a timedelta.

    Negative durations are rejected.
    """
    if isinstance(value, timedelta):
        result = value
    elif isinstance(value, (int, float)):
        result = timedelta(seconds=value)
    else:
        text = value.strip()
        if not text:
            raise UnitParseError("Duration must not be empty")
        if _BARE_NUMBER_RE.match(text):
            result = timedelta(seconds=float(text))
        else:
            seconds = 0.0
            position = 0
            for match in _DURATION_PART_RE.finditer(text):
                if match.start() != position:
                    break
                number, unit = match.groups()
                seconds += _DURATION_UNITS[unit] * float(number)
                position = match.end()
            if position != len(text):
                raise UnitParseError(f"Invalid duration '{value}'")
            result = timedelta(seconds=seconds)

    if result < timedelta(0):
        raise UnitParseError(f"Duration must not be negative: {value}")
    return result


def format_duration(value: timedelta) -> str:
    """Render a timedelta in the same compact notation accepted by parse_duration."""
    total = value.total_seconds()
    if total == 0:
        return "0s"
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    parts = []
    if hours:
        parts.append(f"{int(hours)}h")
    if minutes:
        parts.append(f"{int(minutes)}m")
    if seconds:
        parts.append(f"{seconds:g}s")
    return "".join(parts)


__all__ = ["UnitParseError", "format_duration", "parse_byte_size", "parse_duration"]
