"""
Utilities package for logflood.

Exports shared helpers for logging, profiling and unit parsing.
Keep this package lightweight and free of record-generation logic.
"""

from logflood.utils.logging import configure_logging, get_logger
from logflood.utils.profiler import ProfileStats, profile_block
from logflood.utils.units import UnitParseError, format_duration, parse_byte_size, parse_duration

__all__ = [
    "configure_logging",
    "get_logger",
    "ProfileStats",
    "profile_block",
    "UnitParseError",
    "format_duration",
    "parse_byte_size",
    "parse_duration",
]
