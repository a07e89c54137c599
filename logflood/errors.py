"""
Error taxonomy for logflood.

Only configuration problems are modelled here. They are detected before the
first record is written and are never retried.
"""

from __future__ import annotations


class ConfigurationError(Exception):
    """Raised when a run cannot be configured."""


class RecordSizeTooSmallError(ConfigurationError):
    """
    The requested record size is below the smallest record that can be rendered.

    Attributes
    ----------
    minimum_size : int
        Byte length of a record with an empty filler.
    desired_size : int
        Byte length that was requested.
    """

    def __init__(self, minimum_size: int, desired_size: int) -> None:
        self.minimum_size = minimum_size
        self.desired_size = desired_size
        super().__init__(
            f"Desired size of {desired_size} bytes is less than minimum size of "
            f"{minimum_size} bytes"
        )


__all__ = ["ConfigurationError", "RecordSizeTooSmallError"]
