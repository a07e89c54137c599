"""
Domain package for logflood.

Exports the run configuration and record models shared by the controller and
the CLI. Keep this package focused on data definitions and validation.
"""

from logflood.domain.models import Record, RunConfig

__all__ = [
    "Record",
    "RunConfig",
]
