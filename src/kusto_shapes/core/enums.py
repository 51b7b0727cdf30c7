"""Core enumerations used across the package."""

from __future__ import annotations

from enum import Enum


class ResultFormat(str, Enum):
    """Output shape requested for a query.

    Values are strings to ease serialization and CLI interchange. Any format
    other than TIME_SERIES is rendered as a table.
    """

    TIME_SERIES = "time_series"
    TABLE = "table"


class TimestampPolicy(str, Enum):
    """How unparseable time cells are handled."""

    COERCE = "coerce"
    STRICT = "strict"


__all__ = ["ResultFormat", "TimestampPolicy"]
