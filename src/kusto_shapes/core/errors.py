"""Exception hierarchy for result and schema parsing.

- MissingTimeColumn: time series requested but no temporal column exists
- UnknownProperty: a table references a property missing from the registry
- MalformedResultError / MalformedMetadataError: boundary validation failures
- InvalidTimestamp: unparseable time cell under the strict timestamp policy
"""

from __future__ import annotations

from typing import Any, Optional


class ResponseParserError(Exception):
    """Base class for all errors raised by this package."""


class MissingTimeColumn(ResponseParserError, ValueError):
    """Raised when a time series is requested for a block without a datetime column."""

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(
            message
            or "No datetime column found in the result. "
            "The Time Series format requires a time column."
        )


class UnknownProperty(ResponseParserError, KeyError):
    """Raised when a table declares a property absent from the property registry."""

    def __init__(self, property_name: str, table_key: Optional[str] = None) -> None:
        self.property_name = property_name
        self.table_key = table_key
        super().__init__(property_name)

    def __str__(self) -> str:
        if self.table_key is not None:
            return (
                f"Unknown property '{self.property_name}' referenced by table "
                f"'{self.table_key}'"
            )
        return f"Unknown property '{self.property_name}'"


class MalformedResultError(ResponseParserError, ValueError):
    """Raised when a query result block does not have the expected shape."""


class MalformedMetadataError(ResponseParserError, ValueError):
    """Raised when a metadata description does not have the expected shape."""


class InvalidTimestamp(ResponseParserError, ValueError):
    """Raised for an unparseable time cell when the strict policy is active."""

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(f"Cannot convert {value!r} to an epoch timestamp")


__all__ = [
    "ResponseParserError",
    "MissingTimeColumn",
    "UnknownProperty",
    "MalformedResultError",
    "MalformedMetadataError",
    "InvalidTimestamp",
]
