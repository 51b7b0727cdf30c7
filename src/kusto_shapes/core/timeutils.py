"""Time cell conversion to epoch milliseconds."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Union

import numpy as np
import pandas as pd

from .enums import TimestampPolicy
from .errors import InvalidTimestamp


logger = logging.getLogger(__name__)


def date_time_to_epoch(
    value: Any, *, policy: TimestampPolicy = TimestampPolicy.COERCE
) -> Union[int, float]:
    """Convert a time cell to milliseconds since the Unix epoch.

    Parsing is permissive: ISO-8601 strings (full or partial), ``datetime``
    and ``date`` objects, pandas timestamps and numeric epoch milliseconds are
    all accepted. Naive values are read as UTC.

    Args:
        value: The raw time cell.
        policy: COERCE returns NaN for unparseable input, STRICT raises.

    Returns:
        Integer epoch milliseconds, or ``numpy.nan`` for unparseable input
        under the COERCE policy.

    Raises:
        InvalidTimestamp: If the value cannot be parsed and policy is STRICT.

    Examples:
        >>> date_time_to_epoch("2020-01-01T00:00:00Z")
        1577836800000
        >>> date_time_to_epoch("not a date")
        nan
    """
    ts = _to_timestamp(value)
    if pd.isna(ts):
        if policy == TimestampPolicy.STRICT:
            raise InvalidTimestamp(value)
        logger.debug("Unparseable time cell %r, using NaN", value)
        return np.nan
    return int(ts.value // 1_000_000)


def _to_timestamp(value: Any):
    if isinstance(value, bool) or not pd.api.types.is_scalar(value) or pd.isna(value):
        return pd.NaT
    try:
        if isinstance(value, (int, float, np.integer, np.floating)):
            # numeric cells are epoch milliseconds
            return pd.to_datetime(value, unit="ms", utc=True, errors="coerce")
        if isinstance(value, (str, datetime, date, np.datetime64)):
            return pd.to_datetime(value, utc=True, errors="coerce")
    except (ValueError, TypeError, OverflowError):
        return pd.NaT
    return pd.NaT


__all__ = ["date_time_to_epoch"]
