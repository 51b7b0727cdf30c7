"""Shared pytest fixtures for result and schema parsing tests."""

from __future__ import annotations

import copy
from typing import Any, Dict, List

import pytest

from kusto_shapes.core.models import QueryResultBlock

TIME_METRIC_VALUE_COLUMNS: List[Dict[str, str]] = [
    {"name": "Time", "type": "datetime"},
    {"name": "Metric", "type": "string"},
    {"name": "Value", "type": "real"},
]

EPOCH_2020_01_01 = 1577836800000


def make_block(
    columns: List[Dict[str, str]],
    rows: List[List[Any]],
    *,
    ref_id: str = "A",
    query: str = "q1",
    result_format: str = "time_series",
) -> Dict[str, Any]:
    """Build a raw result block in the flat shape."""
    return {
        "query": {"refId": ref_id, "query": query, "resultFormat": result_format},
        "columns": copy.deepcopy(columns),
        "rows": copy.deepcopy(rows),
    }


def make_nested_block(
    columns: List[Dict[str, str]],
    rows: List[List[Any]],
    *,
    ref_id: str = "A",
    query: str = "q1",
    result_format: str = "time_series",
) -> Dict[str, Any]:
    """Build a raw result block in the nested fetch-response shape."""
    tables = [{"columns": copy.deepcopy(columns), "rows": copy.deepcopy(rows)}] if columns else []
    return {
        "query": {"refId": ref_id, "query": query, "resultFormat": result_format},
        "result": {"data": {"tables": tables}},
    }


@pytest.fixture
def time_series_raw() -> Dict[str, Any]:
    """Single-row time series block with time, metric and value columns."""
    return make_block(TIME_METRIC_VALUE_COLUMNS, [["2020-01-01T00:00:00Z", "cpu", 42]])


@pytest.fixture
def table_raw() -> Dict[str, Any]:
    """Same data as time_series_raw but requesting table output."""
    return make_block(
        TIME_METRIC_VALUE_COLUMNS,
        [["2020-01-01T00:00:00Z", "cpu", 42]],
        result_format="table",
    )


@pytest.fixture
def time_series_block(time_series_raw) -> QueryResultBlock:  # pylint: disable=redefined-outer-name
    return QueryResultBlock.from_dict(time_series_raw)


@pytest.fixture
def metadata_raw() -> Dict[str, Any]:
    """Metadata description with two entities sharing a property and two queries."""
    return {
        "types": {
            "requests": {
                "analytics": {"tableName": "AppRequests"},
                "properties": ["timestamp", "name", "duration"],
            },
            "traces": {
                "analytics": {"tableName": "AppTraces"},
                "properties": ["timestamp", "message"],
            },
        },
        "queries": {
            "q-failures": {
                "analytics": {
                    "functionName": "failedRequests",
                    "functionBody": "AppRequests | where Success == false",
                },
                "displayName": "Failed requests",
                "category": "Reliability",
            },
            "q-slow": {
                "analytics": {
                    "functionName": "slowRequests",
                    "functionBody": "AppRequests | where DurationMs > 1000",
                },
                "displayName": "Slow requests",
                "category": "Performance",
            },
        },
        "properties": {
            "timestamp": {"analytics": {"columnType": "datetime"}},
            "name": {"analytics": {"columnType": "string"}},
            "duration": {"analytics": {"columnType": "real"}},
            "message": {"analytics": {"columnType": "string"}},
        },
    }
