"""Result parsers: time series, table, aggregation and variables.

Public API:
 - ResponseParser
 - parse_query_results
 - parse_time_series_result
 - parse_table_result
 - extract_variables
"""

from .timeseries import find_or_create_bucket, parse_time_series_result
from .table import parse_table_result
from .variables import extract_variables, flatten_deep
from .parser import ResponseParser, parse_query_results

__all__ = [
    "ResponseParser",
    "parse_query_results",
    "parse_time_series_result",
    "find_or_create_bucket",
    "parse_table_result",
    "extract_variables",
    "flatten_deep",
]
