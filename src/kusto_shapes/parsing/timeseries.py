"""Time series parsing: group rows into named series buckets."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from kusto_shapes.config import DEFAULT_CONFIG, ParserConfig
from kusto_shapes.core.models import Column, QueryDescriptor, Row, SeriesBucket
from kusto_shapes.core.roles import ColumnRoles, get_column_roles
from kusto_shapes.core.timeutils import date_time_to_epoch


logger = logging.getLogger(__name__)


def find_or_create_bucket(buckets: Dict[Any, SeriesBucket], target: Any) -> SeriesBucket:
    """Return the bucket named ``target``, creating it at the end if new."""
    bucket = buckets.get(target)
    if bucket is None:
        bucket = SeriesBucket(target=target)
        buckets[target] = bucket
        logger.debug("Created series bucket %r", target)
    return bucket


def _series_name(row: Row, columns: Sequence[Column], roles: ColumnRoles) -> Any:
    if roles.has_metric:
        return row[roles.metric_index]
    if roles.has_value:
        # without a label column all rows share one series named after the value column
        return columns[roles.value_index].name
    return None


def parse_time_series_result(
    query: QueryDescriptor,
    columns: Sequence[Column],
    rows: Sequence[Row],
    *,
    config: Optional[ParserConfig] = None,
) -> List[SeriesBucket]:
    """Group rows into series buckets keyed by series name.

    Each row contributes one ``[value, epoch_millis]`` datapoint to the bucket
    named by its metric cell (or by the value column's name when the result
    has no label column). Datapoints keep row order; buckets keep first-seen
    order.

    Args:
        query: Descriptor of the query that produced the rows.
        columns: Column metadata, positionally aligned with rows.
        rows: Result rows.
        config: Parser settings; defaults to DEFAULT_CONFIG.

    Returns:
        List of SeriesBucket objects.

    Raises:
        MissingTimeColumn: If no column has a time type.
        InvalidTimestamp: If a time cell is unparseable under the strict policy.

    Examples:
        >>> buckets = parse_time_series_result(query, columns, [["2020-01-01T00:00:00Z", "cpu", 42]])
        >>> buckets[0].datapoints
        [[42, 1577836800000]]
    """
    cfg = config or DEFAULT_CONFIG
    roles = get_column_roles(columns, config=cfg)
    if not roles.has_metric and not roles.has_value:
        logger.warning(
            "Query %s has neither a label nor a value column; datapoints will have no value",
            query.ref_id,
        )

    buckets: Dict[Any, SeriesBucket] = {}
    for row in rows:
        epoch = date_time_to_epoch(row[roles.time_index], policy=cfg.timestamp_policy)
        bucket = find_or_create_bucket(buckets, _series_name(row, columns, roles))
        value = row[roles.value_index] if roles.has_value else None
        bucket.datapoints.append([value, epoch])
        bucket.ref_id = query.ref_id
        bucket.query = query.query

    return list(buckets.values())
