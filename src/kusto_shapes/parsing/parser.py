"""Result aggregation across query blocks.

This module orchestrates the per-block parsers:
- parse_query_results(): dispatch each block by result format and concatenate
- ResponseParser: captures a result set once and derives results, variables
  and (for metadata documents) the schema from it
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional, Sequence, Union

from kusto_shapes.config import DEFAULT_CONFIG, ParserConfig
from kusto_shapes.core.models import (
    QueryResult,
    QueryResultBlock,
    Variable,
    load_query_results,
)
from .table import parse_table_result
from .timeseries import parse_time_series_result
from .variables import extract_variables


logger = logging.getLogger(__name__)


def parse_query_results(
    blocks: Sequence[QueryResultBlock], *, config: Optional[ParserConfig] = None
) -> List[QueryResult]:
    """Parse every non-empty block and concatenate the outputs in block order.

    Blocks whose resultFormat is "time_series" become series buckets; any
    other format becomes a table. Empty blocks are skipped without output.

    Args:
        blocks: Validated result blocks.
        config: Parser settings; defaults to DEFAULT_CONFIG.

    Returns:
        Mixed list of SeriesBucket and TableResult objects.

    Raises:
        MissingTimeColumn: If any time series block lacks a time column. No
            partial output is returned.

    Examples:
        >>> results = parse_query_results(load_query_results(raw))
        >>> [type(r).__name__ for r in results]
        ['SeriesBucket', 'TableResult']
    """
    cfg = config or DEFAULT_CONFIG
    data: List[QueryResult] = []
    for block in blocks:
        if block.is_empty:
            logger.debug("Skipping empty result for query %s", block.query.ref_id)
            continue

        if block.query.result_format == cfg.time_series_format:
            logger.debug(
                "Parsing query %s as time series (%d rows)", block.query.ref_id, len(block.rows)
            )
            data.extend(
                parse_time_series_result(block.query, block.columns, block.rows, config=cfg)
            )
        else:
            logger.debug(
                "Parsing query %s as table (%d rows)", block.query.ref_id, len(block.rows)
            )
            data.append(parse_table_result(block.query, block.columns, block.rows))

    return data


class ResponseParser:
    """Derive dashboard shapes from one captured result set.

    The result set is validated at construction and never mutated; every
    call re-derives its output from it.

    Examples:
        >>> parser = ResponseParser(raw_results)
        >>> series_and_tables = parser.parse_query_result()
        >>> variables = parser.parse_to_variables()
    """

    def __init__(
        self,
        results: Sequence[Union[QueryResultBlock, Mapping[str, Any]]],
        *,
        config: Optional[ParserConfig] = None,
    ) -> None:
        self.config = config or DEFAULT_CONFIG
        self._blocks: tuple[QueryResultBlock, ...] = tuple(load_query_results(results))

    @property
    def blocks(self) -> tuple[QueryResultBlock, ...]:
        return self._blocks

    def parse_query_result(self) -> List[QueryResult]:
        """Return series buckets and tables for all captured blocks."""
        return parse_query_results(self._blocks, config=self.config)

    def parse_to_variables(self) -> List[Variable]:
        """Return one Variable per scalar cell of the parsed results."""
        return extract_variables(self.parse_query_result())


__all__ = ["parse_query_results", "ResponseParser"]
