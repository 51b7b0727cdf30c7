"""Result data models.

This module defines the records exchanged by the parsers:
- Column, QueryDescriptor, QueryResultBlock: validated input blocks
- SeriesBucket, TableResult: the two output shapes
- Variable: a selectable dashboard parameter value

Raw JSON-like documents are validated once, here, by the ``from_dict``
constructors and ``load_query_results``. Everything downstream assumes the
shapes below.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import pandas as pd

from .enums import ResultFormat
from .errors import MalformedResultError

Row = List[Any]


@dataclass(frozen=True)
class Column:
    """Column metadata of a result block.

    Attributes:
        name: Declared column name.
        type: Type tag from the engine's open vocabulary (e.g. "datetime", "real").
    """

    name: str
    type: str

    @classmethod
    def from_dict(cls, data: Any) -> "Column":
        if not isinstance(data, Mapping):
            raise MalformedResultError(f"Column must be a mapping, got {type(data).__name__}")
        if "name" not in data or "type" not in data:
            raise MalformedResultError(f"Column requires 'name' and 'type': {dict(data)!r}")
        return cls(name=str(data["name"]), type=str(data["type"]))

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "type": self.type}


def _text(value: Any) -> str:
    return "" if value is None else str(value)


@dataclass(frozen=True)
class QueryDescriptor:
    """The query a result block answers.

    Attributes:
        ref_id: Identifier of the query within its request (e.g. "A").
        query: Query text as submitted.
        result_format: Requested output shape; anything but "time_series" is a table.
        extra: Remaining keys of the original query document, kept verbatim.
    """

    ref_id: str
    query: str
    result_format: str = ResultFormat.TABLE.value
    extra: Dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_dict(cls, data: Any) -> "QueryDescriptor":
        if not isinstance(data, Mapping):
            raise MalformedResultError(
                f"Query descriptor must be a mapping, got {type(data).__name__}"
            )
        extra = {k: v for k, v in data.items() if k not in ("refId", "query", "resultFormat")}
        return cls(
            ref_id=_text(data.get("refId")),
            query=_text(data.get("query")),
            result_format=str(data.get("resultFormat") or ResultFormat.TABLE.value),
            extra=extra,
        )


@dataclass(frozen=True)
class QueryResultBlock:
    """One query's result: its descriptor, columns and positional rows."""

    query: QueryDescriptor
    columns: Tuple[Column, ...] = ()
    rows: Tuple[Row, ...] = ()

    @property
    def is_empty(self) -> bool:
        """True when the engine returned no table for this query."""
        return not self.columns and not self.rows

    @classmethod
    def from_dict(cls, data: Any) -> "QueryResultBlock":
        """Build a block from either the nested fetch shape or the flat shape.

        Nested: ``{"query": {...}, "result": {"data": {"tables": [{"columns", "rows"}]}}}``
        (first table wins, no tables means an empty block).
        Flat: ``{"query": {...}, "columns": [...], "rows": [...]}``.

        Raises:
            MalformedResultError: If the document does not match either shape.
        """
        if not isinstance(data, Mapping):
            raise MalformedResultError(
                f"Result block must be a mapping, got {type(data).__name__}"
            )
        if "query" not in data:
            raise MalformedResultError("Result block is missing its 'query' descriptor")
        query = QueryDescriptor.from_dict(data["query"])

        if "result" in data:
            table = _first_table(data["result"])
            raw_columns = table.get("columns", []) if table else []
            raw_rows = table.get("rows", []) if table else []
        else:
            raw_columns = data.get("columns", [])
            raw_rows = data.get("rows", [])

        if not isinstance(raw_columns, list):
            raise MalformedResultError("'columns' must be a list")
        if not isinstance(raw_rows, list):
            raise MalformedResultError("'rows' must be a list")
        for i, row in enumerate(raw_rows):
            if not isinstance(row, list):
                raise MalformedResultError(f"Row {i} must be a list, got {type(row).__name__}")

        return cls(
            query=query,
            columns=tuple(Column.from_dict(c) for c in raw_columns),
            rows=tuple(copy.deepcopy(r) for r in raw_rows),
        )


def _first_table(result: Any) -> Optional[Mapping]:
    if not isinstance(result, Mapping):
        raise MalformedResultError("'result' must be a mapping")
    data = result.get("data", {})
    if not isinstance(data, Mapping):
        raise MalformedResultError("'result.data' must be a mapping")
    tables = data.get("tables", [])
    if not isinstance(tables, list):
        raise MalformedResultError("'result.data.tables' must be a list")
    if not tables:
        return None
    if not isinstance(tables[0], Mapping):
        raise MalformedResultError("Result tables must be mappings")
    return tables[0]


def load_query_results(
    raw: Sequence[Union[QueryResultBlock, Mapping[str, Any]]],
) -> List[QueryResultBlock]:
    """Validate a list of raw result documents into QueryResultBlock objects.

    Already-built blocks are passed through untouched.

    Raises:
        MalformedResultError: If ``raw`` is not a list or any block is malformed.
    """
    if isinstance(raw, (str, bytes, Mapping)) or not isinstance(raw, Sequence):
        raise MalformedResultError(
            f"Query results must be a list of blocks, got {type(raw).__name__}"
        )
    return [b if isinstance(b, QueryResultBlock) else QueryResultBlock.from_dict(b) for b in raw]


@dataclass
class SeriesBucket:
    """An accumulating named time series.

    Attributes:
        target: Series name.
        datapoints: ``[value, epoch_millis]`` pairs in row order.
        ref_id: refId of the query that produced the series.
        query: Query text that produced the series.
    """

    target: Any
    datapoints: List[List[Any]] = field(default_factory=list)
    ref_id: str = ""
    query: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "target": self.target,
            "datapoints": [list(dp) for dp in self.datapoints],
            "refId": self.ref_id,
            "query": self.query,
        }


@dataclass(frozen=True)
class TableColumn:
    text: str
    type: str

    def to_dict(self) -> Dict[str, str]:
        return {"text": self.text, "type": self.type}


@dataclass
class TableResult:
    """Flat table output: renamed column metadata plus copies of the rows."""

    columns: List[TableColumn]
    rows: List[Row]
    ref_id: str = ""
    query: str = ""
    type: str = "table"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "columns": [c.to_dict() for c in self.columns],
            "rows": self.rows,
            "refId": self.ref_id,
            "query": self.query,
        }

    def to_frame(self) -> pd.DataFrame:
        """Return the table as a DataFrame named after its columns.

        Examples:
            >>> table.to_frame().columns.tolist()
            ['Time', 'Metric', 'Value']
        """
        return pd.DataFrame(
            [list(r) for r in self.rows], columns=[c.text for c in self.columns]
        )


@dataclass(frozen=True)
class Variable:
    text: Any
    value: Any

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text, "value": self.value}


QueryResult = Union[SeriesBucket, TableResult]


def results_to_dicts(results: Sequence[Union[QueryResult, Variable]]) -> List[Dict[str, Any]]:
    """Serialize parser output to plain JSON-compatible dictionaries."""
    return [r.to_dict() for r in results]


__all__ = [
    "Row",
    "Column",
    "QueryDescriptor",
    "QueryResultBlock",
    "load_query_results",
    "SeriesBucket",
    "TableColumn",
    "TableResult",
    "Variable",
    "QueryResult",
    "results_to_dicts",
]
