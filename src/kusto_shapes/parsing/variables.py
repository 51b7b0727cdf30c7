"""Variable extraction: flatten result rows into selectable values."""

from __future__ import annotations

from typing import Any, Iterator, List, Sequence

from kusto_shapes.core.models import QueryResult, TableResult, Variable


def flatten_deep(value: Any) -> Iterator[Any]:
    """Yield every scalar leaf of arbitrarily nested lists/tuples in order.

    Strings, dicts and other non-sequence values are leaves.

    Examples:
        >>> list(flatten_deep([1, [2, [3, "ab"]]]))
        [1, 2, 3, 'ab']
    """
    if isinstance(value, (list, tuple)):
        for item in value:
            yield from flatten_deep(item)
    else:
        yield value


def extract_variables(results: Sequence[QueryResult]) -> List[Variable]:
    """Emit one Variable per scalar cell across all table rows.

    Series buckets have no rows and contribute nothing. Duplicates are kept.
    """
    variables: List[Variable] = []
    for result in results:
        if not isinstance(result, TableResult):
            continue
        for cell in flatten_deep(result.rows):
            variables.append(Variable(text=cell, value=cell))
    return variables


__all__ = ["flatten_deep", "extract_variables"]
