from __future__ import annotations

import copy
from typing import Sequence

from kusto_shapes.core.models import Column, QueryDescriptor, Row, TableColumn, TableResult


def parse_table_result(
    query: QueryDescriptor, columns: Sequence[Column], rows: Sequence[Row]
) -> TableResult:
    """Repackage a result block as a table, renaming ``name`` to ``text``.

    Rows keep their order and values. Each call returns copies, so editing
    a result never reaches the captured input.
    """
    return TableResult(
        columns=[TableColumn(text=c.name, type=c.type) for c in columns],
        rows=[copy.deepcopy(r) for r in rows],
        ref_id=query.ref_id,
        query=query.query,
    )
