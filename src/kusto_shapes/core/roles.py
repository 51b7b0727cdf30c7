from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from kusto_shapes.config import DEFAULT_CONFIG, ParserConfig
from .errors import MissingTimeColumn
from .models import Column

UNSET = -1


@dataclass(frozen=True)
class ColumnRoles:
    """Positional indices of the time, metric and value columns (-1 when absent)."""

    time_index: int = UNSET
    metric_index: int = UNSET
    value_index: int = UNSET

    @property
    def has_metric(self) -> bool:
        return self.metric_index > UNSET

    @property
    def has_value(self) -> bool:
        return self.value_index > UNSET


def get_column_roles(
    columns: Sequence[Column], *, config: Optional[ParserConfig] = None
) -> ColumnRoles:
    """Return the first column index for each role, scanning left to right.

    A later column of an already assigned role is ignored.

    Raises:
        MissingTimeColumn: If no column has a time type.
    """
    cfg = config or DEFAULT_CONFIG
    time_index = metric_index = value_index = UNSET
    for i, col in enumerate(columns):
        if time_index == UNSET and col.type in cfg.time_types:
            time_index = i
        if metric_index == UNSET and col.type in cfg.metric_types:
            metric_index = i
        if value_index == UNSET and col.type in cfg.value_types:
            value_index = i

    if time_index == UNSET:
        raise MissingTimeColumn()

    return ColumnRoles(time_index=time_index, metric_index=metric_index, value_index=value_index)


__all__ = ["ColumnRoles", "get_column_roles", "UNSET"]
