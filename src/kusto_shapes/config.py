"""Parser configuration constants and YAML loading.

This module centralizes the column type vocabularies used to infer column
roles and the policy applied to unparseable timestamps. Adjust the defaults
here, or point the CLI at a YAML file to override them per deployment.

Example YAML:

    parser:
      time_types: [datetime]
      metric_types: [string]
      value_types: [int, long, real, double, decimal]
      timestamp_policy: strict
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Tuple

import yaml

from kusto_shapes.core.enums import ResultFormat, TimestampPolicy

# ============================================================================
# COLUMN ROLE VOCABULARIES
# ============================================================================

# First column of one of these types becomes the time axis
TIME_COLUMN_TYPES: Tuple[str, ...] = ("datetime",)

# First column of one of these types names the series
METRIC_COLUMN_TYPES: Tuple[str, ...] = ("string",)

# First column of one of these types supplies datapoint values
VALUE_COLUMN_TYPES: Tuple[str, ...] = ("int", "long", "real", "double")


# ============================================================================
# TIME CONVERSION
# ============================================================================

# "coerce": unparseable cells become NaN; "strict": raise InvalidTimestamp
DEFAULT_TIMESTAMP_POLICY = TimestampPolicy.COERCE


# ============================================================================
# SCHEMA SYNTHESIS
# ============================================================================

DEFAULT_DATABASE_NAME = "Default"
SCHEMA_PLUGINS: Tuple[str, ...] = ("pivot",)
UNKNOWN_FUNCTION_KIND = "Unknown"


@dataclass(frozen=True)
class ParserConfig:
    """Tunable parser settings.

    Attributes:
        time_types: Column type tags treated as the time axis.
        metric_types: Column type tags treated as series labels.
        value_types: Column type tags treated as datapoint values.
        timestamp_policy: Handling of unparseable time cells.
        time_series_format: resultFormat literal that selects time series output.
    """

    time_types: Tuple[str, ...] = TIME_COLUMN_TYPES
    metric_types: Tuple[str, ...] = METRIC_COLUMN_TYPES
    value_types: Tuple[str, ...] = VALUE_COLUMN_TYPES
    timestamp_policy: TimestampPolicy = DEFAULT_TIMESTAMP_POLICY
    time_series_format: str = ResultFormat.TIME_SERIES.value


DEFAULT_CONFIG = ParserConfig()


def _as_tuple(values: Iterable, key: str) -> Tuple[str, ...]:
    if isinstance(values, str) or not isinstance(values, (list, tuple)):
        raise ValueError(f"Config key '{key}' must be a list of type names")
    return tuple(str(v) for v in values)


def load_config(config_file: Path) -> ParserConfig:
    """Load a ParserConfig from YAML.

    Keys missing from the file keep their defaults.

    Args:
        config_file: Path to a YAML file with a top-level ``parser`` mapping.

    Returns:
        ParserConfig with overrides applied.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If a value has the wrong shape or the policy is unknown.

    Examples:
        >>> cfg = load_config(Path("config/parser.yaml"))
        >>> cfg.timestamp_policy
        <TimestampPolicy.COERCE: 'coerce'>
    """
    if not config_file.exists():
        raise FileNotFoundError(f"Config file not found: {config_file}")
    try:
        with config_file.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {config_file}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Config file {config_file} must contain a mapping")
    section = data.get("parser", {}) or {}
    if not isinstance(section, dict):
        raise ValueError(f"'parser' section in {config_file} must be a mapping")

    kwargs = {}
    for key in ("time_types", "metric_types", "value_types"):
        if key in section:
            kwargs[key] = _as_tuple(section[key], key)
    if "timestamp_policy" in section:
        raw_policy = str(section["timestamp_policy"]).lower()
        try:
            kwargs["timestamp_policy"] = TimestampPolicy(raw_policy)
        except ValueError as e:
            valid = ", ".join(p.value for p in TimestampPolicy)
            raise ValueError(
                f"Unknown timestamp_policy '{raw_policy}'. Valid policies: {valid}"
            ) from e
    if "time_series_format" in section:
        kwargs["time_series_format"] = str(section["time_series_format"])
    return ParserConfig(**kwargs)


__all__ = [
    "ParserConfig",
    "DEFAULT_CONFIG",
    "load_config",
    "TIME_COLUMN_TYPES",
    "METRIC_COLUMN_TYPES",
    "VALUE_COLUMN_TYPES",
    "DEFAULT_DATABASE_NAME",
    "SCHEMA_PLUGINS",
    "UNKNOWN_FUNCTION_KIND",
]
