"""Kusto Shapes: turn columnar query results into dashboard-ready shapes.

The package converts result blocks returned by a Kusto-style query engine
into time series or flat tables, derives variable candidates from them, and
synthesizes a simplified schema document from a metadata description.
The core is pure; the CLI under `interfaces/cli` handles file I/O.
"""

__all__ = [
    "__version__",
    "ResponseParser",
    "parse_schema_result",
]

__version__ = "0.4.0"

from .parsing.parser import ResponseParser  # noqa: E402
from .schema.synthesizer import parse_schema_result  # noqa: E402
