"""Schema synthesis from a metadata description.

Public API:
    SchemaSynthesizer: builds a SchemaDocument from entity, query and property definitions
    parse_schema_result: one-call synthesis from a raw metadata document
    MetadataDescription, PropertyRegistry: validated inputs
    SchemaDocument: output document
"""

from __future__ import annotations

from .models import MetadataDescription, PropertyRegistry, SchemaDocument
from .synthesizer import SchemaSynthesizer, parse_schema_result

__all__ = [
    "SchemaSynthesizer",
    "parse_schema_result",
    "MetadataDescription",
    "PropertyRegistry",
    "SchemaDocument",
]
