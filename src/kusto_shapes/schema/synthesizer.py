"""Schema synthesis.

Builds a single-database schema document for autocomplete and
introspection from a metadata description. Table columns are resolved
through the global property registry; saved queries become functions.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from kusto_shapes.config import DEFAULT_DATABASE_NAME, SCHEMA_PLUGINS
from .models import (
    EntityDefinition,
    FunctionDescriptor,
    MetadataDescription,
    PropertyRegistry,
    QueryDefinition,
    SchemaColumn,
    SchemaDatabase,
    SchemaDocument,
    SchemaTable,
)


logger = logging.getLogger(__name__)


class SchemaSynthesizer:
    """Synthesize a SchemaDocument from entity and query definitions.

    The property registry is passed in explicitly, so synthesis depends on
    nothing but its inputs.

    Examples:
        >>> meta = MetadataDescription.from_dict(raw)
        >>> doc = SchemaSynthesizer(meta.types, meta.queries, meta.properties).synthesize()
        >>> list(doc.to_dict()["Databases"])
        ['Default']
    """

    def __init__(
        self,
        types: Iterable[EntityDefinition],
        queries: Iterable[QueryDefinition],
        properties: PropertyRegistry,
    ) -> None:
        self.types = tuple(types)
        self.queries = tuple(queries)
        self.properties = properties

    def synthesize(self) -> SchemaDocument:
        """Return the schema document.

        Raises:
            UnknownProperty: If a table declares a property missing from the registry.
        """
        database = SchemaDatabase(
            name=DEFAULT_DATABASE_NAME,
            tables=self.create_tables(),
            functions=self.create_functions(),
        )
        return SchemaDocument(
            databases={DEFAULT_DATABASE_NAME: database},
            plugins=list(SCHEMA_PLUGINS),
        )

    def create_tables(self) -> Dict[str, SchemaTable]:
        tables: Dict[str, SchemaTable] = {}
        for entity in self.types:
            table = SchemaTable(name=entity.table_name)
            for prop in entity.properties:
                table.ordered_columns.append(self.find_column(prop, table_key=entity.key))
            tables[entity.key] = table
        logger.debug("Synthesized %d tables", len(tables))
        return tables

    def find_column(self, property_name: str, *, table_key: Optional[str] = None) -> SchemaColumn:
        return SchemaColumn(
            name=property_name,
            type=self.properties.column_type(property_name, table_key=table_key),
        )

    def create_functions(self) -> Dict[str, FunctionDescriptor]:
        # keyed by function name, not by the query's key
        functions: Dict[str, FunctionDescriptor] = {}
        for q in self.queries:
            if q.function_name in functions:
                logger.warning(
                    "Function name %r is declared by more than one query; keeping the last (%s)",
                    q.function_name,
                    q.key,
                )
            functions[q.function_name] = FunctionDescriptor(
                name=q.function_name,
                body=q.function_body,
                doc_string=q.display_name,
                folder=q.category,
            )
        logger.debug("Synthesized %d functions", len(functions))
        return functions


def parse_schema_result(
    metadata: Union[MetadataDescription, Mapping[str, Any]],
) -> SchemaDocument:
    """Validate a raw metadata document (if needed) and synthesize its schema.

    Raises:
        MalformedMetadataError: If the raw document has the wrong shape.
        UnknownProperty: If a table declares an unregistered property.
    """
    if not isinstance(metadata, MetadataDescription):
        metadata = MetadataDescription.from_dict(metadata)
    return SchemaSynthesizer(metadata.types, metadata.queries, metadata.properties).synthesize()


__all__ = ["SchemaSynthesizer", "parse_schema_result"]
