"""Schema data models.

Input side (validated metadata description):
- EntityDefinition: a table-like entity and its declared property names
- QueryDefinition: a saved query exposed as a function
- PropertyRegistry: global property name -> column type lookup
- MetadataDescription: the three namespaces together

Output side (schema document, PascalCase on the wire):
- SchemaColumn, SchemaTable, FunctionDescriptor, SchemaDatabase, SchemaDocument
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from kusto_shapes.config import UNKNOWN_FUNCTION_KIND
from kusto_shapes.core.errors import MalformedMetadataError, UnknownProperty


def _analytics(entry: Any, namespace: str, key: str) -> Mapping:
    if not isinstance(entry, Mapping):
        raise MalformedMetadataError(f"{namespace}['{key}'] must be a mapping")
    analytics = entry.get("analytics")
    if not isinstance(analytics, Mapping):
        raise MalformedMetadataError(f"{namespace}['{key}'] is missing its 'analytics' mapping")
    return analytics


def _required(mapping: Mapping, field_name: str, where: str) -> Any:
    if field_name not in mapping:
        raise MalformedMetadataError(f"{where} is missing required field '{field_name}'")
    return mapping[field_name]


@dataclass(frozen=True)
class EntityDefinition:
    key: str
    table_name: str
    properties: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, key: str, data: Any) -> "EntityDefinition":
        analytics = _analytics(data, "types", key)
        props = data.get("properties", []) or []
        if not isinstance(props, list):
            raise MalformedMetadataError(f"types['{key}'].properties must be a list")
        return cls(
            key=key,
            table_name=str(_required(analytics, "tableName", f"types['{key}'].analytics")),
            properties=tuple(str(p) for p in props),
        )


@dataclass(frozen=True)
class QueryDefinition:
    key: str
    function_name: str
    function_body: str = ""
    display_name: str = ""
    category: str = ""

    @classmethod
    def from_dict(cls, key: str, data: Any) -> "QueryDefinition":
        analytics = _analytics(data, "queries", key)
        where = f"queries['{key}'].analytics"
        return cls(
            key=key,
            function_name=str(_required(analytics, "functionName", where)),
            function_body=str(analytics.get("functionBody", "")),
            display_name=str(data.get("displayName", "")),
            category=str(data.get("category", "")),
        )


class PropertyRegistry(Mapping):
    """Global lookup of column types by property name.

    Properties are shared by all entities, so lookup is never scoped to the
    entity that declares them.
    """

    def __init__(self, column_types: Optional[Mapping[str, str]] = None) -> None:
        self._column_types: Dict[str, str] = dict(column_types or {})

    @classmethod
    def from_dict(cls, data: Any) -> "PropertyRegistry":
        if not isinstance(data, Mapping):
            raise MalformedMetadataError("'properties' must be a mapping")
        column_types = {}
        for name, entry in data.items():
            analytics = _analytics(entry, "properties", name)
            column_types[str(name)] = str(
                _required(analytics, "columnType", f"properties['{name}'].analytics")
            )
        return cls(column_types)

    def column_type(self, property_name: str, *, table_key: Optional[str] = None) -> str:
        """Return the column type of a property.

        Raises:
            UnknownProperty: If the property is not registered.
        """
        try:
            return self._column_types[property_name]
        except KeyError:
            raise UnknownProperty(property_name, table_key) from None

    def __getitem__(self, property_name: str) -> str:
        return self.column_type(property_name)

    def __iter__(self) -> Iterator[str]:
        return iter(self._column_types)

    def __len__(self) -> int:
        return len(self._column_types)


@dataclass(frozen=True)
class MetadataDescription:
    """Validated metadata description used for schema synthesis."""

    types: Tuple[EntityDefinition, ...] = ()
    queries: Tuple[QueryDefinition, ...] = ()
    properties: PropertyRegistry = field(default_factory=PropertyRegistry)

    @classmethod
    def from_dict(cls, data: Any) -> "MetadataDescription":
        """Validate a raw ``{types, queries, properties}`` document.

        Missing namespaces default to empty. Cross references between types
        and properties are not checked here; synthesis reports them.

        Raises:
            MalformedMetadataError: If a namespace or entry has the wrong shape.
        """
        if not isinstance(data, Mapping):
            raise MalformedMetadataError(
                f"Metadata description must be a mapping, got {type(data).__name__}"
            )
        for namespace in ("types", "queries", "properties"):
            value = data.get(namespace)
            if value is not None and not isinstance(value, Mapping):
                raise MalformedMetadataError(f"'{namespace}' must be a mapping")
        types = data.get("types") or {}
        queries = data.get("queries") or {}
        return cls(
            types=tuple(EntityDefinition.from_dict(str(k), v) for k, v in types.items()),
            queries=tuple(QueryDefinition.from_dict(str(k), v) for k, v in queries.items()),
            properties=PropertyRegistry.from_dict(data.get("properties") or {}),
        )


@dataclass(frozen=True)
class SchemaColumn:
    name: str
    type: str

    def to_dict(self) -> Dict[str, str]:
        return {"Name": self.name, "Type": self.type}


@dataclass
class SchemaTable:
    name: str
    ordered_columns: List[SchemaColumn] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "Name": self.name,
            "OrderedColumns": [c.to_dict() for c in self.ordered_columns],
        }


@dataclass
class FunctionDescriptor:
    """A saved query exposed as a schema function.

    Parameters and output columns are not described by the metadata source,
    so they are always empty and the kind is always "Unknown".
    """

    name: str
    body: str = ""
    doc_string: str = ""
    folder: str = ""
    function_kind: str = UNKNOWN_FUNCTION_KIND
    input_parameters: List[Any] = field(default_factory=list)
    output_columns: List[Any] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "Name": self.name,
            "DocString": self.doc_string,
            "Body": self.body,
            "Folder": self.folder,
            "FunctionKind": self.function_kind,
            "InputParameters": list(self.input_parameters),
            "OutputColumns": list(self.output_columns),
        }


@dataclass
class SchemaDatabase:
    name: str
    tables: Dict[str, SchemaTable] = field(default_factory=dict)
    functions: Dict[str, FunctionDescriptor] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "Name": self.name,
            "Tables": {k: t.to_dict() for k, t in self.tables.items()},
            "Functions": {k: f.to_dict() for k, f in self.functions.items()},
        }


@dataclass
class SchemaDocument:
    databases: Dict[str, SchemaDatabase] = field(default_factory=dict)
    plugins: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "Plugins": [{"Name": p} for p in self.plugins],
            "Databases": {k: db.to_dict() for k, db in self.databases.items()},
        }


__all__ = [
    "EntityDefinition",
    "QueryDefinition",
    "PropertyRegistry",
    "MetadataDescription",
    "SchemaColumn",
    "SchemaTable",
    "FunctionDescriptor",
    "SchemaDatabase",
    "SchemaDocument",
]
