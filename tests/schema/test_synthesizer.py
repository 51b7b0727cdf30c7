"""Tests for schema synthesis from a metadata description."""

import pytest

from kusto_shapes.core.errors import MalformedMetadataError, UnknownProperty
from kusto_shapes.schema import (
    MetadataDescription,
    PropertyRegistry,
    SchemaSynthesizer,
    parse_schema_result,
)
from kusto_shapes.schema.models import EntityDefinition, QueryDefinition


def test_single_default_database_and_pivot_plugin(metadata_raw):
    doc = parse_schema_result(metadata_raw).to_dict()

    assert list(doc["Databases"]) == ["Default"]
    assert doc["Databases"]["Default"]["Name"] == "Default"
    assert doc["Plugins"] == [{"Name": "pivot"}]


def test_empty_metadata_still_has_default_database():
    doc = parse_schema_result({}).to_dict()
    assert doc == {
        "Plugins": [{"Name": "pivot"}],
        "Databases": {"Default": {"Name": "Default", "Tables": {}, "Functions": {}}},
    }


def test_tables_keyed_by_type_key_and_named_from_table_name(metadata_raw):
    tables = parse_schema_result(metadata_raw).to_dict()["Databases"]["Default"]["Tables"]

    assert list(tables) == ["requests", "traces"]
    assert tables["requests"]["Name"] == "AppRequests"
    assert tables["requests"]["OrderedColumns"] == [
        {"Name": "timestamp", "Type": "datetime"},
        {"Name": "name", "Type": "string"},
        {"Name": "duration", "Type": "real"},
    ]


def test_properties_resolve_through_global_registry(metadata_raw):
    """A property shared by two entities resolves to the same registry entry."""
    tables = parse_schema_result(metadata_raw).databases["Default"].tables
    assert tables["requests"].ordered_columns[0] == tables["traces"].ordered_columns[0]


def test_functions_keyed_by_function_name(metadata_raw):
    functions = parse_schema_result(metadata_raw).to_dict()["Databases"]["Default"]["Functions"]

    assert list(functions) == ["failedRequests", "slowRequests"]
    assert functions["failedRequests"] == {
        "Name": "failedRequests",
        "DocString": "Failed requests",
        "Body": "AppRequests | where Success == false",
        "Folder": "Reliability",
        "FunctionKind": "Unknown",
        "InputParameters": [],
        "OutputColumns": [],
    }


def test_unknown_property_aborts_synthesis(metadata_raw):
    metadata_raw["types"]["traces"]["properties"].append("severityLevel")

    with pytest.raises(UnknownProperty) as exc_info:
        parse_schema_result(metadata_raw)

    assert exc_info.value.property_name == "severityLevel"
    assert exc_info.value.table_key == "traces"
    assert "severityLevel" in str(exc_info.value)


def test_unknown_property_is_a_key_error():
    registry = PropertyRegistry({"a": "string"})
    with pytest.raises(KeyError):
        registry["b"]


def test_synthesizer_with_explicit_registry():
    synthesizer = SchemaSynthesizer(
        types=[EntityDefinition(key="t", table_name="T", properties=("x", "y"))],
        queries=[QueryDefinition(key="k", function_name="f", function_body="T | take 1")],
        properties=PropertyRegistry({"x": "long", "y": "dynamic"}),
    )
    doc = synthesizer.synthesize()

    table = doc.databases["Default"].tables["t"]
    assert [(c.name, c.type) for c in table.ordered_columns] == [("x", "long"), ("y", "dynamic")]
    fn = doc.databases["Default"].functions["f"]
    assert fn.function_kind == "Unknown"
    assert fn.input_parameters == [] and fn.output_columns == []


def test_duplicate_function_names_keep_last(metadata_raw):
    metadata_raw["queries"]["q-slow"]["analytics"]["functionName"] = "failedRequests"
    functions = parse_schema_result(metadata_raw).databases["Default"].functions

    assert list(functions) == ["failedRequests"]
    assert functions["failedRequests"].doc_string == "Slow requests"


def test_synthesis_is_repeatable(metadata_raw):
    meta = MetadataDescription.from_dict(metadata_raw)
    synthesizer = SchemaSynthesizer(meta.types, meta.queries, meta.properties)
    assert synthesizer.synthesize().to_dict() == synthesizer.synthesize().to_dict()


@pytest.mark.parametrize(
    "raw",
    [
        [],
        {"types": []},
        {"types": {"t": {"properties": []}}},
        {"types": {"t": {"analytics": {}, "properties": []}}},
        {"types": {"t": {"analytics": {"tableName": "T"}, "properties": "x"}}},
        {"queries": {"q": {"analytics": {"functionBody": "x"}}}},
        {"properties": {"p": {"analytics": {}}}},
        {"properties": []},
    ],
)
def test_malformed_metadata_rejected(raw):
    with pytest.raises(MalformedMetadataError):
        MetadataDescription.from_dict(raw)


def test_query_optional_fields_default_to_empty():
    meta = MetadataDescription.from_dict(
        {"queries": {"q": {"analytics": {"functionName": "f"}}}}
    )
    fn = SchemaSynthesizer(meta.types, meta.queries, meta.properties).synthesize()
    assert fn.databases["Default"].functions["f"].to_dict()["Body"] == ""
    assert fn.databases["Default"].functions["f"].folder == ""
