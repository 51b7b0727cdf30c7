"""Tests for variable extraction."""

from conftest import TIME_METRIC_VALUE_COLUMNS, make_block
from kusto_shapes.core.models import SeriesBucket, TableColumn, TableResult, Variable
from kusto_shapes.parsing.parser import ResponseParser
from kusto_shapes.parsing.variables import extract_variables, flatten_deep


def test_one_variable_per_cell():
    raw = make_block(
        [{"name": "Host", "type": "string"}, {"name": "Region", "type": "string"}],
        [["web-1", "eu"], ["web-2", "us"]],
        result_format="table",
    )
    variables = ResponseParser([raw]).parse_to_variables()

    assert [v.text for v in variables] == ["web-1", "eu", "web-2", "us"]
    assert all(v.text == v.value for v in variables)


def test_duplicates_are_kept():
    raw = make_block(
        [{"name": "Host", "type": "string"}],
        [["web-1"], ["web-1"]],
        result_format="table",
    )
    variables = ResponseParser([raw]).parse_to_variables()
    assert variables == [Variable("web-1", "web-1"), Variable("web-1", "web-1")]


def test_nested_cells_are_flattened_in_traversal_order():
    table = TableResult(
        columns=[TableColumn("Tags", "dynamic")],
        rows=[[["a", ["b", ["c"]]], "d"], [[]]],
    )
    variables = extract_variables([table])
    assert [v.value for v in variables] == ["a", "b", "c", "d"]


def test_series_buckets_contribute_no_variables():
    bucket = SeriesBucket(target="cpu", datapoints=[[1, 0]], ref_id="A", query="q1")
    assert extract_variables([bucket]) == []


def test_time_series_results_yield_no_variables():
    raw = make_block(TIME_METRIC_VALUE_COLUMNS, [["2020-01-01T00:00:00Z", "cpu", 1]])
    assert ResponseParser([raw]).parse_to_variables() == []


def test_variables_across_multiple_tables():
    first = make_block(
        [{"name": "Host", "type": "string"}], [["web-1"]], ref_id="A", result_format="table"
    )
    second = make_block(
        [{"name": "Count", "type": "long"}], [[3], [4]], ref_id="B", result_format="table"
    )
    variables = ResponseParser([first, second]).parse_to_variables()
    assert [v.to_dict() for v in variables] == [
        {"text": "web-1", "value": "web-1"},
        {"text": 3, "value": 3},
        {"text": 4, "value": 4},
    ]


def test_flatten_deep_keeps_strings_and_mappings_whole():
    assert list(flatten_deep(["ab", ("c", [{"k": 1}])])) == ["ab", "c", {"k": 1}]
    assert list(flatten_deep("abc")) == ["abc"]

