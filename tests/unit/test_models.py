"""
Tests for schema and load job models.
"""
import pytest
from pydantic import ValidationError

from gcs_bigquery_loader.models import (
    ColumnType,
    LoadOptions,
    QueryResult,
    SchemaColumn,
    TranscodeReport,
    WriteDisposition,
    column_names,
)


@pytest.mark.parametrize("field_type,expected", [
    ("STRING", ColumnType.STRING),
    ("INTEGER", ColumnType.INTEGER),
    ("INT64", ColumnType.INTEGER),
    ("BOOLEAN", ColumnType.BOOLEAN),
    ("bool", ColumnType.BOOLEAN),
    ("FLOAT64", ColumnType.OTHER),
    ("", ColumnType.OTHER),
])
def test_column_type_from_bigquery(field_type, expected):
    assert ColumnType.from_bigquery(field_type) == expected


def test_schema_column_accepts_member_or_name():
    assert SchemaColumn(name="a", type=ColumnType.BOOLEAN).type == ColumnType.BOOLEAN
    assert SchemaColumn(name="a", field_type="INT64").type == ColumnType.INTEGER


def test_schema_column_is_immutable():
    column = SchemaColumn(name="a", field_type="STRING")

    with pytest.raises(ValidationError):
        column.name = "b"


def test_column_names_keep_order():
    schema = (SchemaColumn(name="b"), SchemaColumn(name="a"))

    assert column_names(schema) == ["b", "a"]


def test_load_options_defaults():
    options = LoadOptions()

    assert options.source_format == "CSV"
    assert options.skip_leading_rows == 1
    assert options.autodetect is True
    assert options.field_delimiter == ","
    assert options.write_disposition == WriteDisposition.WRITE_APPEND


def test_load_options_for_extension():
    assert LoadOptions.for_extension(".csv").field_delimiter == ","
    assert LoadOptions.for_extension(".tsv").field_delimiter == "\t"

    with pytest.raises(KeyError):
        LoadOptions.for_extension(".json")


def test_load_options_extension_is_case_sensitive():
    with pytest.raises(KeyError):
        LoadOptions.for_extension(".CSV")


def test_load_options_reject_multi_character_delimiter():
    with pytest.raises(ValidationError, match="single character"):
        LoadOptions(field_delimiter="||")


def test_load_options_accept_camel_case_aliases():
    options = LoadOptions(fieldDelimiter="\t", skipLeadingRows=0)

    assert options.field_delimiter == "\t"
    assert options.skip_leading_rows == 0


def test_query_result_shapes():
    error = RuntimeError("x")

    assert QueryResult.success([{"a": 1}]).ok
    assert not QueryResult.failure(error).ok
    assert QueryResult.failure(error).error is error


def test_transcode_report_totals():
    report = TranscodeReport()
    report.record_passthrough("a")
    report.record_passthrough("a")
    report.record_passthrough("b")

    assert report.passthrough_counts == {"a": 2, "b": 1}
    assert report.total_passthrough == 3
