"""
Tests for the document assembler.
"""

import datetime

import pytest

from ballotbase.assembler import (
    assemble,
    assemble_job,
    cell_value,
    header_for,
    humanize_field,
    resolve_fields,
)
from ballotbase.model import ExportJob
from ballotbase.selection import FieldSelection


def test_assemble_basic_example():
    """Test the two-field example."""
    records = [{"first_name": "Jane", "last_name": "Doe"}]
    table = assemble(records, ["first_name", "last_name"])

    assert table.headers == ["First Name", "Last Name"]
    assert table.rows == [["Jane", "Doe"]]
    assert table.fields == ["first_name", "last_name"]


def test_assemble_row_lengths_match_headers(sample_voters):
    """Every row has exactly one cell per header."""
    fields = ["first_name", "unit_no", "not_a_field", "zip_code"]
    table = assemble(sample_voters, fields)

    assert table.column_count == len(fields)
    assert table.row_count == len(sample_voters)
    for row in table.rows:
        assert len(row) == len(fields)


def test_assemble_missing_and_null_values_are_empty(sample_voters):
    """Missing keys and None values become empty strings."""
    table = assemble(sample_voters, ["suffix", "not_a_field", "unit_no"])

    assert table.rows[0] == ["", "", "4B"]
    assert table.rows[1] == ["", "", ""]


def test_assemble_wildcard_uses_first_record_keys():
    """Wildcard mode takes headers from the first record, in order."""
    records = [
        {"zip_code": "10451", "first_name": "Jane", "county": "bronx"},
        {"first_name": "John", "extra": "ignored"},
    ]
    table = assemble(records, [], export_all=True)

    assert table.fields == ["zip_code", "first_name", "county"]
    assert table.headers == ["Zip Code", "First Name", "County"]
    assert table.rows[1] == ["", "John", ""]


def test_assemble_wildcard_from_selection():
    """A FieldSelection in wildcard mode overrides its field list."""
    records = [{"a_b": 1, "c": 2}]
    selection = FieldSelection(["c"], export_all=True)
    table = assemble(records, selection)

    assert table.fields == ["a_b", "c"]
    assert table.rows == [["1", "2"]]


def test_assemble_no_records_gives_header_only():
    """Zero records produce headers and no rows."""
    table = assemble([], ["first_name", "last_name"])

    assert table.headers == ["First Name", "Last Name"]
    assert table.rows == []
    assert not table.is_empty()


def test_assemble_empty_selection_is_noop(sample_voters):
    """An empty selection without wildcard returns an empty table."""
    table = assemble(sample_voters, [])

    assert table.is_empty()
    assert table.headers == []
    assert table.rows == []


def test_assemble_wildcard_with_no_records_is_empty():
    """Wildcard mode has no keys to use when there are no records."""
    assert assemble([], None, export_all=True).is_empty()


def test_assemble_is_deterministic(sample_voters):
    """Identical inputs produce identical output."""
    fields = ["last_name", "first_name", "zip_code"]
    first = assemble(sample_voters, fields)
    second = assemble(sample_voters, fields)

    assert first.headers == second.headers
    assert first.rows == second.rows


def test_resolve_fields_keeps_order_and_drops_repeats():
    """Repeated keys keep their first position."""
    assert resolve_fields([], ["b", "a", "b", "c"]) == ["b", "a", "c"]


def test_humanize_field():
    """Test header humanization."""
    assert humanize_field("first_name") == "First Name"
    assert humanize_field("state_senate_district") == "State Senate District"
    assert humanize_field("county") == "County"


def test_header_for_catalog_style():
    """Catalog style uses catalog labels and falls back to humanized keys."""
    assert header_for("middle", "catalog") == "Middle Name"
    assert header_for("enrolled_party", "catalog") == "Party"
    assert header_for("state_voter_id", "catalog") == "State Voter Id"
    assert header_for("middle") == "Middle"


def test_cell_value_conversions():
    """Test value conversion for cells."""
    assert cell_value({"n": 0}, "n") == "0"
    assert cell_value({"flag": False}, "flag") == "False"
    assert cell_value({"d": datetime.date(2024, 11, 5)}, "d") == "2024-11-05"
    assert cell_value({"v": None}, "v") == ""
    assert cell_value({}, "v") == ""


def test_assemble_job_uses_header_style(sample_voters):
    """ExportJob assembly honors the header style."""
    job = ExportJob(records=sample_voters, selection=["middle"], title="List")

    assert assemble_job(job).headers == ["Middle"]
    assert assemble_job(job, "catalog").headers == ["Middle Name"]


@pytest.mark.parametrize("selection", [["first_name"], ["first_name", "last_name", "zip_code"]])
def test_assemble_header_count_matches_selection(sample_voters, selection):
    """Header length equals the selection size."""
    table = assemble(sample_voters, selection)
    assert len(table.headers) == len(selection)
    assert all(len(row) == len(selection) for row in table.rows)
