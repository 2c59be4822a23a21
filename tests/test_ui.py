"""
Tests for the Gradio UI handlers.
"""

import os
from unittest.mock import patch

import gradio as gr
import pytest

from ballotbase.ui import build_selection, export_handler, petition_handler


def test_build_selection_keeps_catalog_order():
    """Checked boxes are collected category by category."""
    selection = build_selection(False, [["last_name", "first_name"], None, ["zip_code"]])

    assert selection.fields == ["last_name", "first_name", "zip_code"]
    assert not selection.export_all


def test_build_selection_export_all():
    """The export-all box alone is a valid selection."""
    selection = build_selection(True, [[], []])

    assert selection.export_all
    assert not selection.is_empty()


@patch("ballotbase.ui.gr.Warning")
def test_export_handler_requires_file(mock_warning):
    """No upload means no export."""
    assert export_handler(None, "List", False, "csv", ["first_name"]) is None
    mock_warning.assert_called_once_with("Please upload a voter records file.")


@patch("ballotbase.ui.gr.Warning")
def test_export_handler_requires_fields(mock_warning, records_file):
    """An empty selection is rejected before anything is read."""
    assert export_handler(records_file, "List", False, "csv", [], None) is None
    mock_warning.assert_called_once_with("Select at least one field to export.")


@patch("ballotbase.ui.gr.Warning")
@patch("ballotbase.ui.load_config")
def test_export_handler_no_records(mock_load_config, mock_warning, sample_config, tmp_path):
    """An empty records file gives a warning."""
    mock_load_config.return_value = sample_config
    path = tmp_path / "empty.json"
    path.write_text("[]", encoding="utf-8")

    assert export_handler(str(path), "List", True, "csv") is None
    mock_warning.assert_called_once_with("No data to export.")


@patch("ballotbase.ui.load_config")
def test_export_handler_csv(mock_load_config, sample_config, records_file):
    """Test exporting from the UI."""
    mock_load_config.return_value = sample_config

    path = export_handler(records_file, "Canvass", False, "csv", ["first_name"], ["zip_code"])

    assert path == os.path.join(sample_config.export.output_dir, "Canvass_voters.csv")
    with open(path, encoding="utf-8") as f:
        assert f.read() == "First Name,Zip Code\nJANE,10451\nJOHN,10452"


@patch("ballotbase.ui.load_config")
def test_export_handler_default_title(mock_load_config, sample_config, records_file):
    """A blank title falls back to "voters"."""
    mock_load_config.return_value = sample_config

    path = export_handler(records_file, "", False, "pdf", ["last_name"])

    assert os.path.basename(path) == "voters_voters.pdf"


@patch("ballotbase.ui.load_config")
def test_export_handler_bad_file(mock_load_config, sample_config, tmp_path):
    """Unreadable input surfaces as a Gradio error."""
    mock_load_config.return_value = sample_config
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(gr.Error):
        export_handler(str(path), "List", True, "csv")


def test_export_handler_malformed_config(records_file, tmp_path, monkeypatch):
    """A broken config.yaml surfaces as a Gradio error with its message."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / "config.yaml").write_text("pdf:\n  font_size: large\n")

    with pytest.raises(gr.Error) as excinfo:
        export_handler(records_file, "List", True, "csv")

    assert "font_size" in str(excinfo.value)


def test_petition_handler_malformed_config(tmp_path, monkeypatch):
    """Config errors in the petition tab are reported the same way."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / "config.yaml").write_text("export: [unclosed\n")

    with pytest.raises(gr.Error) as excinfo:
        petition_handler("Green", "June 24", "2025", [], [], True, False, 10)

    assert "Error parsing configuration file" in str(excinfo.value)


@patch("ballotbase.ui.load_config")
def test_petition_handler(mock_load_config, sample_config):
    """Test generating a petition from form values."""
    mock_load_config.return_value = sample_config

    path = petition_handler(
        "Democratic",
        "June 24",
        2025,
        [["Jane Q Doe", "Member of Assembly", "123 MAIN ST, BRONX, NY 10451"], ["", "", ""]],
        [["Ann Lee", "1 First Ave"], ["Bo Chan", "2 Second Ave"], ["Cy Ortiz", "3 Third Ave"]],
        True,
        False,
        5.0,
    )

    assert path == os.path.join(sample_config.export.output_dir, "designating_petition_Democratic_2025.pdf")
    assert os.path.exists(path)


@patch("ballotbase.ui.load_config")
def test_petition_handler_incomplete(mock_load_config, sample_config):
    """Missing committee members raise a Gradio error."""
    mock_load_config.return_value = sample_config

    with pytest.raises(gr.Error) as excinfo:
        petition_handler("Green", "June 24", "2025", [["A", "B", "C"]], [], True, False, 10)

    assert "At least 3 committee members are required" in str(excinfo.value)
    assert not os.path.exists(sample_config.export.output_dir)
