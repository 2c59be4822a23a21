"""
Gradio UI for BallotBase.

This module provides a web UI for exporting voter lists and generating
designating petitions.
"""

import argparse
import logging
import sys
from typing import Any, List, Optional, Sequence

import gradio as gr

from ballotbase.catalog import fields_in_category, get_categories
from ballotbase.config import load_config
from ballotbase.log import configure_logging
from ballotbase.model import BallotBaseError
from ballotbase.petition import Candidate, CommitteeMember, PetitionWizard, write_petition
from ballotbase.readers import load_records
from ballotbase.selection import FieldSelection
from ballotbase.writers import export_voters

logger = logging.getLogger(__name__)


def _file_path(upload: Any) -> Optional[str]:
    if upload is None:
        return None
    return upload if isinstance(upload, str) else getattr(upload, "name", None)


def build_selection(export_all: bool, category_values: Sequence[Optional[List[str]]]) -> FieldSelection:
    """
    Build a selection from the per-category checkbox groups, in catalog order.
    """
    selection = FieldSelection(export_all=export_all)
    for values in category_values:
        for key in values or []:
            if not selection.includes(key):
                selection.toggle(key)
    return selection


def export_handler(upload: Any, title: str, export_all: bool, fmt: str, *category_values) -> Optional[str]:
    """
    Handle export requests.

    Returns:
        Path of the generated file for download
    """
    path = _file_path(upload)
    if not path:
        gr.Warning("Please upload a voter records file.")
        return None

    selection = build_selection(export_all, category_values)
    if selection.is_empty():
        gr.Warning("Select at least one field to export.")
        return None

    try:
        config = load_config()
        records = load_records(path)
        if not records:
            gr.Warning("No data to export.")
            return None
        return export_voters(records, selection, title or "voters", fmt, config)
    except BallotBaseError as e:
        logger.error(f"Export failed: {e}")
        raise gr.Error(f"Export failed: {e}")


def _rows(table: Any) -> List[List[str]]:
    """Normalize Dataframe input to a list of string rows, dropping blank rows."""
    if table is None:
        return []
    if hasattr(table, "values"):
        table = table.values.tolist()
    rows = []
    for row in table:
        cells = ["" if cell is None else str(cell).strip() for cell in row]
        if any(cells):
            rows.append(cells)
    return rows


def petition_handler(
    party: str,
    election_date: str,
    election_year: str,
    candidates: Any,
    committee: Any,
    show_witness: bool,
    show_notary: bool,
    signature_count: float,
) -> Optional[str]:
    """
    Handle petition generation requests.

    Returns:
        Path of the generated petition for download
    """
    try:
        config = load_config()
        wizard = PetitionWizard()
        wizard.update(
            party=party or "",
            election_date=election_date or "",
            election_year=str(election_year or ""),
            candidates=[
                Candidate(name=row[0], position=row[1], residence=row[2]).model_dump()
                for row in (r + ["", ""] for r in _rows(candidates))
            ],
            committee_members=[
                CommitteeMember(name=row[0], residence=row[1]).model_dump()
                for row in (r + [""] for r in _rows(committee))
            ],
            show_witness=bool(show_witness),
            show_notary=bool(show_notary),
            signature_count=int(signature_count or 0),
        )
        data = wizard.finish()
        return write_petition(data, config.export.output_dir, config.petition)
    except BallotBaseError as e:
        logger.error(f"Petition generation failed: {e}")
        raise gr.Error(str(e))


def create_ui() -> gr.Blocks:
    """
    Create the Gradio UI.

    Returns:
        Gradio Blocks interface
    """
    with gr.Blocks(title="BallotBase") as ui:
        gr.Markdown("# BallotBase")

        with gr.Tabs():
            with gr.TabItem("Export Voter Data"):
                with gr.Row():
                    with gr.Column(scale=2):
                        records_input = gr.File(
                            label="Voter records",
                            file_types=[".json", ".ndjson", ".csv"],
                            type="filepath",
                        )
                        title_input = gr.Textbox(label="List title", placeholder="My list")
                        export_all = gr.Checkbox(label="Export all fields", value=False)
                    with gr.Column(scale=3):
                        category_groups = []
                        for category, label in get_categories():
                            category_groups.append(gr.CheckboxGroup(
                                label=label,
                                choices=[(d.label, d.key) for d in fields_in_category(category)],
                            ))

                with gr.Row():
                    csv_button = gr.Button("Export CSV")
                    pdf_button = gr.Button("Export PDF", variant="primary")
                export_output = gr.File(label="Download")

                csv_format = gr.State("csv")
                pdf_format = gr.State("pdf")
                csv_button.click(
                    fn=export_handler,
                    inputs=[records_input, title_input, export_all, csv_format] + category_groups,
                    outputs=export_output,
                )
                pdf_button.click(
                    fn=export_handler,
                    inputs=[records_input, title_input, export_all, pdf_format] + category_groups,
                    outputs=export_output,
                )

            with gr.TabItem("Designating Petition"):
                with gr.Row():
                    party_input = gr.Textbox(label="Party")
                    date_input = gr.Textbox(label="Election date", placeholder="June 24")
                    year_input = gr.Textbox(label="Election year", placeholder="2025")
                candidates_input = gr.Dataframe(
                    headers=["Name", "Office or Position", "Residence"],
                    col_count=(3, "fixed"),
                    type="array",
                    label="Candidates",
                )
                committee_input = gr.Dataframe(
                    headers=["Name", "Residence"],
                    col_count=(2, "fixed"),
                    type="array",
                    label="Committee to Fill Vacancies (at least three)",
                )
                with gr.Row():
                    witness_input = gr.Checkbox(label="Include Witness Statement", value=True)
                    notary_input = gr.Checkbox(label="Include Notary Section", value=False)
                    signatures_input = gr.Number(label="Number of Signature Lines", value=10, precision=0, minimum=0)
                petition_button = gr.Button("Generate Petition", variant="primary")
                petition_output = gr.File(label="Download")

                petition_button.click(
                    fn=petition_handler,
                    inputs=[
                        party_input,
                        date_input,
                        year_input,
                        candidates_input,
                        committee_input,
                        witness_input,
                        notary_input,
                        signatures_input,
                    ],
                    outputs=petition_output,
                )

    return ui


def main() -> int:
    """
    Main entry point.

    Returns:
        Exit code
    """
    parser = argparse.ArgumentParser(description="BallotBase UI")
    parser.add_argument("--port", type=int, default=7860, help="Port to run the UI on")
    parser.add_argument("--share", action="store_true", help="Create a public link")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], help="Logging level")

    args = parser.parse_args()

    # Set up logging
    configure_logging(level=args.log_level)

    try:
        # Create the UI
        ui = create_ui()

        # Launch the UI
        ui.launch(server_port=args.port, share=args.share)

        return 0
    except Exception as e:
        logger.exception(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
