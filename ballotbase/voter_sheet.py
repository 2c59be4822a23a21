"""
Single-voter record sheet.
"""

import io
import os
from typing import List, Optional, Tuple

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas as pdf_canvas

from ballotbase.config import PdfConfig
from ballotbase.log import get_logger
from ballotbase.model import ExportError, RenderError, VoterRecord
from ballotbase.utils import calculate_age, format_date
from ballotbase.writers import draw_brand, save_bytes

logger = get_logger(__name__)

Section = Tuple[str, List[Tuple[str, str]]]

LINE_HEIGHT = 7  # mm
BOTTOM_LIMIT = 20  # mm from the bottom edge


def _join(*parts: Optional[str]) -> str:
    return " ".join(str(p) for p in parts if p).strip()


def _section(title: str, pairs: List[Tuple[str, Optional[str]]]) -> Section:
    return title, [(label, str(value)) for label, value in pairs if value]


def build_voter_sections(voter: VoterRecord) -> List[Section]:
    """
    Group a voter's fields into labelled sections, dropping empty values.

    Args:
        voter: Voter record

    Returns:
        List of (section title, [(label, value), ...])
    """
    dob = voter.get("date_of_birth")
    age = calculate_age(dob)

    unit = None
    if voter.get("unit_no"):
        unit = f"{voter.get('aptunit_type') or 'Unit'} {voter['unit_no']}"

    zip_code = None
    if voter.get("zip_code"):
        zip_code = str(voter["zip_code"])
        if voter.get("zip_four"):
            zip_code += f"-{voter['zip_four']}"

    return [
        _section("Personal Information", [
            ("Name", _join(voter.get("first_name"), voter.get("middle"), voter.get("last_name"), voter.get("suffix"))),
            ("Date of Birth", format_date(dob) if dob else None),
            ("Age", str(age) if age is not None else None),
            ("Gender", voter.get("gender")),
            ("Party", voter.get("enrolled_party")),
            ("Voter Status", voter.get("voter_status")),
            ("County Voter No.", voter.get("county_voter_no")),
        ]),
        _section("Address Information", [
            ("Residence", _join(
                voter.get("house"),
                voter.get("house_suffix"),
                voter.get("pre_st_direction"),
                voter.get("street_name"),
                voter.get("post_st_direction"),
            )),
            ("Unit", unit),
            ("City", voter.get("residence_city")),
            ("ZIP", zip_code),
        ]),
        _section("District Information", [
            ("Election District", voter.get("election_district")),
            ("Legislative District", voter.get("legislative_district")),
            ("Congressional District", voter.get("congressional_district")),
            ("Senate District", voter.get("state_senate_district")),
            ("Assembly District", voter.get("assembly_district")),
            ("Ward", voter.get("ward")),
        ]),
        _section("Voting History", [
            ("Last Date Voted", voter.get("last_date_voted")),
            ("Last Year Voted", voter.get("last_year_voted")),
            ("Last County Voted", voter.get("last_county_voted")),
            ("Voter History", voter.get("voter_history")),
        ]),
        _section("Registration Information", [
            ("Application Date", voter.get("application_date")),
            ("Application Source", voter.get("application_source")),
            ("Previous Name", voter.get("last_registered_name")),
            ("Previous Address", voter.get("last_registered_address")),
        ]),
    ]


def voter_record_filename(voter: VoterRecord) -> str:
    last = voter.get("last_name") or "unknown"
    first = voter.get("first_name") or "unknown"
    return f"voter_record_{last}_{first}.pdf".replace("/", "_")


def render_voter_record(voter: VoterRecord, cfg: Optional[PdfConfig] = None) -> bytes:
    """
    Render one voter's record sheet as PDF.

    Raises:
        RenderError: If the document cannot be rendered
    """
    cfg = cfg or PdfConfig()
    _, height = A4
    buffer = io.BytesIO()

    try:
        c = pdf_canvas.Canvas(buffer, pagesize=A4, invariant=1)
        y = 20

        draw_brand(c, 20 * mm, height - y * mm, cfg)
        y += 20

        c.setFont("Helvetica", 16)
        c.drawString(20 * mm, height - y * mm, "Voter Record")
        y += 20

        for title, pairs in build_voter_sections(voter):
            # Keep a section title together with at least its first line
            if y + 10 + LINE_HEIGHT > (height / mm) - BOTTOM_LIMIT:
                c.showPage()
                y = 20

            c.setFont("Helvetica-Bold", 12)
            c.drawString(20 * mm, height - y * mm, title)
            c.setFont("Helvetica", 10)
            y += 10

            for label, value in pairs:
                if y > (height / mm) - BOTTOM_LIMIT:
                    c.showPage()
                    c.setFont("Helvetica", 10)
                    y = 20
                c.drawString(25 * mm, height - y * mm, f"{label}: {value}")
                y += LINE_HEIGHT

            y += 5

        c.save()
    except Exception as e:
        logger.error(f"Error generating voter record PDF: {e}")
        raise RenderError(f"Error generating voter record PDF: {e}")

    return buffer.getvalue()


def write_voter_record(voter: VoterRecord, output_dir: str, cfg: Optional[PdfConfig] = None) -> str:
    """
    Write a voter's record sheet into output_dir.

    Returns:
        Path of the written file
    """
    if not voter:
        raise ExportError("Cannot print an empty voter record")

    path = os.path.join(output_dir, voter_record_filename(voter))
    logger.info(f"Writing voter record to {path}")
    save_bytes(render_voter_record(voter, cfg), path)
    return path
