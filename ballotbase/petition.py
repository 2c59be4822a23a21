"""
Designating petitions: data model, step wizard, and PDF generation.
"""

import io
import os
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError
from reportlab.lib.pagesizes import letter
from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas as pdf_canvas

from ballotbase.config import PetitionConfig
from ballotbase.log import get_logger
from ballotbase.model import PetitionError, RenderError, VoterRecord
from ballotbase.writers import save_bytes

logger = get_logger(__name__)


class Candidate(BaseModel):
    """
    A candidate designated by the petition.
    """

    name: str = ""
    position: str = ""  # Public office or party position
    residence: str = ""


class CommitteeMember(BaseModel):
    """
    A member of the committee to fill vacancies.
    """

    name: str = ""
    residence: str = ""


class PetitionData(BaseModel):
    """
    Everything needed to print a designating petition.
    """

    party: str = ""
    election_date: str = ""  # e.g. "June 24"
    election_year: str = ""
    candidates: List[Candidate] = Field(default_factory=list)
    committee_members: List[CommitteeMember] = Field(default_factory=list)
    committee: Optional[str] = None  # Free-text committee, used when no members are listed
    show_witness: bool = True
    show_notary: bool = False
    signature_count: int = Field(default=10, ge=0)


def _voter_name(voter: VoterRecord) -> str:
    parts = [voter.get("first_name"), voter.get("middle"), voter.get("last_name"), voter.get("suffix")]
    return " ".join(str(p) for p in parts if p).strip()


def _voter_residence(voter: VoterRecord) -> str:
    return (
        f"{voter.get('house') or ''} {voter.get('street_name') or ''}, "
        f"{voter.get('residence_city') or ''}, NY {voter.get('zip_code') or ''}"
    ).strip()


def candidate_from_voter(voter: VoterRecord, position: str = "") -> Candidate:
    """Build a candidate from a voter record."""
    return Candidate(name=_voter_name(voter), position=position, residence=_voter_residence(voter))


def committee_member_from_voter(voter: VoterRecord) -> CommitteeMember:
    """Build a committee member from a voter record."""
    return CommitteeMember(name=_voter_name(voter), residence=_voter_residence(voter))


class PetitionWizard:
    """
    Four-step wizard that collects petition data.

    The wizard only advances past a step when that step is complete.
    """

    STEPS = [
        "Basic Information",
        "Candidates",
        "Committee to Fill Vacancies",
        "Options",
    ]

    MIN_COMMITTEE_MEMBERS = 3

    def __init__(self, data: Optional[PetitionData] = None):
        self.data = data or PetitionData()
        self.current_step = 0

    @property
    def step_name(self) -> str:
        return self.STEPS[self.current_step]

    @property
    def progress(self) -> float:
        return (self.current_step + 1) / len(self.STEPS)

    def is_last_step(self) -> bool:
        return self.current_step == len(self.STEPS) - 1

    def update(self, **changes: Any) -> PetitionData:
        """
        Merge changes into the petition data.

        Raises:
            PetitionError: If the merged data does not validate
        """
        merged = {**self.data.model_dump(), **changes}
        try:
            self.data = PetitionData(**merged)
        except ValidationError as e:
            raise PetitionError(f"Invalid petition data: {e}")
        return self.data

    def step_errors(self, step: Optional[int] = None) -> List[str]:
        """
        Return the problems that keep a step from being complete.
        """
        step = self.current_step if step is None else step
        data = self.data
        errors = []

        if step == 0:
            if not data.party:
                errors.append("Party is required")
            if not data.election_date:
                errors.append("Election date is required")
            if not data.election_year:
                errors.append("Election year is required")
        elif step == 1:
            if not data.candidates:
                errors.append("At least one candidate is required")
        elif step == 2:
            if len(data.committee_members) < self.MIN_COMMITTEE_MEMBERS:
                errors.append(f"At least {self.MIN_COMMITTEE_MEMBERS} committee members are required")
            if not all(m.name and m.residence for m in data.committee_members):
                errors.append("Every committee member needs a name and residence")

        return errors

    def can_advance(self) -> bool:
        return not self.step_errors()

    def next(self) -> int:
        """
        Move to the next step.

        Raises:
            PetitionError: If the current step is incomplete
        """
        errors = self.step_errors()
        if errors:
            raise PetitionError(f"{self.step_name}: {'; '.join(errors)}")
        self.current_step = min(self.current_step + 1, len(self.STEPS) - 1)
        return self.current_step

    def back(self) -> int:
        self.current_step = max(self.current_step - 1, 0)
        return self.current_step

    def finish(self) -> PetitionData:
        """
        Validate every step and return the completed data.

        Raises:
            PetitionError: If any step is incomplete
        """
        for step, name in enumerate(self.STEPS):
            errors = self.step_errors(step)
            if errors:
                raise PetitionError(f"{name}: {'; '.join(errors)}")
        return self.data


def petition_title(data: PetitionData) -> str:
    if data.party:
        return f"{data.party.upper()} PARTY DESIGNATING PETITION"
    return "Designating Petition"


def intro_text(data: PetitionData) -> str:
    return (
        f"I, the undersigned, do hereby state that I am a duly enrolled voter of the {data.party} Party "
        f"and entitled to vote at the next primary election of such party, to be held on "
        f"{data.election_date}, {data.election_year}; that my place of residence is truly stated opposite "
        f"my signature hereto, and I do hereby designate the following named person (or persons) as a "
        f"candidate (or candidates) for the nomination of such party for public office or for election "
        f"to a party position of such party."
    )


COMMITTEE_TEXT = (
    "I do hereby appoint as a committee to fill vacancies in accordance with the provisions of the "
    "election law (here insert the names and addresses of at least three persons, all of whom shall "
    "be enrolled voters of said party):"
)

WITNESS_LINE = (
    "In witness whereof, I have hereunto set my hand, the day and year placed opposite my signature."
)

WITNESS_STATEMENT = (
    "STATEMENT OF WITNESS: I, ______________________ (name of witness), state: I am a duly qualified "
    "voter of the State of New York and an enrolled voter of the {party} Party. I now reside at "
    "______________________. Each of the individuals whose names are subscribed to this petition sheet "
    "containing ____ signatures subscribed the same in my presence on the dates above indicated and "
    "identified themselves to be the individual who signed this sheet. I understand that this statement "
    "will be accepted for all purposes as the equivalent of an affidavit and, if it contains a material "
    "false statement, shall subject me to the same penalties as if I had been duly sworn."
)

NOTARY_STATEMENT = (
    "NOTARY PUBLIC OR COMMISSIONER OF DEEDS: On the dates above indicated before me personally came each "
    "of the voters whose signatures appear on this petition sheet containing ____ signatures, who signed "
    "same in my presence and who, being by me duly sworn, each for themselves, said that the foregoing "
    "statement made and subscribed by them was true."
)


def committee_summary(data: PetitionData) -> str:
    """
    Return the text printed inside the committee box.
    """
    if data.committee_members:
        return "; ".join(f"{m.name}, residing at {m.residence}" for m in data.committee_members)
    return data.committee or ""


def petition_filename(data: PetitionData) -> str:
    party = data.party or "petition"
    return f"designating_petition_{party}_{data.election_year}.pdf".replace("/", "_")


class _PetitionCanvas:
    """
    Tracks the cursor while drawing a petition sheet.

    Coordinates are millimetres measured from the top-left corner.
    """

    LEFT = 15
    TEXT_WIDTH = 180
    FOOTER_Y = 270
    BOTTOM_LIMIT = 260

    def __init__(self, buffer: io.BytesIO, cfg: PetitionConfig):
        self.cfg = cfg
        self.canvas = pdf_canvas.Canvas(buffer, pagesize=letter, invariant=1)
        self.page_width, self.page_height = letter
        self.y = 20.0
        self.font()

    def _y(self, y: float) -> float:
        return self.page_height - y * mm

    def font(self, name: str = "Helvetica", size: float = 10) -> None:
        self.canvas.setFont(name, size)
        self._font = (name, size)

    def centered(self, text: str, y: float) -> None:
        self.canvas.drawCentredString(self.page_width / 2, self._y(y), text)

    def text(self, text: str, x: float, y: float) -> None:
        self.canvas.drawString(x * mm, self._y(y), text)

    def wrapped(self, text: str, x: float, y: float, width: float, leading: float = 4.5) -> int:
        lines = simpleSplit(text, self._font[0], self._font[1], width * mm)
        for i, line in enumerate(lines):
            self.text(line, x, y + i * leading)
        return len(lines)

    def rect(self, x: float, y: float, w: float, h: float) -> None:
        self.canvas.rect(x * mm, self._y(y + h), w * mm, h * mm)

    def paragraph(self, text: str, leading: float = 4.5) -> None:
        lines = simpleSplit(text, self._font[0], self._font[1], self.TEXT_WIDTH * mm)
        self.ensure_space(len(lines) * leading)
        for line in lines:
            self.text(line, self.LEFT, self.y)
            self.y += leading

    def ensure_space(self, height: float) -> bool:
        """
        Start a new page when the next block would run into the footer.

        Returns:
            True if a new page was started
        """
        if self.y + height <= self.BOTTOM_LIMIT:
            return False
        self.footer()
        self.canvas.showPage()
        self.font()
        self.y = 20.0
        return True

    def footer(self) -> None:
        self.font("Helvetica", 8)
        self.text(self.cfg.footer_code, self.LEFT, self.FOOTER_Y)
        self.font("Helvetica-Oblique", 8)
        self.centered("(Sample prepared by the State Board of Elections)", self.FOOTER_Y)
        self.font("Helvetica", 8)
        self.canvas.drawRightString(180 * mm, self._y(self.FOOTER_Y), "Sheet No. _________")

    def save(self) -> None:
        self.footer()
        self.canvas.save()


CANDIDATE_COLUMNS = [("Name(s) of Candidate(s)", 60), ("Public Office or Party Position", 60), ("Residence Address", 65)]
SIGNATURE_COLUMNS = [("Date", 20), ("Name of Signer", 60), ("Residence", 60), ("Enter Town or City", 45)]


def _draw_header_row(sheet: _PetitionCanvas, columns, height: float) -> None:
    sheet.font("Helvetica-Bold", 9)
    x = sheet.LEFT
    for label, width in columns:
        sheet.rect(x, sheet.y, width, height)
        sheet.text(label, x + 2, sheet.y + 6)
        x += width
    sheet.y += height


def _draw_candidates(sheet: _PetitionCanvas, data: PetitionData) -> None:
    _draw_header_row(sheet, CANDIDATE_COLUMNS, 10)
    sheet.font("Helvetica", 9)
    total_width = sum(w for _, w in CANDIDATE_COLUMNS)

    if not data.candidates:
        sheet.rect(sheet.LEFT, sheet.y, total_width, 10)
        sheet.y += 10
        return

    for candidate in data.candidates:
        values = [candidate.name, candidate.position, candidate.residence]
        split = [
            simpleSplit(value, "Helvetica", 9, (width - 4) * mm)
            for value, (_, width) in zip(values, CANDIDATE_COLUMNS)
        ]
        row_height = max(15, 4 + 4 * max(len(lines) for lines in split))
        if sheet.ensure_space(row_height):
            _draw_header_row(sheet, CANDIDATE_COLUMNS, 10)

        x = sheet.LEFT
        for index, ((_, width), lines) in enumerate(zip(CANDIDATE_COLUMNS, split)):
            sheet.rect(x, sheet.y, width, row_height)
            sheet.font("Helvetica-Bold" if index == 0 else "Helvetica", 9)
            for i, line in enumerate(lines):
                sheet.text(line, x + 2, sheet.y + 5 + i * 4)
            x += width
        sheet.y += row_height


def _draw_committee(sheet: _PetitionCanvas, data: PetitionData) -> None:
    sheet.y += 5
    sheet.font("Helvetica", 9)
    sheet.paragraph(COMMITTEE_TEXT)

    total_width = sum(w for _, w in CANDIDATE_COLUMNS)
    summary = committee_summary(data)
    lines = simpleSplit(summary, "Helvetica", 9, 175 * mm) if summary else []
    box_height = max(20, 6 + 4.5 * len(lines))
    sheet.ensure_space(box_height)
    sheet.rect(sheet.LEFT, sheet.y, total_width, box_height)
    for i, line in enumerate(lines):
        sheet.text(line, sheet.LEFT + 2, sheet.y + 5 + i * 4.5)
    sheet.y += box_height + 5


def _draw_signatures(sheet: _PetitionCanvas, data: PetitionData) -> None:
    sheet.font("Helvetica", 9)
    sheet.ensure_space(10)
    sheet.text(WITNESS_LINE, sheet.LEFT, sheet.y)
    sheet.y += 5

    sheet.ensure_space(10 + 15)
    _draw_header_row(sheet, SIGNATURE_COLUMNS, 10)

    for line_number in range(1, data.signature_count + 1):
        if sheet.ensure_space(15):
            _draw_header_row(sheet, SIGNATURE_COLUMNS, 10)
        sheet.font("Helvetica", 9)
        x = sheet.LEFT
        for _, width in SIGNATURE_COLUMNS:
            sheet.rect(x, sheet.y, width, 15)
            x += width
        sheet.text(f"{line_number}. __/__/20__", sheet.LEFT + 2, sheet.y + 6)
        sheet.text("Printed Name", sheet.LEFT + SIGNATURE_COLUMNS[0][1] + 22, sheet.y + 12)
        sheet.y += 15


def render_petition(data: PetitionData, cfg: Optional[PetitionConfig] = None) -> bytes:
    """
    Render a designating petition sheet as PDF.

    Args:
        data: Petition data
        cfg: Petition configuration

    Returns:
        PDF bytes

    Raises:
        RenderError: If the document cannot be rendered
    """
    cfg = cfg or PetitionConfig()
    logger.info(
        f"Rendering petition for {data.party or 'no party'}: {len(data.candidates)} candidates, "
        f"{data.signature_count} signature lines"
    )
    buffer = io.BytesIO()

    try:
        sheet = _PetitionCanvas(buffer, cfg)

        sheet.font("Helvetica", 16)
        sheet.centered(petition_title(data), 20)
        sheet.font("Helvetica", 10)
        sheet.centered("(Sec. 6-132, Election Law)", 26)

        sheet.y = 35
        sheet.paragraph(intro_text(data))
        sheet.y += 4

        _draw_candidates(sheet, data)
        _draw_committee(sheet, data)
        _draw_signatures(sheet, data)

        if data.show_witness:
            sheet.y += 6
            sheet.font("Helvetica", 8)
            sheet.paragraph(WITNESS_STATEMENT.format(party=data.party), leading=4)
            sheet.ensure_space(12)
            sheet.y += 8
            sheet.text("____________________", sheet.LEFT, sheet.y)
            sheet.text("______________________________", 110, sheet.y)
            sheet.y += 4
            sheet.text("(Date)", sheet.LEFT, sheet.y)
            sheet.text("(Signature of Witness)", 110, sheet.y)
            sheet.y += 4

        if data.show_notary:
            sheet.y += 6
            sheet.font("Helvetica", 8)
            sheet.paragraph(NOTARY_STATEMENT, leading=4)
            sheet.ensure_space(12)
            sheet.y += 8
            sheet.text("______________________________", 110, sheet.y)
            sheet.y += 4
            sheet.text("(Signature and Official Title of Officer Administering Oath)", 110, sheet.y)
            sheet.y += 4

        sheet.save()
    except Exception as e:
        logger.error(f"Error generating petition PDF: {e}")
        raise RenderError(f"Error generating petition PDF: {e}")

    return buffer.getvalue()


def load_petition(raw: Dict[str, Any]) -> PetitionData:
    """
    Build petition data from a plain mapping (YAML or JSON input).

    Raises:
        PetitionError: If the data does not validate
    """
    try:
        return PetitionData(**raw)
    except ValidationError as e:
        raise PetitionError(f"Invalid petition data: {e}")


def write_petition(data: PetitionData, output_dir: str, cfg: Optional[PetitionConfig] = None) -> str:
    """
    Render a petition and write it into output_dir.

    Returns:
        Path of the written file
    """
    path = os.path.join(output_dir, petition_filename(data))
    logger.info(f"Writing petition to {path}")
    save_bytes(render_petition(data, cfg), path)
    return path
