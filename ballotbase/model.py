"""
Data models for BallotBase.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, List, NamedTuple, Optional, Sequence, TypedDict, Union

if TYPE_CHECKING:
    from ballotbase.selection import FieldSelection


class VoterRecord(TypedDict, total=False):
    """
    Represents one voter row from a county partition.

    Counties share this core schema; extra keys are allowed and are kept as-is.
    """

    state_voter_id: str
    county_voter_no: str
    county: str  # Partition the record was fetched from
    first_name: str
    middle: Optional[str]
    last_name: str
    suffix: Optional[str]
    date_of_birth: Optional[str]  # YYYYMMDD
    gender: Optional[str]
    enrolled_party: Optional[str]
    house: Optional[str]
    house_suffix: Optional[str]
    pre_st_direction: Optional[str]
    street_name: Optional[str]
    post_st_direction: Optional[str]
    aptunit_type: Optional[str]
    unit_no: Optional[str]
    residence_city: Optional[str]
    zip_code: Optional[str]
    zip_four: Optional[str]
    election_district: Optional[str]
    legislative_district: Optional[str]
    congressional_district: Optional[str]
    state_senate_district: Optional[str]
    assembly_district: Optional[str]
    ward: Optional[str]
    last_date_voted: Optional[str]
    last_year_voted: Optional[str]
    last_county_voted: Optional[str]
    voter_history: Optional[str]
    voter_status: Optional[str]
    application_date: Optional[str]
    application_source: Optional[str]
    last_registered_name: Optional[str]
    last_registered_address: Optional[str]


class FieldDescriptor(NamedTuple):
    """
    Static description of one exportable field.
    """

    key: str
    label: str
    category: str


class ExportFormat(Enum):
    """
    Supported export file formats.
    """

    CSV = "csv"
    PDF = "pdf"


@dataclass
class ExportJob:
    """
    One export request. Nothing about it is persisted.
    """

    records: Sequence[VoterRecord]
    selection: Union["FieldSelection", Sequence[str], None]
    title: str
    export_all: bool = False
    fmt: ExportFormat = ExportFormat.CSV


@dataclass
class ExportTable:
    """
    Header row plus data rows produced by the assembler.
    """

    fields: List[str] = field(default_factory=list)
    headers: List[str] = field(default_factory=list)
    rows: List[List[str]] = field(default_factory=list)

    @property
    def column_count(self) -> int:
        return len(self.headers)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def is_empty(self) -> bool:
        """True when there are no columns to export."""
        return not self.headers


class BallotBaseError(Exception):
    """Base class for all ballotbase exceptions."""

    pass


class ConfigError(BallotBaseError):
    """Exception raised for configuration errors."""

    pass


class ExportError(BallotBaseError):
    """Exception raised when an export file cannot be produced."""

    pass


class RenderError(ExportError):
    """Exception raised when a PDF document fails to render."""

    pass


class VoterSourceError(BallotBaseError):
    """Exception raised when voters cannot be fetched from the backend."""

    pass


class PetitionError(BallotBaseError):
    """Exception raised for invalid petition data."""

    pass
