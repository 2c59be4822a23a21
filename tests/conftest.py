"""
Pytest configuration and fixtures.
"""

import io
import json
from typing import List

import pytest
from pypdf import PdfReader

from ballotbase.config import Config
from ballotbase.model import VoterRecord


@pytest.fixture
def sample_config(tmp_path):
    """Return a configuration that writes into a temporary directory."""
    cfg = Config()
    cfg.export.output_dir = str(tmp_path / "out")
    return cfg


@pytest.fixture
def sample_voter() -> VoterRecord:
    """Return a sample voter record."""
    return {
        "state_voter_id": "NY000000000012345678",
        "county_voter_no": "1234567",
        "county": "bronx",
        "first_name": "JANE",
        "middle": "Q",
        "last_name": "DOE",
        "suffix": None,
        "date_of_birth": "19800102",
        "gender": "F",
        "enrolled_party": "DEM",
        "house": "123",
        "house_suffix": None,
        "pre_st_direction": "E",
        "street_name": "MAIN ST",
        "post_st_direction": None,
        "aptunit_type": "APT",
        "unit_no": "4B",
        "residence_city": "BRONX",
        "zip_code": "10451",
        "zip_four": "1234",
        "election_district": "001",
        "legislative_district": None,
        "congressional_district": "15",
        "state_senate_district": "32",
        "assembly_district": "84",
        "ward": None,
        "last_date_voted": "20241105",
        "last_year_voted": "2024",
        "last_county_voted": "BRONX",
        "voter_history": "2024 GENERAL ELECTION;2022 GENERAL ELECTION",
        "voter_status": "ACTIVE",
        "application_date": "19980315",
        "application_source": "DMV",
        "last_registered_name": None,
        "last_registered_address": None,
    }


@pytest.fixture
def sample_voters(sample_voter) -> List[VoterRecord]:
    """Return a list of sample voter records."""
    second = dict(sample_voter)
    second.update({
        "state_voter_id": "NY000000000087654321",
        "first_name": "JOHN",
        "middle": None,
        "last_name": "SMITH",
        "gender": "M",
        "enrolled_party": "REP",
        "house": "456",
        "street_name": "OAK AVE",
        "unit_no": None,
        "zip_code": "10452",
    })
    return [sample_voter, second]


@pytest.fixture
def records_file(tmp_path, sample_voters):
    """Write the sample voters to a JSON file and return its path."""
    path = tmp_path / "voters.json"
    path.write_text(json.dumps(sample_voters), encoding="utf-8")
    return str(path)


@pytest.fixture
def sample_petition_dict():
    """Return petition data as it would be loaded from YAML."""
    return {
        "party": "Democratic",
        "election_date": "June 24",
        "election_year": "2025",
        "candidates": [
            {"name": "Jane Q Doe", "position": "Member of Assembly, 84th District", "residence": "123 MAIN ST, BRONX, NY 10451"},
        ],
        "committee_members": [
            {"name": "Ann Lee", "residence": "1 First Ave, Bronx, NY 10451"},
            {"name": "Bo Chan", "residence": "2 Second Ave, Bronx, NY 10452"},
            {"name": "Cy Ortiz", "residence": "3 Third Ave, Bronx, NY 10453"},
        ],
        "show_witness": True,
        "show_notary": False,
        "signature_count": 5,
    }


@pytest.fixture
def pdf_reader():
    """Return a function that opens PDF bytes with pypdf."""
    def _open(data: bytes) -> PdfReader:
        return PdfReader(io.BytesIO(data))
    return _open


@pytest.fixture
def pdf_text(pdf_reader):
    """Return a function that extracts the text of every page of a PDF."""
    def _text(data: bytes) -> str:
        return "\n".join(page.extract_text() or "" for page in pdf_reader(data).pages)
    return _text
