"""
Tests for designating petitions.
"""

import os
from unittest.mock import patch

import pytest

from ballotbase.model import PetitionError, RenderError
from ballotbase.petition import (
    Candidate,
    CommitteeMember,
    PetitionData,
    PetitionWizard,
    candidate_from_voter,
    committee_member_from_voter,
    committee_summary,
    load_petition,
    petition_filename,
    petition_title,
    render_petition,
    write_petition,
)


def test_petition_title():
    """Test the petition heading."""
    assert petition_title(PetitionData(party="Democratic")) == "DEMOCRATIC PARTY DESIGNATING PETITION"
    assert petition_title(PetitionData()) == "Designating Petition"


def test_petition_filename(sample_petition_dict):
    """Test the petition file name."""
    data = load_petition(sample_petition_dict)
    assert petition_filename(data) == "designating_petition_Democratic_2025.pdf"


def test_load_petition_rejects_negative_signatures(sample_petition_dict):
    """Signature count cannot be negative."""
    sample_petition_dict["signature_count"] = -1
    with pytest.raises(PetitionError):
        load_petition(sample_petition_dict)


def test_candidate_from_voter(sample_voter):
    """Voter data fills name and residence."""
    candidate = candidate_from_voter(sample_voter, "Member of Assembly")

    assert candidate.name == "JANE Q DOE"
    assert candidate.position == "Member of Assembly"
    assert candidate.residence == "123 MAIN ST, BRONX, NY 10451"


def test_committee_member_from_voter(sample_voter):
    """Committee members take name and residence from the voter."""
    member = committee_member_from_voter(sample_voter)
    assert member == CommitteeMember(name="JANE Q DOE", residence="123 MAIN ST, BRONX, NY 10451")


def test_committee_summary():
    """Members are joined; the free-text committee is the fallback."""
    data = PetitionData(committee_members=[
        CommitteeMember(name="Ann", residence="1 A St"),
        CommitteeMember(name="Bo", residence="2 B St"),
    ])
    assert committee_summary(data) == "Ann, residing at 1 A St; Bo, residing at 2 B St"
    assert committee_summary(PetitionData(committee="Ann, Bo, Cy")) == "Ann, Bo, Cy"
    assert committee_summary(PetitionData()) == ""


def test_wizard_walks_all_steps(sample_petition_dict):
    """A complete petition passes every step."""
    wizard = PetitionWizard()
    assert wizard.step_name == "Basic Information"
    assert not wizard.can_advance()

    wizard.update(party="Democratic", election_date="June 24", election_year="2025")
    assert wizard.next() == 1

    wizard.update(candidates=sample_petition_dict["candidates"])
    assert wizard.next() == 2

    wizard.update(committee_members=sample_petition_dict["committee_members"])
    assert wizard.next() == 3
    assert wizard.is_last_step()
    assert wizard.progress == 1.0

    # Next on the last step stays put
    assert wizard.next() == 3
    assert isinstance(wizard.finish(), PetitionData)


def test_wizard_blocks_incomplete_basic_info():
    """Basic info needs party, date, and year."""
    wizard = PetitionWizard(PetitionData(party="Working Families"))
    with pytest.raises(PetitionError) as excinfo:
        wizard.next()

    assert "Election date is required" in str(excinfo.value)
    assert wizard.current_step == 0


def test_wizard_requires_three_committee_members(sample_petition_dict):
    """Fewer than three committee members blocks the committee step."""
    sample_petition_dict["committee_members"] = sample_petition_dict["committee_members"][:2]
    wizard = PetitionWizard(load_petition(sample_petition_dict))
    wizard.current_step = 2

    assert wizard.step_errors() == ["At least 3 committee members are required"]
    with pytest.raises(PetitionError):
        wizard.next()


def test_wizard_requires_member_residence(sample_petition_dict):
    """Each committee member needs a residence."""
    sample_petition_dict["committee_members"][1]["residence"] = ""
    wizard = PetitionWizard(load_petition(sample_petition_dict))

    with pytest.raises(PetitionError) as excinfo:
        wizard.finish()
    assert "name and residence" in str(excinfo.value)


def test_wizard_back_clamps():
    """Back never goes before the first step."""
    wizard = PetitionWizard()
    assert wizard.back() == 0


def test_wizard_update_validates():
    """Invalid updates raise PetitionError and keep the old data."""
    wizard = PetitionWizard()
    with pytest.raises(PetitionError):
        wizard.update(signature_count=-5)
    assert wizard.data.signature_count == 10


def test_render_petition(sample_petition_dict, pdf_text, pdf_reader):
    """The petition carries title, candidates, committee, and signature lines."""
    data = render_petition(load_petition(sample_petition_dict))
    text = pdf_text(data)

    assert "DEMOCRATIC PARTY DESIGNATING PETITION" in text
    assert "(Sec. 6-132, Election Law)" in text
    assert "Jane Q Doe" in text
    assert "Ann Lee, residing at 1 First Ave" in text
    assert "5. __/__/20__" in text
    assert "STATEMENT OF WITNESS" in text
    assert "NOTARY PUBLIC" not in text
    assert "Sheet No." in text

    page = pdf_reader(data).pages[0]
    assert float(page.mediabox.height) > float(page.mediabox.width)  # portrait


def test_render_petition_paginates_signatures(sample_petition_dict, pdf_text, pdf_reader):
    """Many signature lines continue on new pages with the header repeated."""
    sample_petition_dict["signature_count"] = 30
    sample_petition_dict["show_notary"] = True
    data = render_petition(load_petition(sample_petition_dict))

    reader = pdf_reader(data)
    assert len(reader.pages) > 1
    assert "Name of Signer" in reader.pages[1].extract_text()

    text = pdf_text(data)
    assert "30. __/__/20__" in text
    assert "NOTARY PUBLIC" in text


def test_render_petition_without_candidates(pdf_text):
    """An empty petition still renders."""
    text = pdf_text(render_petition(PetitionData(signature_count=0, show_witness=False)))
    assert "Designating Petition" in text
    assert "STATEMENT OF WITNESS" not in text


def test_render_petition_legacy_committee(pdf_text):
    """The free-text committee is printed when no members are listed."""
    text = pdf_text(render_petition(PetitionData(party="Green", committee="Ann, Bo and Cy")))
    assert "Ann, Bo and Cy" in text


def test_render_petition_failure():
    """Rendering failures raise RenderError."""
    with patch("ballotbase.petition.simpleSplit", side_effect=RuntimeError("split failed")):
        with pytest.raises(RenderError):
            render_petition(PetitionData(party="Green"))


def test_write_petition(sample_petition_dict, tmp_path):
    """Test writing the petition to disk."""
    path = write_petition(load_petition(sample_petition_dict), str(tmp_path))

    assert path == os.path.join(str(tmp_path), "designating_petition_Democratic_2025.pdf")
    with open(path, "rb") as f:
        assert f.read(4) == b"%PDF"
