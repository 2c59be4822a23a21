"""
BallotBase - Voter Data Export Toolkit.

Builds CSV and PDF exports of voter lists, single-voter record sheets, and
designating petitions.
"""

__version__ = "0.1.0"

from ballotbase.model import ExportFormat, ExportJob, ExportTable, FieldDescriptor, VoterRecord
from ballotbase.config import Config, MongoDBConfig, load_config
from ballotbase.catalog import EXPORT_FIELDS, get_label
from ballotbase.selection import FieldSelection
from ballotbase.assembler import assemble
from ballotbase.writers import export_voters, render_csv, render_pdf, write_csv, write_pdf
from ballotbase.voter_sheet import write_voter_record
from ballotbase.petition import PetitionData, PetitionWizard, write_petition
from ballotbase.db.mongo import fetch_list_voters

__all__ = [
    "ExportFormat",
    "ExportJob",
    "ExportTable",
    "FieldDescriptor",
    "VoterRecord",
    "Config",
    "MongoDBConfig",
    "load_config",
    "EXPORT_FIELDS",
    "get_label",
    "FieldSelection",
    "assemble",
    "export_voters",
    "render_csv",
    "render_pdf",
    "write_csv",
    "write_pdf",
    "write_voter_record",
    "PetitionData",
    "PetitionWizard",
    "write_petition",
    "fetch_list_voters",
]
