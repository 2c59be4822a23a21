"""
Command-line interface for BallotBase.
"""

import argparse
import logging
import sys
from typing import List, Optional

from ballotbase.catalog import fields_in_category, get_categories
from ballotbase.config import Config, load_config
from ballotbase.db.mongo import add_voters_to_list, fetch_list, fetch_list_voters, setup_mongodb
from ballotbase.log import configure_logging
from ballotbase.model import BallotBaseError
from ballotbase.petition import PetitionWizard, load_petition, write_petition
from ballotbase.readers import load_mapping, load_records
from ballotbase.selection import FieldSelection
from ballotbase.voter_sheet import write_voter_record
from ballotbase.writers import export_voters

logger = logging.getLogger(__name__)


def _selection(args: argparse.Namespace) -> FieldSelection:
    return FieldSelection(args.fields or [], export_all=args.all)


def _report_export(path: Optional[str]) -> int:
    if path is None:
        logger.error("No fields selected; use --fields or --all")
        return 1
    logger.info(f"Export written to {path}")
    return 0


def export_command(args: argparse.Namespace, config: Config) -> int:
    records = load_records(args.input)
    path = export_voters(
        records,
        _selection(args),
        args.title,
        args.format,
        config,
        output_dir=args.out,
    )
    return _report_export(path)


def export_list_command(args: argparse.Namespace, config: Config) -> int:
    if config.mongodb is None:
        logger.error("MongoDB is not configured")
        return 1

    voter_list = fetch_list(args.list_id, config.mongodb)
    voters = fetch_list_voters(args.list_id, config.mongodb)
    if not voters:
        logger.error(f"No voters to export in list {args.list_id}")
        return 1

    path = export_voters(
        voters,
        _selection(args),
        voter_list.get("name") or args.list_id,
        args.format,
        config,
        output_dir=args.out,
    )
    return _report_export(path)


def fields_command(args: argparse.Namespace, config: Config) -> int:
    for category, label in get_categories():
        print(f"{label} ({category})")
        for descriptor in fields_in_category(category):
            print(f"  {descriptor.key:<24} {descriptor.label}")
    return 0


def voter_command(args: argparse.Namespace, config: Config) -> int:
    records = load_records(args.input)
    if not 0 <= args.index < len(records):
        logger.error(f"No record at index {args.index} ({len(records)} records loaded)")
        return 1

    path = write_voter_record(records[args.index], args.out or config.export.output_dir, config.pdf)
    logger.info(f"Voter record written to {path}")
    return 0


def petition_command(args: argparse.Namespace, config: Config) -> int:
    raw = load_mapping(args.input)
    raw.setdefault("signature_count", config.petition.default_signature_count)

    wizard = PetitionWizard(load_petition(raw))
    data = wizard.finish()

    path = write_petition(data, args.out or config.export.output_dir, config.petition)
    logger.info(f"Petition written to {path}")
    return 0


def add_to_list_command(args: argparse.Namespace, config: Config) -> int:
    if config.mongodb is None:
        logger.error("MongoDB is not configured")
        return 1

    if args.input:
        voter_ids = [r["state_voter_id"] for r in load_records(args.input) if r.get("state_voter_id")]
    else:
        voter_ids = args.voter_ids

    added = add_voters_to_list(args.list_id, args.county, voter_ids, config.mongodb)
    logger.info(f"Added {added} voters to list {args.list_id}")
    return 0


def setup_db_command(args: argparse.Namespace, config: Config) -> int:
    if config.mongodb is None:
        logger.error("MongoDB is not configured")
        return 1

    setup_mongodb(config.mongodb)
    return 0


COMMANDS = {
    "export": export_command,
    "export-list": export_list_command,
    "fields": fields_command,
    "voter": voter_command,
    "petition": petition_command,
    "add-to-list": add_to_list_command,
    "setup-db": setup_db_command,
}


def process_command(args: argparse.Namespace) -> int:
    """
    Process command-line arguments.

    Args:
        args: Command-line arguments

    Returns:
        Exit code
    """
    # Load configuration
    config = load_config(args.config)

    # Set up logging
    configure_logging(config, args.log_level)

    return COMMANDS[args.command](args, config)


def _add_selection_args(parser: argparse.ArgumentParser) -> None:
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--fields", nargs="+", help="Field keys to export, in column order")
    group.add_argument("--all", action="store_true", help="Export every field of the first record")
    parser.add_argument("--format", choices=["csv", "pdf"], default="csv", help="Output format")
    parser.add_argument("--out", help="Output directory")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="BallotBase voter data tools")
    parser.add_argument("--config", help="Path to configuration file")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], help="Logging level")

    subparsers = parser.add_subparsers(dest="command", required=True, help="Command to run")

    # Export command
    export_parser = subparsers.add_parser("export", help="Export voter records to CSV or PDF")
    export_parser.add_argument("--in", dest="input", required=True, help="Records file (JSON, NDJSON or CSV)")
    export_parser.add_argument("--title", required=True, help="List title")
    _add_selection_args(export_parser)

    # Export-list command
    list_parser = subparsers.add_parser("export-list", help="Export a saved list from MongoDB")
    list_parser.add_argument("--list-id", required=True, help="Saved list identifier")
    _add_selection_args(list_parser)

    # Fields command
    subparsers.add_parser("fields", help="Show the exportable fields")

    # Voter command
    voter_parser = subparsers.add_parser("voter", help="Print a voter record sheet")
    voter_parser.add_argument("--in", dest="input", required=True, help="Records file (JSON, NDJSON or CSV)")
    voter_parser.add_argument("--index", type=int, default=0, help="Record index in the file")
    voter_parser.add_argument("--out", help="Output directory")

    # Petition command
    petition_parser = subparsers.add_parser("petition", help="Generate a designating petition")
    petition_parser.add_argument("--in", dest="input", required=True, help="Petition data (YAML or JSON)")
    petition_parser.add_argument("--out", help="Output directory")

    # Add-to-list command
    add_parser = subparsers.add_parser("add-to-list", help="Add voters to a saved list in MongoDB")
    add_parser.add_argument("--list-id", required=True, help="Saved list identifier")
    add_parser.add_argument("--county", required=True, help="County of the voters")
    ids_group = add_parser.add_mutually_exclusive_group(required=True)
    ids_group.add_argument("--voter-ids", nargs="+", help="State voter ids")
    ids_group.add_argument("--in", dest="input", help="Records file whose state_voter_id values are added")

    # Setup-db command
    subparsers.add_parser("setup-db", help="Create MongoDB indexes")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code
    """
    args = build_parser().parse_args(argv)

    try:
        return process_command(args)
    except BallotBaseError as e:
        logger.error(f"Error: {e}")
        return 1
    except Exception as e:
        logger.exception(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
