"""
Document assembler: turns voter records and a field selection into a table.
"""

import datetime
from typing import Any, List, Optional, Sequence, Union

from ballotbase.catalog import get_label
from ballotbase.log import get_logger
from ballotbase.model import ExportTable, VoterRecord
from ballotbase.selection import FieldSelection

logger = get_logger(__name__)

Selection = Union[FieldSelection, Sequence[str], None]


def resolve_fields(
    records: Sequence[VoterRecord],
    selection: Selection,
    export_all: bool = False,
) -> List[str]:
    """
    Resolve the ordered list of field keys to export.

    In wildcard mode the keys of the first record are used, in their original
    order. Otherwise the explicit selection is used.

    Args:
        records: Records to export
        selection: Selected field keys
        export_all: Wildcard mode

    Returns:
        Ordered field keys
    """
    if isinstance(selection, FieldSelection):
        export_all = export_all or selection.export_all
        keys = selection.fields
    else:
        keys = list(selection or [])

    if export_all:
        return list(records[0].keys()) if records else []

    # Drop repeated keys but keep first-seen order
    seen = set()
    resolved = []
    for key in keys:
        if key not in seen:
            seen.add(key)
            resolved.append(key)
    return resolved


def humanize_field(key: str) -> str:
    """
    Turn a field key into a column header: first_name -> First Name.
    """
    return key.replace("_", " ").title()


def header_for(key: str, style: str = "humanize") -> str:
    if style == "catalog":
        return get_label(key) or humanize_field(key)
    return humanize_field(key)


def cell_value(record: VoterRecord, key: str) -> str:
    """
    Return the printable value of a field; missing and None become "".
    """
    value: Any = record.get(key)
    if value is None:
        return ""
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat()
    return str(value)


def assemble(
    records: Sequence[VoterRecord],
    selection: Selection,
    export_all: bool = False,
    header_style: str = "humanize",
) -> ExportTable:
    """
    Build the header row and one row per record.

    Args:
        records: Records to export
        selection: Selected field keys
        export_all: Wildcard mode (all keys of the first record)
        header_style: "humanize" or "catalog"

    Returns:
        Export table; empty when there is nothing to export
    """
    fields = resolve_fields(records, selection, export_all)
    if not fields:
        logger.warning("No fields selected for export")
        return ExportTable()

    headers = [header_for(key, header_style) for key in fields]
    rows = [[cell_value(record, key) for key in fields] for record in records]

    logger.debug(f"Assembled {len(rows)} rows with {len(headers)} columns")
    return ExportTable(fields=fields, headers=headers, rows=rows)


def assemble_job(job, header_style: Optional[str] = None) -> ExportTable:
    """
    Assemble the table for an ExportJob.
    """
    return assemble(job.records, job.selection, job.export_all, header_style or "humanize")
