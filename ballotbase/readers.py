"""
Input readers for voter records and petition data files.
"""

import csv
import json
from typing import Any, Dict, List

import yaml

from ballotbase.log import get_logger
from ballotbase.model import ExportError, VoterRecord

logger = get_logger(__name__)


def load_records(path: str) -> List[VoterRecord]:
    """
    Load voter records from a JSON array, NDJSON, or CSV file.

    Args:
        path: Input file path

    Returns:
        List of records
    """
    logger.info(f"Loading records from {path}")

    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            if path.endswith(".csv"):
                records = [dict(row) for row in csv.DictReader(f)]
            elif path.endswith(".ndjson") or path.endswith(".jsonl"):
                records = [json.loads(line) for line in f if line.strip()]
            else:
                records = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Error reading records from {path}: {e}")
        raise ExportError(f"Error reading records from {path}: {e}")

    if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
        raise ExportError(f"Expected a list of records in {path}")

    logger.info(f"Loaded {len(records)} records from {path}")
    return records


def load_mapping(path: str) -> Dict[str, Any]:
    """
    Load a YAML or JSON mapping, such as petition data.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.endswith(".json"):
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.error(f"Error reading {path}: {e}")
        raise ExportError(f"Error reading {path}: {e}")

    if not isinstance(data, dict):
        raise ExportError(f"Expected a mapping in {path}")
    return data
