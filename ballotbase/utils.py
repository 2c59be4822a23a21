"""
Date helpers for voter record fields.

Voter files store dates as compact YYYYMMDD strings.
"""

import datetime
from typing import Optional


def parse_compact_date(date_str: Optional[str]) -> Optional[datetime.date]:
    """
    Parse a YYYYMMDD string, returning None for empty or malformed input.
    """
    if not date_str:
        return None
    try:
        return datetime.datetime.strptime(str(date_str)[:8], "%Y%m%d").date()
    except ValueError:
        return None


def format_date(date_str: Optional[str]) -> str:
    """
    Format a YYYYMMDD string as "January 2, 1980".

    Args:
        date_str: Compact date string

    Returns:
        Formatted date, "N/A" when empty, or the input unchanged when it does not parse
    """
    if not date_str:
        return "N/A"
    date = parse_compact_date(date_str)
    if date is None:
        return str(date_str)
    return f"{date.strftime('%B')} {date.day}, {date.year}"


def calculate_age(date_str: Optional[str], today: Optional[datetime.date] = None) -> Optional[int]:
    """
    Return the age in whole years for a YYYYMMDD birth date.

    Args:
        date_str: Compact birth date
        today: Reference date (defaults to today)

    Returns:
        Age, or None when the date is missing or malformed
    """
    birth = parse_compact_date(date_str)
    if birth is None:
        return None

    today = today or datetime.date.today()
    age = today.year - birth.year
    if (today.month, today.day) < (birth.month, birth.day):
        age -= 1
    return age
