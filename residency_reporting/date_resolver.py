"""
Date Resolver Module

Turns the raw card-expiry cell into a calendar date.

The sheet mixes two conventions:
- Gregorian dates written day-first: "05/03/2025" is 5 March 2025
- Hijri dates carrying the era marker "هـ": "10/05/1446 هـ"

Hijri years are converted with a linear approximation, which can be off by
about a day near year boundaries. That precision is enough for expiry alerts.

Resolution never raises. Input that cannot be understood resolves to the
run's "today" and a warning is logged, so a bad cell shows up as expired
instead of silently disappearing from the report.
"""

import math
import re
from datetime import date, datetime, timedelta
from typing import Optional, Union

import pandas as pd

from residency_reporting.logger import get_logger

logger = get_logger(__name__)

HIJRI_MARKER = "هـ"

DATE_SEPARATOR = "/"

# gregorian_year = floor(hijri_year * HIJRI_YEAR_FACTOR + HIJRI_YEAR_OFFSET)
HIJRI_YEAR_FACTOR = 0.970229
HIJRI_YEAR_OFFSET = 621.5643

_LEADING_INT_PATTERN = re.compile(r"^\s*([+-]?\d+)")
_HIJRI_STRIP_PATTERN = re.compile(r"هـ|\s")


def to_date(value: Union[date, datetime]) -> date:
    """Drop the time-of-day component (midnight normalisation)."""
    if isinstance(value, datetime):
        return value.date()
    return value


def hijri_to_gregorian_year(hijri_year: int) -> int:
    """Approximate the Gregorian year that a Hijri year falls in."""
    return math.floor(hijri_year * HIJRI_YEAR_FACTOR + HIJRI_YEAR_OFFSET)


def _leading_int(value: str) -> Optional[int]:
    """Read the leading integer of a string ("05 " -> 5, "12abc" -> 12)."""
    match = _LEADING_INT_PATTERN.match(value)
    if not match:
        return None
    return int(match.group(1))


def build_date(year: int, month: int, day: int) -> Optional[date]:
    """
    Build a date leniently from 1-based month and day values.

    Out-of-range months and days roll over (31/02/2025 -> 2025-03-03,
    month 13 -> January of the next year) and two-digit years 0-99 are read
    as 1900-1999, matching spreadsheet date arithmetic.

    Returns:
        The resulting date, or None if it falls outside the supported range
    """
    if 0 <= year <= 99:
        year += 1900

    try:
        carry_years, month_index = divmod(month - 1, 12)
        first_of_month = date(year + carry_years, month_index + 1, 1)
        return first_of_month + timedelta(days=day - 1)
    except (ValueError, OverflowError):
        return None


def _parse_parts(parts) -> Optional[date]:
    """Build a date from [day, month, year] string parts."""
    day, month, year = (_leading_int(part) for part in parts)
    if day is None or month is None or year is None:
        return None
    return build_date(year, month, day)


def resolve_hijri_date(raw_value: str, today: date) -> date:
    """
    Resolve a Hijri-marked date string ("10/05/1446 هـ").

    The month and day are used as-is; only the year is converted.
    """
    parts = _HIJRI_STRIP_PATTERN.sub("", raw_value).split(DATE_SEPARATOR)

    if len(parts) != 3:
        logger.warning(f"Hijri date '{raw_value}' does not have 3 parts. Using today's date.")
        return today

    day = _leading_int(parts[0])
    month = _leading_int(parts[1])
    hijri_year = _leading_int(parts[2])
    if day is None or month is None or hijri_year is None:
        logger.warning(f"Hijri date '{raw_value}' has non-numeric parts. Using today's date.")
        return today

    resolved = build_date(hijri_to_gregorian_year(hijri_year), month, day)
    if resolved is None:
        logger.warning(f"Hijri date '{raw_value}' is out of range. Using today's date.")
        return today

    return resolved


def _parse_free_form(raw_value: str) -> Optional[date]:
    """Best-effort parse of a non day/month/year string ("2025-03-05", "5 March 2025")."""
    parsed = pd.to_datetime(raw_value.strip(), errors="coerce")
    if pd.isna(parsed):
        return None
    return parsed.date()


def resolve_expiry_date(raw_value: str, today: Optional[Union[date, datetime]] = None) -> date:
    """
    Resolve a raw card-expiry cell to a calendar date.

    Args:
        raw_value: Cell text, e.g. "05/03/2025", "10/05/1446 هـ", "2025-03-05"
        today: Current date used as the fallback for unreadable input
               (defaults to date.today())

    Returns:
        Resolved calendar date
    """
    today = to_date(today) if today is not None else date.today()

    if HIJRI_MARKER in raw_value:
        return resolve_hijri_date(raw_value, today)

    parts = raw_value.split(DATE_SEPARATOR)
    if len(parts) == 3:
        resolved = _parse_parts(parts)
    else:
        resolved = _parse_free_form(raw_value)

    if resolved is None:
        logger.warning(f"Could not parse expiry date '{raw_value}'. Using today's date.")
        return today

    return resolved
