"""
Record Normalizer Module

Turns parsed sheet rows into Employee records.

A row becomes a record only when it has both a staff number and a card-expiry
cell; anything else is skipped, never kept as a partial record.
days_until_expiry is computed against the "today" passed in by the caller, so
every run recalculates it from scratch.
"""

from datetime import date, datetime
from typing import List, Optional, Sequence, Union

from residency_reporting.date_resolver import resolve_expiry_date, to_date
from residency_reporting.logger import get_logger
from residency_reporting.models import Employee
from residency_reporting.schema import COLUMN_INDEX, STAFF_NO_INDEX, CARD_EXPIRY_INDEX

logger = get_logger(__name__)


def _cell(row: Sequence[str], field: str) -> str:
    """Return the cell for a schema field, or "" when the row is too short."""
    index = COLUMN_INDEX[field]
    if index >= len(row):
        return ""
    return row[index] or ""


def format_display_name(value: Optional[str]) -> str:
    """
    Title-case a value for display: "JOHN o'neil" -> "John O'neil".

    Only the first letter of each space-separated word is uppercased; the
    rest of the word is lowercased. Use this when rendering name, job,
    nationality and card type. Never use it on values that are stored,
    searched or compared.
    """
    if not value:
        return ""
    return " ".join(word[:1].upper() + word[1:] for word in value.lower().split(" "))


def calculate_days_until_expiry(
    card_expiry: Union[date, datetime],
    today: Union[date, datetime]
) -> int:
    """
    Whole days from today's midnight to the expiry date's midnight.

    Same day -> 0, tomorrow -> 1, yesterday -> -1.
    """
    return (to_date(card_expiry) - to_date(today)).days


def normalize_row(row: Sequence[str], today: Union[date, datetime]) -> Optional[Employee]:
    """
    Build an Employee from one data row.

    Args:
        row: Parsed cells in source column order
        today: Current date for the day count and date fallback

    Returns:
        Employee, or None when the staff number or expiry cell is empty
    """
    staff_no = row[STAFF_NO_INDEX] if len(row) > STAFF_NO_INDEX else ""
    raw_expiry = row[CARD_EXPIRY_INDEX] if len(row) > CARD_EXPIRY_INDEX else ""

    if not staff_no or not raw_expiry:
        return None

    today = to_date(today)
    card_expiry = resolve_expiry_date(raw_expiry, today)

    return Employee(
        staff_no=staff_no,
        name=_cell(row, "name"),
        job=_cell(row, "job"),
        nationality=_cell(row, "nationality"),
        card_number=_cell(row, "card_number"),
        card_expiry=card_expiry,
        days_until_expiry=calculate_days_until_expiry(card_expiry, today),
        passport_number=_cell(row, "passport_number"),
        card_type=_cell(row, "card_type"),
        passport_issue_date=_cell(row, "passport_issue_date"),
        passport_expiry_date=_cell(row, "passport_expiry_date"),
        email=_cell(row, "email"),
        joining_date=_cell(row, "joining_date"),
        years=_cell(row, "years"),
    )


def build_employees(rows: List[List[str]], today: Union[date, datetime]) -> List[Employee]:
    """
    Normalise all data rows of a parsed sheet.

    Row 0 is the header and is always skipped.

    Args:
        rows: Output of csv_parser.parse_delimited_text()
        today: Current date

    Returns:
        Employees in source order
    """
    employees = []
    skipped = 0

    for row_number, row in enumerate(rows[1:], start=1):
        employee = normalize_row(row, today)
        if employee is None:
            skipped += 1
            logger.debug(f"Skipping row {row_number}: missing staff number or card expiry")
            continue
        employees.append(employee)

    if skipped:
        logger.info(f"Skipped {skipped} row(s) without staff number or card expiry")

    logger.info(f"Normalized {len(employees)} employee record(s)")
    return employees
