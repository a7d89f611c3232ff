"""
Source Schema Module

Rows from the sheet are read by position. This module keeps the
column-index -> field table in one versioned place and checks the header
row against it before any data row is read, so a reordered sheet fails
loudly instead of producing wrong records.

Bump SCHEMA_VERSION whenever SOURCE_COLUMNS changes.
"""

import re
from collections import namedtuple
from typing import List, Sequence

from residency_reporting.logger import get_logger

logger = get_logger(__name__)

SCHEMA_VERSION = 2

SourceColumn = namedtuple("SourceColumn", ["index", "field", "keywords", "required"])

# keywords are matched against the normalised header text (lowercase,
# punctuation removed); any one keyword is enough
SOURCE_COLUMNS = (
    SourceColumn(
        0, "staff_no",
        ("staff", "employee no", "employee number", "employee id", "emp no", "emp id",
         "رقم الموظف", "الرقم الوظيفي"),
        True,
    ),
    SourceColumn(1, "passport_number", ("passport",), False),
    SourceColumn(2, "name", ("name", "اسم"), False),
    SourceColumn(3, "job", ("job", "position", "title", "الوظيفة"), False),
    SourceColumn(4, "nationality", ("national", "الجنسية"), False),
    SourceColumn(5, "card_type", ("type", "نوع"), False),
    SourceColumn(6, "card_number", ("card", "number", "رقم"), False),
    SourceColumn(7, "card_expiry", ("expir", "انتهاء"), True),
    SourceColumn(8, "passport_issue_date", ("issue", "إصدار", "اصدار"), False),
    SourceColumn(9, "passport_expiry_date", ("expir", "انتهاء"), False),
    SourceColumn(10, "email", ("mail", "البريد"), False),
    SourceColumn(11, "joining_date", ("join", "التحاق", "تعيين"), False),
    SourceColumn(12, "years", ("year", "سنوات"), False),
)

COLUMN_INDEX = {column.field: column.index for column in SOURCE_COLUMNS}

STAFF_NO_INDEX = COLUMN_INDEX["staff_no"]

CARD_EXPIRY_INDEX = COLUMN_INDEX["card_expiry"]

_PUNCTUATION_PATTERN = re.compile(r"[^\w\s]")


class SchemaMismatchError(ValueError):
    """Raised when the source header does not match SOURCE_COLUMNS."""


def normalize_header(value: str) -> str:
    """Lowercase a header cell, drop punctuation and collapse whitespace."""
    cleaned = _PUNCTUATION_PATTERN.sub(" ", str(value).lower())
    return " ".join(cleaned.split())


def header_matches(header_cell: str, column: SourceColumn) -> bool:
    normalized = normalize_header(header_cell)
    return any(keyword in normalized for keyword in column.keywords)


def validate_header(header_row: Sequence[str]) -> List[str]:
    """
    Check the header row against the versioned column table.

    Required columns must be present and match; optional columns that do not
    match only produce warnings.

    Args:
        header_row: First row of the parsed sheet

    Returns:
        List of warning messages for optional columns (empty when all match)

    Raises:
        SchemaMismatchError: If a required column is missing or mismatched
    """
    problems = []
    warnings = []

    for column in SOURCE_COLUMNS:
        if column.index >= len(header_row):
            message = f"column {column.index} ({column.field}) is missing"
        elif not header_matches(header_row[column.index], column):
            message = (
                f"column {column.index} ({column.field}) has unexpected header "
                f"'{header_row[column.index]}'"
            )
        else:
            continue

        if column.required:
            problems.append(message)
        else:
            warnings.append(message)

    if problems:
        error_msg = (
            f"Source header does not match schema version {SCHEMA_VERSION}: "
            + "; ".join(problems)
        )
        logger.error(error_msg)
        raise SchemaMismatchError(error_msg)

    for message in warnings:
        logger.warning(f"Source header check: {message}")

    logger.debug(f"Source header matches schema version {SCHEMA_VERSION}")
    return warnings
