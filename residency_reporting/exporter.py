"""
Exporter Module

Builds the spreadsheet export of employee records used by the dashboard's
download button. The column set mirrors the email table plus the passport,
contact and tenure fields of the source sheet.
"""

import io
from datetime import date
from typing import Optional, Sequence

import pandas as pd

from residency_reporting.classifier import get_status_text
from residency_reporting.config import (
    DATE_FORMAT_FILENAME,
    DATE_FORMAT_TABLE,
    EXPORT_FILENAME_PREFIX,
    EXPORT_SHEET_NAME
)
from residency_reporting.logger import get_logger
from residency_reporting.models import Employee
from residency_reporting.normalizer import format_display_name

logger = get_logger(__name__)

EXPORT_COLUMNS = [
    "Staff No.",
    "Passport Number",
    "Employee Name",
    "Job",
    "Nationality",
    "Card Type",
    "Card Number",
    "Card Expiry Date",
    "Passport Issue Date",
    "Passport Expire Date",
    "Email",
    "Joining Date",
    "Years",
    "Days Remaining",
    "Status",
]


def build_export_dataframe(employees: Sequence[Employee]) -> pd.DataFrame:
    """
    One row per employee with display-cased text columns.

    Returns an empty DataFrame with EXPORT_COLUMNS when employees is empty.
    """
    records = [
        {
            "Staff No.": employee.staff_no,
            "Passport Number": employee.passport_number,
            "Employee Name": format_display_name(employee.name),
            "Job": format_display_name(employee.job),
            "Nationality": format_display_name(employee.nationality),
            "Card Type": format_display_name(employee.card_type),
            "Card Number": employee.card_number,
            "Card Expiry Date": employee.card_expiry.strftime(DATE_FORMAT_TABLE),
            "Passport Issue Date": employee.passport_issue_date,
            "Passport Expire Date": employee.passport_expiry_date,
            "Email": employee.email,
            "Joining Date": employee.joining_date,
            "Years": employee.years,
            "Days Remaining": employee.days_until_expiry,
            "Status": get_status_text(employee.days_until_expiry),
        }
        for employee in employees
    ]
    return pd.DataFrame(records, columns=EXPORT_COLUMNS)


def export_filename(today: Optional[date] = None) -> str:
    """Download filename, e.g. "Staff_Report_2025-03-05.xlsx"."""
    today = today or date.today()
    return f"{EXPORT_FILENAME_PREFIX}{today.strftime(DATE_FORMAT_FILENAME)}.xlsx"


def export_to_excel_bytes(
    employees: Sequence[Employee],
    sheet_name: str = EXPORT_SHEET_NAME
) -> bytes:
    """
    Serialise employees to an .xlsx workbook in memory.

    Args:
        employees: Records to export
        sheet_name: Worksheet name

    Returns:
        Workbook bytes

    Raises:
        ValueError: If employees is empty
    """
    if not employees:
        raise ValueError("No data to export")

    df = build_export_dataframe(employees)

    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=sheet_name, index=False)

    logger.info(f"Exported {len(df)} employee record(s) to Excel")
    return buffer.getvalue()
