"""
Data Models for Residency Reporting

Value types shared by every step of the pipeline. All of them are created
and discarded within a single run; nothing here is persisted.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional


class SeverityTier(Enum):
    """Display tier of a record, derived from its days until expiry."""

    EXPIRED = "Expired"
    URGENT = "Urgent"
    WARNING = "Warning"
    NORMAL = "Normal"


class ReportBucket(Enum):
    """
    Partition used to decide what goes into a report.

    URGENT_OR_WARNING covers 1-30 days and is deliberately wider than
    SeverityTier.URGENT (1-7 days).
    """

    EXPIRED = "expired"
    URGENT_OR_WARNING = "urgent_or_warning"


class ReportType(Enum):
    """Report flavour requested by the caller."""

    EXPIRED = "expired"
    URGENT = "urgent"
    BOTH = "both"

    @classmethod
    def from_string(cls, value: Optional[str]) -> "ReportType":
        """
        Convert a string such as "urgent" to a ReportType.

        Args:
            value: Report type name, or None for the default (URGENT)

        Returns:
            Matching ReportType

        Raises:
            ValueError: If value is not a known report type
        """
        if value is None:
            return cls.URGENT

        if isinstance(value, cls):
            return value

        value_lower = str(value).strip().lower()
        for report_type in cls:
            if report_type.value == value_lower:
                return report_type

        raise ValueError(
            f"Unknown report type: {value}. "
            f"Valid options: {', '.join(t.value for t in cls)}"
        )


@dataclass(frozen=True)
class Employee:
    """
    One staff member's residency record.

    Text fields hold the raw source values (empty string when the cell is
    missing). Display casing is applied only at render time, see
    normalizer.format_display_name().
    """

    staff_no: str
    name: str
    job: str
    nationality: str
    card_number: str
    card_expiry: date
    days_until_expiry: int
    passport_number: str = ""
    card_type: str = ""
    passport_issue_date: str = ""
    passport_expiry_date: str = ""
    email: str = ""
    joining_date: str = ""
    years: str = ""


@dataclass(frozen=True)
class EmployeeSummary:
    """Headline counts shown on the dashboard."""

    total: int
    expiring: int
    expired: int


@dataclass(frozen=True)
class Report:
    """Rendered notification ready to hand to the email sender."""

    subject: str
    body: str
