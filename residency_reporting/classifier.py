"""
Classifier Module

Pure functions that label and filter Employee records by days until expiry.

Two families of predicates exist and must not be merged:
- Display tiers (get_severity_tier): Expired <= 0, Urgent 1-7,
  Warning 8-30, Normal > 30. Used for status labels and row colours.
- Report buckets (is_expired / is_urgent_for_report): expired <= 0 and
  urgent-or-warning 1-30. Only these decide what goes into a report, so
  Warning records are always reported together with Urgent ones.

This module is pure data processing - no UI, email, or I/O logic.
"""

from typing import List, Optional, Sequence

from residency_reporting.config import URGENT_THRESHOLD_DAYS, REPORT_WINDOW_DAYS
from residency_reporting.models import Employee, EmployeeSummary, ReportBucket, SeverityTier

VIEW_ALL = "all"
VIEW_EXPIRING = "expiring"
VIEW_EXPIRED = "expired"

VIEWS = (VIEW_ALL, VIEW_EXPIRING, VIEW_EXPIRED)


def get_severity_tier(days_until_expiry: int) -> SeverityTier:
    """Display tier for a day count."""
    if days_until_expiry <= 0:
        return SeverityTier.EXPIRED
    if days_until_expiry <= URGENT_THRESHOLD_DAYS:
        return SeverityTier.URGENT
    if days_until_expiry <= REPORT_WINDOW_DAYS:
        return SeverityTier.WARNING
    return SeverityTier.NORMAL


def get_status_text(days_until_expiry: int) -> str:
    """English status label ("Expired", "Urgent", "Warning", "Normal")."""
    return get_severity_tier(days_until_expiry).value


def is_expired(employee: Employee) -> bool:
    return employee.days_until_expiry <= 0


def is_urgent_for_report(employee: Employee) -> bool:
    """True for cards expiring within the report window (1-30 days)."""
    return 0 < employee.days_until_expiry <= REPORT_WINDOW_DAYS


def is_warning(employee: Employee) -> bool:
    return URGENT_THRESHOLD_DAYS < employee.days_until_expiry <= REPORT_WINDOW_DAYS


def get_report_bucket(employee: Employee) -> Optional[ReportBucket]:
    """Report bucket of a record, or None when it needs no notification."""
    if is_expired(employee):
        return ReportBucket.EXPIRED
    if is_urgent_for_report(employee):
        return ReportBucket.URGENT_OR_WARNING
    return None


def filter_expired(employees: Sequence[Employee]) -> List[Employee]:
    return [employee for employee in employees if is_expired(employee)]


def filter_urgent_for_report(employees: Sequence[Employee]) -> List[Employee]:
    return [employee for employee in employees if is_urgent_for_report(employee)]


def filter_warning(employees: Sequence[Employee]) -> List[Employee]:
    return [employee for employee in employees if is_warning(employee)]


def summarize(employees: Sequence[Employee]) -> EmployeeSummary:
    """
    Count all, expiring (1-30 days) and expired records.

    Args:
        employees: Records of the current run

    Returns:
        EmployeeSummary with total, expiring and expired counts
    """
    return EmployeeSummary(
        total=len(employees),
        expiring=len(filter_urgent_for_report(employees)),
        expired=len(filter_expired(employees)),
    )


def search_employees(employees: Sequence[Employee], keyword: str) -> List[Employee]:
    """
    Case-insensitive substring search over the raw record values.

    Matches name, staff number, passport number, job, nationality, card type
    and card number. A blank keyword returns an empty list.
    """
    search_keyword = (keyword or "").strip().lower()
    if not search_keyword:
        return []

    results = []
    for employee in employees:
        searchable = (
            employee.name,
            employee.staff_no,
            employee.passport_number,
            employee.job,
            employee.nationality,
            employee.card_type,
            employee.card_number,
        )
        if any(search_keyword in value.lower() for value in searchable):
            results.append(employee)
    return results


def select_view(employees: Sequence[Employee], view: str) -> List[Employee]:
    """
    Records for a dashboard view.

    Args:
        employees: Records of the current run
        view: "all", "expiring" (1-30 days) or "expired" (<= 0 days)

    Raises:
        ValueError: If view is unknown
    """
    if view == VIEW_ALL:
        return list(employees)
    if view == VIEW_EXPIRING:
        return filter_urgent_for_report(employees)
    if view == VIEW_EXPIRED:
        return filter_expired(employees)
    raise ValueError(f"Unknown view: {view}. Valid options: {', '.join(VIEWS)}")
