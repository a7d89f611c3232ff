"""
Main Orchestrator Module

This module orchestrates the complete residency reporting pipeline:
1. Fetch and normalise employee records from the source sheet
2. Classify records and render the requested report
3. Send the report by email (or log it in dry-run mode)

This is pure orchestration/glue code - no business logic.
All business logic lives in the individual modules.
"""

import html
import os
from datetime import date, datetime
from typing import Optional, Sequence, Tuple, Union

from residency_reporting.classifier import summarize
from residency_reporting.config import (
    DEFAULT_REPORT_TYPE,
    EMAIL_RECIPIENTS,
    EMAIL_SENDER_DISPLAY,
    HEARTBEAT_SUBJECT,
    LOGS_DIR,
    LOG_FILENAME,
    SEND_HEARTBEAT_WHEN_EMPTY
)
from residency_reporting.date_resolver import to_date
from residency_reporting.email_sender import send_email
from residency_reporting.logger import get_logger
from residency_reporting.models import Employee, Report, ReportType
from residency_reporting.report_renderer import format_report_date, generate_report
from residency_reporting.schema import SchemaMismatchError
from residency_reporting.source_fetcher import load_employees

logger = get_logger(__name__)


def build_report(
    report_type: Union[ReportType, str],
    employees: Sequence[Employee],
    today: Optional[Union[date, datetime]] = None
) -> Optional[Report]:
    """
    Render one report type for an already-loaded employee collection.

    Args:
        report_type: "expired", "urgent" or "both"
        employees: Records of the current run
        today: Current date for the subject line (default: date.today())

    Returns:
        Report, or None when there is nothing to notify
    """
    today = to_date(today) if today is not None else date.today()
    return generate_report(report_type, employees, today_text=format_report_date(today))


def build_heartbeat_report(employee_count: int) -> Report:
    """Diagnostic "system is alive" email sent when a run has nothing to report."""
    body = (
        "<h2>Test Email</h2>"
        "<p>This is a test email to verify the email system is working. "
        f"Total employees processed: {html.escape(str(employee_count))}</p>"
    )
    return Report(subject=HEARTBEAT_SUBJECT, body=body)


def _deliver(report: Report) -> Optional[str]:
    """Send a report to the configured recipients. Returns an error message or None."""
    if not EMAIL_RECIPIENTS:
        error_msg = "Email recipient list is empty. Skipping email send."
        logger.warning(error_msg)
        return error_msg

    success, error = send_email(
        to_emails=EMAIL_RECIPIENTS,
        subject=report.subject,
        html_body=report.body,
        sender_display=EMAIL_SENDER_DISPLAY
    )

    if not success:
        error_msg = f"Failed to send email: {error}"
        logger.warning(error_msg)
        return error_msg

    logger.info("Email sent successfully")
    return None


def run_residency_check(
    report_type: Optional[Union[ReportType, str]] = None,
    today: Optional[Union[date, datetime]] = None,
    dry_run_email: bool = True,
    source_text: Optional[str] = None
) -> Tuple[bool, Optional[Report], Optional[str]]:
    """
    Run the complete residency reporting pipeline end-to-end.

    This function orchestrates all reporting steps:
    1. Fetch and normalise employee records (empty on fetch failure)
    2. Render the requested report (None when nothing to notify)
    3. Send the report by email (if dry_run_email=False)

    Args:
        report_type: "expired", "urgent" or "both" (default: DEFAULT_REPORT_TYPE from config)
        today: Current date (default: date.today())
        dry_run_email: If True, skip email sending (log only). If False, send email.
        source_text: Already-downloaded CSV text; skips the HTTP fetch when given

    Returns:
        Tuple of (success: bool, report: Optional[Report], error: Optional[str])
        - success: False when the run itself failed (unknown report type,
          source header that no longer matches the column table)
        - report: Rendered report, or None when there was nothing to notify
        - error: Failure or delivery error message, None if everything succeeded

    Example:
        success, report, error = run_residency_check(
            report_type="both",
            today=date(2025, 1, 1),
            dry_run_email=True
        )
    """
    try:
        report_type = ReportType.from_string(report_type or DEFAULT_REPORT_TYPE)
    except ValueError as e:
        error_msg = str(e)
        logger.error(error_msg)
        return False, None, error_msg

    today = to_date(today) if today is not None else date.today()

    try:
        logger.info("=" * 70)
        logger.info("Starting Residency Expiry Check")
        logger.info("=" * 70)
        logger.info(f"Report type: {report_type.value}")
        logger.info(f"Run date: {today.isoformat()}")
        logger.info(f"Dry run email: {dry_run_email}")
        logger.info(f"Log file: {os.path.join(LOGS_DIR, LOG_FILENAME)}")
        logger.info("=" * 70)

        # Step 1: Load employee records
        logger.info("STEP 1: Loading employee records...")
        try:
            employees = load_employees(today=today, source_text=source_text)
        except SchemaMismatchError as e:
            error_msg = f"Source sheet layout changed, aborting check: {str(e)}"
            logger.error(error_msg)
            logger.info("=" * 70)
            return False, None, error_msg

        if not employees:
            logger.warning("Aborting check, no employees to process.")
            logger.info("=" * 70)
            return True, None, None

        summary = summarize(employees)
        logger.info(f"Loaded {summary.total} employees: "
                    f"{summary.expired} expired, {summary.expiring} expiring within 30 days")
        for employee in employees[:3]:
            logger.debug(f"Employee {employee.staff_no}: days until expiry {employee.days_until_expiry}")
        logger.info("✓ Step 1 completed: Employee records loaded")

        # Step 2: Render report
        logger.info("STEP 2: Generating report...")
        report = build_report(report_type, employees, today)

        if report is None:
            logger.info(f"No employees match the '{report_type.value}' report. No email will be sent.")

            if SEND_HEARTBEAT_WHEN_EMPTY and not dry_run_email:
                logger.info("Sending heartbeat email to verify email functionality...")
                heartbeat_error = _deliver(build_heartbeat_report(len(employees)))
                return True, None, heartbeat_error

            logger.info("=" * 70)
            return True, None, None

        logger.info(f"✓ Step 2 completed: Report generated ({report.subject.strip()})")

        # Step 3: Send email (if not dry run)
        logger.info("STEP 3: Sending email...")

        if dry_run_email:
            logger.info("DRY RUN MODE: Email sending skipped (dry_run_email=True)")
            logger.info(f"Would send email to {len(EMAIL_RECIPIENTS)} recipients")
            logger.debug(f"Email body preview generated ({len(report.body)} characters)")
            delivery_error = None
        else:
            # Delivery failure does not invalidate the report
            delivery_error = _deliver(report)

        logger.info("=" * 70)
        logger.info("Residency check completed")
        logger.info(f"Email sent: {'No (dry run)' if dry_run_email else ('No' if delivery_error else 'Yes')}")
        logger.info("=" * 70)

        return True, report, delivery_error

    except Exception as e:
        error_msg = f"Unexpected error in residency check: {str(e)}"
        logger.error(error_msg, exc_info=True)
        return False, None, error_msg
