"""
Report Renderer Module

This module generates the Arabic email reports for the residency pipeline.
A report contains:
- Subject line tagged by report type and dated with today's long-form Arabic date
- Greeting and narrative paragraph
- HTML table(s) of the affected employees (right-to-left)
- Closing

Report types:
- expired: cards with 0 or fewer days left
- urgent:  cards expiring within 1-30 days
- both:    one email with an "expired" section and an "expiring soon" section

No report is generated when the relevant records are empty; callers receive
None and should treat it as "nothing to notify".

All HTML is email-client safe (Gmail-compatible).
"""

import html
from datetime import date, datetime
from typing import Dict, List, Optional, Sequence, Union

from babel.dates import format_date

from residency_reporting.classifier import filter_expired, filter_urgent_for_report, get_severity_tier
from residency_reporting.config import DATE_FORMAT_TABLE, REPORT_DATE_LOCALE
from residency_reporting.date_resolver import to_date
from residency_reporting.logger import get_logger
from residency_reporting.models import Employee, Report, ReportType, SeverityTier
from residency_reporting.normalizer import format_display_name

logger = get_logger(__name__)

EMAIL_SUBJECTS = {
    ReportType.EXPIRED: " عاجل - إقامات موظفين منتهية الصلاحية - {date}",
    ReportType.URGENT: " تنبيه - إقامات موظفين تنتهي قريباً - {date}",
    ReportType.BOTH: " عاجل - تقرير إقامات الموظفين (منتهية وقاربة على الانتهاء) - {date}",
}

ARABIC_HEADERS = {
    "staff_no": "رقم الموظف",
    "name": "اسم الموظف",
    "job": "الوظيفة",
    "nationality": "الجنسية",
    "card_number": "رقم البطاقة",
    "card_expiry": "تاريخ انتهاء الإقامة",
    "days_until_expiry": "الأيام المتبقية",
    "status": "الحالة",
}

ARABIC_STATUS = {
    SeverityTier.EXPIRED: "منتهية",
    SeverityTier.URGENT: "عاجل",
    SeverityTier.WARNING: "تحذير",
    SeverityTier.NORMAL: "سارية",
}

# Row background colour per display tier
TIER_ROW_COLORS = {
    SeverityTier.EXPIRED: "#FFEBEE",
    SeverityTier.URGENT: "#FFE0B2",
    SeverityTier.WARNING: "#FFF8E1",
    SeverityTier.NORMAL: "#E8F5E8",
}

DAYS_SUFFIX = "يوم"

# Babel renders Latin digits for ar_EG; subjects use Arabic-Indic digits
ARABIC_INDIC_DIGITS = str.maketrans("0123456789", "٠١٢٣٤٥٦٧٨٩")

EXPIRED_SECTION_TITLE = "أولاً: الموظفون ذوو الإقامات المنتهية الصلاحية"

URGENT_SECTION_TITLE = "ثانياً: الموظفون ذوو الإقامات التي تنتهي قريباً"

TABLE_PLACEHOLDER = "{{TABLE}}"
EXPIRED_SECTION_PLACEHOLDER = "{{EXPIRED_SECTION}}"
URGENT_SECTION_PLACEHOLDER = "{{URGENT_SECTION}}"

_BODY_OPEN = (
    '<div dir="rtl" style="font-family: Arial, sans-serif; font-size: 14px; '
    'line-height: 1.6; color: #333; text-align: right;">'
)
_GREETING = (
    "<p>السلام عليكم ورحمة الله وبركاته</p>\n"
    "<p>تحية طيبة وبعد،</p>\n"
)
_CLOSING = "<p>مع خالص التقدير</p>\n</div>"

EMAIL_TEMPLATES = {
    ReportType.EXPIRED: (
        _BODY_OPEN + "\n" + _GREETING
        + "<p>نود إحاطتكم علماً بأن إقامات الموظفين المذكورين أدناه قد انتهت صلاحيتها، "
        "ونرجو اتخاذ الإجراءات اللازمة لتجديدها في أقرب وقت ممكن.</p>\n"
        + TABLE_PLACEHOLDER + "\n"
        + _CLOSING
    ),
    ReportType.URGENT: (
        _BODY_OPEN + "\n" + _GREETING
        + "<p>نود لفت انتباهكم إلى أن إقامات الموظفين المذكورين أدناه ستنتهي خلال الأيام القادمة، "
        "نرجو التكرم باتخاذ الإجراءات اللازمة لتجديدها قبل انتهاء المدة المحددة.</p>\n"
        + TABLE_PLACEHOLDER + "\n"
        + _CLOSING
    ),
    ReportType.BOTH: (
        _BODY_OPEN + "\n" + _GREETING
        + "<p>نود إحاطتكم علماً بحالة إقامات الموظفين التي تحتاج لاتخاذ إجراءات عاجلة كما يلي:</p>\n"
        + EXPIRED_SECTION_PLACEHOLDER + "\n"
        + URGENT_SECTION_PLACEHOLDER + "\n"
        + "<p>نرجو التكرم باتخاذ الإجراءات اللازمة لتجديد هذه الإقامات في أقرب وقت ممكن.</p>\n"
        + _CLOSING
    ),
}

_CELL_STYLE = "border: 1px solid #ddd; padding: 8px; text-align: center;"


def format_report_date(today: Optional[Union[date, datetime]] = None) -> str:
    """
    Format a date as a long Arabic date for the subject line.

    Digits are converted to Arabic-Indic, e.g. 2026-10-17 -> "١٧ أكتوبر ٢٠٢٦"
    """
    today = to_date(today) if today is not None else date.today()
    return format_date(today, format="long", locale=REPORT_DATE_LOCALE).translate(ARABIC_INDIC_DIGITS)


def format_expiry_date(value: date) -> str:
    """Zero-padded day/month/year, e.g. "05/03/2025"."""
    return value.strftime(DATE_FORMAT_TABLE)


def _table_row(employee: Employee) -> str:
    tier = get_severity_tier(employee.days_until_expiry)
    cells = [
        employee.staff_no,
        format_display_name(employee.name),
        format_display_name(employee.job),
        format_display_name(employee.nationality),
        employee.card_number,
        format_expiry_date(employee.card_expiry),
        f"{employee.days_until_expiry} {DAYS_SUFFIX}",
        ARABIC_STATUS[tier],
    ]
    cells_html = "".join(
        f'\n        <td style="{_CELL_STYLE} font-weight: bold;">{html.escape(value)}</td>'
        for value in cells
    )
    return f'\n      <tr style="background-color: {TIER_ROW_COLORS[tier]};">{cells_html}\n      </tr>'


def generate_email_table(employees: Sequence[Employee], title: str = "") -> str:
    """
    Render employees as an RTL HTML table with Arabic headers.

    Row colour and status label follow the display tier of each record.

    Args:
        employees: Records to list
        title: Optional section heading rendered above the table

    Returns:
        HTML string, or "" when employees is empty
    """
    if not employees:
        return ""

    header_cells = "".join(
        f'\n      <th style="{_CELL_STYLE}">{header}</th>'
        for header in ARABIC_HEADERS.values()
    )
    table_header = (
        '\n    <tr style="background-color: #FFD600; color: #673ab7; font-weight: bold;">'
        f"{header_cells}\n    </tr>"
    )
    table_rows = "".join(_table_row(employee) for employee in employees)

    title_section = (
        f'<h3 style="color: #673ab7; margin: 20px 0 10px 0;">{html.escape(title)}</h3>' if title else ""
    )

    return f"""
    {title_section}
    <table style="border-collapse: collapse; width: 100%; margin: 10px 0; font-family: Arial, sans-serif; direction: rtl;">{table_header}{table_rows}
    </table>
    """


def generate_email_subject(report_type: ReportType, today_text: str) -> str:
    return EMAIL_SUBJECTS[report_type].format(date=today_text)


def _select_buckets(report_type: ReportType, employees: Sequence[Employee]) -> Dict[str, List[Employee]]:
    buckets = {}
    if report_type in (ReportType.EXPIRED, ReportType.BOTH):
        buckets["expired"] = filter_expired(employees)
    if report_type in (ReportType.URGENT, ReportType.BOTH):
        buckets["urgent"] = filter_urgent_for_report(employees)
    return buckets


def generate_report(
    report_type: Union[ReportType, str],
    employees: Sequence[Employee],
    today_text: Optional[str] = None,
    today: Optional[Union[date, datetime]] = None
) -> Optional[Report]:
    """
    Generate the subject and HTML body for a report type.

    Args:
        report_type: "expired", "urgent" or "both" (or a ReportType)
        employees: All records of the current run
        today_text: Date string for the subject; derived from today when omitted
        today: Current date, used only when today_text is omitted

    Returns:
        Report, or None when there is nothing to report for this type

    Raises:
        ValueError: If report_type is unknown
    """
    report_type = ReportType.from_string(report_type)
    buckets = _select_buckets(report_type, employees)

    if not any(buckets.values()):
        logger.info(f"No employees for '{report_type.value}' report. No report generated.")
        return None

    if today_text is None:
        today_text = format_report_date(today)

    template = EMAIL_TEMPLATES[report_type]

    if report_type == ReportType.BOTH:
        expired_section = generate_email_table(buckets["expired"], EXPIRED_SECTION_TITLE)
        urgent_section = generate_email_table(buckets["urgent"], URGENT_SECTION_TITLE)
        body = (
            template
            .replace(EXPIRED_SECTION_PLACEHOLDER, expired_section)
            .replace(URGENT_SECTION_PLACEHOLDER, urgent_section)
        )
    else:
        (selected,) = buckets.values()
        body = template.replace(TABLE_PLACEHOLDER, generate_email_table(selected))

    logger.info(
        f"Generated '{report_type.value}' report: "
        + ", ".join(f"{name}={len(records)}" for name, records in buckets.items())
    )
    logger.debug(f"Report body length: {len(body)} characters")

    return Report(subject=generate_email_subject(report_type, today_text), body=body)
