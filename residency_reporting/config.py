"""
Configuration file for automated residency expiry reporting.

All configurable values must be defined here - no hardcoded values in logic files.
Update these values as needed without modifying the implementation code.

IMPORTANT: Sensitive values (email recipients, SMTP credentials) are read from environment variables.
Set these in your .env file or system environment before running the pipeline.
"""

import os
import logging

# Set up logger for configuration warnings
_logger = logging.getLogger(__name__)


def _env_flag(name: str, default: bool) -> bool:
    """Read a boolean feature flag ("true", "1", "yes") from the environment."""
    value = os.getenv(name, "").strip().lower()
    if not value:
        return default
    return value in ("true", "1", "yes")


# ============================================================================
# Data Source Configuration
# ============================================================================

# Published CSV export of the staff residency sheet
# Expected format in .env: RESIDENCY_SOURCE_URL=https://docs.google.com/spreadsheets/d/<id>/export?format=csv&gid=<gid>
DEFAULT_SOURCE_CSV_URL = (
    "https://docs.google.com/spreadsheets/d/1Fnr64ZBPhUoOJRY9CUr47rh6a_j-iHRmR37Jew9WdXo"
    "/export?format=csv&gid=323448096"
)
SOURCE_CSV_URL = os.getenv("RESIDENCY_SOURCE_URL", "") or DEFAULT_SOURCE_CSV_URL

# HTTP request timeout in seconds
# Expected format in .env: SOURCE_FETCH_TIMEOUT=30
_fetch_timeout_str = os.getenv("SOURCE_FETCH_TIMEOUT", "30")
try:
    SOURCE_FETCH_TIMEOUT = int(_fetch_timeout_str)
except ValueError:
    _logger.warning(f"Invalid SOURCE_FETCH_TIMEOUT value '{_fetch_timeout_str}'. Using default: 30 seconds.")
    SOURCE_FETCH_TIMEOUT = 30

# Validate the header row against the column table in schema.py before reading rows
# Expected format in .env: VALIDATE_SOURCE_HEADER=false
VALIDATE_SOURCE_HEADER = _env_flag("VALIDATE_SOURCE_HEADER", True)

if not VALIDATE_SOURCE_HEADER:
    _logger.debug("VALIDATE_SOURCE_HEADER is disabled. Source columns are read positionally without checks.")

# ============================================================================
# Email Configuration
# ============================================================================

# Email recipients are read from environment variable EMAIL_TO
# Expected format in .env: EMAIL_TO=hr@company.com,admin@company.com
# Values are split by comma, stripped of whitespace, and empty values are ignored
_email_recipients_str = os.getenv("EMAIL_TO", "")

if _email_recipients_str:
    EMAIL_RECIPIENTS = [
        email.strip()
        for email in _email_recipients_str.split(",")
        if email.strip()
    ]
else:
    EMAIL_RECIPIENTS = []

# Log warning if no recipients configured (but don't log actual email addresses)
if not EMAIL_RECIPIENTS:
    _logger.warning(
        "EMAIL_TO environment variable is not set or is empty. "
        "Pipeline will run but no emails will be sent. "
        "Set EMAIL_TO in .env file (comma-separated list of email addresses)."
    )
else:
    _logger.info(f"Loaded {len(EMAIL_RECIPIENTS)} email recipient(s) from environment variable")

# Display name used in the From header ("Staff Alert System" <SMTP_USER>)
EMAIL_SENDER_DISPLAY = os.getenv("EMAIL_SENDER_DISPLAY", "") or "Staff Alert System"

# Delay in seconds between sending emails to different recipients
EMAIL_DELAY_SECONDS = 1.5

# ============================================================================
# Report Configuration
# ============================================================================

# Report type sent by the scheduled run: 'expired', 'urgent' or 'both'
# Expected format in .env: REPORT_TYPE=urgent
DEFAULT_REPORT_TYPE = os.getenv("REPORT_TYPE", "").strip().lower() or "urgent"

if DEFAULT_REPORT_TYPE not in ("expired", "urgent", "both"):
    _logger.warning(f"Invalid REPORT_TYPE value '{DEFAULT_REPORT_TYPE}'. Using default: urgent.")
    DEFAULT_REPORT_TYPE = "urgent"

# Send a diagnostic "system is alive" email when there is nothing to report
# Expected format in .env: SEND_HEARTBEAT_WHEN_EMPTY=true
SEND_HEARTBEAT_WHEN_EMPTY = _env_flag("SEND_HEARTBEAT_WHEN_EMPTY", False)

HEARTBEAT_SUBJECT = "Test Email - Staff Alert System"

# ============================================================================
# Expiry Thresholds
# ============================================================================

# Cards expiring within this many days are shown as "Urgent" (display tier)
URGENT_THRESHOLD_DAYS = 7

# Cards expiring within this many days are included in the urgent report
# and shown as "Warning" when beyond URGENT_THRESHOLD_DAYS
REPORT_WINDOW_DAYS = 30

# ============================================================================
# Date Format Configuration
# ============================================================================

# Locale for the long-form date in email subjects (e.g. "١٧ أكتوبر ٢٠٢٦")
REPORT_DATE_LOCALE = "ar_EG"

# Expiry date format in email tables and exports (e.g. "05/03/2025")
DATE_FORMAT_TABLE = "%d/%m/%Y"

# Date format for export filenames (e.g. "Staff_Report_2025-03-05.xlsx")
DATE_FORMAT_FILENAME = "%Y-%m-%d"

# ============================================================================
# Export Configuration
# ============================================================================

EXPORT_SHEET_NAME = "Staff Report"

EXPORT_FILENAME_PREFIX = "Staff_Report_"

# ============================================================================
# Scheduling Configuration
# ============================================================================

# The scheduled run is triggered by cron (see scripts/run_residency_check.py).
# These values document the intended schedule: daily at 09:00 Asia/Riyadh.
SCHEDULE_HOUR = 9

SCHEDULE_MINUTE = 0

SCHEDULE_TIMEZONE = "Asia/Riyadh"

# ============================================================================
# File Paths and Directories
# ============================================================================

# Directory for log files
# Relative to project root
LOGS_DIR = "logs"

# Log file name
LOG_FILENAME = "residency_report.log"

# Console log level; the log file always records DEBUG
# Expected format in .env: LOG_CONSOLE_LEVEL=WARNING
_console_level_str = os.getenv("LOG_CONSOLE_LEVEL", "INFO").strip().upper() or "INFO"
if isinstance(logging.getLevelName(_console_level_str), int):
    LOG_CONSOLE_LEVEL = _console_level_str
else:
    _logger.warning(f"Invalid LOG_CONSOLE_LEVEL value '{_console_level_str}'. Using default: INFO.")
    LOG_CONSOLE_LEVEL = "INFO"

# ============================================================================
# SMTP Configuration
# ============================================================================

# SMTP settings are read from environment variables for security:
# - SMTP_SERVER: SMTP server address (e.g., 'smtp.gmail.com')
# - SMTP_PORT: SMTP port (default: 587 for STARTTLS, 465 for implicit TLS)
# - SMTP_USER: SMTP username/email
# - SMTP_PASSWORD: SMTP password or app-specific password

# Default SMTP port (used if SMTP_PORT environment variable is not set)
DEFAULT_SMTP_PORT = 587

# Port that uses implicit TLS (SMTP_SSL) instead of STARTTLS
SMTP_SSL_PORT = 465
