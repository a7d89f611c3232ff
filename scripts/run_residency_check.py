#!/usr/bin/env python3
"""
Cron Runner Script for Residency Expiry Reporting

This script is designed to be executed by cron (or a CI scheduler) for the
daily residency check. It runs the pipeline once and exits.

CRON CONFIGURATION:
-------------------
# Run every day at 09:00 AM Riyadh time (06:00 AM UTC)
0 6 * * * /usr/bin/python3 /path/to/project/scripts/run_residency_check.py --send >> /path/to/project/logs/cron.log 2>&1

CRON EXPRESSION BREAKDOWN:
- 0: Minute (top of the hour)
- 6: Hour (6 AM UTC = 9:00 AM Asia/Riyadh, UTC + 3, no daylight saving)
- *: Day of month (any)
- *: Month (any)
- *: Day of week (any)

ENVIRONMENT VARIABLES:
----------------------
Values are loaded from a .env file in the project root when present.

REQUIRED FOR SENDING:
- SMTP_SERVER
- SMTP_USER
- SMTP_PASSWORD
- SMTP_PORT (optional, default: 587; 465 uses implicit TLS)
- EMAIL_TO (comma-separated recipients)

OPTIONAL:
- RESIDENCY_SOURCE_URL (CSV export URL of the residency sheet)
- REPORT_TYPE (expired, urgent or both; default: urgent)
- SEND_HEARTBEAT_WHEN_EMPTY (send a test email when nothing is due)
- LOG_CONSOLE_LEVEL (console verbosity, default: INFO; --verbose forces DEBUG)

LOGGING:
--------
- Cron output: logs/cron.log (stdout/stderr from this script)
- Application logs: logs/residency_report.log (from residency_reporting modules)
"""

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Environment must be loaded before the config module reads it
load_dotenv(project_root / ".env")

from residency_reporting.logger import set_console_level  # noqa: E402
from residency_reporting.orchestrator import run_residency_check  # noqa: E402


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Run the residency expiry check once.")
    parser.add_argument(
        "--type",
        dest="report_type",
        choices=["expired", "urgent", "both"],
        default=None,
        help="Report type (default: REPORT_TYPE from environment, else urgent)",
    )
    parser.add_argument(
        "--send",
        action="store_true",
        help="Actually send the email (default is a dry run that only logs)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show DEBUG messages on the console (the log file always has them)",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """
    Main entry point for cron execution.

    Returns:
        Process exit code (0 on success, 1 on failure)
    """
    args = parse_args(argv)

    if args.verbose:
        set_console_level("DEBUG")

    try:
        print("=" * 70)
        print("CRON: Starting Residency Expiry Check")
        print("=" * 70)
        print()

        success, report, error = run_residency_check(
            report_type=args.report_type,
            dry_run_email=not args.send
        )

        print()
        print("=" * 70)

        if not success:
            print("CRON: Check failed")
            print(f"Error: {error}")
            print("=" * 70)
            return 1

        print("CRON: Check completed successfully")
        print(f"Report: {report.subject.strip() if report else 'none (nothing to notify)'}")
        if error:
            print(f"Warning: {error}")
        print("=" * 70)
        return 0

    except Exception as e:
        print()
        print("=" * 70)
        print("CRON: Unexpected error in residency check")
        print(f"Error: {str(e)}")
        print("=" * 70)
        return 1


if __name__ == "__main__":
    sys.exit(main())
