"""
Source Fetcher Module (READ-ONLY)

This module downloads the published CSV export of the staff residency sheet
and turns it into Employee records.

Failure policy:
- Network errors, timeouts, non-2xx responses and undecodable bodies are
  logged and reported through the returned tuple; nothing is raised
- load_employees() turns a fetch failure into an empty list, so an
  unreachable source produces a quiet run instead of a crash
- A header that no longer matches the column table is NOT quiet:
  SchemaMismatchError propagates so the run is reported as failed
- No retries; the next scheduled run simply tries again
"""

from datetime import date, datetime
from typing import List, Optional, Tuple, Union

import requests

from residency_reporting.config import SOURCE_CSV_URL, SOURCE_FETCH_TIMEOUT, VALIDATE_SOURCE_HEADER
from residency_reporting.csv_parser import parse_delimited_text
from residency_reporting.date_resolver import to_date
from residency_reporting.logger import get_logger
from residency_reporting.models import Employee
from residency_reporting.normalizer import build_employees
from residency_reporting.schema import validate_header

logger = get_logger(__name__)


def fetch_source_text(
    url: Optional[str] = None,
    timeout: Optional[int] = None
) -> Tuple[bool, Optional[str], Optional[str]]:
    """
    Download the raw CSV text of the residency sheet.

    Args:
        url: CSV export URL (default: SOURCE_CSV_URL from config)
        timeout: Request timeout in seconds (default: SOURCE_FETCH_TIMEOUT)

    Returns:
        Tuple of (success: bool, text: Optional[str], error_message: Optional[str])
        - success: True if the body was downloaded and decoded
        - text: CSV text, or None if failed
        - error_message: Error message if fetch failed, None if successful

    Example:
        success, text, error = fetch_source_text()
        if success:
            rows = parse_delimited_text(text)
    """
    if url is None:
        url = SOURCE_CSV_URL
    if timeout is None:
        timeout = SOURCE_FETCH_TIMEOUT

    if not url:
        error_msg = "Source URL is not configured"
        logger.error(error_msg)
        return False, None, error_msg

    logger.info("Fetching employee data from source...")
    logger.debug(f"Source URL: {url}")

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.Timeout:
        error_msg = f"Timed out after {timeout} seconds while fetching source data"
        logger.error(error_msg)
        return False, None, error_msg
    except requests.HTTPError as e:
        error_msg = f"Source returned HTTP error: {str(e)}"
        logger.error(error_msg)
        return False, None, error_msg
    except requests.RequestException as e:
        error_msg = f"Failed to fetch source data: {str(e)}"
        logger.error(error_msg, exc_info=True)
        return False, None, error_msg

    try:
        text = response.content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        error_msg = f"Source body is not valid UTF-8: {str(e)}"
        logger.error(error_msg)
        return False, None, error_msg

    logger.info(f"Fetched {len(text)} characters from source")
    return True, text, None


def load_employees(
    today: Optional[Union[date, datetime]] = None,
    source_text: Optional[str] = None,
    url: Optional[str] = None
) -> List[Employee]:
    """
    Fetch, parse, validate and normalise the residency sheet.

    Args:
        today: Current date (default: date.today())
        source_text: Already-downloaded CSV text; skips the HTTP fetch when given
        url: Override for the source URL

    Returns:
        Employee records, or an empty list when the source could not be read

    Raises:
        SchemaMismatchError: If the header no longer matches the column table
    """
    today = to_date(today) if today is not None else date.today()

    if source_text is None:
        success, source_text, error = fetch_source_text(url=url)
        if not success:
            logger.error(f"Treating run as having no employees: {error}")
            return []

    rows = parse_delimited_text(source_text)

    if len(rows) < 2:
        logger.warning("No employee data found in source (header only or empty).")
        return []

    if VALIDATE_SOURCE_HEADER:
        # Raises SchemaMismatchError; positional reads would be wrong past this point
        validate_header(rows[0])

    employees = build_employees(rows, today)
    logger.info(f"Successfully processed {len(employees)} employees.")
    return employees
