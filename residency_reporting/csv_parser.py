"""
CSV Parser Module

Splits the raw text of the published sheet export into rows of string cells.

The parser is intentionally naive and matches how the sheet has always been
read:
- one row per line, blank lines are dropped
- cells are split on every comma, trimmed, and have all double quotes removed
- quoted cells are NOT protected, so a comma inside a quoted value splits it

Upstream data must therefore never contain commas inside a cell.
The first row is the header; this module does not treat it specially.
"""

from typing import List

from residency_reporting.logger import get_logger

logger = get_logger(__name__)

CELL_DELIMITER = ","

QUOTE_CHAR = '"'


def parse_line(line: str) -> List[str]:
    """Split one line into trimmed, quote-stripped cells."""
    return [cell.strip().replace(QUOTE_CHAR, "") for cell in line.split(CELL_DELIMITER)]


def parse_delimited_text(text: str) -> List[List[str]]:
    """
    Parse delimited text into a list of rows.

    Args:
        text: Raw CSV text (UTF-8 decoded)

    Returns:
        List of rows, each a list of cell strings. Whitespace-only lines
        produce no row.
    """
    if not text:
        logger.debug("Received empty text, no rows parsed")
        return []

    rows = []
    for line in text.split("\n"):
        if not line.strip():
            continue
        rows.append(parse_line(line))

    logger.debug(f"Parsed {len(rows)} row(s) from {len(text)} characters")
    return rows
