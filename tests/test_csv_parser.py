"""Unit tests for csv_parser module.

Tests cover:
- Row and cell counts for plain input
- Blank and whitespace-only lines are dropped
- Cell trimming and removal of every double quote
- Commas inside quoted cells are not protected
"""

from __future__ import annotations

import pytest

from residency_reporting.csv_parser import parse_delimited_text, parse_line


@pytest.mark.unit
class TestParseDelimitedText:
    """Unit tests for parse_delimited_text."""

    def test_rows_and_cells_match_input_shape(self) -> None:
        """Verify N non-blank lines of M cells give N rows of M cells."""
        text = "a,b,c\n1,2,3\n4,5,6"
        rows = parse_delimited_text(text)
        assert rows == [["a", "b", "c"], ["1", "2", "3"], ["4", "5", "6"]]

    def test_blank_lines_are_dropped(self) -> None:
        """Verify empty and whitespace-only lines produce no rows."""
        text = "a,b\n\n   \n1,2\n\t\n"
        rows = parse_delimited_text(text)
        assert rows == [["a", "b"], ["1", "2"]]

    def test_empty_text_returns_no_rows(self) -> None:
        assert parse_delimited_text("") == []

    def test_cells_are_trimmed_and_quotes_removed(self) -> None:
        """Verify cells are trimmed and every double quote is deleted."""
        rows = parse_delimited_text(' "Ahmed" , say "hi" ,x\r\n')
        assert rows == [["Ahmed", "say hi", "x"]]

    def test_quoted_comma_splits_cell(self) -> None:
        """Verify a comma inside quotes still splits the cell."""
        rows = parse_delimited_text('1,"Ali, Ahmed",2')
        assert rows == [["1", "Ali", "Ahmed", "2"]]

    def test_empty_cells_are_kept(self) -> None:
        assert parse_line("1,,3,") == ["1", "", "3", ""]

    def test_windows_line_endings(self) -> None:
        """Verify a trailing carriage return does not leak into the last cell."""
        rows = parse_delimited_text("a,b\r\n1,2\r\n")
        assert rows == [["a", "b"], ["1", "2"]]
