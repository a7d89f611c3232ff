"""Unit tests for schema module.

Tests cover:
- The expected header passes validation
- Reordered or missing required columns raise SchemaMismatchError
- Optional column mismatches only produce warnings
"""

from __future__ import annotations

import pytest

from residency_reporting.csv_parser import parse_line
from residency_reporting.schema import (
    CARD_EXPIRY_INDEX,
    SOURCE_COLUMNS,
    STAFF_NO_INDEX,
    SchemaMismatchError,
    normalize_header,
    validate_header,
)


@pytest.mark.unit
class TestValidateHeader:
    """Unit tests for validate_header."""

    def test_expected_header_is_valid(self, source_header: str) -> None:
        assert validate_header(parse_line(source_header)) == []

    def test_arabic_required_headers_are_valid(self) -> None:
        header = ["رقم الموظف", "", "", "", "", "", "", "تاريخ انتهاء الإقامة"]
        warnings = validate_header(header)
        assert any("passport_number" in w for w in warnings)

    @pytest.mark.parametrize(
        "staff_header", ["Employee Number", "Employee ID", "Emp. No", "الرقم الوظيفي"]
    )
    def test_staff_number_header_variants_are_valid(self, source_header: str, staff_header: str) -> None:
        header = parse_line(source_header)
        header[STAFF_NO_INDEX] = staff_header
        assert validate_header(header) == []

    def test_swapped_required_columns_raise(self, source_header: str) -> None:
        """Verify a sheet with staff number and expiry swapped is rejected."""
        header = parse_line(source_header)
        header[STAFF_NO_INDEX], header[CARD_EXPIRY_INDEX] = header[CARD_EXPIRY_INDEX], header[STAFF_NO_INDEX]
        with pytest.raises(SchemaMismatchError, match="staff_no"):
            validate_header(header)

    def test_short_header_raises(self) -> None:
        with pytest.raises(SchemaMismatchError, match="card_expiry"):
            validate_header(["Staff No.", "Passport Number"])

    def test_optional_mismatch_only_warns(self, source_header: str) -> None:
        header = parse_line(source_header)
        header[10] = "Phone"
        warnings = validate_header(header)
        assert len(warnings) == 1
        assert "email" in warnings[0]


@pytest.mark.unit
class TestSchemaTable:
    """Unit tests for the column table itself."""

    def test_indices_are_contiguous(self) -> None:
        assert [column.index for column in SOURCE_COLUMNS] == list(range(len(SOURCE_COLUMNS)))

    def test_required_columns(self) -> None:
        required = {column.field for column in SOURCE_COLUMNS if column.required}
        assert required == {"staff_no", "card_expiry"}

    def test_normalize_header(self) -> None:
        assert normalize_header("  Staff   No. ") == "staff no"
