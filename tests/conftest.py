"""Shared pytest fixtures for residency reporting tests.

This module provides:
- A fixed "today" so day counts are deterministic
- An Employee factory with sensible defaults
- Sample CSV text matching the source sheet layout
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Callable

import pytest

from residency_reporting.models import Employee

SOURCE_HEADER = (
    "Staff No.,Passport Number,Employee Name,Job,Nationality,Card Type,Card Number,"
    "Card Expiry Date,Passport Issue Date,Passport Expire Date,Email,Joining Date,Years"
)


@pytest.fixture
def today() -> date:
    """Fixed run date used across tests."""
    return date(2025, 1, 1)


@pytest.fixture
def make_employee(today: date) -> Callable[..., Employee]:
    """Build an Employee whose expiry is `days` after the fixed run date.

    Returns
    -------
    Callable[..., Employee]
        Factory accepting `days` plus any Employee field overrides.
    """

    def _make(days: int = 60, **overrides) -> Employee:
        fields = {
            "staff_no": "1001",
            "name": "AHMED ALI",
            "job": "DRIVER",
            "nationality": "EGYPTIAN",
            "card_number": "784-1990-1234567-1",
            "card_expiry": today + timedelta(days=days),
            "days_until_expiry": days,
        }
        fields.update(overrides)
        return Employee(**fields)

    return _make


@pytest.fixture
def source_header() -> str:
    return SOURCE_HEADER


@pytest.fixture
def sample_csv_text() -> str:
    """Source sheet export with one record per tier plus rows that must be skipped.

    Relative to 2025-01-01:
    - 1001 expired (2024-12-25)
    - 1002 urgent (2025-01-05, 4 days)
    - 1003 warning (2025-01-21, 20 days)
    - 1004 normal (2025-06-01)
    - 1005 Hijri date
    - one row without staff number and one without expiry date
    """
    return "\n".join([
        SOURCE_HEADER,
        '1001,P100,"AHMED ALI",DRIVER,EGYPTIAN,Residence,C-1,25/12/2024,01/01/2020,01/01/2030,a@x.com,01/01/2019,5',
        "1002,P200,sara khan,ACCOUNTANT,indian,Residence,C-2,05/01/2025,,,,,",
        "1003,P300,John Smith,Engineer,British,Residence,C-3,21/01/2025,,,,,",
        "1004,P400,MARIA LOPEZ,NURSE,FILIPINO,Residence,C-4,01/06/2025,,,,,",
        "1005,P500,OMAR FAROUK,CLERK,SUDANESE,Residence,C-5,10/05/1446 هـ,,,,,",
        ",P600,NO STAFF NUMBER,CLERK,SUDANESE,Residence,C-6,01/06/2025,,,,,",
        "1007,P700,NO EXPIRY,CLERK,SUDANESE,Residence,C-7,,,,,,",
        "",
        "   ",
    ]) + "\n"
