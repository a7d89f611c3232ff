"""Integration tests for the orchestrator pipeline.

Tests cover:
- Dry run renders without sending
- Delivery through send_email with the configured recipients
- Delivery failures reported without discarding the report
- Quiet runs and the optional heartbeat email
- Invalid report types, unreadable sources and changed sheet layouts
"""

from __future__ import annotations

from datetime import date
from unittest.mock import MagicMock

import pytest

from residency_reporting import orchestrator
from residency_reporting.models import Report, ReportType


@pytest.fixture
def sender(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    """Replace send_email and configure one recipient."""
    mock = MagicMock(return_value=(True, None))
    monkeypatch.setattr(orchestrator, "send_email", mock)
    monkeypatch.setattr(orchestrator, "EMAIL_RECIPIENTS", ["hr@example.com"])
    return mock


@pytest.mark.integration
class TestRunResidencyCheck:
    """Integration tests for run_residency_check."""

    def test_dry_run_renders_without_sending(self, sender, sample_csv_text: str, today: date) -> None:
        success, report, error = orchestrator.run_residency_check(
            report_type="urgent", today=today, source_text=sample_csv_text
        )
        assert success is True
        assert error is None
        assert isinstance(report, Report)
        assert "1002" in report.body
        assert "1003" in report.body
        assert "1001" not in report.body
        sender.assert_not_called()

    def test_send(self, sender, sample_csv_text: str, today: date) -> None:
        success, report, error = orchestrator.run_residency_check(
            report_type=ReportType.EXPIRED, today=today, dry_run_email=False, source_text=sample_csv_text
        )
        assert (success, error) == (True, None)
        kwargs = sender.call_args.kwargs
        assert kwargs["to_emails"] == ["hr@example.com"]
        assert kwargs["subject"] == report.subject
        assert kwargs["html_body"] == report.body
        assert kwargs["sender_display"] == "Staff Alert System"
        assert "1001" in report.body
        assert "1005" in report.body

    def test_delivery_failure_keeps_report(self, sender, sample_csv_text: str, today: date) -> None:
        sender.return_value = (False, "SMTP_SERVER environment variable is not set")
        success, report, error = orchestrator.run_residency_check(
            report_type="both", today=today, dry_run_email=False, source_text=sample_csv_text
        )
        assert success is True
        assert report is not None
        assert "SMTP_SERVER" in error

    def test_no_recipients(self, sender, sample_csv_text: str, today: date, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(orchestrator, "EMAIL_RECIPIENTS", [])
        success, report, error = orchestrator.run_residency_check(
            report_type="both", today=today, dry_run_email=False, source_text=sample_csv_text
        )
        assert success is True
        assert report is not None
        assert "empty" in error
        sender.assert_not_called()

    def test_nothing_to_notify(self, sender, source_header: str, today: date) -> None:
        text = source_header + "\n1004,P400,MARIA LOPEZ,NURSE,FILIPINO,Residence,C-4,01/06/2025,,,,,\n"
        success, report, error = orchestrator.run_residency_check(
            report_type="both", today=today, dry_run_email=False, source_text=text
        )
        assert (success, report, error) == (True, None, None)
        sender.assert_not_called()

    def test_heartbeat_when_enabled(
        self, sender, source_header: str, today: date, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(orchestrator, "SEND_HEARTBEAT_WHEN_EMPTY", True)
        text = source_header + "\n1004,P400,MARIA LOPEZ,NURSE,FILIPINO,Residence,C-4,01/06/2025,,,,,\n"
        success, report, error = orchestrator.run_residency_check(
            report_type="expired", today=today, dry_run_email=False, source_text=text
        )
        assert (success, report, error) == (True, None, None)
        kwargs = sender.call_args.kwargs
        assert kwargs["subject"] == "Test Email - Staff Alert System"
        assert "Total employees processed: 1" in kwargs["html_body"]

    def test_no_employees(self, sender, source_header: str, today: date) -> None:
        success, report, error = orchestrator.run_residency_check(
            report_type="both", today=today, dry_run_email=False, source_text=source_header
        )
        assert (success, report, error) == (True, None, None)
        sender.assert_not_called()

    def test_fetch_failure_is_quiet(self, sender, today: date, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(
            "residency_reporting.source_fetcher.fetch_source_text",
            MagicMock(return_value=(False, None, "Connection refused")),
        )
        success, report, error = orchestrator.run_residency_check(
            report_type="both", today=today, dry_run_email=False
        )
        assert (success, report, error) == (True, None, None)
        sender.assert_not_called()

    def test_changed_header_fails_run(self, sender, source_header: str, today: date) -> None:
        """Verify a renamed required column stops the run with an error instead of a quiet pass."""
        header = source_header.replace("Staff No.", "Full Name", 1)
        text = header + "\n1001,P100,AHMED ALI,DRIVER,EGYPTIAN,Residence,C-1,25/12/2024,,,,,\n"
        success, report, error = orchestrator.run_residency_check(
            report_type="expired", today=today, dry_run_email=False, source_text=text
        )
        assert success is False
        assert report is None
        assert "staff_no" in error
        sender.assert_not_called()

    def test_employee_number_header_is_reported(self, sender, source_header: str, today: date) -> None:
        header = source_header.replace("Staff No.", "Employee Number", 1)
        text = header + "\n1001,P100,AHMED ALI,DRIVER,EGYPTIAN,Residence,C-1,25/12/2024,,,,,\n"
        success, report, error = orchestrator.run_residency_check(
            report_type="expired", today=today, dry_run_email=False, source_text=text
        )
        assert (success, error) == (True, None)
        assert "1001" in report.body
        sender.assert_called_once()

    def test_invalid_report_type(self, sender, sample_csv_text: str, today: date) -> None:
        success, report, error = orchestrator.run_residency_check(
            report_type="monthly", today=today, source_text=sample_csv_text
        )
        assert success is False
        assert report is None
        assert "monthly" in error

    def test_repeated_runs_are_identical(self, sender, sample_csv_text: str, today: date) -> None:
        first = orchestrator.run_residency_check(report_type="both", today=today, source_text=sample_csv_text)
        second = orchestrator.run_residency_check(report_type="both", today=today, source_text=sample_csv_text)
        assert first == second


@pytest.mark.unit
class TestBuildReport:
    """Unit tests for build_report and build_heartbeat_report."""

    def test_subject_carries_long_date(self, make_employee, today: date) -> None:
        report = orchestrator.build_report("expired", [make_employee(days=-1)], today)
        assert report.subject.startswith(" عاجل")
        assert "٢٠٢٥" in report.subject

    def test_none_when_nothing_due(self, make_employee, today: date) -> None:
        assert orchestrator.build_report("both", [make_employee(days=90)], today) is None

    def test_heartbeat(self) -> None:
        report = orchestrator.build_heartbeat_report(12)
        assert report.subject == "Test Email - Staff Alert System"
        assert "12" in report.body
