"""Tests for the cron runner script's argument handling and exit codes."""

from __future__ import annotations

import importlib.util
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from residency_reporting.models import Report

SCRIPT_PATH = Path(__file__).parent.parent / "scripts" / "run_residency_check.py"


@pytest.fixture
def runner():
    spec = importlib.util.spec_from_file_location("run_residency_check", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.mark.unit
class TestRunner:
    """Unit tests for scripts/run_residency_check.py."""

    def test_defaults_to_dry_run(self, runner, monkeypatch: pytest.MonkeyPatch) -> None:
        run = MagicMock(return_value=(True, None, None))
        monkeypatch.setattr(runner, "run_residency_check", run)
        assert runner.main([]) == 0
        run.assert_called_once_with(report_type=None, dry_run_email=True)

    def test_send_with_type(self, runner, monkeypatch: pytest.MonkeyPatch) -> None:
        run = MagicMock(return_value=(True, Report(subject=" s", body="b"), None))
        monkeypatch.setattr(runner, "run_residency_check", run)
        assert runner.main(["--type", "both", "--send"]) == 0
        run.assert_called_once_with(report_type="both", dry_run_email=False)

    def test_verbose_lowers_console_level(self, runner, monkeypatch: pytest.MonkeyPatch) -> None:
        set_level = MagicMock()
        monkeypatch.setattr(runner, "set_console_level", set_level)
        monkeypatch.setattr(runner, "run_residency_check", MagicMock(return_value=(True, None, None)))
        assert runner.main(["--verbose"]) == 0
        set_level.assert_called_once_with("DEBUG")

    def test_schema_mismatch_exit_code(self, runner, monkeypatch: pytest.MonkeyPatch) -> None:
        result = (False, None, "Source sheet layout changed, aborting check: column 0 (staff_no)")
        monkeypatch.setattr(runner, "run_residency_check", MagicMock(return_value=result))
        assert runner.main(["--send"]) == 1

    def test_failure_exit_code(self, runner, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(runner, "run_residency_check", MagicMock(return_value=(False, None, "bad")))
        assert runner.main([]) == 1

    def test_rejects_unknown_type(self, runner) -> None:
        with pytest.raises(SystemExit):
            runner.parse_args(["--type", "weekly"])
