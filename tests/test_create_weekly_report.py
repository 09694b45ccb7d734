"""Tests for the weekly Excel report script."""

from datetime import date

import pytest
from openpyxl import load_workbook

from scripts import create_weekly_report


def test_weekly_date_range_starts_on_monday():
    assert create_weekly_report.get_weekly_date_range("2023-07-06") == (date(2023, 7, 3), date(2023, 7, 6))
    assert create_weekly_report.get_weekly_date_range("2023-07-03") == (date(2023, 7, 3), date(2023, 7, 3))


def test_report_name():
    assert create_weekly_report.report_name(date(2023, 7, 6)) == "timeclock_weekly_report_2023_07_06"


@pytest.fixture
def workspace(tmp_path, monkeypatch, codes):
    monkeypatch.setenv("TIMECLOCK_CONFIG_DIR", str(tmp_path))
    monkeypatch.setattr(create_weekly_report, "OUTPUT_DIR", tmp_path / "output")
    (tmp_path / "config.ini").write_text("logfile=$CONFIG/time.log\ncodefile=$CONFIG/codes.txt\n")
    (tmp_path / "codes.txt").write_text("\n".join(codes) + "\n")
    (tmp_path / "time.log").write_text(
        "2023/07/02 05:00PM [Personal] Sunday, previous week\n"
        "2023/07/03 12:00AM [Personal] Midnight\n"
        "2023/07/03 09:00AM [Project:Sub] Build\n"
        "2023/07/03 12:00PM [Admin] Email\n"
        "2023/07/06 01:00PM [Project] Plan\n"
        "2023/07/07 09:00AM [Admin] Friday\n"
    )
    return tmp_path


def test_main_writes_workbook(workspace, capsys):
    output_path = create_weekly_report.main("2023-07-06", ["Project:...", "Admin"])

    assert output_path == workspace / "output" / "reports" / "weekly" / "timeclock_weekly_report_2023_07_06.xlsx"
    assert "2023-W27" in capsys.readouterr().out

    wb = load_workbook(output_path)
    detail = wb["Period Detail"]
    assert [row[3] for row in detail.iter_rows(min_row=2, values_only=True)] == ["Project:Sub", "Admin"]


def test_main_with_no_periods(workspace, capsys):
    assert create_weekly_report.main("2023-01-04") is None
    assert "No periods in given time range." in capsys.readouterr().out
