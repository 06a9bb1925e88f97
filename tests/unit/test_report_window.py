"""Unit tests for report windows and report-type parsing."""

from datetime import date, datetime

import pytest

from app.core.exceptions import ValidationError
from app.models.enums import ReportCadence, ReportCategory
from app.services.report_service import (
    ReportWindow,
    explicit_window,
    parse_report_type,
    report_filename,
    window_for,
)


def test_monthly_window_is_month_to_date():
    window = window_for(ReportCadence.MONTHLY, datetime(2025, 3, 15, 22, 0))
    assert window == ReportWindow(datetime(2025, 3, 1), datetime(2025, 3, 16))


def test_daily_window_covers_the_whole_day_so_far():
    window = window_for(ReportCadence.DAILY, datetime(2025, 3, 15, 22, 0))
    assert window == ReportWindow(datetime(2025, 3, 15), datetime(2025, 3, 16))


def test_weekly_window_starts_on_most_recent_sunday():
    # Wednesday 2025-03-12 -> Sunday 2025-03-09
    window = window_for(ReportCadence.WEEKLY, datetime(2025, 3, 12, 9, 30))
    assert window == ReportWindow(datetime(2025, 3, 9), datetime(2025, 3, 13))


def test_weekly_window_on_sunday_is_just_today():
    window = window_for(ReportCadence.WEEKLY, datetime(2025, 3, 9, 22, 0))
    assert window == ReportWindow(datetime(2025, 3, 9), datetime(2025, 3, 10))


def test_monthly_window_across_year_end():
    window = window_for(ReportCadence.MONTHLY, datetime(2025, 12, 31, 23, 59))
    assert window == ReportWindow(datetime(2025, 12, 1), datetime(2026, 1, 1))


def test_explicit_window_is_inclusive_of_end_day():
    window = explicit_window(date(2025, 3, 1), date(2025, 3, 3))
    assert window == ReportWindow(datetime(2025, 3, 1), datetime(2025, 3, 4))


def test_explicit_window_rejects_reversed_range():
    with pytest.raises(ValidationError):
        explicit_window(date(2025, 3, 3), date(2025, 3, 1))


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Daily", (ReportCadence.DAILY, ReportCategory.ALL)),
        ("Weekly_Sales", (ReportCadence.WEEKLY, ReportCategory.SALES)),
        ("Monthly_Expenses", (ReportCadence.MONTHLY, ReportCategory.EXPENSES)),
        ("daily_all", (ReportCadence.DAILY, ReportCategory.ALL)),
    ],
)
def test_parse_report_type(raw, expected):
    assert parse_report_type(raw) == expected


@pytest.mark.parametrize("raw", ["Yearly", "Daily_Payroll", "", "_Sales"])
def test_parse_report_type_rejects_unknown(raw):
    with pytest.raises(ValidationError):
        parse_report_type(raw)


def test_report_filename_uses_window_bounds():
    window = ReportWindow(datetime(2025, 3, 1), datetime(2025, 3, 16))
    name = report_filename(ReportCadence.MONTHLY, ReportCategory.SALES, window)
    assert name == "Monthly_Sales_Report_20250301_20250316.csv"
