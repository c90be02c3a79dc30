from datetime import date, datetime, timezone

import pytest

from sitelog.core.reporting.dates import day_key, next_day, to_calendar_day
from sitelog.core.reporting.schemas import ReportData


def test_plain_date_string():
    assert to_calendar_day("2024-01-10") == date(2024, 1, 10)


def test_naive_datetime_uses_its_own_calendar_fields():
    assert to_calendar_day(datetime(2024, 1, 10, 23, 45)) == date(2024, 1, 10)


def test_utc_timestamp_resolves_to_local_day():
    expected = datetime(2024, 1, 10, 12, 0, tzinfo=timezone.utc).astimezone().date()
    assert to_calendar_day("2024-01-10T12:00:00.000Z") == expected


def test_invalid_values_raise():
    with pytest.raises(ValueError):
        to_calendar_day("")
    with pytest.raises(ValueError):
        to_calendar_day("2024-13-40")
    with pytest.raises(ValueError):
        to_calendar_day(12345)  # type: ignore[arg-type]


def test_day_key_format():
    assert day_key(date(2024, 3, 5)) == "2024-03-05"


def test_next_day_crosses_month_and_year():
    assert next_day(date(2024, 1, 31)) == date(2024, 2, 1)
    assert next_day(date(2024, 2, 28)) == date(2024, 2, 29)
    assert next_day("2023-12-31") == date(2024, 1, 1)


def test_report_data_normalizes_report_date():
    assert ReportData(report_date=date(2024, 1, 10)).report_date == "2024-01-10"
    assert ReportData(report_date="2024-01-10T09:00:00").report_date == "2024-01-10"
    assert ReportData(report_date="").report_date is None
    assert ReportData().day() is None
