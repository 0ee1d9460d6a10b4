from __future__ import annotations

from datetime import date, datetime

import pytest

from src.hr_tool.hr_tool.common.datetime_utils import month_window, ranges_overlap, to_calendar_date
from src.hr_tool.hr_tool.core.exceptions import ValidationError


@pytest.mark.parametrize(
    "year,month,expected",
    [
        (2025, 1, (date(2025, 1, 1), date(2025, 1, 31))),
        (2024, 2, (date(2024, 2, 1), date(2024, 2, 29))),
        (2025, 2, (date(2025, 2, 1), date(2025, 2, 28))),
        (2025, 12, (date(2025, 12, 1), date(2025, 12, 31))),
    ],
)
def test_month_window(year, month, expected):
    assert month_window(year, month) == expected


def test_month_window_rejects_bad_month():
    with pytest.raises(ValidationError):
        month_window(2025, 13)


@pytest.mark.parametrize("year", [0, -1, 10000])
def test_month_window_rejects_out_of_range_year(year):
    with pytest.raises(ValidationError):
        month_window(year, 3)


def test_to_calendar_date_accepts_dates_datetimes_and_strings():
    assert to_calendar_date(date(2025, 3, 10), "d") == date(2025, 3, 10)
    assert to_calendar_date(datetime(2025, 3, 10, 23, 59), "d") == date(2025, 3, 10)
    assert to_calendar_date("2025-03-10", "d") == date(2025, 3, 10)
    assert to_calendar_date("2025-03-10T23:30:00Z", "d") == date(2025, 3, 10)
    assert to_calendar_date(" 2025-03-10 08:00:00 ", "d") == date(2025, 3, 10)


@pytest.mark.parametrize(
    "value", [None, "", "2025/03/10", 20250310, "2025-03-10garbage", "2025-03-1", "2025-03-10Tnoon"]
)
def test_to_calendar_date_rejects_other_values(value):
    with pytest.raises(ValidationError):
        to_calendar_date(value, "Start date")


def test_ranges_overlap_is_inclusive():
    assert ranges_overlap(date(2025, 4, 1), date(2025, 4, 5), date(2025, 4, 5), date(2025, 4, 9))
    assert not ranges_overlap(date(2025, 4, 1), date(2025, 4, 5), date(2025, 4, 6), date(2025, 4, 9))
