from __future__ import annotations

import calendar
from datetime import MAXYEAR, MINYEAR, date, datetime

from ..core.constants import ISO_DATE_FORMAT
from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, ISO_DATE_FORMAT).date()


def to_calendar_date(value: date | datetime | str | None, field_name: str) -> date:
    """Normalize a date-ish value to day granularity.

    Datetimes drop their time-of-day, strings may be ``YYYY-MM-DD`` or a full
    ISO timestamp (only the date part is kept).
    """

    if value is None or value == "":
        raise ValidationError(f"{field_name} is required")
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        raw = value.strip()
        try:
            if len(raw) == 10:
                return parse_iso_date(raw)
            if len(raw) > 10 and raw[10] in "T ":
                return datetime.fromisoformat(raw.replace("Z", "+00:00")).date()
        except ValueError:
            pass
        raise ValidationError(f"{field_name} must be a date in YYYY-MM-DD format")
    raise ValidationError(f"{field_name} must be a date")


def inclusive_day_count(start: date, end: date) -> int:
    return (end - start).days + 1


def ranges_overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    return a_start <= b_end and a_end >= b_start


def month_window(year: int, month: int) -> tuple[date, date]:
    """First and last calendar day of the given month."""
    if not 1 <= int(month) <= 12:
        raise ValidationError("Month must be between 1 and 12")
    if not MINYEAR <= int(year) <= MAXYEAR:
        raise ValidationError(f"Year must be between {MINYEAR} and {MAXYEAR}")
    last_day = calendar.monthrange(int(year), int(month))[1]
    return date(int(year), int(month), 1), date(int(year), int(month), last_day)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch it.
    """
    return datetime.now()
