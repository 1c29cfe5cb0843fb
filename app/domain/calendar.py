"""Jalali calendar parsing and whole-day arithmetic.

Dates are entered and displayed in the Jalali calendar (``yyyy/MM/dd`` and
``HH:mm``). Internally every instant is a naive local wall-clock
``datetime``; aware values are converted to local time first.
"""

from __future__ import annotations

import re
from datetime import datetime, time, timedelta

import jdatetime

JALALI_DATE_FORMAT = "%Y/%m/%d"
JALALI_DATETIME_FORMAT = "%Y/%m/%d %H:%M"

_DATE_PATTERN = re.compile(r"^(\d{4})/(\d{1,2})/(\d{1,2})$")
_TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")
_ONE_DAY = timedelta(days=1)


class CalendarValidationError(ValueError):
    pass


def to_local_naive(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def parse_jalali_date(text: str) -> datetime:
    """Parse ``yyyy/MM/dd`` (Jalali) into local midnight of that day."""
    match = _DATE_PATTERN.match((text or "").strip())
    if match is None:
        raise CalendarValidationError(f"invalid date {text!r}, expected yyyy/MM/dd")
    year, month, day = (int(part) for part in match.groups())
    try:
        jalali_day = jdatetime.date(year, month, day)
    except ValueError as exc:
        raise CalendarValidationError(f"invalid date {text!r}: {exc}") from exc
    return datetime.combine(jalali_day.togregorian(), time.min)


def parse_time_of_day(text: str) -> time:
    match = _TIME_PATTERN.match((text or "").strip())
    if match is None:
        raise CalendarValidationError(f"invalid time {text!r}, expected HH:mm")
    hours, minutes = (int(part) for part in match.groups())
    if hours > 23 or minutes > 59:
        raise CalendarValidationError(f"invalid time {text!r}, expected HH:mm")
    return time(hours, minutes)


def parse_jalali_datetime(date_text: str, time_text: str) -> datetime:
    day = parse_jalali_date(date_text)
    return datetime.combine(day.date(), parse_time_of_day(time_text))


def format_jalali_date(value: datetime) -> str:
    local = to_local_naive(value)
    return jdatetime.datetime.fromgregorian(datetime=local).strftime(JALALI_DATE_FORMAT)


def format_jalali_datetime(value: datetime) -> str:
    local = to_local_naive(value)
    return jdatetime.datetime.fromgregorian(datetime=local).strftime(JALALI_DATETIME_FORMAT)


def days_between(earlier: datetime, later: datetime) -> int:
    # Floor division on timedelta: partial days never round up.
    return (to_local_naive(later) - to_local_naive(earlier)) // _ONE_DAY
