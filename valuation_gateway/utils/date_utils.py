"""Date manipulation utilities"""

import calendar
from datetime import date
from typing import Optional

from valuation_gateway.domain.exceptions import InvalidDateRangeError


def add_months(from_date: date, months: int) -> date:
    """Shift a date by whole months, clamping the day to the target month's length"""
    month_index = from_date.month - 1 + months
    year = from_date.year + month_index // 12
    month = month_index % 12 + 1
    day = min(from_date.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def days_between(start: date, end: date) -> int:
    """Number of days from start to end (negative if end precedes start)"""
    return (end - start).days


def require_date_range(start: Optional[date], end: Optional[date]) -> None:
    """Raise InvalidDateRangeError unless both endpoints are present and ordered"""
    if start is None or end is None:
        raise InvalidDateRangeError("Both start_date and end_date are required")
    if start > end:
        raise InvalidDateRangeError(f"start_date {start} is after end_date {end}")
