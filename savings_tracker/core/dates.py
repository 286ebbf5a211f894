"""
Local calendar date helpers.

Dates are stored as YYYY-MM-DD strings and mean a calendar day
wherever the user is. They are never converted through UTC, which
is what used to shift due dates by a day near midnight.
"""

from datetime import date, datetime
from typing import Optional, Union

from dateutil.relativedelta import relativedelta

DateLike = Union[str, date, datetime]


def today() -> date:
    """Today's local calendar date."""
    return date.today()


def parse_local_date(value: DateLike) -> date:
    """
    Read a date-only value as a local calendar date.

    Accepts date objects, datetimes (their own calendar day, no
    timezone conversion) and ISO strings. A string with a time part
    keeps the calendar day written in it.

    Raises:
        ValueError: If the string is not an ISO date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = value.strip()
    if len(text) < 10:
        raise ValueError(f"Not an ISO date: {value!r}")
    return date.fromisoformat(text[:10])


def day_difference(start: DateLike, end: DateLike) -> int:
    """
    Whole calendar days from start to end (negative if end is earlier).

    Both ends are local midnights, so the difference is always an
    exact number of days.
    """
    return (parse_local_date(end) - parse_local_date(start)).days


def add_months(value: date, months: int) -> date:
    """
    Move a date by whole calendar months.

    A day that does not exist in the target month is clamped to that
    month's last day (Jan 31 + 1 month = Feb 28 or Feb 29).
    """
    return value + relativedelta(months=months)


def add_years(value: date, years: int) -> date:
    """Move a date by whole calendar years (Feb 29 falls back to Feb 28)."""
    return value + relativedelta(years=years)


def default_plan_target(horizon_months: int, reference: Optional[date] = None) -> date:
    """Target date pre-filled in the planning form."""
    return add_months(reference or today(), horizon_months)
