"""Calendar arithmetic for monthly due dates.

Dates are plain ``(year, month, day)`` values on the proleptic Gregorian
calendar. Adding months keeps the day of month where the target month has it
and clamps to the month's last day where it does not, so an anchor on the 31st
lands on Feb 28/29, Apr 30 and so on, and returns to the 31st in long months.
"""

from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date

_ISO_DATE = re.compile(r"(-?\d{4,})-(\d{2})-(\d{2})")


class InstallmentError(Exception):
    """Base exception for installment planning errors."""


class InvalidArgumentError(InstallmentError, ValueError):
    """An argument cannot be turned into a valid date, count or amount."""


def ensure_int(name: str, value: object) -> int:
    # bool is an int subclass; True months or counts are a caller bug.
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(f"{name} must be an integer, got {value!r}")
    return value


def last_day_of_month(year: int, month: int) -> int:
    """Return the number of days in ``month`` (1-12) of ``year``."""
    ensure_int("year", year)
    ensure_int("month", month)
    if not 1 <= month <= 12:
        raise InvalidArgumentError(f"month must be between 1 and 12, got {month}")
    if month == 2 and calendar.isleap(year):
        return 29
    return calendar.mdays[month]


def is_valid_day_for_month(day: int, year: int, month: int) -> bool:
    """Return True if ``day`` exists in the given month."""
    for value in (day, year, month):
        if isinstance(value, bool) or not isinstance(value, int):
            return False
    if not 1 <= month <= 12:
        return False
    return 1 <= day <= last_day_of_month(year, month)


@dataclass(frozen=True, order=True)
class CalendarDate:
    """A calendar date that is always valid for its month."""

    year: int
    month: int
    day: int

    def __post_init__(self) -> None:
        ensure_int("year", self.year)
        ensure_int("month", self.month)
        ensure_int("day", self.day)
        if not is_valid_day_for_month(self.day, self.year, self.month):
            raise InvalidArgumentError(
                f"{self.year:04d}-{self.month:02d}-{self.day:02d} is not a valid date"
            )

    @classmethod
    def from_date(cls, value: date) -> CalendarDate:
        return cls(value.year, value.month, value.day)

    @classmethod
    def parse(cls, value: str) -> CalendarDate:
        """Parse a ``YYYY-MM-DD`` string."""
        return parse_iso_date(value)

    @classmethod
    def coerce(cls, value: CalendarDate | date | str) -> CalendarDate:
        """Accept a ``CalendarDate``, a ``datetime.date`` or an ISO string."""
        if isinstance(value, CalendarDate):
            return value
        if isinstance(value, date):
            return cls.from_date(value)
        if isinstance(value, str):
            return parse_iso_date(value)
        raise InvalidArgumentError(f"cannot interpret {value!r} as a date")

    def to_date(self) -> date:
        return date(self.year, self.month, self.day)

    def isoformat(self) -> str:
        return to_iso_date(self)

    def __str__(self) -> str:
        return self.isoformat()


@dataclass(frozen=True)
class DateAdjustment:
    """Whether a due date had to move off its anchor day."""

    was_adjusted: bool
    from_day: int
    to_day: int


def parse_iso_date(value: str) -> CalendarDate:
    """Parse a strict ``YYYY-MM-DD`` date string."""
    if not isinstance(value, str):
        raise InvalidArgumentError(f"expected an ISO date string, got {value!r}")
    match = _ISO_DATE.fullmatch(value.strip())
    if match is None:
        raise InvalidArgumentError(f"invalid ISO date {value!r}, expected YYYY-MM-DD")
    year, month, day = (int(part) for part in match.groups())
    return CalendarDate(year, month, day)


def add_months(
    value: CalendarDate | date | str,
    months_to_add: int,
    anchor_day: int | None = None,
) -> CalendarDate:
    """Return the date ``months_to_add`` whole months after ``value``.

    The result keeps ``anchor_day`` (default: the day of ``value``) unless the
    target month is shorter, in which case it lands on that month's last day.
    Negative offsets move backwards.
    """
    base = CalendarDate.coerce(value)
    ensure_int("months_to_add", months_to_add)
    if anchor_day is None:
        anchor_day = base.day
    else:
        ensure_int("anchor_day", anchor_day)
        if not 1 <= anchor_day <= 31:
            raise InvalidArgumentError(
                f"anchor_day must be between 1 and 31, got {anchor_day}"
            )

    # Zero-based month index; divmod floors, so negative offsets borrow years.
    year_offset, month_index = divmod(base.month - 1 + months_to_add, 12)
    year = base.year + year_offset
    month = month_index + 1
    return CalendarDate(year, month, min(anchor_day, last_day_of_month(year, month)))


def to_iso_date(value: CalendarDate | date) -> str:
    """Format a date as ``YYYY-MM-DD`` without any timezone handling.

    Years past 9999 use more digits and years before 0 get a leading minus
    sign, so the result always parses back with :func:`parse_iso_date`.
    """
    sign = "-" if value.year < 0 else ""
    return f"{sign}{abs(value.year):04d}-{value.month:02d}-{value.day:02d}"


def adjustment_info(anchor_day: int, result: CalendarDate | date) -> DateAdjustment:
    """Describe how ``result`` relates to the day it was anchored on."""
    return DateAdjustment(
        was_adjusted=anchor_day != result.day,
        from_day=anchor_day,
        to_day=result.day,
    )
