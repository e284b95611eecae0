"""Monthly due-date schedules for installment plans."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date
from typing import Any

from installment_planner.calendar_math import (
    CalendarDate,
    add_months,
    adjustment_info,
    ensure_int,
)


@dataclass(frozen=True)
class ScheduleEntry:
    """One due date of a schedule."""

    index: int  # 1-based
    due_date: CalendarDate
    was_adjusted: bool
    anchor_day: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "date": self.due_date.isoformat(),
            "was_adjusted": self.was_adjusted,
            "anchor_day": self.anchor_day,
        }


def _entries(start: CalendarDate, count: int) -> Iterator[ScheduleEntry]:
    anchor_day = start.day
    for offset in range(count):
        due = add_months(start, offset, anchor_day)
        yield ScheduleEntry(
            index=offset + 1,
            due_date=due,
            was_adjusted=adjustment_info(anchor_day, due).was_adjusted,
            anchor_day=anchor_day,
        )


def iter_schedule(
    start_date: CalendarDate | date | str, count: int
) -> Iterator[ScheduleEntry]:
    """Lazily yield ``count`` monthly due dates starting at ``start_date``.

    Arguments are validated when this is called, not on first iteration.
    A ``count`` below 1 yields nothing.
    """
    start = CalendarDate.coerce(start_date)
    ensure_int("count", count)
    return _entries(start, max(count, 0))


def generate_schedule(
    start_date: CalendarDate | date | str, count: int
) -> list[ScheduleEntry]:
    """Return the due dates of a ``count``-installment monthly plan.

    Every entry tries to fall on the start date's day of month. Months too
    short for it are clamped to their last day and flagged ``was_adjusted``;
    the following months go back to the anchor day.

    >>> [e.due_date.isoformat() for e in generate_schedule("2024-01-31", 3)]
    ['2024-01-31', '2024-02-29', '2024-03-31']
    """
    return list(iter_schedule(start_date, count))
