import calendar
from collections.abc import Iterator
from datetime import date


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def month_end(year: int, month: int) -> date:
    """Return the last calendar day of the given month."""
    return date(year, month, days_in_month(year, month))


def month_index(year: int, month: int) -> int:
    """Absolute month counter; consecutive calendar months differ by one."""
    return year * 12 + (month - 1)


def from_month_index(index: int) -> tuple[int, int]:
    year, zero_based = divmod(index, 12)
    return year, zero_based + 1


def add_months(d: date, months: int) -> date:
    """Shift a date by whole calendar months.

    A day-of-month that does not exist in the target month is clamped to that
    month's last day (Jan 31 + 1 month -> Feb 28/29), never rolled forward.
    """
    year, month = from_month_index(month_index(d.year, d.month) + months)
    return date(year, month, min(d.day, days_in_month(year, month)))


def months_between(start: date, as_of: date) -> int:
    """Whole calendar months from ``start`` to ``as_of``.

    The count advances on the (clamped) anniversary day of ``start``. The
    result is negative when ``as_of`` precedes ``start``.
    """
    months = month_index(as_of.year, as_of.month) - month_index(
        start.year, start.month
    )
    if months > 0 and as_of < add_months(start, months):
        months -= 1
    elif months < 0 and as_of > add_months(start, months):
        months += 1
    return months


def iter_months(start: date, end: date) -> Iterator[tuple[int, int]]:
    """Yield (year, month) for every calendar month from start to end inclusive."""
    first = month_index(start.year, start.month)
    last = month_index(end.year, end.month)
    for index in range(first, last + 1):
        yield from_month_index(index)
