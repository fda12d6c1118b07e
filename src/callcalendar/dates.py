"""Calendar-day arithmetic on plain UTC dates.

Every value handled here is a ``datetime.date``: a calendar day with no
time-of-day and no timezone, so nothing can drift across a UTC boundary.
Weekdays use Python's convention (Monday=0 ... Sunday=6).
"""

from __future__ import annotations

import calendar
import re
from datetime import date, datetime, timedelta, timezone

_ISO_DAY = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")

SATURDAY = 5
SUNDAY = 6

# Calendar grids start on Sunday.
WEEKDAY_LABELS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


# ---- Parsing / formatting ----

def parse_date(text: str | None) -> date | None:
    """Parse ``YYYY-MM-DD``; None on malformed, zero-valued or impossible days."""
    if not text or not isinstance(text, str):
        return None
    match = _ISO_DAY.match(text.strip())
    if not match:
        return None
    year, month, day = (int(part) for part in match.groups())
    if not year or not month or not day:
        return None
    try:
        return date(year, month, day)
    except ValueError:
        return None


def date_key(d: date) -> str:
    """ISO day string used as the key of per-year event maps."""
    return d.isoformat()


def month_label(d: date) -> str:
    """``"February 2025"`` style label for the month containing ``d``."""
    return f"{calendar.month_name[d.month]} {d.year}"


def today_utc() -> date:
    """Current calendar day in UTC."""
    return datetime.now(timezone.utc).date()


# ---- Stepping ----

def add_days(d: date, n: int) -> date:
    return d + timedelta(days=n)


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def month_start(d: date) -> date:
    return d.replace(day=1)


def add_months(d: date, n: int) -> date:
    """Shift by ``n`` months, clamping the day to the target month's length."""
    index = d.year * 12 + (d.month - 1) + n
    year, month = divmod(index, 12)
    month += 1
    return date(year, month, min(d.day, days_in_month(year, month)))


# ---- Weekdays ----

def is_weekend(d: date) -> bool:
    return d.weekday() in (SATURDAY, SUNDAY)


def sunday_offset(d: date) -> int:
    """Column of ``d`` in a Sunday-first week (Sunday=0 ... Saturday=6)."""
    return (d.weekday() + 1) % 7


def nearest_weekday(d: date, target_weekday: int, direction: int) -> date:
    """Walk from ``d`` one day at a time in ``direction`` until the weekday matches.

    At most 7 steps are taken. Only meant as a building block for weekend
    adjustment.
    """
    step = 1 if direction >= 0 else -1
    current = d
    for _ in range(7):
        if current.weekday() == target_weekday:
            break
        current = add_days(current, step)
    return current
