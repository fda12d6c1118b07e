"""Month calendar state and its render model.

``CalendarView`` owns the navigation state (the active month and whether
empty weeks are collapsed) and exposes explicit commands for a
presentation layer to call. ``render()`` returns plain data; drawing it is
left to the caller.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date

from callcalendar.dates import (
    WEEKDAY_LABELS,
    add_days,
    add_months,
    date_key,
    days_in_month,
    month_label,
    month_start,
    sunday_offset,
)
from callcalendar.models.call import ProjectedEvent
from callcalendar.projector import EventProjector

# Months scanned when looking for the nearest month with events.
MAX_MONTH_SCAN = 240


@dataclass(frozen=True)
class CalendarDay:
    """One grid cell."""

    date: date
    is_outside: bool
    is_today: bool
    events: tuple[ProjectedEvent, ...] = ()

    @property
    def day(self) -> int:
        return self.date.day

    @property
    def key(self) -> str:
        return date_key(self.date)


@dataclass(frozen=True)
class CalendarWeek:
    """Sunday-to-Saturday row of the grid."""

    days: tuple[CalendarDay, ...]

    @property
    def has_events(self) -> bool:
        """True if a day belonging to the active month has events."""
        return any(d.events for d in self.days if not d.is_outside)


@dataclass(frozen=True)
class CalendarMonth:
    """Render model of the active month."""

    month_start: date
    label: str
    collapsed: bool
    weeks: tuple[CalendarWeek, ...]
    weekday_labels: tuple[str, ...] = WEEKDAY_LABELS

    @property
    def event_count(self) -> int:
        return sum(
            len(d.events) for w in self.weeks for d in w.days if not d.is_outside
        )


class CalendarView:
    """Stateful month cursor over the projected events.

    States are ``{expanded, collapsed} x month_start``. Only
    ``step_month``, ``go_to_today``, ``toggle_collapse`` and the
    self-healing step of ``render`` change them.
    """

    def __init__(
        self,
        projector: EventProjector,
        collapsed: bool = False,
        today: Callable[[], date] | None = None,
        start: date | None = None,
    ) -> None:
        self.projector = projector
        self._today = today or projector.today
        self.month_start = month_start(start or self._today())
        self.collapsed = collapsed

    # ------------------------------------------------------------ commands

    def step_month(self, direction: int) -> date:
        """Move one month, or to the nearest month with events when collapsed.

        In collapsed mode the state is left unchanged if no month with
        events exists within ``MAX_MONTH_SCAN`` months.
        """
        if direction == 0:
            raise ValueError("direction must be non-zero")
        step = 1 if direction > 0 else -1

        if self.collapsed:
            found = self.find_month_with_events(self.month_start, step)
            if found is not None:
                self.month_start = found
        else:
            self.month_start = add_months(self.month_start, step)
        return self.month_start

    def go_to_today(self) -> date:
        """Show the current month, expanding the view if it would be empty."""
        self.month_start = month_start(self._today())
        if self.collapsed and not self.projector.month_has_events(self.month_start):
            self.collapsed = False
        return self.month_start

    def toggle_collapse(self) -> bool:
        self.collapsed = not self.collapsed
        return self.collapsed

    # ------------------------------------------------------------- queries

    def find_month_with_events(self, start: date, direction: int) -> date | None:
        """Nearest month strictly after/before ``start`` that has events."""
        step = 1 if direction > 0 else -1
        cursor = month_start(start)
        for _ in range(MAX_MONTH_SCAN):
            cursor = add_months(cursor, step)
            if self.projector.month_has_events(cursor):
                return cursor
        return None

    def render(self) -> CalendarMonth:
        """Build the grid for the active month.

        A collapsed view on an empty month first moves to the nearest month
        with events (forward, then backward). Collapsed grids omit weeks
        whose in-month days have no events.
        """
        if self.collapsed and not self.projector.month_has_events(self.month_start):
            found = self.find_month_with_events(self.month_start, 1)
            if found is None:
                found = self.find_month_with_events(self.month_start, -1)
            if found is not None:
                self.month_start = found

        first = self.month_start
        offset = sunday_offset(first)
        total_cells = -(-(offset + days_in_month(first.year, first.month)) // 7) * 7
        today = self._today()

        weeks: list[CalendarWeek] = []
        cursor = add_days(first, -offset)
        for _ in range(total_cells // 7):
            days = []
            for _ in range(7):
                days.append(CalendarDay(
                    date=cursor,
                    is_outside=cursor.month != first.month,
                    is_today=cursor == today,
                    events=tuple(self.projector.events_on(cursor)),
                ))
                cursor = add_days(cursor, 1)
            week = CalendarWeek(days=tuple(days))
            if self.collapsed and not week.has_events:
                continue
            weeks.append(week)

        return CalendarMonth(
            month_start=first,
            label=month_label(first),
            collapsed=self.collapsed,
            weeks=tuple(weeks),
        )
