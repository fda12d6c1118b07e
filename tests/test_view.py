"""Tests for the month calendar state machine and render model."""

from __future__ import annotations

from datetime import date

import pytest

from callcalendar.dates import add_months
from callcalendar.projector import EventProjector
from callcalendar.view import MAX_MONTH_SCAN, CalendarView

from conftest import FixedClock, make_call


class _FakeProjector:
    """Projector stand-in that only knows which months have events."""

    def __init__(self, months: set[date], today: date) -> None:
        self.months = months
        self._today = today

    def today(self) -> date:
        return self._today

    def month_has_events(self, month: date) -> bool:
        return month.replace(day=1) in self.months

    def events_on(self, day: date) -> list:
        return []


@pytest.fixture
def view_clock() -> FixedClock:
    return FixedClock(date(2025, 1, 15))


@pytest.fixture
def projector(sample_index, view_clock) -> EventProjector:
    # ACME actual 2025-02-20, BETA actual 2025-05-08
    return EventProjector.from_index(sample_index, today=view_clock)


class TestRenderExpanded:
    def test_starts_on_current_month(self, projector):
        view = CalendarView(projector)
        assert view.month_start == date(2025, 1, 1)
        assert view.collapsed is False

    def test_start_month_normalized(self, projector):
        view = CalendarView(projector, start=date(2025, 5, 8))
        assert view.month_start == date(2025, 5, 1)
        month = view.render()
        assert month.label == "May 2025"
        assert not any(d.is_today for w in month.weeks for d in w.days)
        assert view.go_to_today() == date(2025, 1, 1)

    def test_full_weeks_from_sunday(self, projector):
        month = CalendarView(projector).render()
        assert month.label == "January 2025"
        assert month.weekday_labels[0] == "Sun"
        assert len(month.weeks) == 5
        assert all(len(w.days) == 7 for w in month.weeks)
        first = month.weeks[0].days[0]
        assert first.date == date(2024, 12, 29)
        assert first.is_outside
        assert month.weeks[-1].days[-1].date == date(2025, 2, 1)

    def test_today_flag(self, projector):
        month = CalendarView(projector).render()
        flagged = [d.date for w in month.weeks for d in w.days if d.is_today]
        assert flagged == [date(2025, 1, 15)]

    def test_day_cells_carry_events(self, projector):
        view = CalendarView(projector)
        view.step_month(1)
        month = view.render()
        day = next(d for w in month.weeks for d in w.days if d.date == date(2025, 2, 20))
        assert day.day == 20
        assert day.key == "2025-02-20"
        assert [e.ticker for e in day.events] == ["ACME"]
        assert month.event_count == 1

    def test_outside_cells_use_adjacent_year(self, view_clock):
        projector = EventProjector([
            make_call("ACME", "FY2025Q1", date(2025, 1, 2)),
            make_call("BETA", "FY2024Q4", date(2024, 12, 10)),
        ], today=view_clock)
        view = CalendarView(projector, start=date(2024, 12, 1))
        month = view.render()
        last = month.weeks[-1]
        jan2 = next(d for d in last.days if d.date == date(2025, 1, 2))
        assert jan2.is_outside
        assert [e.ticker for e in jan2.events] == ["ACME"]
        assert month.event_count == 1

    def test_all_events_shown(self, view_clock):
        calls = [make_call(f"T{i}", "FY2025Q1", date(2025, 3, 4)) for i in range(5)]
        view = CalendarView(EventProjector(calls, today=view_clock), start=date(2025, 3, 1))
        day = next(d for w in view.render().weeks for d in w.days if d.date == date(2025, 3, 4))
        assert len(day.events) == 5


class TestRenderCollapsed:
    def test_only_weeks_with_events(self, projector):
        view = CalendarView(projector, collapsed=True, start=date(2025, 2, 1))
        month = view.render()
        assert len(month.weeks) == 1
        assert [d.date.day for d in month.weeks[0].days] == list(range(16, 23))

    def test_outside_events_do_not_keep_week(self, view_clock):
        projector = EventProjector([
            make_call("ACME", "FY2025Q1", date(2025, 1, 2)),
            make_call("BETA", "FY2024Q4", date(2024, 12, 10)),
        ], today=view_clock)
        view = CalendarView(projector, collapsed=True, start=date(2024, 12, 1))
        month = view.render()
        assert month.month_start == date(2024, 12, 1)
        assert [w.days[0].date for w in month.weeks] == [date(2024, 12, 8)]

    def test_self_heals_forward(self, projector):
        view = CalendarView(projector, collapsed=True)
        month = view.render()
        assert view.month_start == date(2025, 2, 1)
        assert month.label == "February 2025"

    def test_self_heals_backward(self):
        fake = _FakeProjector({date(2024, 6, 1)}, today=date(2025, 1, 15))
        view = CalendarView(fake, collapsed=True)
        view.render()
        assert view.month_start == date(2024, 6, 1)

    def test_no_events_anywhere(self):
        fake = _FakeProjector(set(), today=date(2025, 1, 15))
        view = CalendarView(fake, collapsed=True)
        month = view.render()
        assert view.month_start == date(2025, 1, 1)
        assert month.weeks == ()
        assert month.event_count == 0


class TestStepMonth:
    def test_expanded_steps_one_month(self, projector):
        view = CalendarView(projector)
        assert view.step_month(1) == date(2025, 2, 1)
        assert view.step_month(1) == date(2025, 3, 1)
        assert view.step_month(-1) == date(2025, 2, 1)

    def test_expanded_crosses_year(self, projector):
        view = CalendarView(projector)
        assert view.step_month(-1) == date(2024, 12, 1)

    def test_collapsed_jumps_to_months_with_events(self, projector):
        view = CalendarView(projector, collapsed=True)
        assert view.step_month(1) == date(2025, 2, 1)
        assert view.step_month(1) == date(2025, 5, 1)
        # 2026 holds projections of both 2025 calls
        assert view.step_month(1) == date(2026, 2, 1)
        assert view.step_month(-1) == date(2025, 5, 1)

    def test_collapsed_unchanged_when_nothing_found(self, projector):
        view = CalendarView(projector, collapsed=True, start=date(2025, 2, 1))
        assert view.step_month(-1) == date(2025, 2, 1)

    def test_scan_bound(self):
        start = date(2025, 1, 1)
        reachable = _FakeProjector({add_months(start, MAX_MONTH_SCAN)}, today=start)
        view = CalendarView(reachable, collapsed=True)
        assert view.step_month(1) == add_months(start, MAX_MONTH_SCAN)

        too_far = _FakeProjector({add_months(start, MAX_MONTH_SCAN + 1)}, today=start)
        view = CalendarView(too_far, collapsed=True)
        assert view.step_month(1) == start

    def test_zero_direction_rejected(self, projector):
        with pytest.raises(ValueError):
            CalendarView(projector).step_month(0)


class TestGoToTodayAndToggle:
    def test_go_to_today_expands_empty_month(self, projector):
        view = CalendarView(projector, collapsed=True, start=date(2025, 5, 1))
        assert view.go_to_today() == date(2025, 1, 1)
        assert view.collapsed is False

    def test_go_to_today_keeps_collapsed_with_events(self, projector, view_clock):
        view_clock.today = date(2025, 2, 3)
        view = CalendarView(projector, collapsed=True, start=date(2025, 5, 1))
        assert view.go_to_today() == date(2025, 2, 1)
        assert view.collapsed is True

    def test_toggle_collapse(self, projector):
        view = CalendarView(projector, start=date(2025, 3, 1))
        assert view.toggle_collapse() is True
        assert view.toggle_collapse() is False
        assert view.month_start == date(2025, 3, 1)
