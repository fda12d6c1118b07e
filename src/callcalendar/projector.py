"""Projection of historical earnings calls into future calendar years.

A call held on a given day is expected to recur on the same month/day in
later years. Projections that land on a weekend are moved to the nearest
day sharing the original call's weekday, and an actual call for the same
ticker and fiscal period always supersedes a projection.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable, Iterable, Mapping
from datetime import date
from pathlib import Path
from typing import Any

from callcalendar.dates import (
    date_key,
    days_in_month,
    is_weekend,
    nearest_weekday,
    parse_date,
    today_utc,
)
from callcalendar.models.call import CallEvent, EventType, ProjectedEvent

LOGGER = logging.getLogger(__name__)

_FYQ = re.compile(r"^FY(\d{4})Q([1-4])$")

YearEventMap = dict[str, list[ProjectedEvent]]


# ---- Date projection ----

def adjust_for_weekend(candidate: date, target_weekday: int, target_year: int) -> date:
    """Move a weekend ``candidate`` to the nearest day on ``target_weekday``.

    Alternatives that stay inside ``target_year`` win; between two such
    alternatives the closer one wins, ties going to the earlier date. If
    neither stays in the year the closer one is returned anyway.
    """
    if not is_weekend(candidate):
        return candidate

    backward = nearest_weekday(candidate, target_weekday, -1)
    forward = nearest_weekday(candidate, target_weekday, 1)
    back_diff = (candidate - backward).days
    forward_diff = (forward - candidate).days
    back_in_year = backward.year == target_year
    forward_in_year = forward.year == target_year

    if back_in_year and forward_in_year:
        return backward if back_diff <= forward_diff else forward
    if back_in_year:
        return backward
    if forward_in_year:
        return forward
    return backward if back_diff <= forward_diff else forward


def project_date(base_date: date | None, target_year: int) -> date | None:
    """Expected date of the call held on ``base_date`` in ``target_year``.

    Returns None when there is no base date or the target year is not
    strictly after the base year.
    """
    if base_date is None or base_date.year >= target_year:
        return None
    day = min(base_date.day, days_in_month(target_year, base_date.month))
    candidate = date(target_year, base_date.month, day)
    return adjust_for_weekend(candidate, base_date.weekday(), target_year)


def shift_fyq(label: str, year_offset: int) -> str:
    """``shift_fyq("FY2024Q1", 1) == "FY2025Q1"``; other labels pass through."""
    if not label or not year_offset:
        return label
    match = _FYQ.match(label)
    if not match:
        return label
    return f"FY{int(match.group(1)) + year_offset}Q{match.group(2)}"


# ---- Loading ----

def load_call_events(index: Mapping[str, Any] | None) -> list[CallEvent]:
    """Convert an index mapping (``{"calls": [...]}``) into call events.

    Records whose ``call_date`` does not parse are left out.
    """
    if not index:
        return []

    events: list[CallEvent] = []
    for record in index.get("calls") or []:
        if not isinstance(record, Mapping):
            continue
        call_date = parse_date(record.get("call_date"))
        if call_date is None:
            LOGGER.debug(
                "Skipping %s %s: unparseable call_date %r",
                record.get("ticker"), record.get("fyq"), record.get("call_date"),
            )
            continue
        events.append(CallEvent(
            company=record.get("company") or "",
            ticker=record.get("ticker") or "",
            fyq=record.get("fyq") or "",
            path=record.get("path"),
            date=call_date,
        ))
    return events


def load_index(path: Path | str) -> dict[str, Any]:
    """Read an index file; a missing or unreadable index counts as empty."""
    index_path = Path(path)
    if not index_path.exists():
        LOGGER.warning("Index %s not found; calendar will have no events", index_path)
        return {}
    try:
        with open(index_path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        LOGGER.warning("Index %s could not be read (%s); calendar will have no events", index_path, exc)
        return {}
    return data if isinstance(data, dict) else {}


# ---- Per-year maps ----

class EventProjector:
    """Builds and memoizes the merged actual + expected event map per year.

    Maps are built on first request and kept for the lifetime of the
    projector. A cached map is never rebuilt, so a projection that slips
    into the past stays visible until a new projector is created.

    Usage::

        projector = EventProjector(load_call_events(load_index("index.json")))
        events = projector.events_on(date(2025, 2, 14))
    """

    def __init__(
        self,
        events: Iterable[CallEvent] = (),
        today: Callable[[], date] = today_utc,
    ) -> None:
        self.events: tuple[CallEvent, ...] = tuple(events)
        self._today = today
        self._by_year: dict[int, YearEventMap] = {}

    @classmethod
    def from_index(
        cls,
        index: Mapping[str, Any] | None,
        today: Callable[[], date] = today_utc,
    ) -> EventProjector:
        return cls(load_call_events(index), today=today)

    def today(self) -> date:
        return self._today()

    def events_for_year(self, year: int) -> YearEventMap:
        """Day key -> events on that day, actual entries first, then by company."""
        cached = self._by_year.get(year)
        if cached is not None:
            return cached

        year_map: YearEventMap = {}
        today = self._today()
        known_actual: set[tuple[str, str]] = set()

        for event in self.events:
            if event.date.year != year:
                continue
            known_actual.add((event.ticker, event.fyq))
            _add(year_map, ProjectedEvent(
                company=event.company,
                ticker=event.ticker,
                fyq=event.fyq,
                display_fyq=event.fyq,
                date=event.date,
                type=EventType.ACTUAL,
                path=event.path,
            ))

        for event in self.events:
            if event.date.year >= year:
                continue
            projected = project_date(event.date, year)
            if projected is None or projected < today:
                continue
            display_fyq = shift_fyq(event.fyq, year - event.date.year)
            if (event.ticker, display_fyq) in known_actual:
                continue
            _add(year_map, ProjectedEvent(
                company=event.company,
                ticker=event.ticker,
                fyq=event.fyq,
                display_fyq=display_fyq,
                date=projected,
                type=EventType.EXPECTED,
            ))

        for day_events in year_map.values():
            day_events.sort(key=ProjectedEvent.sort_key)

        self._by_year[year] = year_map
        return year_map

    def events_on(self, day: date) -> list[ProjectedEvent]:
        return self.events_for_year(day.year).get(date_key(day), [])

    def month_has_events(self, month: date) -> bool:
        """Whether any day of the month containing ``month`` has an event."""
        prefix = f"{month.year:04d}-{month.month:02d}-"
        return any(
            key.startswith(prefix) and events
            for key, events in self.events_for_year(month.year).items()
        )


def _add(year_map: YearEventMap, event: ProjectedEvent) -> None:
    year_map.setdefault(date_key(event.date), []).append(event)
