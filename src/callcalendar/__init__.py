"""callcalendar: earnings-call calendar with projected future calls.

Projects past earnings-call dates into later years, merges them with the
calls already on record, drives a month calendar over the result, and
ingests an external ICS feed into a static artifact.

Quick start::

    from callcalendar import create_view_from_index
    view = create_view_from_index("index.json")
    month = view.render()
    view.step_month(1)
"""

from __future__ import annotations

from pathlib import Path

from callcalendar.config import (
    FeedConfig,
    IndexConfig,
    feed_config_from_env,
    index_config_from_env,
)
from callcalendar.errors import CallCalendarError, CallCalendarErrorCode
from callcalendar.feed import FeedFetcher, build_calendar_feed, run_feed
from callcalendar.ics import parse_ics_events
from callcalendar.index import build_index, write_index
from callcalendar.models.call import CallEvent, EventType, ProjectedEvent
from callcalendar.models.feed import FeedEvent
from callcalendar.projector import (
    EventProjector,
    load_call_events,
    load_index,
    project_date,
    shift_fyq,
)
from callcalendar.view import CalendarDay, CalendarMonth, CalendarView, CalendarWeek

__version__ = "0.1.0"

__all__ = [
    # Calendar
    "CalendarView",
    "CalendarMonth",
    "CalendarWeek",
    "CalendarDay",
    "create_view_from_index",
    # Projection
    "EventProjector",
    "project_date",
    "shift_fyq",
    "load_call_events",
    "load_index",
    # Feed ingestion
    "FeedFetcher",
    "build_calendar_feed",
    "run_feed",
    "parse_ics_events",
    # Index
    "build_index",
    "write_index",
    # Config
    "FeedConfig",
    "IndexConfig",
    "feed_config_from_env",
    "index_config_from_env",
    # Errors
    "CallCalendarError",
    "CallCalendarErrorCode",
    # Models
    "CallEvent",
    "ProjectedEvent",
    "EventType",
    "FeedEvent",
]


def create_view_from_index(path: Path | str = "index.json", collapsed: bool = False) -> CalendarView:
    """Calendar view over the calls in an index file.

    A missing index gives an empty calendar rather than an error.
    """
    projector = EventProjector.from_index(load_index(path))
    return CalendarView(projector, collapsed=collapsed)
