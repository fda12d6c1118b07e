"""Call calendar models."""

from callcalendar.models.call import CallEvent, EventType, ProjectedEvent
from callcalendar.models.feed import FeedEvent, IcsDate, IcsProperty

__all__ = [
    "CallEvent",
    "EventType",
    "ProjectedEvent",
    "FeedEvent",
    "IcsDate",
    "IcsProperty",
]
