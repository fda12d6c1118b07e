"""ICS feed models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


def format_instant(value: datetime) -> str:
    """``2025-02-14T00:00:00.000Z`` form used in the feed artifact."""
    return value.strftime("%Y-%m-%dT%H:%M:%S.000Z")


@dataclass(frozen=True)
class IcsProperty:
    """One logical content line: ``NAME;KEY=VAL:value``."""

    name: str
    value: str
    params: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class IcsDate:
    """Decoded DTSTART/DTEND value, always a UTC instant."""

    value: datetime
    all_day: bool


@dataclass(frozen=True)
class FeedEvent:
    """Normalized feed entry written to the calendar-feed artifact.

    Attributes:
        id: ``UID`` of the event, or its title when the UID is missing.
        title: Trimmed summary.
        date: ISO calendar day of ``start``.
        start: Start instant (UTC).
        end: End instant (UTC) or None.
        all_day: Whether the start was a date-only value.
        url: First ``href`` found in the event description.
    """

    id: str
    title: str
    date: str
    start: datetime
    end: datetime | None
    all_day: bool
    url: str | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "date": self.date,
            "start": format_instant(self.start),
            "end": format_instant(self.end) if self.end else None,
            "all_day": self.all_day,
            "url": self.url,
        }
