"""Earnings-call event models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum


class EventType(Enum):
    """Whether a calendar entry is a real call or a projection."""

    ACTUAL = "actual"
    EXPECTED = "expected"


@dataclass(frozen=True)
class CallEvent:
    """Historical earnings call.

    Attributes:
        company: Company display name.
        ticker: Ticker symbol.
        fyq: Fiscal period label, normally ``FY<year>Q<1-4>``.
        path: Detail document for this call, if any.
        date: Calendar day of the call.
    """

    company: str
    ticker: str
    fyq: str
    path: str | None
    date: date


@dataclass(frozen=True)
class ProjectedEvent:
    """Entry of a per-year calendar map.

    ``fyq`` is the label of the source call; ``display_fyq`` is the label
    for the year under view (shifted forward for expected entries).
    """

    company: str
    ticker: str
    fyq: str
    display_fyq: str
    date: date
    type: EventType
    path: str | None = None

    @property
    def is_expected(self) -> bool:
        return self.type is EventType.EXPECTED

    def sort_key(self) -> tuple[int, str]:
        return (0 if self.type is EventType.ACTUAL else 1, self.company)
