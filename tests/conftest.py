"""Shared fixtures for callcalendar tests."""

from __future__ import annotations

import sys
from datetime import date
from pathlib import Path

import pytest

# Ensure src/ is on the path for editable-style imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from callcalendar.models.call import CallEvent


class FixedClock:
    """Callable "today" that tests can move forward."""

    def __init__(self, today: date) -> None:
        self.today = today

    def __call__(self) -> date:
        return self.today


def make_call(
    ticker: str,
    fyq: str,
    day: date,
    company: str | None = None,
    path: str | None = None,
) -> CallEvent:
    return CallEvent(
        company=company or f"{ticker.title()} Corp",
        ticker=ticker,
        fyq=fyq,
        path=path,
        date=day,
    )


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(date(2025, 1, 1))


@pytest.fixture
def sample_calls() -> list[CallEvent]:
    """ACME reports both years; BETA and ALPHA only have 2024 on record."""
    return [
        make_call("ACME", "FY2023Q1", date(2023, 2, 16), company="Acme Corp"),
        make_call("ACME", "FY2024Q1", date(2024, 2, 15), company="Acme Corp",
                  path="calls/acme/fy2024q1.json"),
        make_call("ACME", "FY2025Q1", date(2025, 2, 20), company="Acme Corp",
                  path="calls/acme/fy2025q1.json"),
        make_call("BETA", "FY2024Q1", date(2024, 2, 13), company="Beta Inc"),
        make_call("ALPH", "FY2024Q1", date(2024, 2, 13), company="Alpha Co"),
        make_call("ZETA", "FY2025Q1", date(2025, 2, 13), company="Zeta Ltd"),
    ]


@pytest.fixture
def sample_index() -> dict:
    return {
        "generated_at": "2025-01-01",
        "calls": [
            {"company": "Acme Corp", "ticker": "ACME", "fyq": "FY2025Q1",
             "call_date": "2025-02-20", "path": "calls/acme/fy2025q1.json"},
            {"company": "Beta Inc", "ticker": "BETA", "fyq": "FY2025Q1",
             "call_date": "2025-05-08", "path": "calls/beta/fy2025q1.json"},
        ],
    }
