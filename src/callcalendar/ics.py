"""Parser for the iCalendar subset used by the earnings-call feed.

Only ``VEVENT`` blocks and the ``UID``, ``SUMMARY``, ``DESCRIPTION``,
``X-ALT-DESC``, ``DTSTART`` and ``DTEND`` properties are read. Everything
else is ignored. Events that cannot be dated, or whose title does not name
a fiscal quarter, are dropped rather than reported.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone

from callcalendar.models.feed import FeedEvent, IcsDate, IcsProperty

LOGGER = logging.getLogger(__name__)

UNTITLED = "Untitled event"

_LINE_BREAK = re.compile(r"\r?\n")
_ESCAPE = re.compile(r"\\([\\,;nN])")
_DATE_ONLY = re.compile(r"^(\d{4})(\d{2})(\d{2})$")
_DATE_TIME = re.compile(r"^(\d{4})(\d{2})(\d{2})T(\d{2})(\d{2})(\d{2})?(Z)?$")
_HREF = re.compile(r'href="([^"]+)"', re.IGNORECASE)
_QUARTER_TITLE = re.compile(r" - Q[1-4]\s+\d{4}\b", re.IGNORECASE)


@dataclass
class _RawEvent:
    uid: str | None = None
    summary: str | None = None
    description: str | None = None
    alt_description: str | None = None
    dtstart: IcsProperty | None = None
    dtend: IcsProperty | None = None


# ---- Lines and properties ----

def unfold_lines(text: str) -> list[str]:
    """Join continuation lines (leading space or tab) onto the previous line.

    Exactly one leading whitespace character is removed from each
    continuation. Blank lines are dropped.
    """
    lines: list[str] = []
    for line in _LINE_BREAK.split(text):
        if not line:
            continue
        if line[0] in (" ", "\t") and lines:
            lines[-1] += line[1:]
            continue
        lines.append(line)
    return lines


def unescape_value(value: str) -> str:
    if not value:
        return ""

    def _replace(match: re.Match[str]) -> str:
        char = match.group(1)
        return "\n" if char in ("n", "N") else char

    return _ESCAPE.sub(_replace, value)


def parse_property(line: str) -> IcsProperty | None:
    """Split ``NAME;KEY=VAL:value`` at the first colon; None if there is none."""
    head, sep, raw_value = line.partition(":")
    if not sep:
        return None
    parts = head.split(";")
    name = parts[0].strip().upper()
    params: dict[str, str] = {}
    for part in parts[1:]:
        key, eq, param_value = part.partition("=")
        if not eq or not key:
            continue
        params[key.upper()] = param_value
    return IcsProperty(name=name, value=unescape_value(raw_value), params=params)


# ---- Values ----

def parse_ics_date(prop: IcsProperty | None) -> IcsDate | None:
    """Decode a DATE or DATE-TIME value into a UTC instant.

    Values without a trailing ``Z`` are read as UTC as well.
    """
    if prop is None or not prop.value:
        return None
    raw = prop.value.strip()
    date_only = prop.params.get("VALUE", "").upper() == "DATE" or bool(_DATE_ONLY.match(raw))

    try:
        if date_only:
            match = _DATE_ONLY.match(raw)
            if not match:
                return None
            year, month, day = (int(g) for g in match.groups())
            return IcsDate(datetime(year, month, day, tzinfo=timezone.utc), all_day=True)

        match = _DATE_TIME.match(raw)
        if not match:
            return None
        year, month, day, hour, minute = (int(g) for g in match.groups()[:5])
        second = int(match.group(6) or 0)
        value = datetime(year, month, day, hour, minute, second, tzinfo=timezone.utc)
        return IcsDate(value, all_day=False)
    except ValueError:
        return None


def first_href(html: str | None) -> str | None:
    if not html:
        return None
    match = _HREF.search(html)
    return match.group(1) if match else None


def is_quarter_title(title: str | None) -> bool:
    """True for titles like ``"Acme Corp - Q1 2025 Earnings Call"``."""
    return bool(_QUARTER_TITLE.search(title or ""))


# ---- Events ----

def _collect(lines: list[str]) -> list[_RawEvent]:
    events: list[_RawEvent] = []
    current: _RawEvent | None = None

    for line in lines:
        marker = line.strip().upper()
        if marker == "BEGIN:VEVENT":
            current = _RawEvent()
            continue
        if marker == "END:VEVENT":
            if current is not None:
                events.append(current)
            current = None
            continue
        if current is None:
            continue

        prop = parse_property(line)
        if prop is None or not prop.name:
            continue
        if prop.name == "UID":
            current.uid = prop.value
        elif prop.name == "SUMMARY":
            current.summary = prop.value
        elif prop.name == "DESCRIPTION":
            current.description = prop.value
        elif prop.name == "X-ALT-DESC":
            current.alt_description = prop.value
        elif prop.name == "DTSTART":
            current.dtstart = prop
        elif prop.name == "DTEND":
            current.dtend = prop

    return events


def _normalize(raw: _RawEvent) -> FeedEvent | None:
    start = parse_ics_date(raw.dtstart)
    if start is None:
        LOGGER.debug("Dropping event %r: bad or missing DTSTART", raw.uid or raw.summary)
        return None
    end = parse_ics_date(raw.dtend)
    summary = (raw.summary or "").strip()
    description = raw.alt_description or raw.description or ""

    return FeedEvent(
        id=raw.uid or summary,
        title=summary or UNTITLED,
        date=start.value.date().isoformat(),
        start=start.value,
        end=end.value if end else None,
        all_day=start.all_day,
        url=first_href(description),
    )


def parse_ics_events(text: str) -> list[FeedEvent]:
    """Parse a feed document into quarter events, most recent start first."""
    events: list[FeedEvent] = []
    for raw in _collect(unfold_lines(text)):
        event = _normalize(raw)
        if event is None:
            continue
        if not is_quarter_title(event.title):
            LOGGER.debug("Dropping event %r: not a fiscal-quarter title", event.title)
            continue
        events.append(event)

    events.sort(key=lambda e: e.start, reverse=True)
    return events
