"""Feed ingestion and index configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from callcalendar.errors import CallCalendarError, CallCalendarErrorCode

DEFAULT_USER_AGENT = "AnalystRepo calendar fetch"
DEFAULT_FEED_SOURCE = "quartr"


@dataclass
class FeedConfig:
    """Configuration for the ICS feed ingestion run.

    Attributes:
        feed_url: Source ICS URL. Required; there is no default.
        output_path: Where the calendar-feed JSON artifact is written.
        source: Provenance tag stored in the artifact.
        user_agent: User-Agent header sent with every request.
        timeout_seconds: Per-request timeout.
        max_redirects: Redirect hops followed before giving up.
    """

    feed_url: str | None = None
    output_path: str = "calendar.json"
    source: str = DEFAULT_FEED_SOURCE
    user_agent: str = DEFAULT_USER_AGENT
    timeout_seconds: float = 30.0
    max_redirects: int = 10

    def require_url(self) -> str:
        if not self.feed_url:
            raise CallCalendarError(
                "Missing CALENDAR_FEED_URL env var (or pass --url <feedUrl>).",
                code=CallCalendarErrorCode.CONFIG_MISSING,
            )
        return self.feed_url


@dataclass
class IndexConfig:
    """Configuration for building the call index.

    Attributes:
        calls_dir: Directory holding one JSON document per call.
        root: Directory that document paths are made relative to.
            Defaults to the parent of ``calls_dir``.
        output_path: Where ``index.json`` is written.
    """

    calls_dir: str = "calls"
    root: str | None = None
    output_path: str = "index.json"

    @property
    def root_dir(self) -> Path:
        if self.root:
            return Path(self.root)
        return Path(self.calls_dir).resolve().parent


def feed_config_from_env() -> FeedConfig:
    """Zero-config factory for the feed ingestion run.

    Environment variables:
        CALENDAR_FEED_URL: ICS feed URL (required at fetch time).
        CALENDAR_OUTPUT: Artifact path (default: "calendar.json").
        CALENDAR_FEED_SOURCE: Provenance tag (default: "quartr").
        CALENDAR_FEED_TIMEOUT: Request timeout in seconds (default: 30).
        CALENDAR_FEED_MAX_REDIRECTS: Redirect hop limit (default: 10).
    """
    return FeedConfig(
        feed_url=os.getenv("CALENDAR_FEED_URL") or None,
        output_path=os.getenv("CALENDAR_OUTPUT", "calendar.json"),
        source=os.getenv("CALENDAR_FEED_SOURCE", DEFAULT_FEED_SOURCE),
        timeout_seconds=float(os.getenv("CALENDAR_FEED_TIMEOUT", "30")),
        max_redirects=int(os.getenv("CALENDAR_FEED_MAX_REDIRECTS", "10")),
    )


def index_config_from_env() -> IndexConfig:
    """Zero-config factory for the index builder.

    Environment variables:
        CALLS_DIR: Directory of call documents (default: "calls").
        CALLS_INDEX: Output index path (default: "index.json").
    """
    return IndexConfig(
        calls_dir=os.getenv("CALLS_DIR", "calls"),
        output_path=os.getenv("CALLS_INDEX", "index.json"),
    )
