"""Download the ICS feed and write the calendar-feed artifact."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any
from urllib.parse import urljoin

import requests

from callcalendar.config import FeedConfig
from callcalendar.errors import CallCalendarError, CallCalendarErrorCode
from callcalendar.ics import parse_ics_events

LOGGER = logging.getLogger(__name__)


class FeedFetcher:
    """Fetch feed documents over HTTP(S), following redirects by hand.

    ``requests`` is told not to follow redirects so each hop can be
    counted against ``FeedConfig.max_redirects`` and logged.
    """

    def __init__(
        self,
        config: FeedConfig,
        session: requests.Session | None = None,
    ) -> None:
        self.config = config
        self.session = session or requests.Session()

    def download_text(self, url: str | None = None) -> str:
        url = url or self.config.require_url()

        for _ in range(self.config.max_redirects + 1):
            try:
                response = self.session.get(
                    url,
                    headers={"User-Agent": self.config.user_agent},
                    timeout=self.config.timeout_seconds,
                    allow_redirects=False,
                )
            except requests.RequestException as exc:
                raise CallCalendarError(
                    f"Request for {url} failed: {exc}",
                    code=CallCalendarErrorCode.NETWORK,
                    retryable=True,
                ) from exc

            status = response.status_code
            location = response.headers.get("Location")
            if 300 <= status < 400 and location:
                next_url = urljoin(url, location)
                LOGGER.info("Following %s redirect %s -> %s", status, url, next_url)
                response.close()
                url = next_url
                continue

            if not 200 <= status < 300:
                response.close()
                raise CallCalendarError(
                    f"Unexpected response {status} for {url}",
                    code=CallCalendarErrorCode.HTTP_STATUS,
                    retryable=status >= 500,
                )

            if "charset" not in response.headers.get("Content-Type", "").lower():
                response.encoding = "utf-8"
            return response.text

        raise CallCalendarError(
            f"Gave up after {self.config.max_redirects} redirects, last location {url}",
            code=CallCalendarErrorCode.TOO_MANY_REDIRECTS,
        )


def build_calendar_feed(
    config: FeedConfig,
    fetcher: FeedFetcher | None = None,
) -> dict[str, Any]:
    """Fetch and parse the feed into the artifact payload."""
    fetcher = fetcher or FeedFetcher(config)
    events = parse_ics_events(fetcher.download_text(config.require_url()))
    return {
        "source": config.source,
        "events": [e.to_dict() for e in events],
    }


def write_feed_artifact(payload: dict[str, Any], path: Path | str) -> Path:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with open(out, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)
    return out


def run_feed(config: FeedConfig, fetcher: FeedFetcher | None = None) -> int:
    """Full ingestion run; returns the number of events written.

    The URL is checked before any request, and nothing is written unless
    the fetch and parse both succeed.
    """
    config.require_url()
    payload = build_calendar_feed(config, fetcher)
    out = write_feed_artifact(payload, config.output_path)
    LOGGER.info("Wrote %d events to %s", len(payload["events"]), out)
    return len(payload["events"])
