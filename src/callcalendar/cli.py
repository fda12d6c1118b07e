"""Command line entry points: ingest the feed, build the index, print a month."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from callcalendar.config import feed_config_from_env, index_config_from_env
from callcalendar.dates import WEEKDAY_LABELS, parse_date
from callcalendar.errors import CallCalendarError
from callcalendar.feed import run_feed
from callcalendar.index import write_index
from callcalendar.projector import EventProjector, load_index
from callcalendar.view import CalendarMonth, CalendarView

LOGGER = logging.getLogger(__name__)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="callcalendar", description="Earnings-call calendar tools.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output.")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors.")
    sub = parser.add_subparsers(dest="command", required=True)

    feed = sub.add_parser("feed", help="Fetch the ICS feed and write the calendar artifact.")
    feed.add_argument("--url", help="Feed URL (overrides CALENDAR_FEED_URL).")
    feed.add_argument("--output", help="Artifact path (overrides CALENDAR_OUTPUT).")
    feed.add_argument("--source", help="Provenance tag stored in the artifact.")

    index = sub.add_parser("index", help="Build index.json from call documents.")
    index.add_argument("--calls-dir", help="Directory of call JSON documents.")
    index.add_argument("--output", help="Index path (overrides CALLS_INDEX).")

    month = sub.add_parser("month", help="Print one month of the call calendar.")
    month.add_argument("--index", default="index.json", help="Index file to read calls from.")
    month.add_argument("--month", help="Month to show as YYYY-MM (default: current month).")
    month.add_argument("--collapsed", action="store_true", help="Hide weeks without calls.")
    month.add_argument("--step", type=int, default=0, help="Months to step from the start month.")

    return parser.parse_args(argv)


def _configure_logging(args: argparse.Namespace) -> None:
    level = logging.INFO
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def format_month(month: CalendarMonth) -> str:
    """Plain-text rendering: one line per day that has calls."""
    title = month.label + (" (collapsed)" if month.collapsed else "")
    lines = [title, " ".join(WEEKDAY_LABELS)]
    for week in month.weeks:
        cells = []
        for day in week.days:
            number = f"{day.day:>2}" if not day.is_outside else " ."
            cells.append(f"{number}*" if day.is_today else f"{number} ")
        lines.append("".join(f"{c:<4}" for c in cells).rstrip())
        for day in week.days:
            for event in day.events:
                if day.is_outside:
                    continue
                badge = " [Expected]" if event.is_expected else ""
                lines.append(
                    f"    {day.key}  {event.company} · {event.ticker} · {event.display_fyq}{badge}"
                )
    if not month.weeks:
        lines.append("    (no calls)")
    return "\n".join(lines)


def _run_month(args: argparse.Namespace) -> int:
    projector = EventProjector.from_index(load_index(args.index))
    start = None
    if args.month:
        start = parse_date(f"{args.month}-01")
        if start is None:
            LOGGER.error("Invalid --month %r, expected YYYY-MM", args.month)
            return 2
    view = CalendarView(projector, collapsed=args.collapsed, start=start)
    for _ in range(abs(args.step)):
        view.step_month(1 if args.step > 0 else -1)
    print(format_month(view.render()))
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    _configure_logging(args)

    try:
        if args.command == "feed":
            feed_config = feed_config_from_env()
            if args.url:
                feed_config.feed_url = args.url
            if args.output:
                feed_config.output_path = args.output
            if args.source:
                feed_config.source = args.source
            run_feed(feed_config)
            return 0

        if args.command == "index":
            index_config = index_config_from_env()
            if args.calls_dir:
                index_config.calls_dir = args.calls_dir
            if args.output:
                index_config.output_path = args.output
            write_index(index_config)
            return 0

        return _run_month(args)
    except CallCalendarError as exc:
        LOGGER.error("%s failed [%s]: %s", args.command, exc.code.value, exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
