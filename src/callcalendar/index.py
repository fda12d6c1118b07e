"""Build ``index.json`` from a directory of call documents.

The index is the event list the calendar is rendered from: one summary
record per call, plus a flattened ``search_blob`` of the call's text.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any

from callcalendar.config import IndexConfig
from callcalendar.dates import today_utc
from callcalendar.quality import as_items, as_section, is_incomplete

LOGGER = logging.getLogger(__name__)


def list_json_files(directory: Path | str) -> list[Path]:
    """All ``*.json`` files under ``directory``, walked with a worklist."""
    root = Path(directory)
    if not root.is_dir():
        return []

    found: list[Path] = []
    pending = [root]
    while pending:
        current = pending.pop()
        for entry in sorted(current.iterdir()):
            if entry.is_dir():
                pending.append(entry)
            elif entry.is_file() and entry.name.endswith(".json"):
                found.append(entry)
    return sorted(found)


def _sections(items: Any) -> list[dict[str, Any]]:
    return [item for item in as_items(items) if isinstance(item, dict)]


def build_search_blob(data: dict[str, Any]) -> str:
    """Flatten a call's text fields into one space-joined string.

    Parts of the document with the wrong JSON shape contribute nothing.
    """
    fields: list[Any] = [
        data.get("company"),
        data.get("ticker"),
        data.get("fyq"),
        data.get("call_date"),
        data.get("tldr"),
        *as_items(data.get("bullets")),
        *as_items(data.get("themes")),
    ]

    deep = as_section(data.get("deep_dive"))
    for section in _sections(deep.get("segments")) + _sections(deep.get("notes")):
        fields.extend([section.get("title"), *as_items(section.get("points")), section.get("body")])

    qna = as_section(data.get("qna"))
    for theme in _sections(qna.get("themes")):
        fields.extend([theme.get("title"), *as_items(theme.get("points")), theme.get("body")])
    for item in _sections(qna.get("top_questions")):
        fields.extend([item.get("question"), item.get("summary")])

    vdc = as_section(data.get("vdc_angle"))
    for key in ("implications", "competitive_notes", "forecast_hooks"):
        fields.extend(as_items(vdc.get(key)))

    follow = as_section(data.get("follow_ups"))
    for key in ("action_items", "open_questions", "watch_next_quarter"):
        fields.extend(as_items(follow.get(key)))

    return " ".join(str(f) for f in fields if f)


def summarize_call(data: dict[str, Any], relative_path: str) -> dict[str, Any]:
    return {
        "company": data.get("company"),
        "ticker": data.get("ticker"),
        "fyq": data.get("fyq"),
        "call_date": data.get("call_date"),
        "tldr": data.get("tldr"),
        "bullets": data.get("bullets") or [],
        "themes": data.get("themes") or [],
        "path": relative_path,
        "incomplete": is_incomplete(data),
        "search_blob": build_search_blob(data),
    }


def build_index(config: IndexConfig, generated_at: date | None = None) -> dict[str, Any]:
    """Read every call document and return the index payload.

    Documents that are not valid JSON objects are skipped. Sections with
    the wrong shape are treated as empty rather than failing the build.
    """
    root = config.root_dir.resolve()
    calls: list[dict[str, Any]] = []

    for file_path in list_json_files(config.calls_dir):
        try:
            with open(file_path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            LOGGER.warning("Skipping %s: %s", file_path, exc)
            continue
        if not isinstance(data, dict):
            LOGGER.warning("Skipping %s: not a JSON object", file_path)
            continue

        resolved = file_path.resolve()
        try:
            relative = resolved.relative_to(root).as_posix()
        except ValueError:
            relative = resolved.as_posix()
        calls.append(summarize_call(data, relative))

    calls.sort(key=lambda c: str(c.get("call_date") or ""), reverse=True)
    return {
        "generated_at": (generated_at or today_utc()).isoformat(),
        "calls": calls,
    }


def write_index(config: IndexConfig, generated_at: date | None = None) -> Path:
    payload = build_index(config, generated_at)
    out = Path(config.output_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with open(out, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)
    LOGGER.info("Indexed %d calls into %s", len(payload["calls"]), out)
    return out
