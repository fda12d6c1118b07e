"""Completeness checks for call documents."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


def as_section(value: Any) -> dict[str, Any]:
    """``value`` if it is a JSON object, else an empty one."""
    return value if isinstance(value, dict) else {}


def as_items(value: Any) -> list[Any]:
    """``value`` if it is a JSON array, else an empty one."""
    return value if isinstance(value, list) else []


@dataclass(frozen=True)
class SectionCheck:
    """Whether one section of a call write-up has content."""

    section: str
    filled: bool
    detail: str = ""


@dataclass
class CompletenessReport:
    """Section-by-section completeness of one call document."""

    checks: list[SectionCheck] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return all(c.filled for c in self.checks)

    @property
    def missing_sections(self) -> list[str]:
        return [c.section for c in self.checks if not c.filled]

    def check(self, section: str) -> SectionCheck:
        return next(c for c in self.checks if c.section == section)


def _has_any(section: dict[str, Any], *keys: str) -> bool:
    return any(section.get(k) for k in keys)


def validate_call_document(data: dict[str, Any]) -> CompletenessReport:
    """Run all completeness checks on one call document.

    A section with the wrong JSON shape counts as empty.

    Checks:
        1. Participants listed
        2. At least 3 snapshot bullets
        3. Deep dive has segments, notes or metrics
        4. Q&A has themes or top questions
        5. VDC angle has implications, competitive notes or forecast hooks
        6. Follow-ups has action items, open questions or watch items
    """
    report = CompletenessReport()

    # 1. Participants
    participants = as_items(data.get("participants"))
    report.checks.append(SectionCheck(
        "participants", bool(participants),
        f"{len(participants)} participants" if participants else "No participants",
    ))

    # 2. Bullets
    bullets = as_items(data.get("bullets"))
    report.checks.append(SectionCheck(
        "bullets", len(bullets) >= 3, f"{len(bullets)} bullets",
    ))

    # 3. Deep dive
    deep = as_section(data.get("deep_dive"))
    metrics = as_section(deep.get("metrics"))
    has_deep = _has_any(deep, "segments", "notes") or _has_any(metrics, "numbers", "guidance")
    report.checks.append(SectionCheck(
        "deep_dive", has_deep, "" if has_deep else "No segments, notes or metrics",
    ))

    # 4. Q&A
    has_qna = _has_any(as_section(data.get("qna")), "themes", "top_questions")
    report.checks.append(SectionCheck(
        "qna", has_qna, "" if has_qna else "No Q&A themes or questions",
    ))

    # 5. VDC angle
    has_vdc = _has_any(
        as_section(data.get("vdc_angle")), "implications", "competitive_notes", "forecast_hooks",
    )
    report.checks.append(SectionCheck(
        "vdc_angle", has_vdc, "" if has_vdc else "No VDC angle notes",
    ))

    # 6. Follow-ups
    has_follow = _has_any(
        as_section(data.get("follow_ups")), "action_items", "open_questions", "watch_next_quarter",
    )
    report.checks.append(SectionCheck(
        "follow_ups", has_follow, "" if has_follow else "No follow-ups",
    ))

    return report


def is_incomplete(data: dict[str, Any]) -> bool:
    return not validate_call_document(data).complete
