"""
MCP server exposing the lecture assignment engine as read-only tools.

The tools let an assistant check how a title parses and which slot a video
would land in, without fetching from YouTube or writing the record.
"""
from __future__ import annotations

from datetime import datetime, timezone
import typing as t

from fastmcp import FastMCP

from orchestrator.config import Settings
from record_store.store import RecordFile
from schedule_engine import record_codec
from schedule_engine.classes import DEFAULT_CLASSES
from schedule_engine.models import Accept, CandidateVideo, SequentialFillRule, SlotFallback
from schedule_engine.resolver import ScheduleContext, evaluate
from schedule_engine.semester import SemesterCalendar
from schedule_engine.title_parser import parse_title

mcp = FastMCP("LectureAssignerGateway")


def _parse_video_title(title: str) -> dict[str, t.Any]:
    """Parse a video title into class code and lecture date."""
    parsed = parse_title(title)
    return {
        "class_code": parsed.class_code,
        "lecture_date": parsed.lecture_date.isoformat() if parsed.lecture_date else None,
    }


def _list_class_schedules() -> list[dict[str, t.Any]]:
    """Describe every class and its scheduling rule."""
    schedules = []
    for spec in DEFAULT_CLASSES:
        entry: dict[str, t.Any] = {"class_code": spec.code, "tokens": list(spec.tokens)}
        if isinstance(spec.rule, SequentialFillRule):
            entry["rule"] = "sequential"
            entry["max_slots"] = spec.rule.max_slots
        else:
            entry["rule"] = "weekday"
            entry["weekdays"] = list(spec.rule.weekdays)
        schedules.append(entry)
    return schedules


def _preview_assignment(
    title: str,
    video_id: str,
    record_path: t.Optional[str] = None,
    semester_start: t.Optional[str] = None,
    strict_slots: bool = False,
) -> dict[str, t.Any]:
    """Report where a video would be assigned, without writing anything.

    Semester dates and the record path default to the environment settings.
    """
    settings = Settings.from_env()
    if semester_start:
        settings.semester_start = semester_start
    start, end = settings.semester_dates()

    snapshot = record_codec.decode(RecordFile(record_path or settings.record_path).read())
    context = ScheduleContext(
        calendar=SemesterCalendar(start, end),
        fallback=SlotFallback.REJECT if strict_slots else SlotFallback.FIRST_SLOT,
    )
    candidate = CandidateVideo(
        external_id=video_id, title=title, published_at=datetime.now(timezone.utc)
    )
    decision = evaluate(candidate, parse_title(title), snapshot, context)

    if isinstance(decision, Accept):
        return {
            "accepted": True,
            "class_code": decision.coordinate.class_code,
            "week": decision.coordinate.week,
            "lecture": decision.coordinate.lecture,
            "lecture_date": decision.lecture_date.isoformat(),
        }
    return {"accepted": False, "reason": decision.reason.value, "detail": decision.detail}


@mcp.tool()
def parse_video_title(title: str) -> dict[str, t.Any]:
    """Parse a video title into class code and lecture date."""
    return _parse_video_title(title)


@mcp.tool()
def list_class_schedules() -> list[dict[str, t.Any]]:
    """List classes with their title tokens and scheduling rules."""
    return _list_class_schedules()


@mcp.tool()
def preview_assignment(
    title: str,
    video_id: str,
    record_path: t.Optional[str] = None,
    semester_start: t.Optional[str] = None,
    strict_slots: bool = False,
) -> dict[str, t.Any]:
    """Show which lecture slot a video would be assigned to."""
    return _preview_assignment(title, video_id, record_path, semester_start, strict_slots)


if __name__ == "__main__":
    mcp.run()
