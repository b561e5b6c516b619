"""Semester calendar arithmetic: week numbers and lecture slot indices."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
import typing as t

from schedule_engine.models import (
    ClassSpec,
    SequentialFillRule,
    SlotCoordinate,
    SlotFallback,
)
from schedule_engine.slot_store import RecordSnapshot


@dataclass(frozen=True)
class SemesterCalendar:
    """Semester date range. Week 1 begins on ``start``."""
    start: date
    end: t.Optional[date] = None

    @property
    def last_week(self) -> t.Optional[int]:
        if self.end is None:
            return None
        return week_number(self.end, self.start)


def week_number(day: date, semester_start: date) -> int:
    """Semester-relative week of ``day``. Not clamped to the semester."""
    return (day - semester_start).days // 7 + 1


def lecture_slot(
    day: date,
    spec: ClassSpec,
    week: int,
    snapshot: RecordSnapshot,
    fallback: SlotFallback = SlotFallback.FIRST_SLOT,
) -> t.Optional[int]:
    """Lecture index within the week for a recording of ``spec`` made on ``day``.

    Weekday classes use the position of the weekday in the class's meeting
    days, defaulting to 1 for an off-schedule day. Sequential-fill classes take
    the first open slot of the week; when none is open the result is 1 under
    ``SlotFallback.FIRST_SLOT`` and None under ``SlotFallback.REJECT``.
    """
    rule = spec.rule
    if isinstance(rule, SequentialFillRule):
        for lecture in range(1, rule.max_slots + 1):
            if snapshot.is_open(SlotCoordinate(spec.code, week, lecture)):
                return lecture
        return 1 if fallback is SlotFallback.FIRST_SLOT else None

    weekday = day.isoweekday()
    if weekday in rule.weekdays:
        return rule.weekdays.index(weekday) + 1
    return 1
