"""
Data models for assigning lecture recordings to schedule slots.

This module contains the dataclasses used to describe classes and their
scheduling rules, candidate videos from the catalog, slot coordinates in the
lecture record, and the outcome of evaluating a candidate.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
import typing as t


@dataclass(frozen=True)
class WeekdayRule:
    """Slot index is the position of the lecture's weekday in ``weekdays``.

    Weekdays use ISO numbering: Monday = 1 ... Sunday = 7.
    """
    weekdays: tuple[int, ...]


@dataclass(frozen=True)
class SequentialFillRule:
    """Arrivals fill the next open slot of the week, whatever the weekday."""
    max_slots: int


ScheduleRule = t.Union[WeekdayRule, SequentialFillRule]


@dataclass(frozen=True)
class ClassSpec:
    """One course offering: canonical code, title tokens and scheduling rule."""
    code: str
    tokens: tuple[str, ...]
    rule: ScheduleRule

    @property
    def max_slots(self) -> int:
        """Number of lecture slots per week for this class."""
        if isinstance(self.rule, SequentialFillRule):
            return self.rule.max_slots
        return len(self.rule.weekdays)


@dataclass(frozen=True)
class CandidateVideo:
    """A published video as supplied by the catalog."""
    external_id: str
    title: str
    published_at: datetime


@dataclass(frozen=True, order=True)
class SlotCoordinate:
    """Address of one lecture cell in the record."""
    class_code: str
    week: int
    lecture: int

    @property
    def lecture_key(self) -> str:
        """Key used inside a class section, e.g. ``week3-lecture2``."""
        return f"week{self.week}-lecture{self.lecture}"

    def __str__(self) -> str:
        return f"{self.class_code} {self.lecture_key}"


@dataclass(frozen=True)
class ParsedTitle:
    """Facts extracted from a video title. Either field may be missing."""
    class_code: t.Optional[str] = None
    lecture_date: t.Optional[date] = None

    @property
    def complete(self) -> bool:
        return self.class_code is not None and self.lecture_date is not None


class RejectReason(Enum):
    """Why a candidate was not assigned."""
    DUPLICATE = "duplicate"
    UNPARSEABLE = "unparseable"
    CLASS_MISMATCH = "class-mismatch"
    OUT_OF_RANGE = "out-of-range"
    NO_SLOT_AVAILABLE = "no-slot-available"
    UNKNOWN_SLOT = "unknown-slot"
    SLOT_OCCUPIED = "slot-occupied"


class SlotFallback(Enum):
    """What sequential fill does when every slot of the week is taken."""
    FIRST_SLOT = "first-slot"
    REJECT = "reject"


@dataclass(frozen=True)
class Accept:
    """The candidate may be written to ``coordinate``."""
    coordinate: SlotCoordinate
    lecture_date: date


@dataclass(frozen=True)
class Reject:
    """The candidate is skipped."""
    reason: RejectReason
    detail: str = ""


Decision = t.Union[Accept, Reject]


@dataclass(frozen=True)
class Assignment:
    """One candidate bound to one slot during a run."""
    external_id: str
    title: str
    coordinate: SlotCoordinate
    url: str
    lecture_date: date


@dataclass(frozen=True)
class Rejection:
    """One candidate skipped during a run, with the reason code."""
    external_id: str
    title: str
    reason: RejectReason
    detail: str = ""
