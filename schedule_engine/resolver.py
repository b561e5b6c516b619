"""
Decide whether a candidate video may be written into the record.

Checks run in a fixed order and stop at the first failure. A rejection is never
an error: the caller skips the candidate and moves on.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import re
import typing as t

from schedule_engine.classes import DEFAULT_CLASSES, class_index
from schedule_engine.models import (
    Accept,
    CandidateVideo,
    ClassSpec,
    Decision,
    ParsedTitle,
    Reject,
    RejectReason,
    SlotCoordinate,
    SlotFallback,
)
from schedule_engine.semester import SemesterCalendar, lecture_slot, week_number
from schedule_engine.slot_store import VIDEO_URL_TEMPLATE, RecordSnapshot, video_id_patterns
from schedule_engine.title_parser import title_mentions_class


@dataclass(frozen=True)
class ScheduleContext:
    """Everything besides the record that a decision depends on."""
    calendar: SemesterCalendar
    classes: tuple[ClassSpec, ...] = DEFAULT_CLASSES
    fallback: SlotFallback = SlotFallback.FIRST_SLOT
    reject_past_semester_end: bool = False
    url_template: str = VIDEO_URL_TEMPLATE
    _by_code: dict[str, ClassSpec] = field(init=False, repr=False, compare=False)
    _id_patterns: tuple[re.Pattern[str], ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_by_code", class_index(self.classes))
        object.__setattr__(self, "_id_patterns", video_id_patterns(self.url_template))

    def class_spec(self, class_code: str) -> t.Optional[ClassSpec]:
        return self._by_code.get(class_code)

    def video_url(self, video_id: str) -> str:
        return self.url_template.format(video_id=video_id)

    def existing_ids(self, snapshot: RecordSnapshot) -> set[str]:
        """Video ids already in ``snapshot``, in any URL form this context writes."""
        return snapshot.existing_external_ids(self._id_patterns)


def evaluate(
    candidate: CandidateVideo,
    parsed: ParsedTitle,
    snapshot: RecordSnapshot,
    context: ScheduleContext,
    seen_ids: t.AbstractSet[str] = frozenset(),
    existing_ids: t.Optional[t.AbstractSet[str]] = None,
) -> Decision:
    """Accept the candidate with a target slot, or reject it with a reason.

    Args:
        candidate: The video being considered
        parsed: Class code and date parsed from the candidate's title
        snapshot: Current record state, including earlier accepts of this run
        context: Semester calendar, class table and slot policies
        seen_ids: Video ids accepted earlier in this run
        existing_ids: Precomputed ids already in the record. Derived from
                      ``snapshot`` when not given.

    Returns:
        ``Accept`` with the slot coordinate, or ``Reject`` with a reason code
    """
    if existing_ids is None:
        existing_ids = context.existing_ids(snapshot)

    # 1. Already in the record, or accepted earlier in this run
    if candidate.external_id in existing_ids or candidate.external_id in seen_ids:
        return Reject(RejectReason.DUPLICATE, f"video {candidate.external_id} already assigned")

    # 2. Title must yield both class and date
    if not parsed.complete:
        return Reject(RejectReason.UNPARSEABLE, "unable to parse class/date from title")

    # 3. Title must literally name the class it resolved to
    spec = context.class_spec(parsed.class_code)
    if spec is None or not title_mentions_class(candidate.title, spec):
        return Reject(
            RejectReason.CLASS_MISMATCH,
            f"title does not contain class {parsed.class_code.upper()}",
        )

    # 4. Week must fall inside the semester
    week = week_number(parsed.lecture_date, context.calendar.start)
    if week < 1:
        return Reject(RejectReason.OUT_OF_RANGE, f"week {week} is before the semester start")
    last_week = context.calendar.last_week
    if context.reject_past_semester_end and last_week is not None and week > last_week:
        return Reject(RejectReason.OUT_OF_RANGE, f"week {week} is after semester week {last_week}")

    # 5. Slot within the week
    lecture = lecture_slot(parsed.lecture_date, spec, week, snapshot, context.fallback)
    if lecture is None:
        return Reject(
            RejectReason.NO_SLOT_AVAILABLE,
            f"all {spec.max_slots} slots of {spec.code} week {week} are filled",
        )
    coordinate = SlotCoordinate(spec.code, week, lecture)

    # 6. The record must have somewhere to put it
    if coordinate not in snapshot:
        return Reject(RejectReason.UNKNOWN_SLOT, f"record has no slot {coordinate}")

    # 7. Filled slots are never overwritten
    if not snapshot.is_open(coordinate):
        return Reject(
            RejectReason.SLOT_OCCUPIED,
            f"{coordinate} already has content: {snapshot.get(coordinate)}",
        )

    return Accept(coordinate=coordinate, lecture_date=parsed.lecture_date)
