"""Assignment engine for candidate videos.

This module walks the catalog candidates in the order given, asks the resolver
about each one, and applies every accepted candidate to a working copy of the
record. The caller's snapshot is never modified; the run hands back a new one
together with the ordered list of assignments.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import logging
import typing as t

from schedule_engine.models import (
    Accept,
    Assignment,
    CandidateVideo,
    Decision,
    Rejection,
)
from schedule_engine.resolver import ScheduleContext, evaluate
from schedule_engine.slot_store import RecordSnapshot
from schedule_engine.title_parser import parse_title

logger = logging.getLogger(__name__)


class RunState(Enum):
    """State of an assignment run."""
    IDLE = "IDLE"
    PROCESSING = "PROCESSING"
    COMMITTING = "COMMITTING"
    DONE = "DONE"
    FAILED = "FAILED"


@dataclass
class AssignmentRun:
    """Outcome of one pass over the catalog candidates."""
    snapshot: RecordSnapshot = field(default_factory=lambda: RecordSnapshot({}))
    assignments: list[Assignment] = field(default_factory=list)
    rejections: list[Rejection] = field(default_factory=list)
    state: RunState = RunState.IDLE

    @property
    def has_changes(self) -> bool:
        return bool(self.assignments)

    def transition(self, state: RunState) -> None:
        logger.debug("Run state %s -> %s", self.state.value, state.value)
        self.state = state


def assign_videos(
    candidates: t.Iterable[CandidateVideo],
    snapshot: RecordSnapshot,
    context: ScheduleContext,
    progress_callback: t.Optional[t.Callable[[int, CandidateVideo, Decision], None]] = None,
    run: t.Optional[AssignmentRun] = None,
) -> AssignmentRun:
    """Assign candidates to record slots and return the run outcome.

    Candidates are processed strictly in the order supplied, since each decision
    depends on every earlier accept of the same run.

    Args:
        candidates: Catalog videos, already filtered and deduplicated
        snapshot: Record state at the start of the run
        context: Semester calendar, class table, slot policies and URL template
        progress_callback: Optional function called after each candidate with
                           (candidate_number, candidate, decision)
        run: Run already started by the caller, to continue on instead of
             creating a new one

    Returns:
        The run, in ``PROCESSING`` state, holding the updated snapshot, the
        assignments and the rejections
    """
    if run is None:
        run = AssignmentRun(snapshot=snapshot)
    else:
        run.snapshot = snapshot
    if run.state is RunState.IDLE:
        run.transition(RunState.PROCESSING)

    # Built once per run; accepted ids are tracked separately in seen_ids
    existing_ids = frozenset(context.existing_ids(snapshot))
    logger.info("Found %d existing video IDs in record", len(existing_ids))
    seen_ids: set[str] = set()

    for number, candidate in enumerate(candidates, start=1):
        logger.info("Processing: %s (%s)", candidate.title, candidate.external_id)
        parsed = parse_title(candidate.title, context.classes)
        decision = evaluate(
            candidate,
            parsed,
            run.snapshot,
            context,
            seen_ids=seen_ids,
            existing_ids=existing_ids,
        )

        if isinstance(decision, Accept):
            url = context.video_url(candidate.external_id)
            run.snapshot = run.snapshot.replace(decision.coordinate, url)
            seen_ids.add(candidate.external_id)
            run.assignments.append(
                Assignment(
                    external_id=candidate.external_id,
                    title=candidate.title,
                    coordinate=decision.coordinate,
                    url=url,
                    lecture_date=decision.lecture_date,
                )
            )
            logger.info("Assigned %s -> %s", candidate.title, decision.coordinate)
        else:
            run.rejections.append(
                Rejection(
                    external_id=candidate.external_id,
                    title=candidate.title,
                    reason=decision.reason,
                    detail=decision.detail,
                )
            )
            logger.info(
                "Skipping %s [%s]: %s", candidate.external_id, decision.reason.value, decision.detail
            )

        if progress_callback:
            progress_callback(number, candidate, decision)

    return run
