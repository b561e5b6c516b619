"""Course offerings known to the assigner and their scheduling rules."""
from __future__ import annotations

import typing as t

from schedule_engine.models import ClassSpec, SequentialFillRule, WeekdayRule


# Monday = 1, Tuesday = 2, Wednesday = 3, Thursday = 4, Friday = 5
DEFAULT_CLASSES: tuple[ClassSpec, ...] = (
    ClassSpec("avc185", ("AVC185", "AVC 185"), WeekdayRule((1, 3))),
    ClassSpec("avc200", ("AVC200", "AVC 200"), WeekdayRule((1, 3))),
    ClassSpec("avc240", ("AVC240", "AVC 240"), WeekdayRule((1, 3))),
    # Asynchronous class: no fixed meeting days, two recordings per week
    ClassSpec("avc285", ("AVC285", "AVC 285"), SequentialFillRule(max_slots=2)),
)


def class_index(classes: t.Iterable[ClassSpec] = DEFAULT_CLASSES) -> dict[str, ClassSpec]:
    """Map canonical class code to its spec."""
    return {spec.code: spec for spec in classes}
