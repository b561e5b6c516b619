"""
In-memory view of the lecture record.

The record maps ``(class, week, lecture)`` coordinates to either a placeholder
page or a video URL. Snapshots are immutable: ``replace`` returns a new
snapshot, so a run can work on its own copy and hand back a single result.
"""
from __future__ import annotations

import re
import typing as t
from types import MappingProxyType

from schedule_engine.models import SlotCoordinate

PLACEHOLDER_MARKER = "not-found.html"

VIDEO_URL_TEMPLATE = "https://www.youtube.com/watch?v={video_id}"

_VIDEO_ID = r"([a-zA-Z0-9_-]+)"
_VIDEO_ID_PATTERN = re.compile(r"youtube\.com/watch\?v=" + _VIDEO_ID)


def video_id_patterns(url_template: str = VIDEO_URL_TEMPLATE) -> tuple[re.Pattern[str], ...]:
    """Patterns recovering video ids from slot values.

    Watch-page URLs are always recognised; URLs written from ``url_template``
    are recognised as well.

    Raises:
        ValueError: If the template has no ``{video_id}`` field
    """
    prefix, field, suffix = url_template.partition("{video_id}")
    if not field:
        raise ValueError(f"URL template has no {{video_id}} field: {url_template!r}")
    from_template = re.compile(re.escape(prefix) + _VIDEO_ID + re.escape(suffix))
    return (_VIDEO_ID_PATTERN, from_template)


class RecordSnapshot:
    """Immutable mapping of slot coordinates to slot values."""

    def __init__(
        self,
        slots: t.Mapping[SlotCoordinate, str],
        placeholder_marker: str = PLACEHOLDER_MARKER,
    ) -> None:
        self._slots = MappingProxyType(dict(slots))
        self.placeholder_marker = placeholder_marker

    @property
    def slots(self) -> t.Mapping[SlotCoordinate, str]:
        return self._slots

    @property
    def class_codes(self) -> set[str]:
        return {coord.class_code for coord in self._slots}

    def __contains__(self, coordinate: object) -> bool:
        return coordinate in self._slots

    def __len__(self) -> int:
        return len(self._slots)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RecordSnapshot):
            return NotImplemented
        return dict(self._slots) == dict(other._slots)

    def __repr__(self) -> str:
        return f"RecordSnapshot({len(self._slots)} slots)"

    def get(self, coordinate: SlotCoordinate) -> t.Optional[str]:
        """Value stored at ``coordinate``, or None when the record has no such key."""
        return self._slots.get(coordinate)

    def is_placeholder(self, value: t.Optional[str]) -> bool:
        return not value or self.placeholder_marker in value

    def is_open(self, coordinate: SlotCoordinate) -> bool:
        """True when nothing has been assigned to ``coordinate`` yet."""
        return self.is_placeholder(self.get(coordinate))

    def replace(self, coordinate: SlotCoordinate, value: str) -> RecordSnapshot:
        """Return a new snapshot with exactly one coordinate changed.

        The class code is part of the key, so the same week/lecture of another
        class is never touched.

        Raises:
            KeyError: If the record has no slot at ``coordinate``
        """
        if coordinate not in self._slots:
            raise KeyError(f"No slot {coordinate} in record")
        slots = dict(self._slots)
        slots[coordinate] = value
        return RecordSnapshot(slots, self.placeholder_marker)

    def existing_external_ids(
        self, patterns: t.Iterable[re.Pattern[str]] = (_VIDEO_ID_PATTERN,)
    ) -> set[str]:
        """Video ids embedded in any resolved slot, across every class.

        Each pattern's first group is the video id.
        """
        patterns = tuple(patterns)
        ids: set[str] = set()
        for value in self._slots.values():
            if self.is_placeholder(value):
                continue
            for pattern in patterns:
                ids.update(pattern.findall(value))
        return ids
