"""
Translate between the lecture record text and ``RecordSnapshot``.

The record is a page (``index.html``) embedding one keyed block per class::

    'avc185': {
        'week1-lecture1': 'https://www.youtube.com/watch?v=abc123',
        'week1-lecture2': 'not-found.html',
    },

``decode`` reads every such block into a snapshot. ``encode`` writes a snapshot
back by rewriting only the values that changed; every other character of the
original text is kept as it was.
"""
from __future__ import annotations

import logging
import re

from schedule_engine.errors import RecordFormatError
from schedule_engine.models import SlotCoordinate
from schedule_engine.slot_store import PLACEHOLDER_MARKER, RecordSnapshot

logger = logging.getLogger(__name__)

_SECTION_PATTERN = re.compile(
    r"(?P<q>['\"])(?P<class_code>[A-Za-z0-9_]+)(?P=q)\s*:\s*\{(?P<body>[^{}]*)\}"
)
_ENTRY_PATTERN = re.compile(
    r"(?P<kq>['\"])week(?P<week>\d+)-lecture(?P<lecture>\d+)(?P=kq)\s*:\s*"
    r"(?P<vq>['\"])(?P<value>(?:(?!(?P=vq)).)*)(?P=vq)"
)


def decode(text: str, placeholder_marker: str = PLACEHOLDER_MARKER) -> RecordSnapshot:
    """Parse the record text into a snapshot.

    Raises:
        RecordFormatError: If the text contains no class section with lecture keys
    """
    slots: dict[SlotCoordinate, str] = {}
    for section in _SECTION_PATTERN.finditer(text):
        class_code = section.group("class_code").lower()
        for entry in _ENTRY_PATTERN.finditer(section.group("body")):
            coordinate = SlotCoordinate(
                class_code, int(entry.group("week")), int(entry.group("lecture"))
            )
            slots[coordinate] = entry.group("value")

    if not slots:
        raise RecordFormatError("Record contains no class sections with lecture slots")

    snapshot = RecordSnapshot(slots, placeholder_marker)
    logger.debug(
        "Decoded %d slots across classes %s", len(snapshot), sorted(snapshot.class_codes)
    )
    return snapshot


def encode(snapshot: RecordSnapshot, original_text: str) -> str:
    """Write ``snapshot`` into ``original_text``, touching changed values only.

    Raises:
        RecordFormatError: If a changed slot is missing from the text, or a
            value would break the quoting of the record
    """
    previous = decode(original_text, snapshot.placeholder_marker)
    changed = {
        coordinate: value
        for coordinate, value in snapshot.slots.items()
        if previous.get(coordinate) != value
    }
    if not changed:
        return original_text

    written: set[SlotCoordinate] = set()

    def _rewrite_section(section: re.Match) -> str:
        class_code = section.group("class_code").lower()

        def _rewrite_entry(entry: re.Match) -> str:
            coordinate = SlotCoordinate(
                class_code, int(entry.group("week")), int(entry.group("lecture"))
            )
            if coordinate not in changed:
                return entry.group(0)
            value = changed[coordinate]
            quote = entry.group("vq")
            if quote in value:
                raise RecordFormatError(f"Value for {coordinate} contains {quote!r}")
            written.add(coordinate)
            start, end = entry.span("value")
            offset = entry.start()
            whole = entry.group(0)
            return whole[: start - offset] + value + whole[end - offset:]

        body = _ENTRY_PATTERN.sub(_rewrite_entry, section.group("body"))
        start, end = section.span("body")
        offset = section.start()
        whole = section.group(0)
        return whole[: start - offset] + body + whole[end - offset:]

    updated = _SECTION_PATTERN.sub(_rewrite_section, original_text)

    missing = set(changed) - written
    if missing:
        raise RecordFormatError(
            f"Slots not present in record text: {', '.join(str(c) for c in sorted(missing))}"
        )
    return updated
