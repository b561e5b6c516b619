"""Extract the class code and lecture date from a free-text video title.

Titles look like ``"AVC185 8/12/2025"`` or ``"AVC 185 - Lighting 8/12/2025"``.
"""
from __future__ import annotations

import re
import typing as t
from datetime import date

from schedule_engine.classes import DEFAULT_CLASSES
from schedule_engine.models import ClassSpec, ParsedTitle

# month/day/four-digit year
_DATE_PATTERN = re.compile(r"(\d{1,2})/(\d{1,2})/(\d{4})")


def parse_class_code(title: str, classes: t.Sequence[ClassSpec] = DEFAULT_CLASSES) -> t.Optional[str]:
    """Return the code of the first class whose token appears in the title."""
    title_upper = title.upper()
    for spec in classes:
        for token in spec.tokens:
            if token.upper() in title_upper:
                return spec.code
    return None


def parse_lecture_date(title: str) -> t.Optional[date]:
    """Return the first ``M/D/YYYY`` date in the title.

    Only the first date-shaped substring is considered; if it is not a real
    calendar date (``2/30/2025``) the title has no date.
    """
    match = _DATE_PATTERN.search(title)
    if match is None:
        return None
    month, day, year = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def parse_title(title: str, classes: t.Sequence[ClassSpec] = DEFAULT_CLASSES) -> ParsedTitle:
    """Parse a title into a class code and a lecture date, independently."""
    return ParsedTitle(
        class_code=parse_class_code(title, classes),
        lecture_date=parse_lecture_date(title),
    )


def title_mentions_class(title: str, spec: ClassSpec) -> bool:
    """True when the title literally contains one of the class's tokens."""
    title_upper = title.upper()
    return any(token.upper() in title_upper for token in spec.tokens)
