"""Shared fixtures for assigner tests."""
from datetime import date

import pytest

from schedule_engine import record_codec
from schedule_engine.resolver import ScheduleContext
from schedule_engine.semester import SemesterCalendar
from schedule_engine.slot_store import RecordSnapshot


RECORD_TEXT = """<!DOCTYPE html>
<html>
<head><title>Lecture Redirects</title></head>
<body>
<script>
const lectureUrls = {
    'avc185': {
        'week1-lecture1': 'not-found.html',
        'week1-lecture2': 'not-found.html',
        'week2-lecture1': 'https://www.youtube.com/watch?v=old185w2l1',
        'week2-lecture2': 'not-found.html',
    },
    'avc200': {
        'week1-lecture1': 'not-found.html',
        'week1-lecture2': 'not-found.html',
        'week2-lecture1': 'not-found.html',
        'week2-lecture2': 'not-found.html',
    },
    'avc240': {
        'week1-lecture1': 'not-found.html',
        'week1-lecture2': 'not-found.html',
        'week2-lecture1': 'not-found.html',
        'week2-lecture2': 'not-found.html',
    },
    'avc285': {
        'week1-lecture1': 'not-found.html',
        'week1-lecture2': 'not-found.html',
        'week2-lecture1': 'not-found.html',
        'week2-lecture2': 'not-found.html',
    }
};
// Redirect to the requested lecture
const params = new URLSearchParams(window.location.search);
</script>
</body>
</html>
"""

SEMESTER_START = date(2025, 8, 24)
SEMESTER_END = date(2025, 12, 15)


@pytest.fixture
def record_text() -> str:
    return RECORD_TEXT


@pytest.fixture
def snapshot() -> RecordSnapshot:
    return record_codec.decode(RECORD_TEXT)


@pytest.fixture
def context() -> ScheduleContext:
    return ScheduleContext(calendar=SemesterCalendar(SEMESTER_START, SEMESTER_END))
