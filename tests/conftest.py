from datetime import datetime, timedelta, timezone

import pytest

from repohealth.models import EventKind, NormalizedEvent

NOW = datetime(2024, 3, 15, 18, 30, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


def make_event(kind, created, *, id="1", author="alice", title="", closed=None, merged=None):
    return NormalizedEvent(
        id=id,
        kind=kind,
        created_at=created,
        author=author,
        title=title,
        closed_at=closed,
        merged_at=merged,
    )


def day(offset_from_start: int, window_days: int = 5, hour: int = 12) -> datetime:
    """Timestamp on day *offset_from_start* of a window ending at NOW."""
    start = (NOW - timedelta(days=window_days)).replace(hour=hour, minute=0)
    return start + timedelta(days=offset_from_start)


@pytest.fixture
def issue():
    return lambda created, **kw: make_event(EventKind.ISSUE, created, **kw)


@pytest.fixture
def pull_request():
    return lambda created, **kw: make_event(EventKind.PULL_REQUEST, created, **kw)


@pytest.fixture
def commit():
    return lambda created, **kw: make_event(EventKind.COMMIT, created, **kw)


@pytest.fixture
def raw_issue():
    return {
        "id": 101,
        "number": 7,
        "title": "Crash on start",
        "state": "closed",
        "user": {"login": "octocat"},
        "created_at": "2024-03-10T09:00:00Z",
        "closed_at": "2024-03-12T10:00:00Z",
    }


@pytest.fixture
def raw_pull_request():
    return {
        "id": 202,
        "number": 8,
        "title": "Fix crash on start",
        "state": "closed",
        "user": {"login": "hubot"},
        "created_at": "2024-03-11T08:00:00Z",
        "closed_at": "2024-03-11T20:00:00Z",
        "merged_at": "2024-03-11T20:00:00Z",
    }


@pytest.fixture
def raw_commit():
    return {
        "sha": "abc123",
        "author": {"login": "hubot"},
        "commit": {
            "message": "Fix crash on start\n\nDetails here",
            "author": {"name": "Hu Bot", "date": "2024-03-11T19:55:00Z"},
        },
    }
