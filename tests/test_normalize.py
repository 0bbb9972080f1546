from datetime import datetime, timezone

import pytest

from repohealth.models import EventKind
from repohealth.normalize import (
    normalize_commit,
    normalize_events,
    normalize_issue,
    normalize_pull_request,
    parse_dt,
)


def test_parse_dt_handles_z_suffix_and_naive():
    assert parse_dt("2024-03-10T09:00:00Z") == datetime(2024, 3, 10, 9, tzinfo=timezone.utc)
    assert parse_dt("2024-03-10T09:00:00").tzinfo == timezone.utc
    assert parse_dt(None) is None
    assert parse_dt("") is None


def test_parse_dt_converts_offsets_to_utc():
    assert parse_dt("2024-03-10T23:30:00-02:00") == datetime(2024, 3, 11, 1, 30, tzinfo=timezone.utc)


def test_normalize_issue_rest_shape(raw_issue):
    event = normalize_issue(raw_issue)
    assert event.id == "101"
    assert event.kind is EventKind.ISSUE
    assert event.author == "octocat"
    assert event.closed_at == datetime(2024, 3, 12, 10, tzinfo=timezone.utc)
    assert event.merged_at is None


def test_normalize_issue_camel_case_shape():
    event = normalize_issue({
        "id": 5, "title": "x", "state": "open",
        "createdAt": "2024-03-10T09:00:00Z", "author": "bob",
    })
    assert event.author == "bob"
    assert event.closed_at is None


def test_normalize_pull_request_marks_merged(raw_pull_request):
    event = normalize_pull_request(raw_pull_request)
    assert event.state == "merged"
    assert event.merged_at == datetime(2024, 3, 11, 20, tzinfo=timezone.utc)


def test_normalize_commit_prefers_login(raw_commit):
    event = normalize_commit(raw_commit)
    assert event.id == "abc123"
    assert event.author == "hubot"
    assert event.title == "Fix crash on start"
    assert event.created_at == datetime(2024, 3, 11, 19, 55, tzinfo=timezone.utc)


def test_normalize_commit_falls_back_to_git_author_name(raw_commit):
    raw_commit["author"] = None
    assert normalize_commit(raw_commit).author == "Hu Bot"


def test_normalize_events_skips_and_counts_malformed(raw_issue, raw_pull_request, raw_commit):
    missing_id = dict(raw_issue, id=None, number=None)
    bad_date = dict(raw_pull_request, created_at="not-a-date")
    no_created = {k: v for k, v in raw_issue.items() if k != "created_at"}
    bad_merge = dict(raw_pull_request, merged_at="yesterday")
    commit_no_date = {"sha": "def", "commit": {"author": {"name": "x"}}}

    result = normalize_events(
        [raw_issue, missing_id, no_created, "junk"],
        [raw_pull_request, bad_date, bad_merge],
        [raw_commit, commit_no_date],
    )
    assert len(result.issues) == 1
    assert len(result.pull_requests) == 1
    assert len(result.commits) == 1
    assert result.skipped == 6


def test_normalize_events_accepts_empty_input():
    result = normalize_events([], [], [])
    assert result.skipped == 0
    assert result.issues == [] and result.pull_requests == [] and result.commits == []


def test_normalized_events_are_immutable(raw_issue):
    event = normalize_issue(raw_issue)
    with pytest.raises(AttributeError):
        event.author = "someone else"
