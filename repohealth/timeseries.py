"""Daily activity series over a fixed window."""

from __future__ import annotations

from collections import Counter
from datetime import date, datetime, timedelta, timezone
from typing import Iterable, Optional

from repohealth.models import DailyBucket, NormalizedEvent


def day_key(ts: datetime) -> date:
    """Calendar day of *ts* in UTC."""
    if ts.tzinfo is None:
        return ts.date()
    return ts.astimezone(timezone.utc).date()


def window_dates(window_days: int, now: Optional[datetime] = None) -> list[date]:
    """Every calendar day from ``now - window_days`` through ``now`` inclusive."""
    now = now or datetime.now(timezone.utc)
    end = day_key(now)
    start = end - timedelta(days=window_days)
    return [start + timedelta(days=i) for i in range(window_days + 1)]


def aggregate_daily(
    issues: Iterable[NormalizedEvent],
    pull_requests: Iterable[NormalizedEvent],
    commits: Iterable[NormalizedEvent],
    window_days: int,
    now: Optional[datetime] = None,
) -> list[DailyBucket]:
    """
    Bucket events into one zero-filled DailyBucket per day of the window,
    ascending by date. Timestamps whose day falls outside the window are
    ignored.
    """
    days = window_dates(window_days, now)
    in_window = set(days)
    counts: dict[str, Counter] = {
        "issues_opened": Counter(),
        "issues_closed": Counter(),
        "prs_opened":    Counter(),
        "prs_merged":    Counter(),
        "commits":       Counter(),
    }

    def _bump(metric: str, ts: Optional[datetime]) -> None:
        if ts is None:
            return
        key = day_key(ts)
        if key in in_window:
            counts[metric][key] += 1

    for issue in issues:
        _bump("issues_opened", issue.created_at)
        _bump("issues_closed", issue.closed_at)

    for pr in pull_requests:
        _bump("prs_opened", pr.created_at)
        _bump("prs_merged", pr.merged_at)

    for commit in commits:
        _bump("commits", commit.created_at)

    return [
        DailyBucket(
            date=d,
            issues_opened=counts["issues_opened"][d],
            issues_closed=counts["issues_closed"][d],
            prs_opened=counts["prs_opened"][d],
            prs_merged=counts["prs_merged"][d],
            commits=counts["commits"][d],
        )
        for d in days
    ]
