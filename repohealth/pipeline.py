"""Normalized events → RepoSummary consumed by the chart layer."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional

from repohealth.metrics import extract_latencies, median_latency, rank_contributors
from repohealth.models import NormalizedEvent, RepoSummary
from repohealth.normalize import normalize_events
from repohealth.timeseries import aggregate_daily

log = logging.getLogger(__name__)


def aggregate(
    issues: Iterable[NormalizedEvent],
    pull_requests: Iterable[NormalizedEvent],
    commits: Iterable[NormalizedEvent],
    window_days: int,
    now: Optional[datetime] = None,
    skipped_records: int = 0,
) -> RepoSummary:
    issues = list(issues)
    pull_requests = list(pull_requests)
    commits = list(commits)

    buckets = aggregate_daily(issues, pull_requests, commits, window_days, now=now)
    samples = extract_latencies(pull_requests)
    median = median_latency(samples)
    ranks = rank_contributors(commits)

    log.info(
        f"Aggregated {window_days}d window: {len(buckets)} buckets, "
        f"{len(samples)} merged PRs, {len(ranks)} contributors"
    )
    return RepoSummary(
        daily_buckets=buckets,
        latency_samples=samples,
        median_latency_hours=median,
        contributor_ranks=ranks,
        window_days=window_days,
        skipped_records=skipped_records,
    )


def summarize_raw(
    raw_issues: Iterable[dict],
    raw_pull_requests: Iterable[dict],
    raw_commits: Iterable[dict],
    window_days: int,
    now: Optional[datetime] = None,
) -> RepoSummary:
    """Normalize raw records then aggregate, carrying the skipped-record count."""
    normalized = normalize_events(raw_issues, raw_pull_requests, raw_commits)
    return aggregate(
        normalized.issues,
        normalized.pull_requests,
        normalized.commits,
        window_days,
        now=now,
        skipped_records=normalized.skipped,
    )
