"""Data loading and DataFrame helpers for the dashboard."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import pandas as pd
import streamlit as st

from repohealth.github import (
    fetch_commits,
    fetch_issues,
    fetch_pull_requests,
    fetch_repo_metadata,
    get_token,
)
from repohealth.models import (
    ContributorRank,
    DailyBucket,
    MergeLatencySample,
    NormalizationResult,
    RepoMetadata,
    RepoSummary,
)
from repohealth.normalize import normalize_events
from repohealth.pipeline import aggregate

log = logging.getLogger(__name__)


@st.cache_data(ttl=300, show_spinner=False)
def load_repo(
    repo: str, window_days: int
) -> tuple[Optional[RepoMetadata], NormalizationResult, RepoSummary]:
    """Fetch, normalize and aggregate one repository; cached per (repo, window)."""
    token = get_token()
    log.info(f"Loading {repo} for the last {window_days} days")
    metadata = fetch_repo_metadata(repo, token)
    normalized = normalize_events(
        fetch_issues(repo, window_days, token),
        fetch_pull_requests(repo, window_days, token),
        fetch_commits(repo, window_days, token),
    )
    summary = aggregate(
        normalized.issues,
        normalized.pull_requests,
        normalized.commits,
        window_days,
        skipped_records=normalized.skipped,
    )
    return metadata, normalized, summary


def buckets_df(buckets: Sequence[DailyBucket]) -> pd.DataFrame:
    df = pd.DataFrame(
        [
            {
                "date":          b.date,
                "issues_opened": b.issues_opened,
                "issues_closed": b.issues_closed,
                "prs_opened":    b.prs_opened,
                "prs_merged":    b.prs_merged,
                "commits":       b.commits,
            }
            for b in buckets
        ],
        columns=["date", "issues_opened", "issues_closed", "prs_opened", "prs_merged", "commits"],
    )
    if not df.empty:
        df["date"] = pd.to_datetime(df["date"])
    return df


def latency_df(samples: Sequence[MergeLatencySample]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {"pr_id": s.pull_request_id, "hours": s.hours, "display_hours": s.display_hours, "title": s.title}
            for s in samples
        ],
        columns=["pr_id", "hours", "display_hours", "title"],
    )


def contributors_df(ranks: Sequence[ContributorRank]) -> pd.DataFrame:
    df = pd.DataFrame(
        [{"login": r.login, "commits": r.commit_count} for r in ranks],
        columns=["login", "commits"],
    )
    df.index = range(1, len(df) + 1)
    return df
