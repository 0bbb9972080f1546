"""CSV export of raw records and aggregated outputs."""

from __future__ import annotations

import pandas as pd

from repohealth.models import NormalizationResult, RepoSummary

ISSUE_COLUMNS = ["id", "title", "state", "author", "created_at", "closed_at"]
PR_COLUMNS    = ["id", "title", "state", "author", "created_at", "merged_at"]


def _cell(value):
    if value is None:
        return ""
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return value


def _events_frame(events, columns: list[str]) -> pd.DataFrame:
    rows = [{col: _cell(getattr(e, col)) for col in columns} for e in events]
    return pd.DataFrame(rows, columns=columns)


def issues_csv(normalized: NormalizationResult) -> str:
    return _events_frame(normalized.issues, ISSUE_COLUMNS).to_csv(index=False)


def pull_requests_csv(normalized: NormalizationResult) -> str:
    return _events_frame(normalized.pull_requests, PR_COLUMNS).to_csv(index=False)


def latency_csv(summary: RepoSummary) -> str:
    df = pd.DataFrame(
        [
            {"pr_id": s.pull_request_id, "time_to_merge_hours": s.display_hours, "title": s.title}
            for s in summary.latency_samples
        ],
        columns=["pr_id", "time_to_merge_hours", "title"],
    )
    return df.to_csv(index=False)


def contributors_csv(summary: RepoSummary) -> str:
    df = pd.DataFrame(
        [{"login": c.login, "contributions": c.commit_count} for c in summary.contributor_ranks],
        columns=["login", "contributions"],
    )
    return df.to_csv(index=False)


def daily_csv(summary: RepoSummary) -> str:
    df = pd.DataFrame(
        [
            {
                "date":          b.date.isoformat(),
                "issues_opened": b.issues_opened,
                "issues_closed": b.issues_closed,
                "prs_opened":    b.prs_opened,
                "prs_merged":    b.prs_merged,
                "commits":       b.commits,
            }
            for b in summary.daily_buckets
        ],
        columns=["date", "issues_opened", "issues_closed", "prs_opened", "prs_merged", "commits"],
    )
    return df.to_csv(index=False)


def export_bundle(repo: str, normalized: NormalizationResult, summary: RepoSummary) -> dict[str, str]:
    """``{filename: csv_text}`` for every export the dashboard offers."""
    prefix = repo.replace("/", "-")
    return {
        f"{prefix}-issues.csv":        issues_csv(normalized),
        f"{prefix}-pull-requests.csv": pull_requests_csv(normalized),
        f"{prefix}-pr-time-to-merge.csv": latency_csv(summary),
        f"{prefix}-contributors.csv":  contributors_csv(summary),
        f"{prefix}-daily-activity.csv": daily_csv(summary),
    }
