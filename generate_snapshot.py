#!/usr/bin/env python3
"""
generate_snapshot.py

Pulls issues, pull requests and commits for one GitHub repository over a
trailing window, caches the raw payloads locally (cache/ directory), and
writes the aggregated daily series, merge latencies and contributor ranking.

Output: <owner>-<repo>-snapshot.json

Usage:
    export GITHUB_TOKEN=ghp_...   # optional
    python generate_snapshot.py streamlit/streamlit --days 90
"""

from __future__ import annotations

import argparse
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import pandas as pd

from repohealth.config import HISTOGRAM_BINS
from repohealth.github import (
    fetch_commits,
    fetch_issues,
    fetch_pull_requests,
    get_token,
    parse_repo_name,
)
from repohealth.histogram import build_histogram
from repohealth.models import to_json
from repohealth.pipeline import summarize_raw

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s: %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger(__name__)


def build_snapshot(repo: str, days: int, token: Optional[str] = None) -> dict:
    log.info(f"Pulling last {days} days of activity for {repo}…")
    summary = summarize_raw(
        fetch_issues(repo, days, token),
        fetch_pull_requests(repo, days, token),
        fetch_commits(repo, days, token),
        days,
    )
    bins = build_histogram(summary.latency_samples, HISTOGRAM_BINS)
    return {
        "generated_at":         datetime.now(timezone.utc).isoformat(),
        "repo":                 repo,
        "window_days":          days,
        "skipped_records":      summary.skipped_records,
        "median_latency_hours": summary.median_latency_hours,
        "daily_buckets":        json.loads(to_json(summary.daily_buckets)),
        "latency_samples":      json.loads(to_json(summary.latency_samples)),
        "histogram": [
            {"lower": b.lower_bound, "upper": b.upper_bound, "count": b.count}
            for b in bins
        ],
        "contributors":         json.loads(to_json(summary.contributor_ranks)),
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="generate_snapshot",
        description="Aggregate a GitHub repository's recent activity into a JSON snapshot.",
    )
    parser.add_argument("repo", help="owner/repo or GitHub URL")
    parser.add_argument("--days", type=int, default=30, metavar="N", help="Window length in days (default: 30)")
    parser.add_argument("--output", default=None, metavar="FILE", help="Write JSON to FILE")
    return parser


def main() -> None:
    args = build_parser().parse_args()
    owner, name = parse_repo_name(args.repo)
    repo = f"{owner}/{name}"

    snapshot = build_snapshot(repo, args.days, get_token())

    output_path = Path(args.output or f"{owner}-{name}-snapshot.json")
    with output_path.open("w") as f:
        json.dump(snapshot, f, indent=2, default=str)

    log.info(f"✓ Saved {output_path} ({output_path.stat().st_size / 1024:.1f} KB)")
    log.info(f"  Buckets:        {len(snapshot['daily_buckets'])}")
    log.info(f"  Merged PRs:     {len(snapshot['latency_samples'])}")
    log.info(f"  Skipped:        {snapshot['skipped_records']}")

    df = pd.DataFrame(snapshot["contributors"])
    if not df.empty:
        print("\n── Top Contributors ─────────────────────────────────────────────────────")
        print(df.head(15).to_string(index=False))


if __name__ == "__main__":
    main()
