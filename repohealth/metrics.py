"""
Metric computation:
  - merge latency per merged pull request, and its median
  - contributor ranking by commit count
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable, Optional

from repohealth.models import ContributorRank, MergeLatencySample, NormalizedEvent


# ── Merge latency ─────────────────────────────────────────────────────────────

def extract_latencies(pull_requests: Iterable[NormalizedEvent]) -> list[MergeLatencySample]:
    """
    One sample per merged PR, in input order. Latency is
    ``(merged_at - created_at)`` in hours at full precision; a negative value
    means the upstream record is inconsistent and is passed through as-is.
    """
    return [
        MergeLatencySample(
            pull_request_id=pr.id,
            hours=(pr.merged_at - pr.created_at).total_seconds() / 3600.0,
            title=pr.title,
        )
        for pr in pull_requests
        if pr.merged_at is not None
    ]


def median_latency(samples: Iterable[MergeLatencySample]) -> Optional[float]:
    """
    Element at index ``n // 2`` of the ascending hours.

    For an even count this is the upper-middle value, not the mean of the two
    middle values. Returns ``None`` when there are no samples.
    """
    hours = sorted(s.hours for s in samples)
    if not hours:
        return None
    return hours[len(hours) // 2]


# ── Contributors ──────────────────────────────────────────────────────────────

def rank_contributors(commits: Iterable[NormalizedEvent]) -> list[ContributorRank]:
    """Commit count per exact author string, descending; ties keep first-seen order."""
    tally: Counter = Counter()
    for commit in commits:
        tally[commit.author] += 1
    # Counter keeps insertion order and sorted() is stable.
    return [
        ContributorRank(login=login, commit_count=n)
        for login, n in sorted(tally.items(), key=lambda x: -x[1])
    ]
