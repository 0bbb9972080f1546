"""Value objects shared by the aggregation engine and the chart layer."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional


class EventKind(str, Enum):
    ISSUE = "issue"
    PULL_REQUEST = "pull_request"
    COMMIT = "commit"


def _default_serializer(obj: Any) -> Any:
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    raise TypeError(f"Object of type {type(obj)} is not JSON serializable")


def to_json(data: Any, indent: int = 2) -> str:
    if isinstance(data, list):
        serializable = [asdict(item) if hasattr(item, "__dataclass_fields__") else item for item in data]
    elif hasattr(data, "__dataclass_fields__"):
        serializable = asdict(data)
    else:
        serializable = data
    return json.dumps(serializable, indent=indent, default=_default_serializer)


@dataclass(frozen=True)
class NormalizedEvent:
    id: str
    kind: EventKind
    created_at: datetime            # timezone-aware, UTC
    author: str
    title: str = ""
    state: str = ""
    closed_at: Optional[datetime] = None
    merged_at: Optional[datetime] = None


@dataclass(frozen=True)
class NormalizationResult:
    issues: list[NormalizedEvent] = field(default_factory=list)
    pull_requests: list[NormalizedEvent] = field(default_factory=list)
    commits: list[NormalizedEvent] = field(default_factory=list)
    skipped: int = 0                # records rejected as malformed


@dataclass(frozen=True)
class DailyBucket:
    date: date
    issues_opened: int = 0
    issues_closed: int = 0
    prs_opened: int = 0
    prs_merged: int = 0
    commits: int = 0

    def value(self, metric: str) -> int:
        return getattr(self, metric)


@dataclass(frozen=True)
class MergeLatencySample:
    pull_request_id: str
    hours: float                    # full precision, may be negative for bad upstream data
    title: str = ""

    @property
    def display_hours(self) -> float:
        return round(self.hours, 1)


@dataclass(frozen=True)
class HistogramBin:
    lower_bound: float
    upper_bound: float
    members: tuple[MergeLatencySample, ...] = ()

    @property
    def count(self) -> int:
        return len(self.members)


@dataclass(frozen=True)
class ContributorRank:
    login: str
    commit_count: int


@dataclass(frozen=True)
class RepoMetadata:
    name: str
    owner: str
    description: Optional[str] = None
    stars: int = 0
    forks: int = 0
    language: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


@dataclass(frozen=True)
class RepoSummary:
    """Everything the charts need for one repository and window."""
    daily_buckets: list[DailyBucket]
    latency_samples: list[MergeLatencySample]
    median_latency_hours: Optional[float]
    contributor_ranks: list[ContributorRank]
    window_days: int
    skipped_records: int = 0
