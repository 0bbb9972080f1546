"""Shared constants: metric keys, colours, time ranges, API and cache settings."""

from __future__ import annotations

import os
from pathlib import Path

# ── Metrics ───────────────────────────────────────────────────────────────────

METRIC_KEYS = ["issues_opened", "issues_closed", "prs_opened", "prs_merged", "commits"]

METRIC_LABELS = {
    "issues_opened": "Issues Opened",
    "issues_closed": "Issues Closed",
    "prs_opened":    "PRs Opened",
    "prs_merged":    "PRs Merged",
    "commits":       "Commits",
}

METRIC_COLORS = {
    "issues_opened": "#1F77B4",
    "issues_closed": "#FF7F0E",
    "prs_opened":    "#2CA02C",
    "prs_merged":    "#D62728",
    "commits":       "#9467BD",
}

DEFAULT_VISIBLE_METRICS = {"issues_opened", "issues_closed"}

COLOR_BAR    = "#69B3A2"   # Histogram bars
COLOR_MEDIAN = "#E74C3C"   # Median marker

# ── Windows & binning ─────────────────────────────────────────────────────────

TIME_RANGES = {"30d": 30, "90d": 90, "1y": 365}
TIME_RANGE_LABELS = {"30d": "Last 30 days", "90d": "Last 90 days", "1y": "Last 12 months"}
DEFAULT_TIME_RANGE = "30d"

HISTOGRAM_BINS = 20
TITLE_PREVIEW_CHARS = 30
TOP_CONTRIBUTORS = 15

# ── Chart geometry ────────────────────────────────────────────────────────────

CHART_WIDTH  = 800
CHART_HEIGHT = 400
TICK_COUNT   = 10

# ── GitHub REST ───────────────────────────────────────────────────────────────

GITHUB_API    = "https://api.github.com"
PER_PAGE      = 100
MAX_PAGES     = 10
REQUEST_DELAY = 0.4             # seconds between paginated requests
REQUEST_TIMEOUT = 30

# ── Cache ─────────────────────────────────────────────────────────────────────

CACHE_DIR = Path(os.environ.get("REPOHEALTH_CACHE_DIR", "cache"))
CACHE_TTL = 3600                # 1 hour
