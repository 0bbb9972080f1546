"""
GitHub REST client: issues, pull requests, commits and repository metadata
for a trailing window, with a small JSON file cache.

Usage:
    export GITHUB_TOKEN=ghp_...   # optional, raises the rate limit
"""

from __future__ import annotations

import json
import logging
import os
import re
import time
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Optional

import requests

from repohealth import config
from repohealth.models import RepoMetadata
from repohealth.normalize import parse_dt

log = logging.getLogger(__name__)

_REPO_RE = re.compile(
    r"^(?:https?://)?(?:www\.)?(?:github\.com/)?"
    r"(?P<owner>[A-Za-z0-9-]+)/(?P<repo>[A-Za-z0-9_.-]+?)(?:\.git)?(?:/.*)?$"
)


def parse_repo_name(text: str) -> tuple[str, str]:
    """``owner/repo`` or a GitHub URL → ``(owner, repo)``."""
    m = _REPO_RE.match((text or "").strip())
    if not m:
        raise ValueError(f"Not a GitHub repository: {text!r} (expected owner/repo)")
    return m.group("owner"), m.group("repo")


def get_token() -> Optional[str]:
    return os.environ.get("GITHUB_TOKEN", "").strip() or None


def _headers(token: Optional[str]) -> dict:
    headers = {"Accept": "application/vnd.github.v3+json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def api_get(url: str, params: Optional[dict] = None, token: Optional[str] = None) -> requests.Response:
    """GET against the REST API; raises on rate limiting and HTTP errors."""
    resp = requests.get(
        url,
        headers=_headers(token),
        params=params or {},
        timeout=config.REQUEST_TIMEOUT,
    )
    if resp.status_code == 403 and resp.headers.get("X-RateLimit-Remaining") == "0":
        reset = resp.headers.get("X-RateLimit-Reset")
        wait = int(reset) - int(time.time()) if reset else None
        raise RuntimeError(
            f"GitHub rate limit exceeded. Retry after {wait} seconds."
            if wait is not None else "GitHub rate limit exceeded."
        )
    resp.raise_for_status()
    return resp


# ─────────────────────────────────────────────────────────────────────────────
# Cache helpers
# ─────────────────────────────────────────────────────────────────────────────

def cache_path(key: str) -> Path:
    config.CACHE_DIR.mkdir(parents=True, exist_ok=True)
    safe = re.sub(r"[^A-Za-z0-9_.-]", "_", key)
    return config.CACHE_DIR / f"{safe}.json"


def cache_load(key: str) -> Optional[list | dict]:
    p = cache_path(key)
    if not p.exists():
        return None
    age = time.time() - p.stat().st_mtime
    if age > config.CACHE_TTL:
        log.info(f"Cache expired for '{key}' (age={age/3600:.1f}h)")
        return None
    with p.open() as f:
        return json.load(f)


def cache_save(key: str, data) -> None:
    with cache_path(key).open("w") as f:
        json.dump(data, f)


# ─────────────────────────────────────────────────────────────────────────────
# Pagination
# ─────────────────────────────────────────────────────────────────────────────

def paginate(
    url: str,
    params: dict,
    token: Optional[str] = None,
    stop: Optional[Callable[[list], bool]] = None,
    label: str = "records",
) -> list[dict]:
    """
    Follow ``Link: rel="next"`` up to MAX_PAGES. A failure on the first page
    propagates; a failure on a later page keeps what was collected so far.
    *stop* is called with each page and ends pagination when it returns True.
    """
    items: list[dict] = []
    next_url: Optional[str] = url
    next_params: Optional[dict] = {**params, "per_page": config.PER_PAGE}
    page = 0

    while next_url and page < config.MAX_PAGES:
        page += 1
        log.info(f"  Fetching {label} page {page} (collected {len(items)} so far)…")
        try:
            resp = api_get(next_url, next_params, token)
        except requests.HTTPError as exc:
            if page == 1:
                raise
            log.error(f"HTTP error on page {page}: {exc}")
            break

        page_items = resp.json()
        if not isinstance(page_items, list):
            break
        items.extend(page_items)
        if stop is not None and stop(page_items):
            break

        next_url = resp.links.get("next", {}).get("url")
        next_params = None   # the next link already carries the query string
        if next_url:
            time.sleep(config.REQUEST_DELAY)

    return items


def _since(window_days: int) -> datetime:
    return datetime.now(timezone.utc) - timedelta(days=window_days)


def _cached_fetch(key: str, fetch: Callable[[], list]) -> list:
    cached = cache_load(key)
    if cached is not None:
        log.info(f"Loaded {len(cached)} records from cache '{key}'")
        return cached
    data = fetch()
    cache_save(key, data)
    return data


# ─────────────────────────────────────────────────────────────────────────────
# Data fetching
# ─────────────────────────────────────────────────────────────────────────────

def fetch_issues(repo_id: str, window_days: int, token: Optional[str] = None) -> list[dict]:
    """Issues updated since the window start; pull requests are filtered out."""
    owner, repo = parse_repo_name(repo_id)
    since = _since(window_days)

    def _fetch() -> list:
        raw = paginate(
            f"{config.GITHUB_API}/repos/{owner}/{repo}/issues",
            {"state": "all", "since": since.isoformat()},
            token,
            label="issue",
        )
        issues = [i for i in raw if "pull_request" not in i]
        log.info(f"Fetched {len(issues)} issues ({len(raw) - len(issues)} PRs dropped)")
        return issues

    return _cached_fetch(f"{owner}__{repo}__issues__{window_days}d", _fetch)


def _created_before(record: dict, since: datetime) -> bool:
    try:
        created = parse_dt(record.get("created_at"))
    except ValueError:
        return False
    return created is not None and created < since


def _older_than(since: datetime) -> Callable[[list], bool]:
    def _stop(page: list) -> bool:
        return not page or _created_before(page[-1], since)
    return _stop


def fetch_pull_requests(repo_id: str, window_days: int, token: Optional[str] = None) -> list[dict]:
    """PRs created inside the window, newest-first; pagination stops at the first older page."""
    owner, repo = parse_repo_name(repo_id)
    since = _since(window_days)

    def _fetch() -> list:
        prs = paginate(
            f"{config.GITHUB_API}/repos/{owner}/{repo}/pulls",
            {"state": "all", "sort": "created", "direction": "desc"},
            token,
            stop=_older_than(since),
            label="PR",
        )
        # the last page usually crosses the window start
        in_window = [p for p in prs if not _created_before(p, since)]
        log.info(f"Fetched {len(in_window)} pull requests ({len(prs) - len(in_window)} older dropped)")
        return in_window

    return _cached_fetch(f"{owner}__{repo}__pulls__{window_days}d", _fetch)


def fetch_commits(repo_id: str, window_days: int, token: Optional[str] = None) -> list[dict]:
    owner, repo = parse_repo_name(repo_id)
    since = _since(window_days)

    def _fetch() -> list:
        commits = paginate(
            f"{config.GITHUB_API}/repos/{owner}/{repo}/commits",
            {"since": since.isoformat()},
            token,
            label="commit",
        )
        log.info(f"Fetched {len(commits)} commits")
        return commits

    return _cached_fetch(f"{owner}__{repo}__commits__{window_days}d", _fetch)


def fetch_repo_metadata(repo_id: str, token: Optional[str] = None) -> RepoMetadata:
    owner, repo = parse_repo_name(repo_id)
    data = api_get(f"{config.GITHUB_API}/repos/{owner}/{repo}", token=token).json()
    return RepoMetadata(
        name=data.get("name", repo),
        owner=(data.get("owner") or {}).get("login", owner),
        description=data.get("description"),
        stars=data.get("stargazers_count", 0),
        forks=data.get("forks_count", 0),
        language=data.get("language"),
        created_at=data.get("created_at"),
        updated_at=data.get("updated_at"),
    )
