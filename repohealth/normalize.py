"""
Raw GitHub records → NormalizedEvent.

Accepts both the REST payload shape (``created_at``, ``user.login``,
``commit.author.date``) and the flattened camelCase shape (``createdAt``,
``author``, ``date``). Records missing an id or a usable creation timestamp
are skipped and counted rather than raised.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from repohealth.models import EventKind, NormalizationResult, NormalizedEvent

log = logging.getLogger(__name__)


class MalformedRecord(ValueError):
    """Raised internally for a record that cannot be normalized."""


def parse_dt(s: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    ``None``/empty → ``None``. Naive timestamps are taken to be UTC.
    Raises ``ValueError`` on unparseable input.
    """
    if not s:
        return None
    if isinstance(s, datetime):
        dt = s
    else:
        dt = datetime.fromisoformat(str(s).strip().replace("Z", "+00:00"))
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _login(value: Any) -> str:
    if isinstance(value, dict):
        return value.get("login") or value.get("name") or ""
    return value or ""


def _record_id(raw: dict) -> str:
    rid = raw.get("id")
    if rid is None or rid == "":
        rid = raw.get("number") if raw.get("number") is not None else raw.get("sha")
    if rid is None or rid == "":
        raise MalformedRecord("missing id")
    return str(rid)


def _timestamp(raw: dict, *keys: str, required: bool = False) -> Optional[datetime]:
    value = None
    for key in keys:
        if raw.get(key):
            value = raw[key]
            break
    if value is None:
        if required:
            raise MalformedRecord(f"missing {keys[0]}")
        return None
    try:
        return parse_dt(value)
    except (TypeError, ValueError):
        raise MalformedRecord(f"unparseable {keys[0]}: {value!r}")


def normalize_issue(raw: dict) -> NormalizedEvent:
    closed_at = _timestamp(raw, "closed_at", "closedAt")
    return NormalizedEvent(
        id=_record_id(raw),
        kind=EventKind.ISSUE,
        created_at=_timestamp(raw, "created_at", "createdAt", required=True),
        closed_at=closed_at,
        author=_login(raw.get("user") or raw.get("author")),
        title=raw.get("title") or "",
        state=raw.get("state") or ("closed" if closed_at else "open"),
    )


def normalize_pull_request(raw: dict) -> NormalizedEvent:
    merged_at = _timestamp(raw, "merged_at", "mergedAt")
    return NormalizedEvent(
        id=_record_id(raw),
        kind=EventKind.PULL_REQUEST,
        created_at=_timestamp(raw, "created_at", "createdAt", required=True),
        closed_at=_timestamp(raw, "closed_at", "closedAt"),
        merged_at=merged_at,
        author=_login(raw.get("user") or raw.get("author")),
        title=raw.get("title") or "",
        state="merged" if merged_at else (raw.get("state") or "open"),
    )


def normalize_commit(raw: dict) -> NormalizedEvent:
    inner = raw.get("commit") or {}
    inner_author = inner.get("author") or {}
    created_at = _timestamp(raw, "date", "created_at", "createdAt")
    if created_at is None:
        created_at = _timestamp(inner_author, "date", required=True)

    # Prefer the GitHub login; fall back to the git author name.
    author = _login(raw.get("author")) or inner_author.get("name") or ""
    message = inner.get("message") or raw.get("message") or ""
    return NormalizedEvent(
        id=_record_id(raw),
        kind=EventKind.COMMIT,
        created_at=created_at,
        author=author,
        title=message.splitlines()[0] if message else "",
    )


_NORMALIZERS = {
    EventKind.ISSUE:        normalize_issue,
    EventKind.PULL_REQUEST: normalize_pull_request,
    EventKind.COMMIT:       normalize_commit,
}


def _normalize_many(raws: Iterable[dict], kind: EventKind) -> tuple[list[NormalizedEvent], int]:
    fn = _NORMALIZERS[kind]
    events: list[NormalizedEvent] = []
    skipped = 0
    for raw in raws or []:
        if not isinstance(raw, dict):
            log.warning(f"Skipping {kind.value} record: not a mapping ({type(raw).__name__})")
            skipped += 1
            continue
        try:
            events.append(fn(raw))
        except MalformedRecord as exc:
            log.warning(f"Skipping {kind.value} record: {exc}")
            skipped += 1
    return events, skipped


def normalize_events(
    raw_issues: Iterable[dict],
    raw_pull_requests: Iterable[dict],
    raw_commits: Iterable[dict],
) -> NormalizationResult:
    """Normalize all three record streams, counting the records rejected."""
    issues, s1 = _normalize_many(raw_issues, EventKind.ISSUE)
    prs, s2 = _normalize_many(raw_pull_requests, EventKind.PULL_REQUEST)
    commits, s3 = _normalize_many(raw_commits, EventKind.COMMIT)
    skipped = s1 + s2 + s3
    log.info(
        f"Normalized {len(issues)} issues, {len(prs)} PRs, {len(commits)} commits "
        f"({skipped} skipped)"
    )
    return NormalizationResult(
        issues=issues, pull_requests=prs, commits=commits, skipped=skipped
    )
