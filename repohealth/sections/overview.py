"""Repository header and headline numbers."""

from __future__ import annotations

from typing import Optional

import streamlit as st

from repohealth.models import RepoMetadata, RepoSummary


def render_overview(metadata: Optional[RepoMetadata], summary: RepoSummary) -> None:
    if metadata is not None:
        st.markdown(f"## 📦 {metadata.owner}/{metadata.name}")
        if metadata.description:
            st.caption(metadata.description)

    buckets = summary.daily_buckets
    m1, m2, m3, m4, m5, m6 = st.columns(6)
    m1.metric("Stars ⭐", f"{metadata.stars:,}" if metadata else "—")
    m2.metric("Forks", f"{metadata.forks:,}" if metadata else "—")
    m3.metric("Issues Opened", sum(b.issues_opened for b in buckets))
    m4.metric("PRs Merged", sum(b.prs_merged for b in buckets))
    m5.metric("Commits", sum(b.commits for b in buckets))
    m6.metric(
        "Median Merge Time",
        f"{summary.median_latency_hours:.1f} hrs" if summary.median_latency_hours is not None else "—",
    )

    if summary.skipped_records:
        st.warning(
            f"{summary.skipped_records} record(s) were skipped because they were missing "
            "an id or a valid timestamp."
        )
