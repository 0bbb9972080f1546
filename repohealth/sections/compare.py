"""Side-by-side view of two independently aggregated repositories."""

from __future__ import annotations

from typing import Callable

import streamlit as st

from repohealth.models import RepoSummary
from repohealth.sections.activity import render_activity
from repohealth.sections.latency import render_latency
from repohealth.state import AppState


def render_compare(state: AppState, load: Callable[[str], RepoSummary | None]) -> None:
    first, second = state.compared_repos
    if not (first and second):
        st.info("Enter two repositories in the sidebar to compare them.")
        return

    st.markdown(f"## ⚖️ {first} vs {second}")
    columns = st.columns(2)
    for idx, (col, repo) in enumerate(zip(columns, (first, second))):
        with col:
            st.markdown(f"### {repo}")
            summary = load(repo)
            if summary is None:
                continue
            render_activity(state, summary, chart_key=f"cmp{idx}_activity")
            render_latency(summary, chart_key=f"cmp{idx}_latency")
