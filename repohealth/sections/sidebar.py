"""Sidebar controls for the repository, time range and compare mode."""

from __future__ import annotations

import streamlit as st

from repohealth.config import TIME_RANGE_LABELS, TIME_RANGES
from repohealth.github import parse_repo_name
from repohealth.state import AppState

_STATE_KEY = "app_state"


def get_app_state() -> AppState:
    """The AppState owned by this browser session."""
    if _STATE_KEY not in st.session_state:
        st.session_state[_STATE_KEY] = AppState()
    return st.session_state[_STATE_KEY]


def _normalized_repo(text: str) -> str | None:
    if not text.strip():
        return None
    try:
        owner, repo = parse_repo_name(text)
    except ValueError as exc:
        st.sidebar.error(str(exc))
        return None
    return f"{owner}/{repo}"


def render_sidebar(state: AppState) -> None:
    with st.sidebar:
        st.markdown("## ⚙️ Controls")

        ranges = list(TIME_RANGES)
        choice = st.selectbox(
            "Time range",
            ranges,
            index=ranges.index(state.time_range),
            format_func=lambda r: TIME_RANGE_LABELS[r],
            key="time_range",
        )
        if choice != state.time_range:
            state.set_time_range(choice)

        compare = st.toggle("Compare two repositories", value=state.compare_mode, key="compare_mode")
        if compare != state.compare_mode:
            state.toggle_compare_mode()

        st.markdown("---")
        if state.compare_mode:
            st.markdown("### Repositories")
            first = st.text_input("First repo", value=state.compared_repos[0] or "",
                                  placeholder="e.g. facebook/react")
            second = st.text_input("Second repo", value=state.compared_repos[1] or "",
                                   placeholder="e.g. vuejs/vue")
            pair = (_normalized_repo(first), _normalized_repo(second))
            if pair != state.compared_repos:
                state.set_compared_repos(*pair)
        else:
            st.markdown("### Repository")
            text = st.text_input("owner/repo or GitHub URL", value=state.selected_repo or "",
                                 placeholder="e.g. streamlit/streamlit")
            repo = _normalized_repo(text)
            if repo and repo != state.selected_repo:
                state.select_repo(repo)

        st.markdown("---")
        st.caption(
            "Set `GITHUB_TOKEN` to raise the API rate limit. "
            f"Window: {TIME_RANGES[state.time_range]} days."
        )
