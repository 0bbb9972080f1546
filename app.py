"""
Repository Health Dashboard: thin orchestrator
"""

from __future__ import annotations

import logging

import requests
import streamlit as st

st.set_page_config(
    page_title="Repo Health Dashboard",
    page_icon="📊",
    layout="wide",
    initial_sidebar_state="expanded",
)

from repohealth.data import load_repo
from repohealth.models import RepoSummary
from repohealth.sections.activity import render_activity
from repohealth.sections.compare import render_compare
from repohealth.sections.contributors import render_contributors
from repohealth.sections.downloads import render_downloads
from repohealth.sections.latency import render_latency
from repohealth.sections.overview import render_overview
from repohealth.sections.sidebar import get_app_state, render_sidebar

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s: %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger(__name__)


def _load(repo: str, window_days: int):
    try:
        with st.spinner(f"Fetching {repo}…"):
            return load_repo(repo, window_days)
    except requests.HTTPError as exc:
        status = exc.response.status_code if exc.response is not None else "?"
        st.error(f"GitHub API error for `{repo}` ({status}): {exc}")
    except (RuntimeError, requests.RequestException) as exc:
        st.error(f"Could not load `{repo}`: {exc}")
    return None


def main() -> None:
    state = get_app_state()
    render_sidebar(state)

    st.title("📊 Repository Health Dashboard")
    st.caption("Activity trends, merge velocity and contributors for GitHub repositories.")

    if state.compare_mode:
        def _summary(repo: str, window_days: int) -> RepoSummary | None:
            loaded = _load(repo, window_days)
            return None if loaded is None else loaded[2]

        render_compare(state, lambda repo: state.summary_for(repo, state.window_days, _summary))
        return

    repo = state.selected_repo
    if not repo:
        st.info("Enter a repository in the sidebar (e.g. `streamlit/streamlit`) to get started.")
        st.stop()

    loaded = _load(repo, state.window_days)
    if loaded is None:
        st.stop()
    metadata, normalized, summary = loaded
    state.store_repo_data(repo, state.window_days, summary)

    render_overview(metadata, summary)
    st.markdown("---")
    render_activity(state, summary, chart_key="activity")
    st.markdown("---")
    col_latency, col_contrib = st.columns([3, 2])
    with col_latency:
        render_latency(summary, chart_key="latency")
    with col_contrib:
        render_contributors(summary, chart_key="contributors")
    st.markdown("---")
    render_downloads(repo, normalized, summary)

    st.caption("Built with Streamlit · Data: GitHub REST API")


if __name__ == "__main__":
    main()
