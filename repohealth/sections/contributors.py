"""Top contributors by commit count."""

from __future__ import annotations

import streamlit as st

from repohealth.charts import make_contributors_bar
from repohealth.data import contributors_df
from repohealth.models import RepoSummary


def render_contributors(summary: RepoSummary, chart_key: str) -> None:
    st.markdown("#### 👥 Top Contributors")
    col_chart, col_table = st.columns([2, 1])
    with col_chart:
        st.plotly_chart(
            make_contributors_bar(summary.contributor_ranks),
            use_container_width=True,
            key=f"{chart_key}_bar",
        )
    with col_table:
        st.dataframe(
            contributors_df(summary.contributor_ranks).rename(
                columns={"login": "Author", "commits": "Commits"}
            ),
            use_container_width=True,
            height=320,
        )
