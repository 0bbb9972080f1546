"""PR merge-latency histogram with median marker and bin drill-down."""

from __future__ import annotations

import streamlit as st

from repohealth.charts import histogram_scales, make_latency_histogram
from repohealth.config import CHART_HEIGHT, CHART_WIDTH, HISTOGRAM_BINS
from repohealth.data import latency_df
from repohealth.histogram import build_histogram
from repohealth.interaction import ChartInteraction
from repohealth.models import RepoSummary


def render_latency(summary: RepoSummary, chart_key: str) -> None:
    st.markdown("#### ⏱ Time to Merge")
    bins = build_histogram(summary.latency_samples, HISTOGRAM_BINS)

    event = st.plotly_chart(
        make_latency_histogram(bins, summary.median_latency_hours, height=CHART_HEIGHT),
        use_container_width=True,
        key=f"{chart_key}_chart",
        on_select="rerun",
        selection_mode="points",
    )
    if not bins:
        if summary.latency_samples:
            st.caption(
                f"{len(summary.latency_samples)} merged PR(s) share a single time-to-merge "
                "value, not enough spread to bin."
            )
        return

    points = list(((event or {}).get("selection") or {}).get("points") or [])
    if not points:
        return

    # Driven from the selection event; see render_activity.
    x_scale, _ = histogram_scales(bins, CHART_WIDTH, CHART_HEIGHT)
    with ChartInteraction(bins, x_scale) as interaction:
        hbin = interaction.dispatch("enter", x_scale(float(points[0]["x"])), 0.0)
        if hbin is None:
            return
        st.info("  \n".join(interaction.tooltip.lines[:2]))
        st.dataframe(
            latency_df(hbin.members)[["pr_id", "display_hours", "title"]].rename(
                columns={"pr_id": "PR", "display_hours": "Hours", "title": "Title"}
            ),
            use_container_width=True,
            hide_index=True,
        )
