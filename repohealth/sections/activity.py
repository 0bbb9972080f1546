"""Daily activity chart with per-series toggles and point detail."""

from __future__ import annotations

from datetime import date

import streamlit as st

from repohealth.charts import activity_scales, make_activity_chart
from repohealth.config import CHART_HEIGHT, CHART_WIDTH, METRIC_KEYS, METRIC_LABELS
from repohealth.data import buckets_df
from repohealth.interaction import ChartInteraction
from repohealth.models import RepoSummary
from repohealth.state import AppState


def _selected_points(event) -> list[dict]:
    return list(((event or {}).get("selection") or {}).get("points") or [])


def render_activity(state: AppState, summary: RepoSummary, chart_key: str) -> None:
    st.markdown("#### 📈 Daily Activity")
    visibility = state.visibility_for(chart_key)

    toggle_cols = st.columns(len(METRIC_KEYS))
    for col, metric in zip(toggle_cols, METRIC_KEYS):
        with col:
            st.toggle(
                METRIC_LABELS[metric],
                value=visibility.is_visible(metric),
                key=f"{chart_key}_{metric}",
                on_change=state.toggle_metric,
                args=(chart_key, metric),
            )

    buckets = summary.daily_buckets
    event = st.plotly_chart(
        make_activity_chart(buckets, visibility, height=CHART_HEIGHT),
        use_container_width=True,
        key=f"{chart_key}_chart",
        on_select="rerun",
        selection_mode="points",
    )
    if buckets:
        with st.expander("Daily data", expanded=False):
            st.dataframe(buckets_df(buckets), use_container_width=True, hide_index=True)

    if not buckets or not visibility.visible_metrics:
        if not visibility.visible_metrics:
            st.caption("All series are hidden. Switch one on to see activity.")
        return

    points = _selected_points(event)
    if not points:
        return

    # Streamlit reports point selections, not pointer motion. The tooltip is
    # driven from the selection event, replayed as a pointer entering at the
    # selected point on a nominal-width axis.
    x_scale, _ = activity_scales(buckets, visibility, CHART_WIDTH, CHART_HEIGHT)
    with ChartInteraction(buckets, x_scale, visibility) as interaction:
        picked = date.fromisoformat(str(points[0]["x"])[:10])
        interaction.dispatch("enter", x_scale(picked), 0.0)
        if interaction.tooltip.visible:
            st.info("  \n".join(interaction.tooltip.lines))
