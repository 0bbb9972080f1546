"""All Plotly chart-builder functions."""

from __future__ import annotations

from typing import Optional, Sequence

import plotly.express as px
import plotly.graph_objects as go

from repohealth.config import (
    CHART_HEIGHT,
    CHART_WIDTH,
    COLOR_BAR,
    COLOR_MEDIAN,
    METRIC_COLORS,
    METRIC_LABELS,
    TOP_CONTRIBUTORS,
)
from repohealth.interaction import SeriesVisibility, as_html, bin_tooltip, bucket_tooltip
from repohealth.models import ContributorRank, DailyBucket, HistogramBin
from repohealth.scales import LinearScale, TimeScale, scale_for, y_domain_for

MARGIN = dict(t=20, b=50, l=55, r=30)


def inner_size(width: int, height: int) -> tuple[int, int]:
    return (
        max(1, width - MARGIN["l"] - MARGIN["r"]),
        max(1, height - MARGIN["t"] - MARGIN["b"]),
    )


def _base_layout(fig: go.Figure, width: Optional[int], height: int) -> None:
    fig.update_layout(
        margin=MARGIN,
        height=height,
        width=width,
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        xaxis=dict(gridcolor="#2a2a3a"),
        yaxis_gridcolor="#2a2a3a",
    )


def no_data_figure(text: str = "No data available", height: int = CHART_HEIGHT) -> go.Figure:
    fig = go.Figure()
    fig.update_layout(
        annotations=[dict(text=text, xref="paper", yref="paper",
                          x=0.5, y=0.5, showarrow=False, font_size=14)],
        xaxis=dict(visible=False),
        yaxis=dict(visible=False),
        height=height,
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
    )
    return fig


# ── Daily activity ────────────────────────────────────────────────────────────

def activity_scales(
    buckets: Sequence[DailyBucket],
    visibility: SeriesVisibility,
    width: int = CHART_WIDTH,
    height: int = CHART_HEIGHT,
) -> tuple[TimeScale, LinearScale]:
    """x: first→last bucket date; y: 0→max of the visible series, pixel y grows downward."""
    inner_w, inner_h = inner_size(width, height)
    x_scale = scale_for((buckets[0].date, buckets[-1].date), (0, inner_w))
    y_scale = scale_for(y_domain_for(buckets, visibility.visible_metrics), (inner_h, 0))
    return x_scale, y_scale


def make_activity_chart(
    buckets: Sequence[DailyBucket],
    visibility: SeriesVisibility,
    width: Optional[int] = None,
    height: int = CHART_HEIGHT,
) -> go.Figure:
    if not buckets:
        return no_data_figure("No data available. Select a repository to analyze.", height)

    x_scale, y_scale = activity_scales(buckets, visibility, width or CHART_WIDTH, height)
    dates = [b.date for b in buckets]
    hover = [as_html(bucket_tooltip(b, visibility)) for b in buckets]

    fig = go.Figure()
    for key in visibility.visible_metrics:
        fig.add_trace(go.Scatter(
            x=dates,
            y=[b.value(key) for b in buckets],
            mode="lines+markers",
            name=METRIC_LABELS[key],
            line=dict(color=METRIC_COLORS[key], width=2),
            marker=dict(size=4),
            hovertext=hover,
            hoverinfo="text",
        ))

    y_max = y_scale.domain_max
    _base_layout(fig, width, height)
    fig.update_layout(
        xaxis=dict(
            title="Date",
            tickvals=x_scale.ticks(),
            tickformat="%m/%d",
            gridcolor="#2a2a3a",
        ),
        yaxis=dict(
            title="Count",
            range=[0, y_max if y_max > 0 else 1],
            tickvals=y_scale.ticks(min_step=1),
        ),
        # Series toggles go through app state so the y-domain is recomputed.
        legend=dict(orientation="h", y=-0.2, itemclick=False, itemdoubleclick=False),
        hovermode="closest",
    )
    return fig


# ── Merge latency histogram ───────────────────────────────────────────────────

def histogram_scales(
    bins: Sequence[HistogramBin],
    width: int = CHART_WIDTH,
    height: int = CHART_HEIGHT,
) -> tuple[LinearScale, LinearScale]:
    inner_w, inner_h = inner_size(width, height)
    x_scale = scale_for((bins[0].lower_bound, bins[-1].upper_bound), (0, inner_w))
    y_scale = scale_for((0, max(b.count for b in bins)), (inner_h, 0))
    return x_scale, y_scale


def make_latency_histogram(
    bins: Sequence[HistogramBin],
    median_hours: Optional[float],
    width: Optional[int] = None,
    height: int = CHART_HEIGHT,
) -> go.Figure:
    if not bins:
        return no_data_figure("No PR data available. Select a repository to analyze.", height)

    x_scale, y_scale = histogram_scales(bins, width or CHART_WIDTH, height)

    fig = go.Figure(go.Bar(
        x=[(b.lower_bound + b.upper_bound) / 2 for b in bins],
        y=[b.count for b in bins],
        width=[b.upper_bound - b.lower_bound for b in bins],
        marker=dict(color=COLOR_BAR, line=dict(width=1, color="rgba(255,255,255,0.6)")),
        hovertext=[as_html(bin_tooltip(b)) for b in bins],
        hoverinfo="text",
        name="PRs",
    ))
    if median_hours is not None:
        fig.add_vline(
            x=median_hours, line_dash="dash", line_color=COLOR_MEDIAN, line_width=2,
            annotation_text=f"Median: {median_hours:.1f} hrs",
            annotation_position="top right",
            annotation_font_color=COLOR_MEDIAN,
        )

    x_ticks = x_scale.ticks()
    _base_layout(fig, width, height)
    fig.update_layout(
        xaxis=dict(
            title="Time to Merge (hours)",
            range=[x_scale.domain_min, x_scale.domain_max],
            tickvals=x_ticks,
            ticktext=[f"{t:g} hrs" for t in x_ticks],
            gridcolor="#2a2a3a",
        ),
        yaxis=dict(
            title="Frequency",
            range=[0, y_scale.domain_max],
            tickvals=y_scale.ticks(min_step=1),
        ),
        bargap=0,
        showlegend=False,
    )
    return fig


# ── Contributors ──────────────────────────────────────────────────────────────

def make_contributors_bar(
    ranks: Sequence[ContributorRank], top_n: int = TOP_CONTRIBUTORS
) -> go.Figure:
    if not ranks:
        return no_data_figure("No commits in this window.", 320)
    top = list(ranks[:top_n])
    fig = px.bar(
        x=[r.commit_count for r in reversed(top)],
        y=[r.login for r in reversed(top)],
        orientation="h",
        labels={"x": "Commits", "y": ""},
        height=max(300, len(top) * 28),
    )
    fig.update_traces(
        marker_color=METRIC_COLORS["commits"],
        hovertemplate="%{y}: %{x} commits<extra></extra>",
    )
    fig.update_layout(
        margin=dict(t=20, b=40, l=120, r=20),
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        xaxis_gridcolor="#2a2a3a",
    )
    return fig
