from datetime import date

from repohealth.charts import (
    activity_scales,
    make_activity_chart,
    make_contributors_bar,
    make_latency_histogram,
)
from repohealth.histogram import build_histogram
from repohealth.interaction import SeriesVisibility
from repohealth.models import ContributorRank, DailyBucket, MergeLatencySample


def _buckets():
    return [
        DailyBucket(date(2024, 3, d), issues_opened=d, commits=10 * d) for d in range(1, 8)
    ]


def test_activity_chart_draws_one_trace_per_visible_series():
    fig = make_activity_chart(_buckets(), SeriesVisibility(["issues_opened", "commits"]))
    assert [t.name for t in fig.data] == ["Issues Opened", "Commits"]
    assert list(fig.layout.yaxis.range) == [0, 70]


def test_hiding_a_series_rescales_y_axis():
    fig = make_activity_chart(_buckets(), SeriesVisibility(["issues_opened"]))
    assert len(fig.data) == 1
    assert list(fig.layout.yaxis.range) == [0, 7]


def test_activity_scales_follow_visibility():
    _, y_all = activity_scales(_buckets(), SeriesVisibility(["commits"]))
    _, y_issues = activity_scales(_buckets(), SeriesVisibility(["issues_opened"]))
    assert y_all.domain_max == 70
    assert y_issues.domain_max == 7
    assert y_issues(0) > y_issues(7)


def test_empty_activity_shows_placeholder():
    fig = make_activity_chart([], SeriesVisibility())
    assert len(fig.data) == 0
    assert "No data available" in fig.layout.annotations[0].text


def test_latency_histogram_marks_median():
    samples = [MergeLatencySample(str(i), h, title=f"PR {i}") for i, h in enumerate([1, 2, 4, 9])]
    bins = build_histogram(samples, 4)
    fig = make_latency_histogram(bins, 4.0)
    assert list(fig.data[0].y) == [2, 1, 0, 1]
    assert fig.layout.shapes[0].x0 == 4.0
    assert fig.layout.annotations[0].text == "Median: 4.0 hrs"


def test_latency_histogram_without_bins():
    fig = make_latency_histogram([], None)
    assert len(fig.data) == 0


def test_contributors_bar_orders_top_first_at_top():
    ranks = [ContributorRank("alice", 5), ContributorRank("bob", 3), ContributorRank("carol", 1)]
    fig = make_contributors_bar(ranks, top_n=2)
    assert list(fig.data[0].y) == ["bob", "alice"]
    assert list(fig.data[0].x) == [3, 5]


def test_small_counts_get_integer_y_ticks():
    buckets = [DailyBucket(date(2024, 3, d), issues_opened=d % 3) for d in range(1, 5)]
    fig = make_activity_chart(buckets, SeriesVisibility(["issues_opened"]))
    assert list(fig.layout.yaxis.tickvals) == [0, 1, 2]
