from datetime import date, datetime, timezone

import pytest

from repohealth.histogram import build_histogram
from repohealth.interaction import (
    ChartInteraction,
    SeriesVisibility,
    Tooltip,
    as_html,
    bin_at,
    bin_tooltip,
    bucket_tooltip,
    hover_from_pixel,
    nearest_bucket,
    resolve_hover,
    truncate_title,
)
from repohealth.models import DailyBucket, MergeLatencySample
from repohealth.scales import LinearScale, TimeScale


@pytest.fixture
def buckets():
    return [
        DailyBucket(date(2024, 3, d), issues_opened=d, issues_closed=10 - d, commits=2 * d)
        for d in range(1, 6)
    ]


@pytest.fixture
def bins():
    samples = [
        MergeLatencySample("1", 0.0, title="Short one"),
        MergeLatencySample("2", 2.5, title="A much longer pull request title than usual"),
        MergeLatencySample("3", 10.0, title="Slow one"),
    ]
    return build_histogram(samples, 2)


def _at(day, hour=0):
    return datetime(2024, 3, day, hour, tzinfo=timezone.utc)


# ── Visibility ────────────────────────────────────────────────────────────────

def test_default_visibility_shows_issue_series():
    vis = SeriesVisibility()
    assert vis.visible_metrics == ["issues_opened", "issues_closed"]


def test_toggles_are_independent():
    vis = SeriesVisibility()
    assert vis.toggle("commits") is True
    assert vis.toggle("issues_opened") is False
    assert vis.visible_metrics == ["issues_closed", "commits"]
    assert vis.toggle("commits") is False
    assert vis.is_visible("issues_closed")


def test_unknown_metric_rejected():
    with pytest.raises(KeyError):
        SeriesVisibility(["stars"])
    with pytest.raises(KeyError):
        SeriesVisibility().toggle("stars")


# ── Hit-testing ───────────────────────────────────────────────────────────────

def test_nearest_bucket_rounds_to_closest_day(buckets):
    assert nearest_bucket(_at(2, 11), buckets).date == date(2024, 3, 2)
    assert nearest_bucket(_at(2, 13), buckets).date == date(2024, 3, 3)
    assert nearest_bucket(date(2024, 3, 4), buckets).date == date(2024, 3, 4)


def test_nearest_bucket_clamps_outside_range(buckets):
    assert nearest_bucket(datetime(2024, 2, 1, tzinfo=timezone.utc), buckets).date == date(2024, 3, 1)
    assert nearest_bucket(date(2024, 4, 1), buckets).date == date(2024, 3, 5)
    assert nearest_bucket(date(2024, 3, 1), []) is None


def test_bin_at_finds_containing_bin(bins):
    assert bin_at(0, bins) is bins[0]
    assert bin_at(4.99, bins) is bins[0]
    assert bin_at(5, bins) is bins[1]
    assert bin_at(10, bins) is bins[1]


def test_bin_at_outside_histogram_is_none(bins):
    assert bin_at(-0.1, bins) is None
    assert bin_at(10.1, bins) is None
    assert bin_at(1, []) is None


def test_resolve_hover_dispatches_on_item_type(buckets, bins):
    assert resolve_hover(date(2024, 3, 3), buckets) is buckets[2]
    assert resolve_hover(7.0, bins) is bins[1]
    assert resolve_hover(7.0, []) is None
    with pytest.raises(TypeError):
        resolve_hover(1, ["not", "hoverable"])


def test_hover_from_pixel_inverts_the_scale(buckets):
    scale = TimeScale(date(2024, 3, 1), date(2024, 3, 5), 0, 400)
    assert hover_from_pixel(0, scale, buckets) is buckets[0]
    assert hover_from_pixel(210, scale, buckets) is buckets[2]
    assert hover_from_pixel(1000, scale, buckets) is buckets[-1]


# ── Tooltip content ───────────────────────────────────────────────────────────

def test_bucket_tooltip_lists_only_visible_metrics(buckets):
    vis = SeriesVisibility(["issues_opened", "commits"])
    assert bucket_tooltip(buckets[2], vis) == [
        "2024-03-03",
        "Issues Opened: 3",
        "Commits: 6",
    ]


def test_bin_tooltip_truncates_titles(bins):
    lines = bin_tooltip(bins[0])
    assert lines[0] == "Time Range: 0.0 - 5.0 hrs"
    assert lines[1] == "Frequency: 2"
    assert lines[2] == "PRs in Range: Short one, A much longer pull request tit..."


def test_truncate_title():
    assert truncate_title("x" * 30) == "x" * 30
    assert truncate_title("x" * 31) == "x" * 30 + "..."


def test_as_html_bolds_header():
    assert as_html(["2024-03-01", "Commits: 4"]) == "<b>2024-03-01</b><br>Commits: 4"
    assert as_html([]) == ""


# ── Tooltip lifecycle ─────────────────────────────────────────────────────────

def test_tooltip_destroy_is_idempotent():
    tip = Tooltip()
    tip.show(["a"], 1, 2)
    tip.destroy()
    tip.destroy()
    assert tip.destroyed and not tip.visible
    with pytest.raises(RuntimeError):
        tip.show(["b"], 0, 0)


def test_pointer_sequence_on_activity_chart(buckets):
    scale = TimeScale(date(2024, 3, 1), date(2024, 3, 5), 0, 400)
    chart = ChartInteraction(buckets, scale, SeriesVisibility(["issues_opened"]))
    with chart:
        tip = chart.tooltip
        assert chart.pointer_enter(100, 50) is buckets[1]
        assert tip.visible
        assert tip.lines == ["2024-03-02", "Issues Opened: 2"]
        assert tip.position == (110, 40)

        chart.pointer_move(130, 60)
        assert chart.active is buckets[1]
        assert tip.position == (140, 50)

        chart.pointer_move(300, 60)
        assert chart.active is buckets[3]
        assert tip.lines[0] == "2024-03-04"

        chart.pointer_leave()
        assert not tip.visible
        assert chart.active is None


def test_pointer_outside_histogram_hides_tooltip(bins):
    chart = ChartInteraction(bins, LinearScale(0, 10, 0, 200)).mount()
    assert chart.pointer_enter(50, 0) is bins[0]
    assert chart.tooltip.visible
    assert chart.pointer_move(250, 0) is None
    assert not chart.tooltip.visible
    chart.unmount()


def test_unmount_releases_everything(buckets):
    scale = TimeScale(date(2024, 3, 1), date(2024, 3, 5), 0, 400)
    chart = ChartInteraction(buckets, scale).mount()
    chart.pointer_enter(0, 0)
    tip = chart.tooltip
    chart.unmount()
    assert tip.destroyed
    assert chart.handlers == {}
    assert chart.active is None
    with pytest.raises(RuntimeError):
        chart.pointer_move(0, 0)
    chart.unmount()


def test_cleanup_runs_when_body_raises(buckets):
    scale = TimeScale(date(2024, 3, 1), date(2024, 3, 5), 0, 400)
    chart = ChartInteraction(buckets, scale)
    with pytest.raises(ZeroDivisionError):
        with chart:
            tip = chart.tooltip
            1 / 0
    assert tip.destroyed
    assert not chart.mounted


def test_dispatch_routes_through_bound_handlers(buckets):
    scale = TimeScale(date(2024, 3, 1), date(2024, 3, 5), 0, 400)
    with ChartInteraction(buckets, scale) as chart:
        assert set(chart.handlers) == {"enter", "move", "leave"}
        assert chart.dispatch("enter", 200, 0) is buckets[2]
        assert chart.dispatch("move", 400, 0) is buckets[4]
        chart.dispatch("leave")
        assert not chart.tooltip.visible
        with pytest.raises(ValueError):
            chart.dispatch("click", 0, 0)
    with pytest.raises(RuntimeError):
        chart.dispatch("enter", 0, 0)
