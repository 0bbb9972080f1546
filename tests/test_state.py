import pytest

from repohealth.models import RepoSummary
from repohealth.state import AppState


def _summary(days=30):
    return RepoSummary(
        daily_buckets=[],
        latency_samples=[],
        median_latency_hours=None,
        contributor_ranks=[],
        window_days=days,
    )


def test_defaults():
    state = AppState()
    assert state.selected_repo is None
    assert state.time_range == "30d"
    assert state.window_days == 30
    assert not state.compare_mode


def test_time_range_changes_window():
    state = AppState()
    state.set_time_range("1y")
    assert state.window_days == 365
    with pytest.raises(ValueError):
        state.set_time_range("2w")
    assert state.time_range == "1y"


def test_listeners_are_notified_and_can_unsubscribe():
    state = AppState()
    seen = []
    unsubscribe = state.subscribe(seen.append)
    state.select_repo("octo/cat")
    state.toggle_compare_mode()
    unsubscribe()
    state.set_compared_repos("a/b", "c/d")
    assert seen == ["selected_repo", "compare_mode"]
    assert state.compared_repos == ("a/b", "c/d")
    unsubscribe()


def test_visibility_is_per_chart():
    state = AppState()
    assert state.toggle_metric("left", "commits") is True
    assert state.visibility_for("left").is_visible("commits")
    assert not state.visibility_for("right").is_visible("commits")


def test_repo_data_keyed_by_repo_and_window():
    state = AppState()
    summary = _summary(90)
    state.store_repo_data("octo/cat", 90, summary)
    assert state.cached_summary("octo/cat", 90) is summary
    assert state.cached_summary("octo/cat", 30) is None


def test_summary_for_loads_once_per_repo_and_window():
    state = AppState()
    calls = []

    def load(repo, days):
        calls.append((repo, days))
        return _summary(days)

    first = state.summary_for("octo/cat", 30, load)
    assert state.summary_for("octo/cat", 30, load) is first
    state.summary_for("octo/cat", 90, load)
    assert calls == [("octo/cat", 30), ("octo/cat", 90)]


def test_failed_load_is_not_cached():
    state = AppState()
    assert state.summary_for("octo/cat", 30, lambda repo, days: None) is None
    assert state.repo_data == {}
