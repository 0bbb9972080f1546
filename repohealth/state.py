"""Per-session application state with explicit setters."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional

from repohealth.config import DEFAULT_TIME_RANGE, TIME_RANGES
from repohealth.interaction import SeriesVisibility
from repohealth.models import RepoSummary

Listener = Callable[[str], None]


@dataclass
class AppState:
    selected_repo: Optional[str] = None
    time_range: str = DEFAULT_TIME_RANGE
    compare_mode: bool = False
    compared_repos: tuple[Optional[str], Optional[str]] = (None, None)
    visibility: dict[str, SeriesVisibility] = field(default_factory=dict)
    repo_data: dict[tuple[str, int], RepoSummary] = field(default_factory=dict)
    _listeners: list[Listener] = field(default_factory=list, repr=False)

    # ── Subscriptions ─────────────────────────────────────────────────────────

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener*; returns a callable that removes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, change: str) -> None:
        for listener in list(self._listeners):
            listener(change)

    # ── Setters ───────────────────────────────────────────────────────────────

    @property
    def window_days(self) -> int:
        return TIME_RANGES[self.time_range]

    def select_repo(self, repo: str) -> None:
        self.selected_repo = repo
        self._notify("selected_repo")

    def set_time_range(self, time_range: str) -> None:
        if time_range not in TIME_RANGES:
            raise ValueError(
                f"Unknown time range {time_range!r}; expected one of {sorted(TIME_RANGES)}"
            )
        self.time_range = time_range
        self._notify("time_range")

    def toggle_compare_mode(self) -> None:
        self.compare_mode = not self.compare_mode
        self._notify("compare_mode")

    def set_compared_repos(self, first: Optional[str], second: Optional[str]) -> None:
        self.compared_repos = (first, second)
        self._notify("compared_repos")

    def visibility_for(self, chart_key: str) -> SeriesVisibility:
        if chart_key not in self.visibility:
            self.visibility[chart_key] = SeriesVisibility()
        return self.visibility[chart_key]

    def toggle_metric(self, chart_key: str, metric: str) -> bool:
        visible = self.visibility_for(chart_key).toggle(metric)
        self._notify("visibility")
        return visible

    def store_repo_data(self, repo: str, window_days: int, summary: RepoSummary) -> None:
        self.repo_data[(repo, window_days)] = summary
        self._notify("repo_data")

    def cached_summary(self, repo: str, window_days: int) -> Optional[RepoSummary]:
        return self.repo_data.get((repo, window_days))

    def summary_for(
        self,
        repo: str,
        window_days: int,
        load: Callable[[str, int], Optional[RepoSummary]],
    ) -> Optional[RepoSummary]:
        """Cached summary for ``(repo, window_days)``, loading and storing it on a miss."""
        summary = self.cached_summary(repo, window_days)
        if summary is None:
            summary = load(repo, window_days)
            if summary is not None:
                self.store_repo_data(repo, window_days, summary)
        return summary
