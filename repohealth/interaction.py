"""
Hover hit-testing, tooltip content and per-series visibility toggles.

Shared by the activity chart (nearest bucket on a regular daily axis) and the
latency histogram (the bin under the pointer).
"""

from __future__ import annotations

import logging
import math
from bisect import bisect_right
from contextlib import ExitStack
from datetime import date, datetime
from typing import Callable, Iterable, Optional, Sequence, Union

from repohealth.config import (
    DEFAULT_VISIBLE_METRICS,
    METRIC_KEYS,
    METRIC_LABELS,
    TITLE_PREVIEW_CHARS,
)
from repohealth.models import DailyBucket, HistogramBin
from repohealth.scales import LinearScale, TimeScale, to_epoch

log = logging.getLogger(__name__)

HoverTarget = Union[DailyBucket, HistogramBin]

_SECONDS_PER_DAY = 86400.0


# ── Visibility toggles ────────────────────────────────────────────────────────

class SeriesVisibility:
    """One independent on/off flag per metric key."""

    def __init__(self, visible: Iterable[str] = DEFAULT_VISIBLE_METRICS):
        visible = set(visible)
        unknown = visible - set(METRIC_KEYS)
        if unknown:
            raise KeyError(f"Unknown metrics: {sorted(unknown)}")
        self._flags = {key: key in visible for key in METRIC_KEYS}

    def _check(self, key: str) -> None:
        if key not in self._flags:
            raise KeyError(f"Unknown metric: {key!r}")

    def is_visible(self, key: str) -> bool:
        self._check(key)
        return self._flags[key]

    def toggle(self, key: str) -> bool:
        self._check(key)
        self._flags[key] = not self._flags[key]
        return self._flags[key]

    @property
    def visible_metrics(self) -> list[str]:
        return [k for k in METRIC_KEYS if self._flags[k]]

    def __eq__(self, other: object) -> bool:
        return isinstance(other, SeriesVisibility) and self._flags == other._flags

    def __repr__(self) -> str:
        return f"SeriesVisibility({self.visible_metrics!r})"


# ── Hit-testing ───────────────────────────────────────────────────────────────

def nearest_bucket(
    position: Union[date, datetime],
    buckets: Sequence[DailyBucket],
) -> Optional[DailyBucket]:
    """Bucket closest to *position*; buckets are one per day, ascending."""
    if not buckets:
        return None
    offset = (to_epoch(position) - to_epoch(buckets[0].date)) / _SECONDS_PER_DAY
    idx = int(math.floor(offset + 0.5))
    return buckets[min(max(idx, 0), len(buckets) - 1)]


def bin_at(value: float, bins: Sequence[HistogramBin]) -> Optional[HistogramBin]:
    """Bin containing *value*, or ``None`` outside the histogram's range."""
    if not bins:
        return None
    if value < bins[0].lower_bound or value > bins[-1].upper_bound:
        return None
    idx = bisect_right([b.lower_bound for b in bins], value) - 1
    return bins[min(max(idx, 0), len(bins) - 1)]


def resolve_hover(position, items: Sequence[HoverTarget]) -> Optional[HoverTarget]:
    """Map a domain-space pointer position to the bucket or bin under it."""
    if not items:
        return None
    if isinstance(items[0], DailyBucket):
        return nearest_bucket(position, items)
    if isinstance(items[0], HistogramBin):
        return bin_at(float(position), items)
    raise TypeError(f"Cannot hit-test items of type {type(items[0]).__name__}")


def hover_from_pixel(
    pixel_x: float,
    scale: Union[LinearScale, TimeScale],
    items: Sequence[HoverTarget],
) -> Optional[HoverTarget]:
    return resolve_hover(scale.invert(pixel_x), items)


# ── Tooltip content ───────────────────────────────────────────────────────────

def truncate_title(title: str, limit: int = TITLE_PREVIEW_CHARS) -> str:
    return f"{title[:limit]}..." if len(title) > limit else title


def bucket_tooltip(bucket: DailyBucket, visibility: SeriesVisibility) -> list[str]:
    lines = [bucket.date.isoformat()]
    for key in visibility.visible_metrics:
        lines.append(f"{METRIC_LABELS[key]}: {bucket.value(key)}")
    return lines


def bin_tooltip(hbin: HistogramBin) -> list[str]:
    titles = ", ".join(truncate_title(m.title) for m in hbin.members if m.title)
    return [
        f"Time Range: {hbin.lower_bound:.1f} - {hbin.upper_bound:.1f} hrs",
        f"Frequency: {hbin.count}",
        f"PRs in Range: {titles}",
    ]


def tooltip_lines(item: HoverTarget, visibility: Optional[SeriesVisibility] = None) -> list[str]:
    if isinstance(item, DailyBucket):
        return bucket_tooltip(item, visibility or SeriesVisibility())
    return bin_tooltip(item)


def as_html(lines: Sequence[str]) -> str:
    """Plotly hover text: first line bold, ``<br>`` separated."""
    if not lines:
        return ""
    return "<br>".join([f"<b>{lines[0]}</b>", *lines[1:]])


# ── Tooltip lifecycle ─────────────────────────────────────────────────────────

class Tooltip:
    """Transient hover box: shown, moved, hidden, then destroyed exactly once."""

    def __init__(self) -> None:
        self.visible = False
        self.lines: list[str] = []
        self.position: tuple[float, float] = (0.0, 0.0)
        self.destroyed = False

    def _alive(self) -> None:
        if self.destroyed:
            raise RuntimeError("Tooltip has been destroyed")

    def show(self, lines: Sequence[str], x: float, y: float) -> None:
        self._alive()
        self.lines = list(lines)
        self.position = (x, y)
        self.visible = True

    def move(self, x: float, y: float) -> None:
        self._alive()
        self.position = (x, y)

    def hide(self) -> None:
        self._alive()
        self.visible = False

    def destroy(self) -> None:
        if self.destroyed:
            return
        self.visible = False
        self.lines = []
        self.destroyed = True


class ChartInteraction:
    """
    Pointer handling for one chart instance.

    ``mount()`` creates the tooltip and binds the pointer handlers, each
    paired with a cleanup callback; ``unmount()`` runs every cleanup whatever
    happened in between. Usable as a context manager.
    """

    def __init__(
        self,
        items: Sequence[HoverTarget],
        x_scale: Union[LinearScale, TimeScale],
        visibility: Optional[SeriesVisibility] = None,
        offset: tuple[float, float] = (10.0, -10.0),
    ):
        self.items = list(items)
        self.x_scale = x_scale
        self.visibility = visibility
        self.offset = offset
        self.tooltip: Optional[Tooltip] = None
        self.active: Optional[HoverTarget] = None
        self.handlers: dict[str, Callable] = {}
        self._stack: Optional[ExitStack] = None

    @property
    def mounted(self) -> bool:
        return self._stack is not None

    def mount(self) -> "ChartInteraction":
        if self.mounted:
            return self
        stack = ExitStack()
        tooltip = Tooltip()
        stack.callback(tooltip.destroy)
        self.tooltip = tooltip

        self.handlers.update(
            enter=self.pointer_enter,
            move=self.pointer_move,
            leave=self.pointer_leave,
        )
        stack.callback(self.handlers.clear)
        stack.callback(self._reset_active)
        self._stack = stack
        return self

    def unmount(self) -> None:
        if self._stack is None:
            return
        stack, self._stack = self._stack, None
        stack.close()

    def __enter__(self) -> "ChartInteraction":
        return self.mount()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.unmount()

    def _reset_active(self) -> None:
        self.active = None

    def _require_mounted(self) -> Tooltip:
        if not self.mounted or self.tooltip is None:
            raise RuntimeError("ChartInteraction is not mounted")
        return self.tooltip

    def dispatch(self, event: str, *args) -> Optional[HoverTarget]:
        """Route a pointer event (``enter``, ``move`` or ``leave``) to its bound handler."""
        self._require_mounted()
        if event not in self.handlers:
            raise ValueError(f"Unknown pointer event: {event!r}")
        return self.handlers[event](*args)

    def _place(self, x: float, y: float) -> tuple[float, float]:
        return x + self.offset[0], y + self.offset[1]

    def pointer_enter(self, x: float, y: float) -> Optional[HoverTarget]:
        tooltip = self._require_mounted()
        item = hover_from_pixel(x, self.x_scale, self.items)
        self.active = item
        if item is None:
            tooltip.hide()
            return None
        tooltip.show(tooltip_lines(item, self.visibility), *self._place(x, y))
        return item

    def pointer_move(self, x: float, y: float) -> Optional[HoverTarget]:
        tooltip = self._require_mounted()
        item = hover_from_pixel(x, self.x_scale, self.items)
        if item is None:
            self.active = None
            tooltip.hide()
            return None
        if item is not self.active or not tooltip.visible:
            self.active = item
            tooltip.show(tooltip_lines(item, self.visibility), *self._place(x, y))
        else:
            tooltip.move(*self._place(x, y))
        return item

    def pointer_leave(self) -> None:
        tooltip = self._require_mounted()
        self.active = None
        tooltip.hide()
