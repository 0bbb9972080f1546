"""
Continuous domain → pixel mappings shared by every chart.

A degenerate domain (min == max) maps every input to the middle of the pixel
range instead of dividing by zero.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Iterable, Optional, Sequence, Union

import numpy as np

from repohealth.config import TICK_COUNT
from repohealth.models import DailyBucket

Temporal = Union[date, datetime]


# ── Ticks ─────────────────────────────────────────────────────────────────────

def tick_step(start: float, stop: float, count: int = TICK_COUNT) -> float:
    """Round step (1, 2 or 5 × 10^k) giving roughly *count* ticks over the span."""
    span = abs(stop - start)
    if span == 0 or count <= 0:
        return 0.0
    step0 = span / count
    step1 = 10 ** math.floor(math.log10(step0))
    error = step0 / step1
    if error >= math.sqrt(50):
        step1 *= 10
    elif error >= math.sqrt(10):
        step1 *= 5
    elif error >= math.sqrt(2):
        step1 *= 2
    return step1 if stop >= start else -step1


def nice_ticks(
    start: float,
    stop: float,
    count: int = TICK_COUNT,
    min_step: Optional[float] = None,
) -> list[float]:
    """Human-readable tick values inside ``[start, stop]``; *min_step* floors the spacing."""
    if start == stop:
        return [float(start)]
    lo, hi = min(start, stop), max(start, stop)
    step = abs(tick_step(lo, hi, count))
    if min_step is not None:
        step = max(step, min_step)
    first = math.ceil(lo / step)
    last = math.floor(hi / step)
    return [round(i * step, 12) for i in range(first, last + 1)]


# ── Scales ────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class LinearScale:
    domain_min: float
    domain_max: float
    range_min: float
    range_max: float

    @property
    def degenerate(self) -> bool:
        return self.domain_min == self.domain_max

    def __call__(self, value: float) -> float:
        if self.degenerate:
            return (self.range_min + self.range_max) / 2
        t = (value - self.domain_min) / (self.domain_max - self.domain_min)
        return self.range_min + t * (self.range_max - self.range_min)

    def map_many(self, values: Iterable[float]) -> np.ndarray:
        arr = np.asarray(list(values), dtype=float)
        if self.degenerate:
            return np.full(arr.shape, (self.range_min + self.range_max) / 2)
        t = (arr - self.domain_min) / (self.domain_max - self.domain_min)
        return self.range_min + t * (self.range_max - self.range_min)

    def invert(self, pixel: float) -> float:
        if self.degenerate or self.range_min == self.range_max:
            return self.domain_min
        t = (pixel - self.range_min) / (self.range_max - self.range_min)
        return self.domain_min + t * (self.domain_max - self.domain_min)

    def ticks(self, count: int = TICK_COUNT, min_step: Optional[float] = None) -> list[float]:
        return nice_ticks(self.domain_min, self.domain_max, count, min_step)


def to_epoch(value: Temporal) -> float:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.timestamp()
    return datetime(value.year, value.month, value.day, tzinfo=timezone.utc).timestamp()


def from_epoch(seconds: float) -> datetime:
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


_DAY_STEPS = [1, 2, 7, 14, 30, 60, 90, 180, 365]


@dataclass(frozen=True)
class TimeScale:
    """Linear scale over a temporal domain, in UTC epoch seconds."""
    domain_min: Temporal
    domain_max: Temporal
    range_min: float
    range_max: float

    @property
    def linear(self) -> LinearScale:
        return LinearScale(
            to_epoch(self.domain_min), to_epoch(self.domain_max),
            self.range_min, self.range_max,
        )

    @property
    def degenerate(self) -> bool:
        return self.linear.degenerate

    def __call__(self, value: Temporal) -> float:
        return self.linear(to_epoch(value))

    def map_many(self, values: Iterable[Temporal]) -> np.ndarray:
        return self.linear.map_many(to_epoch(v) for v in values)

    def invert(self, pixel: float) -> datetime:
        return from_epoch(self.linear.invert(pixel))

    def ticks(self, count: int = TICK_COUNT) -> list[date]:
        """Day-aligned ticks, stepping by the smallest calendar step that fits *count*."""
        start = from_epoch(to_epoch(self.domain_min)).date()
        end = from_epoch(to_epoch(self.domain_max)).date()
        span = (end - start).days
        if span <= 0:
            return [start]
        step = next((s for s in _DAY_STEPS if span / s <= count), _DAY_STEPS[-1])
        return [start + timedelta(days=i) for i in range(0, span + 1, step)]


def scale_for(
    domain_extent: Sequence,
    pixel_range: Sequence[float],
) -> Union[LinearScale, TimeScale]:
    """Pick a time or linear scale based on the type of the domain values."""
    lo, hi = domain_extent
    r0, r1 = pixel_range
    if isinstance(lo, (date, datetime)):
        return TimeScale(lo, hi, float(r0), float(r1))
    return LinearScale(float(lo), float(hi), float(r0), float(r1))


def y_domain_for(buckets: Sequence[DailyBucket], visible_metrics: Iterable[str]) -> tuple[int, int]:
    """``(0, max)`` over the visible metrics only; ``(0, 0)`` when nothing is visible."""
    metrics = list(visible_metrics)
    top = max(
        (b.value(m) for b in buckets for m in metrics),
        default=0,
    )
    return 0, top
