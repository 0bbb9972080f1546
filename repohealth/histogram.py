"""Equal-width binning of merge-latency samples."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from repohealth.config import HISTOGRAM_BINS
from repohealth.models import HistogramBin, MergeLatencySample


def build_histogram(
    samples: Sequence[MergeLatencySample],
    bin_count: int = HISTOGRAM_BINS,
) -> list[HistogramBin]:
    """
    Partition ``[min(hours), max(hours)]`` into *bin_count* equal-width bins.

    Bins are half-open ``[lower, upper)`` except the last, which is closed so
    the maximum sample is kept. Members keep input order. No samples, or only
    one distinct value, yields ``[]``.
    """
    if bin_count < 1:
        raise ValueError(f"bin_count must be >= 1, got {bin_count}")
    if not samples:
        return []

    values = np.array([s.hours for s in samples], dtype=float)
    lo, hi = float(values.min()), float(values.max())
    if lo == hi:
        return []

    edges = lo + np.arange(bin_count + 1) * ((hi - lo) / bin_count)
    edges[-1] = hi
    idx = np.clip(np.searchsorted(edges, values, side="right") - 1, 0, bin_count - 1)

    members: list[list[MergeLatencySample]] = [[] for _ in range(bin_count)]
    for sample, i in zip(samples, idx):
        members[int(i)].append(sample)

    return [
        HistogramBin(
            lower_bound=float(edges[i]),
            upper_bound=float(edges[i + 1]),
            members=tuple(members[i]),
        )
        for i in range(bin_count)
    ]
