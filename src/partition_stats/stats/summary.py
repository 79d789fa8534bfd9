"""Descriptive statistics over partition sizes."""

import statistics
from collections.abc import Iterable
from dataclasses import dataclass, field

# Percentiles reported alongside the median.
PERCENTILES = (5, 10, 25, 75, 90, 95)


def _percentiles(sorted_values: list[int]) -> dict[int, float]:
    if len(sorted_values) == 1:
        only = float(sorted_values[0])
        return {p: only for p in PERCENTILES}

    # quantiles() returns the 99 cut points between 100 groups.
    cuts = statistics.quantiles(sorted_values, n=100, method="inclusive")
    return {p: cuts[p - 1] for p in PERCENTILES}


@dataclass(frozen=True)
class Stats:
    """Summary of a sequence of non-negative integers.

    Every metric is None when the sequence is empty.
    """

    n: int
    total: int = 0
    mean: float | None = None
    stddev: float | None = None
    min: int | None = None
    max: int | None = None
    median: float | None = None
    mad: float | None = None
    percentiles: dict[int, float] = field(default_factory=dict)

    @classmethod
    def from_values(cls, values: Iterable[int]) -> "Stats":
        data = sorted(values)
        if not data:
            return cls(n=0)

        median = statistics.median(data)
        return cls(
            n=len(data),
            total=sum(data),
            mean=statistics.fmean(data),
            stddev=statistics.pstdev(data),
            min=data[0],
            max=data[-1],
            median=float(median),
            mad=float(statistics.median(abs(v - median) for v in data)),
            percentiles=_percentiles(data),
        )

    def __str__(self) -> str:
        if self.n == 0:
            return "N: 0"

        parts = [
            f"N: {self.n}",
            f"sum: {self.total}",
            f"range: [{self.min}, {self.max}]",
            f"μ/σ: {self.mean:.1f}/{self.stddev:.1f}",
            f"med/mad: {self.median:g}/{self.mad:g}",
        ]
        if self.n > 1:
            spread = ", ".join(f"{p}: {v:g}" for p, v in self.percentiles.items())
            parts.append(f"percentiles: {{{spread}}}")
        return ", ".join(parts)
