"""
Percentile and distribution math over numeric samples.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
import math
from typing import Any, Dict, Iterable, List, Optional, Sequence

from messmass.metrics.summary import BENCHMARK_METRICS, EventSummary, benchmark_value

logger = logging.getLogger(__name__)

DISTRIBUTION_PERCENTILES = (10, 25, 50, 75, 90, 95)


def percentile(sorted_values: Sequence[float], p: float) -> float:
    """
    Linearly interpolated percentile of an ascending sequence.

    index = (p / 100) * (n - 1); an integral index returns that element,
    otherwise the floor and ceil elements are interpolated by the
    fractional part.

    Args:
        sorted_values: Samples sorted ascending.
        p: Percentile in [0, 100].

    Raises:
        ValueError: If sorted_values is empty or p is out of range.
    """
    if not sorted_values:
        raise ValueError("Cannot take a percentile of no values")
    if p < 0 or p > 100:
        raise ValueError(f"Percentile must be within [0, 100], got {p}")

    index = (p / 100) * (len(sorted_values) - 1)
    lower = math.floor(index)
    upper = math.ceil(index)
    if lower == upper:
        return float(sorted_values[lower])
    weight = index - lower
    return sorted_values[lower] * (1 - weight) + sorted_values[upper] * weight


def mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def population_std_dev(values: Sequence[float]) -> float:
    """sqrt of the mean squared deviation from the mean (population, not sample)."""
    if not values:
        return 0.0
    avg = mean(values)
    return math.sqrt(sum((v - avg) ** 2 for v in values) / len(values))


@dataclass(frozen=True)
class BenchmarkDistribution:
    """
    Distribution of one metric across a set of events.

    Attributes:
        metric (str): Metric name.
        count (int): Number of samples.
        min (float): Smallest sample.
        max (float): Largest sample.
        mean (float): Arithmetic mean.
        median (float): 50th percentile.
        percentiles (Dict[int, float]): p10, p25, p50, p75, p90, p95.
        std_dev (float): Population standard deviation.
    """
    metric: str
    count: int
    min: float
    max: float
    mean: float
    median: float
    percentiles: Dict[int, float] = field(default_factory=dict)
    std_dev: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'metric': self.metric,
            'count': self.count,
            'min': self.min,
            'max': self.max,
            'mean': self.mean,
            'median': self.median,
            'percentiles': {f"p{p}": value for p, value in self.percentiles.items()},
            'stdDev': self.std_dev,
        }


def build_distribution(metric: str, values: Iterable[float]) -> Optional[BenchmarkDistribution]:
    """
    Distribution of values; None when there are no values.
    """
    ordered = sorted(float(v) for v in values)
    if not ordered:
        return None
    return BenchmarkDistribution(
        metric=metric,
        count=len(ordered),
        min=ordered[0],
        max=ordered[-1],
        mean=mean(ordered),
        median=percentile(ordered, 50),
        percentiles={p: percentile(ordered, p) for p in DISTRIBUTION_PERCENTILES},
        std_dev=population_std_dev(ordered),
    )


def build_distributions(summaries: Sequence[EventSummary], metrics: Optional[Sequence[str]] = None) -> Dict[str, BenchmarkDistribution]:
    """
    Distributions of benchmark metrics over event summaries.

    Args:
        summaries: Per-event summaries forming the benchmark pool.
        metrics: Metric names (see BENCHMARK_METRICS); all when omitted.

    Raises:
        ValueError: For an unknown metric name.
    """
    metrics = list(metrics) if metrics else list(BENCHMARK_METRICS)
    distributions: Dict[str, BenchmarkDistribution] = {}
    for metric in metrics:
        values: List[float] = [benchmark_value(s, metric) for s in summaries]
        distribution = build_distribution(metric, values)
        if distribution is not None:
            distributions[metric] = distribution
    logger.debug(f"Built {len(distributions)} distributions over {len(summaries)} events")
    return distributions
