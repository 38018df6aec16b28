"""
Benchmark engine: percentile ranks, ratings and comparisons of one value
against a dataset of peers or history.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
import logging
from typing import Any, Dict, List, Literal, Mapping, Optional, Sequence, Tuple

from messmass.benchmarks.percentile import mean, population_std_dev
from messmass.charts.formatting import round_half_up

logger = logging.getLogger(__name__)

PerformanceRating = Literal['excellent', 'good', 'average', 'below_average', 'poor']
Trend = Literal['improving', 'declining', 'stable']

# Minimum percentile rank for each rating, best first
RATING_THRESHOLDS: Tuple[Tuple[int, PerformanceRating], ...] = (
    (90, 'excellent'),
    (75, 'good'),
    (40, 'average'),
    (25, 'below_average'),
)

# Values within 5% of each other count as a tie
TIE_BAND = 0.05


def percentile_rank(value: float, dataset: Sequence[float]) -> int:
    """Share of the dataset strictly below value, as a rounded percentage. 50 for an empty dataset."""
    if not dataset:
        return 50
    below = sum(1 for v in dataset if v < value)
    return int(round_half_up(below / len(dataset) * 100))


def rank(value: float, dataset: Sequence[float]) -> int:
    """1-based rank of value among dataset, highest first; len + 1 when value is absent."""
    ordered = sorted(dataset, reverse=True)
    try:
        return ordered.index(value) + 1
    except ValueError:
        return len(ordered) + 1


def performance_rating(percentile: float) -> PerformanceRating:
    for threshold, rating in RATING_THRESHOLDS:
        if percentile >= threshold:
            return rating
    return 'poor'


@dataclass(frozen=True)
class BenchmarkResult:
    """
    One value benchmarked against a dataset.

    Attributes:
        value (float): Benchmarked value.
        benchmark (float): Dataset mean.
        percentile (int): Percentile rank of value.
        deviation (float): Standard deviations from the mean.
        relative_performance (float): (value - mean) / mean, as a fraction.
        rating (PerformanceRating): Rating derived from the percentile rank.
        rank (int): 1 = best.
        total (int): Dataset size.
        message (str): Human-readable summary.
        trend (Optional[Trend]): Set by benchmark_against_history.
    """
    value: float
    benchmark: float
    percentile: int
    deviation: float
    relative_performance: float
    rating: PerformanceRating
    rank: int
    total: int
    message: str
    trend: Optional[Trend] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'value': self.value,
            'benchmark': self.benchmark,
            'percentile': self.percentile,
            'deviation': self.deviation,
            'relativePerformance': round_half_up(self.relative_performance * 100, 1),
            'rating': self.rating,
            'rank': self.rank,
            'totalInCategory': self.total,
            'message': self.message,
            'trend': self.trend,
        }


def benchmark_metric(value: float, dataset: Sequence[float], metric: str = 'metric', context: str = 'league') -> BenchmarkResult:
    """
    Benchmark value against dataset.

    An empty dataset yields an 'average' result with a message saying the
    data is insufficient.
    """
    if not dataset:
        return BenchmarkResult(
            value=value, benchmark=0.0, percentile=50, deviation=0.0, relative_performance=0.0,
            rating='average', rank=1, total=1,
            message=f"Insufficient {context} data for {metric} comparison",
        )

    benchmark = mean(dataset)
    std_dev = population_std_dev(dataset)
    deviation = 0.0 if std_dev == 0 else (value - benchmark) / std_dev
    pct = percentile_rank(value, dataset)
    position = rank(value, dataset)
    relative = 0.0 if benchmark == 0 else (value - benchmark) / benchmark
    rating = performance_rating(pct)

    message = (f"{metric}: {rating.replace('_', ' ')}, ranked #{position} of {len(dataset)} "
               f"in {context} ({pct}th percentile)")
    if abs(relative) > TIE_BAND:
        direction = 'above' if relative > 0 else 'below'
        message += f", {abs(relative) * 100:.0f}% {direction} {context} average"

    return BenchmarkResult(
        value=value,
        benchmark=benchmark,
        percentile=pct,
        deviation=deviation,
        relative_performance=relative,
        rating=rating,
        rank=position,
        total=len(dataset),
        message=message,
    )


def history_trend(current: float, history: Sequence[float], window: int = 3) -> Trend:
    """Compare current with the mean of the last `window` values: >10% above improving, >10% below declining."""
    if len(history) < window:
        return 'stable'
    recent = mean(history[-window:])
    if current > recent * 1.1:
        return 'improving'
    if current < recent * 0.9:
        return 'declining'
    return 'stable'


def benchmark_against_history(current: float, history: Sequence[float], metric: str = 'metric') -> BenchmarkResult:
    """
    Benchmark a value against the same metric's history (oldest first) and
    attach a trend.
    """
    result = benchmark_metric(current, history, metric, context='partner history')
    return replace(result, trend=history_trend(current, history))


@dataclass(frozen=True)
class EventComparison:
    winners: Dict[str, str]
    deltas: Dict[str, Dict[str, float]]
    first_score: int
    second_score: int
    overall_winner: str


def compare_events(first: Mapping[str, float], second: Mapping[str, float], metrics: Sequence[str]) -> EventComparison:
    """
    Compare two events metric by metric.

    A metric is won when one value exceeds the other by more than 5%.
    Scores are the share of metrics won, as rounded percentages.
    """
    winners: Dict[str, str] = {}
    deltas: Dict[str, Dict[str, float]] = {}
    first_wins = second_wins = 0
    for metric in metrics:
        a = first.get(metric) or 0.0
        b = second.get(metric) or 0.0
        if a > b * (1 + TIE_BAND):
            winners[metric] = 'first'
            first_wins += 1
        elif b > a * (1 + TIE_BAND):
            winners[metric] = 'second'
            second_wins += 1
        else:
            winners[metric] = 'tie'
        absolute = a - b
        deltas[metric] = {'absolute': absolute, 'relative': 0.0 if b == 0 else absolute / b}

    total = len(metrics)
    if first_wins > second_wins:
        overall = 'first'
    elif second_wins > first_wins:
        overall = 'second'
    else:
        overall = 'tie'
    return EventComparison(
        winners=winners,
        deltas=deltas,
        first_score=int(round_half_up(first_wins / total * 100)) if total else 0,
        second_score=int(round_half_up(second_wins / total * 100)) if total else 0,
        overall_winner=overall,
    )


def identify_outliers(values: Mapping[str, float], top: int = 90, bottom: int = 10) -> Dict[str, List[Tuple[str, float, int]]]:
    """
    Split ids into top and bottom performers by percentile rank.

    Args:
        values: id -> value.
        top: Minimum percentile rank for a top performer.
        bottom: Maximum percentile rank for a bottom performer.

    Returns:
        Dict with 'top' (best first) and 'bottom' (worst first) lists of
        (id, value, percentile rank).
    """
    dataset = list(values.values())
    ranked = sorted(
        ((item_id, value, percentile_rank(value, dataset)) for item_id, value in values.items()),
        key=lambda item: (-item[1], item[0]),
    )
    return {
        'top': [item for item in ranked if item[2] >= top],
        'bottom': [item for item in reversed(ranked) if item[2] <= bottom],
    }


def top_performers(values: Mapping[str, float], share: float = 0.1) -> List[Tuple[str, float]]:
    """The best `share` of ids by value (at least one), best first."""
    if not values:
        return []
    ranked = sorted(values.items(), key=lambda item: (-item[1], item[0]))
    count = max(1, int(len(ranked) * share))
    return ranked[:count]


def composite_percentile(results: Sequence[BenchmarkResult]) -> float:
    """Mean percentile rank across several benchmarked metrics; 50 when there are none."""
    if not results:
        return 50.0
    return mean([result.percentile for result in results])
