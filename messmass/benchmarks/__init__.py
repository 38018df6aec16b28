"""Benchmark distributions, percentile math and the benchmark engine."""

from .engine import (
    BenchmarkResult,
    EventComparison,
    benchmark_against_history,
    benchmark_metric,
    compare_events,
    composite_percentile,
    history_trend,
    identify_outliers,
    percentile_rank,
    performance_rating,
    rank,
    top_performers,
)
from .percentile import (
    DISTRIBUTION_PERCENTILES,
    BenchmarkDistribution,
    build_distribution,
    build_distributions,
    mean,
    percentile,
    population_std_dev,
)

__all__ = [
    'BenchmarkResult',
    'EventComparison',
    'benchmark_against_history',
    'benchmark_metric',
    'compare_events',
    'composite_percentile',
    'history_trend',
    'identify_outliers',
    'percentile_rank',
    'performance_rating',
    'rank',
    'top_performers',
    'DISTRIBUTION_PERCENTILES',
    'BenchmarkDistribution',
    'build_distribution',
    'build_distributions',
    'mean',
    'percentile',
    'population_std_dev',
]
