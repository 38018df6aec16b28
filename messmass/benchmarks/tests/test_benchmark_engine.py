"""
Tests for the benchmark engine.
"""
from __future__ import annotations

import pytest

from messmass.benchmarks import (
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


class TestRanking:
    """Tests for percentile_rank, rank and performance_rating."""

    def test_percentile_rank(self):
        """Test the share strictly below a value."""
        assert percentile_rank(35, [10, 20, 30, 40]) == 75
        assert percentile_rank(10, [10, 20, 30, 40]) == 0
        assert percentile_rank(5, []) == 50

    def test_rank(self):
        """Test 1-based rank, highest first."""
        assert rank(30, [10, 20, 30, 40]) == 2
        assert rank(25, [10, 20, 30, 40]) == 5

    @pytest.mark.parametrize("pct,rating", [
        (95, 'excellent'), (90, 'excellent'), (75, 'good'), (40, 'average'), (25, 'below_average'), (24, 'poor'),
    ])
    def test_performance_rating(self, pct, rating):
        """Test the rating thresholds."""
        assert performance_rating(pct) == rating


class TestBenchmarkMetric:
    """Tests for benchmark_metric."""

    def test_above_average(self):
        """Test a value above the dataset mean."""
        result = benchmark_metric(40, [10, 20, 30, 40], 'fans')
        assert result.benchmark == 25
        assert result.percentile == 75
        assert result.rating == 'good'
        assert result.rank == 1
        assert result.total == 4
        assert result.relative_performance == pytest.approx(0.6)
        assert "60% above league average" in result.message
        assert result.to_dict()['relativePerformance'] == 60.0

    def test_empty_dataset(self):
        """Test the insufficient data result."""
        result = benchmark_metric(10, [], 'fans')
        assert result.rating == 'average'
        assert result.percentile == 50
        assert "Insufficient" in result.message

    def test_against_history(self):
        """Test that history benchmarking attaches a trend."""
        result = benchmark_against_history(20, [10, 10, 10], 'fans')
        assert result.trend == 'improving'
        assert result.percentile == 100
        assert "partner history" in result.message


class TestHistoryTrend:
    """Tests for history_trend."""

    def test_trends(self):
        """Test improving, declining and stable."""
        assert history_trend(12, [10, 10, 10]) == 'improving'
        assert history_trend(8, [10, 10, 10]) == 'declining'
        assert history_trend(10.5, [10, 10, 10]) == 'stable'

    def test_short_history(self):
        """Test that too little history is stable."""
        assert history_trend(100, [10, 10]) == 'stable'


class TestComparisons:
    """Tests for compare_events, identify_outliers and top_performers."""

    def test_compare_events(self):
        """Test per-metric winners with a 5% tie band."""
        comparison = compare_events({'fans': 110, 'merched': 100}, {'fans': 100, 'merched': 102}, ['fans', 'merched'])
        assert comparison.winners == {'fans': 'first', 'merched': 'tie'}
        assert comparison.first_score == 50
        assert comparison.second_score == 0
        assert comparison.overall_winner == 'first'
        assert comparison.deltas['fans']['absolute'] == 10

    def test_identify_outliers(self):
        """Test top and bottom performers by percentile rank."""
        values = {chr(ord('a') + i): float(i + 1) for i in range(10)}
        outliers = identify_outliers(values)
        assert outliers['top'] == [('j', 10.0, 90)]
        assert outliers['bottom'] == [('a', 1.0, 0), ('b', 2.0, 10)]

    def test_top_performers(self):
        """Test that at least one performer is returned."""
        assert top_performers({'a': 1, 'b': 3, 'c': 2}) == [('b', 3)]
        assert top_performers({}) == []

    def test_composite_percentile(self):
        """Test the mean percentile across metrics."""
        results = [benchmark_metric(40, [10, 20, 30, 40]), benchmark_metric(10, [10, 20, 30, 40])]
        assert composite_percentile(results) == 37.5
        assert composite_percentile([]) == 50.0
