"""
Tests for MetricsPipeline and MetricsConfig.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date

import pytest

from messmass.metrics import (
    BENCHMARK_METRICS,
    MetricCollector,
    Metrics,
    MetricsConfig,
    MetricsPipeline,
    benchmark_value,
    get_collector_registry,
    summarize_event,
)
from messmass.metrics.collectors import FanMetricsCollector
from messmass.records import EventDocument


@dataclass
class ExplodingCollector(MetricCollector):
    collector_id: str = "exploding"

    def collect(self, stats, existing_metrics):
        raise RuntimeError("boom")


class TestRegistry:
    """Tests for the collector registry."""

    def test_builtin_collectors_registered(self):
        """Test that importing the pipeline registers every built-in collector in order."""
        registry = get_collector_registry()
        assert list(registry)[:6] == ['fans', 'merchandise', 'advertising', 'demographics', 'visits', 'bitly']

    def test_collector_requires_id(self):
        """Test that a collector without an id is rejected."""
        with pytest.raises(ValueError):
            ExplodingCollector(collector_id="")


class TestMetricsPipeline:
    """Tests for MetricsPipeline."""

    def test_default_pipeline(self, sample_stats):
        """Test that the default pipeline loads every registered collector."""
        pipeline = MetricsPipeline()
        metrics = pipeline.run(sample_stats)
        assert metrics.get_value('fans', 'total_fans') == 500
        assert metrics.get_value('advertising', 'total_value') == pytest.approx(9074.5)

    def test_failing_collector_isolated(self, sample_stats):
        """Test that a failing collector is recorded and the others still run."""
        pipeline = MetricsPipeline(collectors=[ExplodingCollector(), FanMetricsCollector()])
        metrics = pipeline.run(sample_stats)
        assert pipeline.failures == {'exploding': 'boom'}
        assert metrics.get_value('fans', 'total_fans') == 500

    def test_disabled_collector_skipped(self, sample_stats):
        """Test that collectors disabled in config do not run."""
        pipeline = MetricsPipeline(config=MetricsConfig(collectors={'advertising': False}))
        metrics = pipeline.run(sample_stats)
        assert 'advertising' not in metrics.categories
        assert metrics.get_value('fans', 'total_fans') == 500


class TestMetricsConfig:
    """Tests for MetricsConfig."""

    def test_defaults_enabled(self):
        """Test that unknown collectors are enabled."""
        assert MetricsConfig().is_enabled('anything')

    def test_load_from_yaml(self, tmp_path):
        """Test reading the metrics.collectors section."""
        path = tmp_path / "metrics.yaml"
        path.write_text("metrics:\n  collectors:\n    demographics:\n      enabled: false\n    bitly: false\n",
                        encoding="utf-8")
        config = MetricsConfig(config_file=path)
        assert not config.is_enabled('demographics')
        assert not config.is_enabled('bitly')
        assert config.is_enabled('fans')

    def test_from_dict(self):
        """Test creation from a dictionary."""
        config = MetricsConfig.from_dict({'collectors': {'visits': False}})
        assert not config.is_enabled('visits')


class TestMetricsModel:
    """Tests for the Metrics container."""

    def test_merge_keeps_formats(self):
        """Test that merging combines categories and their value formats."""
        a = Metrics()
        a.add_value('fans', 'total_fans', 10)
        b = Metrics()
        b.add_rate('fans', 'engagement_rate', 0.5)
        b.add_amount('advertising', 'total_value', 120.0)
        a.merge(b)
        assert a.to_dict() == {'fans': {'total_fans': 10, 'engagement_rate': 0.5},
                               'advertising': {'total_value': 120.0}}
        assert a.format_of('fans', 'total_fans') == 'number'
        assert a.format_of('fans', 'engagement_rate') == 'percentage'
        assert a.format_of('advertising', 'total_value') == 'currency'
        assert a.get_value('missing', 'x', 0) == 0

    def test_items(self):
        """Test iteration over every value with its format."""
        metrics = Metrics()
        metrics.add_value('bitly', 'top_country', 'HU')
        metrics.add_rate('demographics', 'age_shares', {'genAlpha': 0.25})
        assert list(metrics.items()) == [
            ('bitly', 'top_country', 'HU', 'number'),
            ('demographics', 'age_shares', {'genAlpha': 0.25}, 'percentage'),
        ]

    def test_run_records_failures_on_result(self, sample_stats):
        """Test that a run's collector failures travel with its Metrics."""
        metrics = MetricsPipeline(collectors=[ExplodingCollector(), FanMetricsCollector()]).run(sample_stats)
        assert metrics.failures == {'exploding': 'boom'}
        assert not metrics.is_complete
        assert MetricsPipeline(collectors=[FanMetricsCollector()]).run(sample_stats).is_complete


class TestEventSummary:
    """Tests for per-event summaries."""

    def test_summarize_event(self, sample_stats):
        """Test the headline metrics of one event."""
        event = EventDocument(event_id='e1', name='E', event_date=date(2024, 1, 1), stats=sample_stats,
                              is_home_game=True, opponent_id='p2')
        summary = summarize_event(event)
        assert summary.fans == 500
        assert summary.merched == 100
        assert summary.engagement_rate == pytest.approx(0.1)
        assert summary.penetration_rate == pytest.approx(0.2)
        assert summary.attendees == 5000
        assert summary.is_home_game is True
        assert benchmark_value(summary, 'adValue') == pytest.approx(9074.5)

    def test_unknown_benchmark_metric(self, sample_stats):
        """Test that unknown benchmark metrics are rejected."""
        event = EventDocument(event_id='e1', name='E', event_date=date(2024, 1, 1), stats=sample_stats)
        with pytest.raises(ValueError):
            benchmark_value(summarize_event(event), 'nope')
        assert set(BENCHMARK_METRICS) == {'fans', 'merched', 'adValue', 'engagement', 'penetration', 'coreFanTeam'}
