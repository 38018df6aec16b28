"""Derived event metrics: collectors, pipeline and per-event summaries.

Built-in collectors:
    - FanMetricsCollector: fans, engagement rate, core fan team
    - MerchandiseCollector: penetration rate, items by type, potential sales
    - AdvertisingCollector: CPM-based ad value
    - DemographicsCollector: gender balance, youth index
    - VisitsCollector / BitlyCollector: channel mix and click metrics

Create custom collectors by subclassing MetricCollector and decorating the
class with @register_collector.
"""

from .base import MetricCollector, get_collector_registry, register_collector
from .model import Metrics
from .pipeline import MetricsConfig, MetricsPipeline
from .summary import BENCHMARK_METRICS, EventSummary, benchmark_value, summarize_event

__all__ = [
    'MetricCollector',
    'register_collector',
    'get_collector_registry',
    'Metrics',
    'MetricsConfig',
    'MetricsPipeline',
    'EventSummary',
    'summarize_event',
    'BENCHMARK_METRICS',
    'benchmark_value',
]
