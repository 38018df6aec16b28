"""messmass package: Exposes the event analytics core (aggregation, charts, benchmarks, insights, storage)."""

from messmass.aggregation import AggregateRecord, Aggregator, DateWindowFilter, HashtagFilter, PartnerFilter
from messmass.benchmarks import BenchmarkDistribution, build_distribution, build_distributions, percentile
from messmass.charts import NA, ChartCalculationResult, ChartConfiguration, Formula, calculate_charts
from messmass.hashtags import FilterValidationError, normalize_filter_terms
from messmass.insights import Insight, InsightConfig, InsightPipeline
from messmass.metrics import MetricsPipeline
from messmass.records import EventDocument, safe_divide
from messmass.storage import DatabaseConnection, EventRepository, InMemoryEventRepository, SQLEventRepository

__all__ = [
    "AggregateRecord",
    "Aggregator",
    "BenchmarkDistribution",
    "ChartCalculationResult",
    "ChartConfiguration",
    "DatabaseConnection",
    "DateWindowFilter",
    "EventDocument",
    "EventRepository",
    "FilterValidationError",
    "Formula",
    "HashtagFilter",
    "InMemoryEventRepository",
    "Insight",
    "InsightConfig",
    "InsightPipeline",
    "MetricsPipeline",
    "NA",
    "PartnerFilter",
    "SQLEventRepository",
    "build_distribution",
    "build_distributions",
    "calculate_charts",
    "normalize_filter_terms",
    "percentile",
    "safe_divide",
]
