"""
Demographics metrics collector.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging

from messmass.metrics.base import MetricCollector, register_collector
from messmass.metrics.model import Metrics
from messmass.records import DEMOGRAPHIC_FIELDS, StatRecord, safe_divide, stat

logger = logging.getLogger(__name__)

AGE_GROUPS = ('genAlpha', 'genYZ', 'genX', 'boomer')


@register_collector
@dataclass
class DemographicsCollector(MetricCollector):
    """
    Collects demographic metrics.

    Metrics collected:
        - Gender counts and balance (|female - male| / total, lower is more balanced)
        - Age group counts and shares
        - Youth index ((genAlpha + genYZ) / all age groups)
        - Diversity index (number of non-empty segments)
    """
    collector_id: str = "demographics"

    def collect(self, stats: StatRecord, existing_metrics: Metrics) -> Metrics:
        metrics = Metrics()
        female = stat(stats, 'female')
        male = stat(stats, 'male')
        age_counts = {name: stat(stats, name) for name in AGE_GROUPS}
        total_age = sum(age_counts.values())

        metrics.add_value('demographics', 'gender', {'female': female, 'male': male})
        metrics.add_rate('demographics', 'gender_balance', safe_divide(abs(female - male), female + male))
        metrics.add_value('demographics', 'age_groups', age_counts)
        metrics.add_rate('demographics', 'age_shares', {
            name: safe_divide(count, total_age) for name, count in age_counts.items()
        })
        metrics.add_rate('demographics', 'youth_index',
                         safe_divide(age_counts['genAlpha'] + age_counts['genYZ'], total_age))
        metrics.add_value('demographics', 'diversity_index',
                          sum(1 for name in DEMOGRAPHIC_FIELDS if stat(stats, name) > 0))
        return metrics
