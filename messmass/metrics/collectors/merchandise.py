"""
Merchandise metrics collector.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging

from messmass.metrics.base import MetricCollector, register_collector
from messmass.metrics.collectors.fans import total_fans
from messmass.metrics.model import Metrics
from messmass.records import StatRecord, safe_divide, stat

logger = logging.getLogger(__name__)

MERCH_TYPES = ('jersey', 'scarf', 'flags', 'baseballCap', 'other')

# Assumed spend per fan not yet carrying merchandise.
POTENTIAL_SALE_VALUE = 10


@register_collector
@dataclass
class MerchandiseCollector(MetricCollector):
    """
    Collects merchandise metrics.

    Metrics collected:
        - Total merched fans and penetration rate
        - Items by type and diversity index (number of types sold)
        - High-value (jersey, scarf) vs casual (cap, other) fans
        - Potential sales from fans without merchandise
    """
    collector_id: str = "merchandise"
    potential_sale_value: float = POTENTIAL_SALE_VALUE

    def collect(self, stats: StatRecord, existing_metrics: Metrics) -> Metrics:
        metrics = Metrics()
        merched = stat(stats, 'merched')
        fans = existing_metrics.get_value('fans', 'total_fans')
        if fans is None:
            fans = total_fans(stats)

        by_type = {name: stat(stats, name) for name in MERCH_TYPES}

        metrics.add_value('merchandise', 'total_merched', merched)
        metrics.add_rate('merchandise', 'penetration_rate', safe_divide(merched, fans))
        metrics.add_value('merchandise', 'by_type', by_type)
        metrics.add_rate('merchandise', 'merch_to_attendee', safe_divide(merched, stat(stats, 'eventAttendees')))
        metrics.add_value('merchandise', 'diversity_index', sum(1 for count in by_type.values() if count > 0))
        metrics.add_value('merchandise', 'high_value_fans', by_type['jersey'] + by_type['scarf'])
        metrics.add_value('merchandise', 'casual_fans', by_type['baseballCap'] + by_type['other'])
        metrics.add_amount('merchandise', 'potential_sales', max(fans - merched, 0) * self.potential_sale_value)
        return metrics
