"""
Fan engagement metrics collector.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging

from messmass.metrics.base import MetricCollector, register_collector
from messmass.metrics.model import Metrics
from messmass.records import StatRecord, numeric_value, safe_divide, stat

logger = logging.getLogger(__name__)


def remote_fans(stats: StatRecord) -> float:
    """Remote fans, falling back to indoor + outdoor for older records."""
    value = numeric_value(stats, 'remoteFans')
    if value is not None:
        return value
    return stat(stats, 'indoor') + stat(stats, 'outdoor')


def total_fans(stats: StatRecord) -> float:
    """Remote plus stadium fans."""
    return remote_fans(stats) + stat(stats, 'stadium')


def all_images(stats: StatRecord) -> float:
    return stat(stats, 'remoteImages') + stat(stats, 'hostessImages') + stat(stats, 'selfies')


@register_collector
@dataclass
class FanMetricsCollector(MetricCollector):
    """
    Collects fan engagement metrics.

    Metrics collected:
        - Remote, stadium and total fans
        - Engagement rate (fans per attendee)
        - Remote/stadium image quality (images per fan)
        - Selfie rate
        - Core fan team (merched share of fans projected onto attendance)
    """
    collector_id: str = "fans"

    def collect(self, stats: StatRecord, existing_metrics: Metrics) -> Metrics:
        metrics = Metrics()
        remote = remote_fans(stats)
        stadium = stat(stats, 'stadium')
        total = remote + stadium
        attendees = stat(stats, 'eventAttendees')

        metrics.add_value('fans', 'remote_fans', remote)
        metrics.add_value('fans', 'stadium', stadium)
        metrics.add_value('fans', 'total_fans', total)
        metrics.add_value('fans', 'all_images', all_images(stats))
        metrics.add_rate('fans', 'engagement_rate', safe_divide(total, attendees))
        metrics.add_rate('fans', 'remote_quality', safe_divide(stat(stats, 'remoteImages'), remote))
        metrics.add_rate('fans', 'stadium_quality', safe_divide(stat(stats, 'hostessImages'), stadium))
        metrics.add_rate('fans', 'selfie_rate', safe_divide(stat(stats, 'selfies'), total))
        metrics.add_value('fans', 'core_fan_team', safe_divide(stat(stats, 'merched'), total) * attendees)
        return metrics
