"""
Visit source and Bitly click metrics collectors.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging

from messmass.metrics.base import MetricCollector, register_collector
from messmass.metrics.collectors.fans import total_fans
from messmass.metrics.model import Metrics
from messmass.records import StatRecord, numeric_value, safe_divide, stat

logger = logging.getLogger(__name__)

VISIT_SOURCES = {
    'qr_code': 'visitQrCode',
    'short_url': 'visitShortUrl',
    'web': 'visitWeb',
    'social': 'socialVisit',
}


@register_collector
@dataclass
class VisitsCollector(MetricCollector):
    """Collects visit channel mix and conversion metrics."""
    collector_id: str = "visits"

    def collect(self, stats: StatRecord, existing_metrics: Metrics) -> Metrics:
        metrics = Metrics()
        by_source = {name: stat(stats, key) for name, key in VISIT_SOURCES.items()}
        total = sum(by_source.values())
        fans = existing_metrics.get_value('fans', 'total_fans')
        if fans is None:
            fans = total_fans(stats)

        metrics.add_value('visits', 'by_source', by_source)
        metrics.add_value('visits', 'total_visits', total)
        metrics.add_rate('visits', 'fan_conversion', safe_divide(fans, total))
        metrics.add_rate('visits', 'proposition_effectiveness', safe_divide(
            stat(stats, 'eventValuePropositionPurchases'), stat(stats, 'eventValuePropositionVisited')))
        return metrics


@register_collector
@dataclass
class BitlyCollector(MetricCollector):
    """Collects link click metrics; contributes nothing when no clicks are recorded."""
    collector_id: str = "bitly"

    def collect(self, stats: StatRecord, existing_metrics: Metrics) -> Metrics:
        metrics = Metrics()
        clicks = numeric_value(stats, 'bitlyTotalClicks')
        if not clicks:
            return metrics

        mobile = stat(stats, 'bitlyMobileClicks')
        metrics.add_value('bitly', 'clicks', clicks)
        metrics.add_value('bitly', 'unique_clicks', stat(stats, 'bitlyUniqueClicks'))
        metrics.add_value('bitly', 'clicks_by_device', {
            'mobile': mobile,
            'desktop': stat(stats, 'bitlyDesktopClicks'),
            'tablet': stat(stats, 'bitlyTabletClicks'),
        })
        metrics.add_rate('bitly', 'click_rate', safe_divide(clicks, stat(stats, 'eventAttendees')))
        metrics.add_rate('bitly', 'mobile_rate', safe_divide(mobile, clicks))
        top_country = stats.get('bitlyTopCountry')
        if isinstance(top_country, str) and top_country:
            metrics.add_value('bitly', 'top_country', top_country)
        return metrics
