"""
Advertising value metrics collector.

Ad value follows a CPM business model: shared images reach an assumed
audience valued at the social organic CPM, proposition visits are valued as
email contacts.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging

from messmass.metrics.base import MetricCollector, register_collector
from messmass.metrics.collectors.fans import all_images, total_fans
from messmass.metrics.model import Metrics
from messmass.records import StatRecord, safe_divide, stat

logger = logging.getLogger(__name__)

AD_MODEL_CONSTANTS = {
    'email_optin_cpm': 4.87,
    'email_addon_cpm': 1.07,
    'stadium_ad_cpm': 6.00,
    'social_organic_cpm': 14.50,
    'youth_premium': 2.14,
    'social_shares_per_image': 20,
    'avg_views_per_share': 300,
    'email_open_rate': 0.35,
    'stadium_ad_exposure_ratio': 0.2,
}


def social_value(images: float) -> float:
    """images x shares x views x (CPM / 1000)."""
    c = AD_MODEL_CONSTANTS
    return images * c['social_shares_per_image'] * c['avg_views_per_share'] * (c['social_organic_cpm'] / 1000)


def email_value(proposition_visits: float) -> float:
    c = AD_MODEL_CONSTANTS
    return proposition_visits * c['email_open_rate'] * c['email_addon_cpm']


def ad_value(stats: StatRecord) -> float:
    """Total advertising value of a StatRecord (social + email)."""
    return social_value(all_images(stats)) + email_value(stat(stats, 'eventValuePropositionVisited'))


@register_collector
@dataclass
class AdvertisingCollector(MetricCollector):
    """Collects advertising value metrics."""
    collector_id: str = "advertising"

    def collect(self, stats: StatRecord, existing_metrics: Metrics) -> Metrics:
        metrics = Metrics()
        images = all_images(stats)
        visits = stat(stats, 'eventValuePropositionVisited')
        purchases = stat(stats, 'eventValuePropositionPurchases')
        fans = existing_metrics.get_value('fans', 'total_fans')
        if fans is None:
            fans = total_fans(stats)

        social = social_value(images)
        email = email_value(visits)
        stadium = stat(stats, 'eventAttendees') / 1000 * AD_MODEL_CONSTANTS['stadium_ad_cpm'] \
            * AD_MODEL_CONSTANTS['stadium_ad_exposure_ratio']
        total = social + email

        metrics.add_value('advertising', 'total_impressions', images * AD_MODEL_CONSTANTS['avg_views_per_share'])
        metrics.add_amount('advertising', 'social_value', social)
        metrics.add_amount('advertising', 'email_value', email)
        metrics.add_amount('advertising', 'stadium_value', stadium)
        metrics.add_amount('advertising', 'total_value', total)
        metrics.add_rate('advertising', 'email_conversion', safe_divide(purchases, visits))
        metrics.add_amount('advertising', 'ad_value_per_fan', safe_divide(total, fans))
        return metrics
