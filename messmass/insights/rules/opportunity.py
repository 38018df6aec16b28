from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from messmass.charts.formatting import format_value
from messmass.insights.model import EventSnapshot, Insight
from .base import BaseRule, register_rule

# Uplift estimate: 20% more merched fans spending 30 each
UPLIFT_SHARE = 0.2
UPLIFT_SPEND = 30


@register_rule
@dataclass
class MerchOpportunityRule(BaseRule):
    """Low merchandise penetration at a well-attended event."""
    rule_id: str = "merch_opportunity"
    penetration_threshold: float = 0.4
    min_fans: int = 500
    confidence: float = 0.7

    def evaluate(self, current: EventSnapshot, history: Sequence[EventSnapshot]) -> List[Insight]:
        fans = current.value('fans')
        penetration = current.value('penetration_rate')
        if fans <= self.min_fans or penetration >= self.penetration_threshold:
            return []
        share = format_value(penetration, 'percentage')
        uplift = format_value(fans * UPLIFT_SHARE * UPLIFT_SPEND, 'currency')
        return [Insight(
            insight_id=self.insight_id(current),
            category='opportunity',
            priority='medium',
            title=f"Merchandise penetration at {share}: growth potential",
            message=f"Only {share} of {format_value(fans)} fans wore merchandise.",
            metrics=('penetration_rate', 'fans'),
            confidence=self.confidence,
            impact='neutral',
            recommendation=f"Improve merchandise visibility and variety. Potential revenue uplift: {uplift}",
            event_id=current.event_id,
            rule_id=self.rule_id,
        )]


@register_rule
@dataclass
class AdValueOpportunityRule(BaseRule):
    """High engagement that is not matched by advertising value."""
    rule_id: str = "ad_value_opportunity"
    engagement_threshold: float = 0.05
    ad_value_threshold: float = 50000
    confidence: float = 0.6

    def evaluate(self, current: EventSnapshot, history: Sequence[EventSnapshot]) -> List[Insight]:
        engagement = current.value('engagement_rate')
        ad_value = current.value('ad_value')
        if engagement <= self.engagement_threshold or ad_value >= self.ad_value_threshold:
            return []
        return [Insight(
            insight_id=self.insight_id(current),
            category='opportunity',
            priority='low',
            title=f"High engagement ({format_value(engagement, 'percentage')}) but low ad value",
            message=f"Strong fan engagement is not fully monetized: ad value is {format_value(ad_value, 'currency')}.",
            metrics=('engagement_rate', 'ad_value'),
            confidence=self.confidence,
            impact='neutral',
            recommendation="Optimize ad placements and sponsor visibility",
            event_id=current.event_id,
            rule_id=self.rule_id,
        )]
