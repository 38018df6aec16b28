from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from messmass.aggregation.breakdowns import home_advantage_text, home_away_split
from messmass.insights.model import EventSnapshot, Insight
from .base import BaseRule, register_rule


@register_rule
@dataclass
class HomeAdvantageRule(BaseRule):
    """
    Compare average fans at home and away over the current event and its
    history. Needs at least one home and one away event; advantages smaller
    than min_advantage (either way) are not reported.
    """
    rule_id: str = "home_advantage"
    min_advantage: float = 0.1
    confidence: float = 0.6

    def evaluate(self, current: EventSnapshot, history: Sequence[EventSnapshot]) -> List[Insight]:
        split = home_away_split(snapshot.summary for snapshot in [*history, current])
        text = home_advantage_text(split)
        advantage = split.fan_advantage
        if text is None or advantage is None or abs(advantage) < self.min_advantage:
            return []
        stronger = advantage > 0
        return [Insight(
            insight_id=self.insight_id(current),
            category='comparison',
            priority='low',
            title=f"{'Home' if stronger else 'Away'} games draw more fans",
            message=f"{text} ({split.home.count} home, {split.away.count} away events)",
            metrics=('fans',),
            confidence=self.confidence,
            impact='positive' if stronger else 'negative',
            recommendation=None if stronger else "Review home event activation against away fixtures",
            event_id=current.event_id,
            rule_id=self.rule_id,
        )]
