from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

from messmass.benchmarks.percentile import mean
from messmass.insights.model import SNAPSHOT_METRICS, EventSnapshot, Insight, describe_value, metric_label
from .base import BaseRule, history_values, register_rule


def decline_streak(values: Sequence[float]) -> int:
    """Number of consecutive decreases at the end of values; an equal value ends the streak."""
    streak = 0
    for i in range(len(values) - 1, 0, -1):
        if values[i] < values[i - 1]:
            streak += 1
        else:
            break
    return streak


@register_rule
@dataclass
class TrendDropRule(BaseRule):
    """Flag metrics that dropped more than `threshold` below the trailing average of the last `window` events."""
    rule_id: str = "trend_drop"
    metrics: List[str] = field(default_factory=lambda: list(SNAPSHOT_METRICS[:4]))
    threshold: float = 0.3
    window: int = 3
    confidence: float = 0.75

    def evaluate(self, current: EventSnapshot, history: Sequence[EventSnapshot]) -> List[Insight]:
        if not history:
            return []
        insights = []
        for metric in self.metrics:
            trailing = mean(history_values(history, metric)[-self.window:])
            if trailing <= 0:
                continue
            value = current.value(metric)
            change = (value - trailing) / trailing
            if change >= -self.threshold:
                continue
            label = metric_label(metric)
            insights.append(Insight(
                insight_id=self.insight_id(current, metric),
                category='trend',
                priority='high',
                title=f"{label} dropped {abs(change) * 100:.0f}% against recent events",
                message=(f"{label} of {describe_value(metric, value)} is below the trailing average "
                         f"of {describe_value(metric, trailing)}"),
                metrics=(metric,),
                confidence=self.confidence,
                impact='negative',
                recommendation=f"Address the declining {label.lower()} before the next event",
                event_id=current.event_id,
                rule_id=self.rule_id,
            ))
        return insights


@register_rule
@dataclass
class ConsecutiveDeclineRule(BaseRule):
    """Flag a metric that fell at `min_streak` or more consecutive events, ending with the current one."""
    rule_id: str = "consecutive_decline"
    metric: str = "fans"
    min_streak: int = 3
    confidence: float = 0.9

    def evaluate(self, current: EventSnapshot, history: Sequence[EventSnapshot]) -> List[Insight]:
        values = history_values(history, self.metric) + [current.value(self.metric)]
        streak = decline_streak(values)
        if streak < self.min_streak:
            return []
        label = metric_label(self.metric)
        return [Insight(
            insight_id=self.insight_id(current, self.metric),
            category='trend',
            priority='critical',
            title=f"{label} declining {streak} events in a row",
            message=f"{label} decreased at each of the last {streak} events, to {describe_value(self.metric, values[-1])}",
            metrics=(self.metric,),
            confidence=self.confidence,
            impact='negative',
            recommendation=f"Investigate the root cause of the sustained {label.lower()} decline",
            event_id=current.event_id,
            rule_id=self.rule_id,
        )]
