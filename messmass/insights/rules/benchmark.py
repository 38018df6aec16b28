from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

from messmass.benchmarks.engine import benchmark_against_history
from messmass.insights.model import SNAPSHOT_METRICS, EventSnapshot, Insight, metric_label
from .base import BaseRule, history_values, register_rule


@register_rule
@dataclass
class BenchmarkRule(BaseRule):
    """
    Rank the current event against the partner's own history.

    A percentile rank at or above high_percentile is a strength (medium);
    at or below low_percentile a weakness (high).
    """
    rule_id: str = "benchmark"
    metrics: List[str] = field(default_factory=lambda: list(SNAPSHOT_METRICS[:4]))
    high_percentile: int = 90
    low_percentile: int = 25
    min_history: int = 3
    confidence: float = 0.8

    def evaluate(self, current: EventSnapshot, history: Sequence[EventSnapshot]) -> List[Insight]:
        if len(history) < self.min_history:
            return []
        insights = []
        for metric in self.metrics:
            label = metric_label(metric)
            result = benchmark_against_history(current.value(metric), history_values(history, metric), label)
            if result.percentile >= self.high_percentile:
                priority, impact = 'medium', 'positive'
                title = f"{label} ranks in the top of recent events ({result.percentile}th percentile)"
                recommendation = f"Document what worked for {label.lower()} and repeat it"
            elif result.percentile <= self.low_percentile:
                priority, impact = 'high', 'negative'
                title = f"{label} ranks near the bottom of recent events ({result.percentile}th percentile)"
                recommendation = f"Make {label.lower()} a priority improvement area"
            else:
                continue
            insights.append(Insight(
                insight_id=self.insight_id(current, metric),
                category='benchmark',
                priority=priority,
                title=title,
                message=result.message,
                metrics=(metric,),
                confidence=self.confidence,
                impact=impact,
                recommendation=recommendation,
                event_id=current.event_id,
                rule_id=self.rule_id,
            ))
        return insights
