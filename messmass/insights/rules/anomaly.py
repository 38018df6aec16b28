from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from messmass.benchmarks.percentile import mean, percentile, population_std_dev
from messmass.insights.model import SNAPSHOT_METRICS, EventSnapshot, Insight, describe_value, metric_label
from messmass.records import safe_divide
from .base import BaseRule, history_values, register_rule


def z_score(value: float, history: Sequence[float]) -> Optional[float]:
    """Standard deviations from the history mean; None without spread."""
    if len(history) < 2:
        return None
    std_dev = population_std_dev(history)
    if std_dev == 0:
        return None
    return (value - mean(history)) / std_dev


def iqr_deviation(value: float, history: Sequence[float], multiplier: float = 1.5) -> Optional[float]:
    """
    Distance outside the Tukey fences, in interquartile ranges.

    Returns 0.0 inside the fences (q1 - m*IQR, q3 + m*IQR), a negative number
    below and a positive number above. None for fewer than four values or a
    zero IQR.
    """
    if len(history) < 4:
        return None
    ordered = sorted(history)
    q1 = percentile(ordered, 25)
    q3 = percentile(ordered, 75)
    iqr = q3 - q1
    if iqr == 0:
        return None
    if value < q1 - multiplier * iqr:
        return (value - q1) / iqr
    if value > q3 + multiplier * iqr:
        return (value - q3) / iqr
    return 0.0


def percent_change(value: float, baseline: float) -> Optional[float]:
    """Relative change from baseline, as a fraction; None for a zero baseline."""
    if baseline == 0:
        return None
    return (value - baseline) / baseline


@register_rule
@dataclass
class AnomalyRule(BaseRule):
    """
    Flag metrics that deviate sharply from the partner's history.

    Three detectors vote: z-score, IQR fences and percent change from the
    previous event. A metric is flagged when at least two agree, or one when
    the history is shorter than consensus_min_history. Confidence is the
    share of applicable detectors that agree.
    """
    rule_id: str = "anomaly"
    metrics: List[str] = field(default_factory=lambda: list(SNAPSHOT_METRICS[:4]))
    z_threshold: float = 2.0
    z_critical: float = 3.0
    iqr_multiplier: float = 1.5
    pct_change_threshold: float = 0.3
    pct_change_critical: float = 0.5
    consensus_min_history: int = 4

    def evaluate(self, current: EventSnapshot, history: Sequence[EventSnapshot]) -> List[Insight]:
        if not history:
            return []
        insights = []
        for metric in self.metrics:
            insight = self._check_metric(current, history_values(history, metric), metric)
            if insight is not None:
                insights.append(insight)
        return insights

    def _check_metric(self, current: EventSnapshot, values: List[float], metric: str) -> Optional[Insight]:
        value = current.value(metric)
        z = z_score(value, values)
        iqr = iqr_deviation(value, values, self.iqr_multiplier)
        change = percent_change(value, values[-1])

        votes = [
            None if z is None else abs(z) >= self.z_threshold,
            None if iqr is None else iqr != 0,
            None if change is None else abs(change) >= self.pct_change_threshold,
        ]
        applicable = [vote for vote in votes if vote is not None]
        agreeing = sum(1 for vote in applicable if vote)
        required = 2 if len(values) >= self.consensus_min_history else 1
        if not applicable or agreeing < required:
            return None

        critical = ((z is not None and abs(z) > self.z_critical)
                    or (change is not None and abs(change) > self.pct_change_critical))
        baseline = mean(values)
        positive = value > baseline
        label = metric_label(metric)
        direction = 'above' if positive else 'below'
        relative = abs(safe_divide(value - baseline, baseline)) * 100

        message = (f"{label} of {describe_value(metric, value)} is {relative:.0f}% {direction} "
                   f"the recent average of {describe_value(metric, baseline)}")
        if z is not None:
            message += f" ({abs(z):.1f} standard deviations)"
        if positive:
            recommendation = f"Analyze what drove the exceptional {label.lower()} for replication"
        else:
            recommendation = f"Investigate why {label.lower()} fell significantly below normal levels"

        return Insight(
            insight_id=self.insight_id(current, metric),
            category='anomaly',
            priority='critical' if critical else 'high',
            title=f"{label} shows an unusual {'rise' if positive else 'drop'}",
            message=message,
            metrics=(metric,),
            confidence=agreeing / len(applicable),
            impact='positive' if positive else 'negative',
            recommendation=recommendation,
            event_id=current.event_id,
            rule_id=self.rule_id,
        )
