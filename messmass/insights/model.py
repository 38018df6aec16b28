from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Literal, Optional, Sequence, Tuple

from messmass.charts.formatting import format_value
from messmass.metrics.pipeline import MetricsPipeline
from messmass.metrics.summary import EventSummary, summarize_event
from messmass.records import EventDocument

Priority = Literal['critical', 'high', 'medium', 'low']
Category = Literal['anomaly', 'trend', 'benchmark', 'opportunity', 'comparison']
Impact = Literal['positive', 'negative', 'neutral']

PRIORITY_RANK: Dict[str, int] = {
    'critical': 4,
    'high': 3,
    'medium': 2,
    'low': 1,
}

# Metrics insight rules read from an EventSnapshot
SNAPSHOT_METRICS: Tuple[str, ...] = ('fans', 'merched', 'ad_value', 'engagement_rate', 'penetration_rate')

METRIC_LABELS: Dict[str, str] = {
    'fans': 'Fans',
    'merched': 'Merched fans',
    'ad_value': 'Ad value',
    'engagement_rate': 'Engagement rate',
    'penetration_rate': 'Merchandise penetration',
}

_METRIC_FORMATS: Dict[str, str] = {
    'ad_value': 'currency',
    'engagement_rate': 'percentage',
    'penetration_rate': 'percentage',
}


def metric_label(metric: str) -> str:
    return METRIC_LABELS.get(metric, metric)


def describe_value(metric: str, value: float) -> str:
    """Format a snapshot metric value for insight text."""
    return format_value(value, _METRIC_FORMATS.get(metric, 'number'))


@dataclass(frozen=True)
class EventSnapshot:
    """
    Derived metric values of one event, as read by insight rules.

    Attributes:
        summary (EventSummary): Headline metrics computed by the metrics pipeline.
    """
    summary: EventSummary

    @property
    def event_id(self) -> str:
        return self.summary.event_id

    @property
    def event_date(self) -> date:
        return self.summary.event_date

    @property
    def is_home_game(self) -> Optional[bool]:
        return self.summary.is_home_game

    def value(self, metric: str) -> float:
        if metric not in SNAPSHOT_METRICS:
            raise KeyError(f"Unknown snapshot metric: {metric}")
        return self.summary.value(metric)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            'eventId': self.event_id,
            'eventDate': self.event_date.isoformat(),
            'isHomeGame': self.is_home_game,
        }
        data.update({metric: self.value(metric) for metric in SNAPSHOT_METRICS})
        return data


def snapshot_event(event: EventDocument, pipeline: Optional[MetricsPipeline] = None) -> EventSnapshot:
    return EventSnapshot(summary=summarize_event(event, pipeline))


@dataclass(frozen=True)
class Insight:
    """
    One prioritized observation about an event.

    Attributes:
        insight_id (str): Deterministic id: rule, metric and event.
        category (Category): anomaly, trend, benchmark, opportunity or comparison.
        priority (Priority): critical, high, medium or low.
        title (str): Short headline.
        message (str): Explanation.
        metrics (Tuple[str, ...]): Metrics involved.
        confidence (float): Reliability in [0, 1].
        impact (Impact): positive, negative or neutral.
        recommendation (Optional[str]): Suggested action.
        event_id (str): Event the insight is about.
        rule_id (str): Rule that produced it.
    """
    insight_id: str
    category: Category
    priority: Priority
    title: str
    message: str
    metrics: Tuple[str, ...] = ()
    confidence: float = 0.5
    impact: Impact = 'neutral'
    recommendation: Optional[str] = None
    event_id: str = ''
    rule_id: str = ''

    def __post_init__(self) -> None:
        if self.priority not in PRIORITY_RANK:
            raise ValueError(f"Unknown insight priority: {self.priority}")
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Insight confidence must be within [0, 1], got {self.confidence}")

    @property
    def priority_rank(self) -> int:
        return PRIORITY_RANK[self.priority]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.insight_id,
            'category': self.category,
            'priority': self.priority,
            'title': self.title,
            'message': self.message,
            'metrics': list(self.metrics),
            'confidence': self.confidence,
            'impact': self.impact,
            'recommendation': self.recommendation,
            'eventId': self.event_id,
            'ruleId': self.rule_id,
        }


def sort_insights(insights: Iterable[Insight]) -> List[Insight]:
    """
    Order by priority rank, then confidence, both descending.

    The sort is stable: insights that tie on both keep their input order.
    """
    return sorted(insights, key=lambda i: (-i.priority_rank, -i.confidence))


# Score deductions for non-positive insights, and the bonus per positive benchmark insight
SCORE_PENALTIES: Dict[str, int] = {'critical': 15, 'high': 7}
SCORE_BENCHMARK_BONUS = 5


def overall_score(insights: Iterable[Insight]) -> int:
    """
    Composite 0-100 score of an event from its insights.

    Starts at 100, deducts 15 per critical and 7 per high insight that is not
    positive, adds 5 per positive benchmark insight, then clamps to [0, 100].
    """
    score = 100
    for insight in insights:
        if insight.impact != 'positive':
            score -= SCORE_PENALTIES.get(insight.priority, 0)
        elif insight.category == 'benchmark':
            score += SCORE_BENCHMARK_BONUS
    return max(0, min(100, score))


def summarize_insights(insights: Sequence[Insight], top: int = 3) -> Dict[str, Any]:
    """
    Counts by priority and category, plus the titles of the leading
    positive (strengths) and negative (weaknesses) insights.
    """
    by_priority = {priority: 0 for priority in PRIORITY_RANK}
    by_category: Dict[str, int] = {}
    for insight in insights:
        by_priority[insight.priority] += 1
        by_category[insight.category] = by_category.get(insight.category, 0) + 1
    return {
        **by_priority,
        'total': len(insights),
        'overallScore': overall_score(insights),
        'byCategory': by_category,
        'topStrengths': [i.title for i in insights if i.impact == 'positive'][:top],
        'topWeaknesses': [i.title for i in insights if i.impact == 'negative'][:top],
    }


@dataclass
class InsightReport:
    event_id: str
    event_date: date
    insights: List[Insight] = field(default_factory=list)
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def summary(self) -> Dict[str, Any]:
        return summarize_insights(self.insights)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'eventId': self.event_id,
            'eventDate': self.event_date.isoformat(),
            'generatedAt': self.generated_at.isoformat(),
            'insights': [insight.to_dict() for insight in self.insights],
            'summary': self.summary,
        }
