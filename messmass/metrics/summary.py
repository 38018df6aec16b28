"""
Per-event metric summaries.

An EventSummary is the small set of headline numbers (fans, merchandise,
ad value, engagement) that breakdowns, benchmarks and insights compare
across events.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
import logging
from typing import Any, Callable, Dict, Optional

from messmass.metrics.model import Metrics
from messmass.metrics.pipeline import MetricsPipeline
from messmass.records import EventDocument, StatRecord, stat

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EventSummary:
    """
    Headline metrics of one event.

    Attributes:
        event_id (str): Event identifier.
        event_date (date): Event date.
        is_home_game (Optional[bool]): Home/away flag, None when unknown.
        fans (float): Total fans.
        merched (float): Fans with merchandise.
        ad_value (float): Total advertising value.
        engagement_rate (float): Fans per attendee, as a fraction.
        penetration_rate (float): Merched share of fans, as a fraction.
        core_fan_team (float): Core fan team estimate.
        attendees (float): Event attendees.
        opponent_id (Optional[str]): Opposing partner.
    """
    event_id: str
    event_date: date
    is_home_game: Optional[bool] = None
    fans: float = 0.0
    merched: float = 0.0
    ad_value: float = 0.0
    engagement_rate: float = 0.0
    penetration_rate: float = 0.0
    core_fan_team: float = 0.0
    attendees: float = 0.0
    opponent_id: Optional[str] = None

    def value(self, metric: str) -> float:
        """Look up a headline metric by name."""
        try:
            return float(getattr(self, metric))
        except AttributeError:
            raise KeyError(f"Unknown summary metric: {metric}") from None


def summary_from_metrics(event_id: str, event_date: date, stats: StatRecord, metrics: Metrics,
                         is_home_game: Optional[bool] = None, opponent_id: Optional[str] = None) -> EventSummary:
    return EventSummary(
        event_id=event_id,
        event_date=event_date,
        is_home_game=is_home_game,
        fans=metrics.get_value('fans', 'total_fans', 0.0),
        merched=metrics.get_value('merchandise', 'total_merched', 0.0),
        ad_value=metrics.get_value('advertising', 'total_value', 0.0),
        engagement_rate=metrics.get_value('fans', 'engagement_rate', 0.0),
        penetration_rate=metrics.get_value('merchandise', 'penetration_rate', 0.0),
        core_fan_team=metrics.get_value('fans', 'core_fan_team', 0.0),
        attendees=stat(stats, 'eventAttendees'),
        opponent_id=opponent_id,
    )


def summarize_event(event: EventDocument, pipeline: Optional[MetricsPipeline] = None) -> EventSummary:
    """
    Build the EventSummary of a stored event.

    Args:
        event: Event document.
        pipeline: Metrics pipeline to use; a default one is built when omitted.
    """
    pipeline = pipeline or MetricsPipeline()
    metrics = pipeline.run(event.stats)
    return summary_from_metrics(
        event.event_id, event.event_date, event.stats, metrics,
        is_home_game=event.is_home_game, opponent_id=event.opponent_id,
    )


# Benchmark metric name -> extractor over an EventSummary
BENCHMARK_METRICS: Dict[str, Callable[[EventSummary], float]] = {
    'fans': lambda s: s.fans,
    'merched': lambda s: s.merched,
    'adValue': lambda s: s.ad_value,
    'engagement': lambda s: s.engagement_rate,
    'penetration': lambda s: s.penetration_rate,
    'coreFanTeam': lambda s: s.core_fan_team,
}

# Metrics holding fractions; formatted as percentages at the API boundary.
RATE_METRICS = frozenset({'engagement', 'penetration'})


def benchmark_value(summary: EventSummary, metric: str) -> float:
    try:
        extractor = BENCHMARK_METRICS[metric]
    except KeyError:
        raise ValueError(f"Unknown benchmark metric: {metric}") from None
    return extractor(summary)


def summary_to_dict(summary: EventSummary) -> Dict[str, Any]:
    return {
        'eventId': summary.event_id,
        'eventDate': summary.event_date.isoformat(),
        'isHomeGame': summary.is_home_game,
        'opponentId': summary.opponent_id,
        'fans': summary.fans,
        'merched': summary.merched,
        'adValue': summary.ad_value,
        'engagementRate': summary.engagement_rate,
        'penetrationRate': summary.penetration_rate,
        'coreFanTeam': summary.core_fan_team,
    }
