"""
API forms of analytics results.

Rates leave the library as fractions and are rendered here in percent-space
with one decimal; counts and currency become integers.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping

from messmass.aggregation import AggregateRecord, HomeAwaySplit, PartnerSummary, SeasonStats, SideStats
from messmass.aggregation.breakdowns import home_advantage_text
from messmass.benchmarks import BenchmarkDistribution
from messmass.charts.formatting import ValueFormat, api_number, api_stats
from messmass.metrics.model import MetricValue, Metrics
from messmass.metrics.summary import RATE_METRICS, EventSummary
from messmass.records import EventDocument, is_number


def aggregate_to_api(aggregate: AggregateRecord) -> Dict[str, Any]:
    data = aggregate.to_dict()
    data['stats'] = api_stats(aggregate.stats)
    return data


def _side_to_api(side: SideStats) -> Dict[str, Any]:
    return {
        'count': side.count,
        'avgFans': api_number(side.avg_fans),
        'avgMerched': api_number(side.avg_merched),
        'avgAdValue': api_number(side.avg_ad_value, 'currency'),
        'avgEngagement': api_number(side.avg_engagement, 'percentage'),
    }


def home_away_to_api(split: HomeAwaySplit) -> Dict[str, Any]:
    advantage = split.fan_advantage
    return {
        'home': _side_to_api(split.home),
        'away': _side_to_api(split.away),
        'fanAdvantage': None if advantage is None else api_number(advantage, 'percentage'),
        'advantageText': home_advantage_text(split),
    }


def _season_to_api(season: SeasonStats) -> Dict[str, Any]:
    return {
        'season': season.season,
        'totalEvents': season.total_events,
        'totalFans': api_number(season.total_fans),
        'avgFans': api_number(season.avg_fans),
        'avgEngagement': api_number(season.avg_engagement, 'percentage'),
    }


def _event_summary_to_api(summary: EventSummary) -> Dict[str, Any]:
    return {
        'eventId': summary.event_id,
        'eventDate': summary.event_date.isoformat(),
        'isHomeGame': summary.is_home_game,
        'opponentId': summary.opponent_id,
        'fans': api_number(summary.fans),
        'merched': api_number(summary.merched),
        'adValue': api_number(summary.ad_value, 'currency'),
        'engagementRate': api_number(summary.engagement_rate, 'percentage'),
        'penetrationRate': api_number(summary.penetration_rate, 'percentage'),
    }


def partner_summary_to_api(summary: PartnerSummary) -> Dict[str, Any]:
    return {
        'partnerId': summary.partner_id,
        'totalEvents': summary.total_events,
        'totalFans': api_number(summary.total_fans),
        'totalMerched': api_number(summary.total_merched),
        'totalAdValue': api_number(summary.total_ad_value, 'currency'),
        'avgEngagement': api_number(summary.avg_engagement, 'percentage'),
        'avgPenetration': api_number(summary.avg_penetration, 'percentage'),
        'dateRange': {
            'oldest': summary.earliest.isoformat(),
            'newest': summary.latest.isoformat(),
            'formatted': summary.date_range_label,
        },
        'seasons': [_season_to_api(season) for season in summary.seasons],
        'homeAway': home_away_to_api(summary.home_away),
        'events': [_event_summary_to_api(event) for event in summary.events],
    }


def distribution_to_api(distribution: BenchmarkDistribution) -> Dict[str, Any]:
    """Distribution with every statistic formatted like the metric itself."""
    value_format = 'percentage' if distribution.metric in RATE_METRICS else 'number'
    data = distribution.to_dict()
    for key in ('min', 'max', 'mean', 'median', 'stdDev'):
        data[key] = api_number(data[key], value_format)
    data['percentiles'] = {key: api_number(value, value_format) for key, value in data['percentiles'].items()}
    return data


def distributions_to_api(distributions: Mapping[str, BenchmarkDistribution], sample_size: int) -> Dict[str, Any]:
    return {
        'sampleSize': sample_size,
        'distributions': {metric: distribution_to_api(d) for metric, d in distributions.items()},
    }


def _camel_case(name: str) -> str:
    head, *rest = name.split('_')
    return head + ''.join(part.title() for part in rest)


def _metric_to_api(value: MetricValue, value_format: ValueFormat) -> Any:
    if isinstance(value, dict):
        return {key: _metric_to_api(item, value_format) for key, item in value.items()}
    if is_number(value):
        return api_number(value, value_format)
    return value


def event_metrics_to_api(event: EventDocument, metrics: Metrics) -> Dict[str, Any]:
    """Every collector's output for one event, formatted per value; failed collectors listed by id."""
    categories: Dict[str, Dict[str, Any]] = {}
    for category, name, value, value_format in metrics.items():
        categories.setdefault(category, {})[_camel_case(name)] = _metric_to_api(value, value_format)
    return {
        'eventId': event.event_id,
        'eventName': event.name,
        'eventDate': event.event_date.isoformat(),
        'metrics': categories,
        'failures': dict(metrics.failures),
    }
