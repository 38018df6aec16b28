"""Aggregation of event statistics and per-partner breakdowns."""

from .aggregator import (
    AggregateRecord,
    Aggregator,
    DateWindowFilter,
    HashtagFilter,
    PartnerFilter,
    aggregate_stats,
    build_aggregate,
    format_date_range,
)
from .breakdowns import (
    HomeAwaySplit,
    PartnerSummary,
    SeasonStats,
    SideStats,
    compare_seasons,
    detect_seasons,
    home_advantage_text,
    home_away_split,
    partner_summary,
    season_of,
)

__all__ = [
    'AggregateRecord',
    'Aggregator',
    'DateWindowFilter',
    'HashtagFilter',
    'PartnerFilter',
    'aggregate_stats',
    'build_aggregate',
    'format_date_range',
    'HomeAwaySplit',
    'PartnerSummary',
    'SeasonStats',
    'SideStats',
    'compare_seasons',
    'detect_seasons',
    'home_advantage_text',
    'home_away_split',
    'partner_summary',
    'season_of',
]
