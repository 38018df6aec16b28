"""
Per-partner breakdowns: seasons, home/away split and partner summary.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from messmass.aggregation.aggregator import format_date_range
from messmass.charts.formatting import round_half_up
from messmass.metrics.summary import EventSummary
from messmass.records import safe_divide

logger = logging.getLogger(__name__)

# Seasons start in August.
SEASON_START_MONTH = 8


def season_of(event_date: date) -> str:
    """Season label, e.g. '2024/2025' for any date from Aug 2024 to Jul 2025."""
    if event_date.month >= SEASON_START_MONTH:
        return f"{event_date.year}/{event_date.year + 1}"
    return f"{event_date.year - 1}/{event_date.year}"


def detect_seasons(dates: Iterable[date]) -> List[str]:
    """Distinct seasons of the given dates, newest first."""
    return sorted({season_of(d) for d in dates}, reverse=True)


def _mean(values: Sequence[float]) -> float:
    return safe_divide(sum(values), len(values))


@dataclass(frozen=True)
class SeasonStats:
    season: str
    total_events: int
    total_fans: float
    avg_fans: float
    avg_engagement: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'season': self.season,
            'totalEvents': self.total_events,
            'totalFans': self.total_fans,
            'avgFans': self.avg_fans,
            'avgEngagement': self.avg_engagement,
        }


def compare_seasons(summaries: Iterable[EventSummary]) -> List[SeasonStats]:
    """Per-season totals and averages, newest season first."""
    by_season: Dict[str, List[EventSummary]] = {}
    for summary in summaries:
        by_season.setdefault(season_of(summary.event_date), []).append(summary)

    results = []
    for season in sorted(by_season, reverse=True):
        events = by_season[season]
        fans = [e.fans for e in events]
        results.append(SeasonStats(
            season=season,
            total_events=len(events),
            total_fans=sum(fans),
            avg_fans=_mean(fans),
            avg_engagement=_mean([e.engagement_rate for e in events]),
        ))
    return results


@dataclass(frozen=True)
class SideStats:
    """Averages for one side (home or away) of a partner's events."""
    count: int = 0
    avg_fans: float = 0.0
    avg_merched: float = 0.0
    avg_ad_value: float = 0.0
    avg_engagement: float = 0.0

    @classmethod
    def from_summaries(cls, summaries: Sequence[EventSummary]) -> SideStats:
        if not summaries:
            return cls()
        return cls(
            count=len(summaries),
            avg_fans=_mean([s.fans for s in summaries]),
            avg_merched=_mean([s.merched for s in summaries]),
            avg_ad_value=_mean([s.ad_value for s in summaries]),
            avg_engagement=_mean([s.engagement_rate for s in summaries]),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'count': self.count,
            'avgFans': self.avg_fans,
            'avgMerched': self.avg_merched,
            'avgAdValue': self.avg_ad_value,
            'avgEngagement': self.avg_engagement,
        }


@dataclass(frozen=True)
class HomeAwaySplit:
    home: SideStats = field(default_factory=SideStats)
    away: SideStats = field(default_factory=SideStats)

    @property
    def fan_advantage(self) -> Optional[float]:
        """Relative home advantage in average fans, as a fraction; None unless both sides have events."""
        if not self.home.count or not self.away.count:
            return None
        return safe_divide(self.home.avg_fans - self.away.avg_fans, self.away.avg_fans)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'home': self.home.to_dict(),
            'away': self.away.to_dict(),
            'fanAdvantage': self.fan_advantage,
            'advantageText': home_advantage_text(self),
        }


def home_away_split(summaries: Iterable[EventSummary]) -> HomeAwaySplit:
    """Split events by home/away flag; events without a flag are ignored."""
    home, away = [], []
    for summary in summaries:
        if summary.is_home_game is True:
            home.append(summary)
        elif summary.is_home_game is False:
            away.append(summary)
    return HomeAwaySplit(home=SideStats.from_summaries(home), away=SideStats.from_summaries(away))


def format_signed_percent(fraction: float) -> str:
    """Fraction as a signed percentage with one decimal, e.g. 0.25 -> '+25.0%'."""
    percent = round_half_up(fraction * 100, 1)
    sign = '+' if percent >= 0 else '-'
    return f"{sign}{abs(percent):.1f}%"


def home_advantage_text(split: HomeAwaySplit) -> Optional[str]:
    """
    Describe the home advantage in average fans.

    Returns:
        Optional[str]: e.g. 'Home games average +25.0% more fans than away games.',
        or None when either side has no events.
    """
    advantage = split.fan_advantage
    if advantage is None:
        return None
    direction = 'more' if advantage >= 0 else 'fewer'
    return f"Home games average {format_signed_percent(advantage)} {direction} fans than away games."


@dataclass(frozen=True)
class PartnerSummary:
    """
    Totals and breakdowns of one partner's events.

    Rates (avg_engagement, avg_penetration) are fractions.
    """
    partner_id: str
    total_events: int
    total_fans: float
    total_merched: float
    total_ad_value: float
    avg_engagement: float
    avg_penetration: float
    earliest: date
    latest: date
    seasons: List[SeasonStats] = field(default_factory=list)
    home_away: HomeAwaySplit = field(default_factory=HomeAwaySplit)
    events: List[EventSummary] = field(default_factory=list)

    @property
    def date_range_label(self) -> str:
        return format_date_range(self.earliest, self.latest)


def partner_summary(partner_id: str, summaries: Sequence[EventSummary]) -> Optional[PartnerSummary]:
    """
    Summarize a partner's events.

    Returns:
        Optional[PartnerSummary]: None when the partner has no events.
    """
    if not summaries:
        return None
    ordered = sorted(summaries, key=lambda s: (s.event_date, s.event_id), reverse=True)
    return PartnerSummary(
        partner_id=partner_id,
        total_events=len(ordered),
        total_fans=sum(s.fans for s in ordered),
        total_merched=sum(s.merched for s in ordered),
        total_ad_value=sum(s.ad_value for s in ordered),
        avg_engagement=_mean([s.engagement_rate for s in ordered]),
        avg_penetration=_mean([s.penetration_rate for s in ordered]),
        earliest=ordered[-1].event_date,
        latest=ordered[0].event_date,
        seasons=compare_seasons(ordered),
        home_away=home_away_split(ordered),
        events=ordered,
    )
