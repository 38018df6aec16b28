"""
Aggregation of event statistics over a matched set of events.

Events are selected by a predicate (hashtags, partner, or date window) and
their StatRecords are combined into one AggregateRecord: counters are summed,
rate fields are averaged.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
import logging
from typing import Any, Dict, Iterable, List, Literal, Optional, Sequence, Tuple

from messmass.hashtags import FilterValidationError, matches_all, matches_any, normalize_filter_terms
from messmass.records import AVERAGED_FIELDS, EventDocument, StatRecord, is_number

logger = logging.getLogger(__name__)

MatchMode = Literal['and', 'or']


def format_date_range(earliest: date, latest: date) -> str:
    """Human-readable label: a single date, or 'earliest - latest'."""
    if earliest == latest:
        return earliest.isoformat()
    return f"{earliest.isoformat()} - {latest.isoformat()}"


def aggregate_stats(records: Iterable[StatRecord]) -> StatRecord:
    """
    Combine StatRecords into one.

    Numeric fields are summed, except AVERAGED_FIELDS, which take the mean over
    the records that carry them. Non-numeric values are ignored. A key absent
    from every record is absent from the result. Keys are returned sorted.
    """
    sums: Dict[str, Any] = {}
    counts: Dict[str, int] = {}
    for record in records:
        for key, value in record.items():
            if not is_number(value):
                continue
            sums[key] = sums.get(key, 0) + value
            counts[key] = counts.get(key, 0) + 1

    result: StatRecord = {}
    for key in sorted(sums):
        if key in AVERAGED_FIELDS:
            result[key] = sums[key] / counts[key]
        else:
            result[key] = sums[key]
    return result


@dataclass(frozen=True)
class HashtagFilter:
    """
    Hashtag predicate.

    Terms are normalized on construction, so an empty filter is rejected
    before any storage access.
    """
    terms: Tuple[str, ...]
    match: MatchMode = 'and'

    def __post_init__(self) -> None:
        if self.match not in ('and', 'or'):
            raise FilterValidationError(f"Unknown match mode: {self.match!r}")
        object.__setattr__(self, 'terms', tuple(normalize_filter_terms(self.terms)))

    def matches(self, event: EventDocument) -> bool:
        if self.match == 'or':
            return matches_any(self.terms, event)
        return matches_all(self.terms, event)

    def query_hints(self) -> Dict[str, Any]:
        return {}

    def describe(self) -> str:
        joiner = ' + ' if self.match == 'and' else ' | '
        return 'Filter: ' + joiner.join(f"#{term}" for term in self.terms)


@dataclass(frozen=True)
class PartnerFilter:
    """Events owned by one partner."""
    partner_id: str

    def __post_init__(self) -> None:
        if not self.partner_id or not str(self.partner_id).strip():
            raise FilterValidationError("Partner id is required")

    def matches(self, event: EventDocument) -> bool:
        return event.partner_id == self.partner_id

    def query_hints(self) -> Dict[str, Any]:
        return {'partner_id': self.partner_id}

    def describe(self) -> str:
        return f"Partner: {self.partner_id}"


@dataclass(frozen=True)
class DateWindowFilter:
    """Events whose date falls within [start, end]; one bound may be open."""
    start: Optional[date] = None
    end: Optional[date] = None

    def __post_init__(self) -> None:
        if self.start is None and self.end is None:
            raise FilterValidationError("A date window needs a start or an end")
        if self.start and self.end and self.start > self.end:
            raise FilterValidationError(f"Date window start {self.start} is after end {self.end}")

    def matches(self, event: EventDocument) -> bool:
        if self.start and event.event_date < self.start:
            return False
        if self.end and event.event_date > self.end:
            return False
        return True

    def query_hints(self) -> Dict[str, Any]:
        return {'start': self.start, 'end': self.end}

    def describe(self) -> str:
        start = self.start.isoformat() if self.start else '...'
        end = self.end.isoformat() if self.end else '...'
        return f"Window: {start} - {end}"


@dataclass(frozen=True)
class AggregateRecord:
    """
    Summed/averaged statistics of a matched set of events.

    Attributes:
        stats (StatRecord): Aggregated counters.
        event_count (int): Number of matched events.
        earliest (date): Earliest matched event date.
        latest (date): Latest matched event date.
        event_ids (Tuple[str, ...]): Matched event ids, newest first.
        name (str): Display name of the aggregate.
        filter_terms (Tuple[str, ...]): Normalized hashtag terms, when filtered by hashtags.
    """
    stats: StatRecord
    event_count: int
    earliest: date
    latest: date
    event_ids: Tuple[str, ...] = ()
    name: str = ''
    filter_terms: Tuple[str, ...] = ()

    @property
    def date_range_label(self) -> str:
        return format_date_range(self.earliest, self.latest)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'eventName': self.name,
            'stats': dict(self.stats),
            'eventCount': self.event_count,
            'eventIds': list(self.event_ids),
            'hashtags': list(self.filter_terms),
            'dateRange': {
                'oldest': self.earliest.isoformat(),
                'newest': self.latest.isoformat(),
                'formatted': self.date_range_label,
            },
        }


def build_aggregate(events: Sequence[EventDocument], name: str = '', filter_terms: Sequence[str] = ()) -> Optional[AggregateRecord]:
    """
    Aggregate an already-matched list of events.

    Returns:
        Optional[AggregateRecord]: None when events is empty.
    """
    if not events:
        return None
    ordered = sorted(events, key=lambda e: (e.event_date, e.event_id), reverse=True)
    return AggregateRecord(
        stats=aggregate_stats(e.stats for e in ordered),
        event_count=len(ordered),
        earliest=ordered[-1].event_date,
        latest=ordered[0].event_date,
        event_ids=tuple(e.event_id for e in ordered),
        name=name,
        filter_terms=tuple(filter_terms),
    )


class Aggregator:
    """
    Aggregates events from a repository by predicate.

    The repository is only consulted after the predicate has been built, so
    filter validation errors never reach storage.
    """
    def __init__(self, repository: Any = None) -> None:
        self.repository = repository

    def aggregate(self, predicate: Any, events: Optional[Iterable[EventDocument]] = None) -> Optional[AggregateRecord]:
        """
        Aggregate events matching predicate.

        Args:
            predicate: HashtagFilter, PartnerFilter or DateWindowFilter.
            events: Candidate events; fetched from the repository when omitted.

        Returns:
            Optional[AggregateRecord]: None when nothing matched.
        """
        if events is None:
            if self.repository is None:
                raise ValueError("Aggregator has no repository and no events were given")
            events = self.repository.list_events(**predicate.query_hints())

        matched: List[EventDocument] = [e for e in events if predicate.matches(e)]
        if not matched:
            logger.info(f"No events matched {predicate.describe()}")
            return None

        logger.debug(f"{len(matched)} events matched {predicate.describe()}")
        terms = predicate.terms if isinstance(predicate, HashtagFilter) else ()
        return build_aggregate(matched, name=predicate.describe(), filter_terms=terms)

    def by_hashtags(self, terms: Any, match: MatchMode = 'and', events: Optional[Iterable[EventDocument]] = None) -> Optional[AggregateRecord]:
        return self.aggregate(HashtagFilter(terms, match), events)

    def by_partner(self, partner_id: str, events: Optional[Iterable[EventDocument]] = None) -> Optional[AggregateRecord]:
        return self.aggregate(PartnerFilter(partner_id), events)

    def by_date_window(self, start: Optional[date] = None, end: Optional[date] = None,
                       events: Optional[Iterable[EventDocument]] = None) -> Optional[AggregateRecord]:
        return self.aggregate(DateWindowFilter(start, end), events)
