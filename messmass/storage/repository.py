"""
Event and chart configuration repositories.

Repositories only narrow by date window and partner; hashtag matching and
aggregation happen in Python on the returned EventDocuments.
"""
from __future__ import annotations

from datetime import date
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    Integer,
    MetaData,
    String,
    Table,
    delete,
    insert,
    select,
)
from sqlalchemy.engine import Row

from messmass.charts.model import ChartConfiguration, ChartValidationError
from messmass.records import EventDocument

from .connection import ConnectionConfig, DatabaseConnection

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 10

ChartInput = Union[ChartConfiguration, Mapping[str, Any]]


class EventRepository:
    """
    Interface for loading events and chart configurations.

    list_events returns events newest first; partner_history returns them
    oldest first.
    """

    def list_events(self, start: Optional[date] = None, end: Optional[date] = None,
                    partner_id: Optional[str] = None, limit: Optional[int] = None) -> List[EventDocument]:
        raise NotImplementedError

    def get_event(self, event_id: str) -> Optional[EventDocument]:
        raise NotImplementedError

    def partner_history(self, partner_id: str, before: date, limit: int = DEFAULT_HISTORY_LIMIT) -> List[EventDocument]:
        """The `limit` most recent events of a partner strictly before `before`, oldest first."""
        events = [e for e in self.list_events(partner_id=partner_id) if e.event_date < before]
        return list(reversed(events[:limit]))

    def list_chart_configurations(self, active_only: bool = False) -> List[ChartConfiguration]:
        raise NotImplementedError


def _newest_first(events: Iterable[EventDocument]) -> List[EventDocument]:
    return sorted(events, key=lambda e: (e.event_date, e.event_id), reverse=True)


def _in_window(event: EventDocument, start: Optional[date], end: Optional[date]) -> bool:
    if start is not None and event.event_date < start:
        return False
    if end is not None and event.event_date > end:
        return False
    return True


def _ordered_charts(configs: Iterable[ChartConfiguration], active_only: bool) -> List[ChartConfiguration]:
    configs = sorted(configs, key=lambda c: (c.order, c.chart_id))
    if active_only:
        configs = [c for c in configs if c.is_active]
    return configs


def _to_chart(config: ChartInput) -> ChartConfiguration:
    if isinstance(config, ChartConfiguration):
        return config
    return ChartConfiguration.from_dict(config)


class InMemoryEventRepository(EventRepository):
    def __init__(self, events: Iterable[EventDocument] = (), charts: Iterable[ChartInput] = ()) -> None:
        self._events: Dict[str, EventDocument] = {}
        self._charts: Dict[str, ChartConfiguration] = {}
        self.add_events(events)
        self.add_chart_configurations(charts)

    def add_events(self, events: Iterable[Union[EventDocument, Mapping[str, Any]]]) -> int:
        stored = set()
        for event in events:
            if not isinstance(event, EventDocument):
                event = EventDocument.from_dict(event)
            self._events[event.event_id] = event
            stored.add(event.event_id)
        return len(stored)

    def add_chart_configurations(self, configs: Iterable[ChartInput]) -> int:
        stored = set()
        for config in configs:
            chart = _to_chart(config)
            self._charts[chart.chart_id] = chart
            stored.add(chart.chart_id)
        return len(stored)

    def list_events(self, start: Optional[date] = None, end: Optional[date] = None,
                    partner_id: Optional[str] = None, limit: Optional[int] = None) -> List[EventDocument]:
        events = [
            e for e in self._events.values()
            if _in_window(e, start, end) and (partner_id is None or e.partner_id == partner_id)
        ]
        events = _newest_first(events)
        return events[:limit] if limit is not None else events

    def get_event(self, event_id: str) -> Optional[EventDocument]:
        return self._events.get(event_id)

    def list_chart_configurations(self, active_only: bool = False) -> List[ChartConfiguration]:
        return _ordered_charts(self._charts.values(), active_only)


class SQLEventRepository(EventRepository):
    """
    Events and chart configurations in two SQL tables.

    Tables:
      - events(id, event_name, event_date, partner_id, opponent_id,
        is_home_game, hashtags, categorized_hashtags, stats)
      - chart_configurations(chart_id, sort_order, is_active, config)

    Hashtag lists, stats and chart documents are JSON columns.
    """

    def __init__(self, connection: DatabaseConnection):
        self.connection = connection
        self.metadata = MetaData()
        self.events = Table(
            "events",
            self.metadata,
            Column("id", String(64), primary_key=True),
            Column("event_name", String(255), nullable=False, default=""),
            Column("event_date", Date, index=True, nullable=False),
            Column("partner_id", String(64), index=True),
            Column("opponent_id", String(64)),
            Column("is_home_game", Boolean),
            Column("hashtags", JSON, nullable=False),
            Column("categorized_hashtags", JSON, nullable=False),
            Column("stats", JSON, nullable=False),
        )
        self.charts = Table(
            "chart_configurations",
            self.metadata,
            Column("chart_id", String(128), primary_key=True),
            Column("sort_order", Integer, nullable=False, default=0),
            Column("is_active", Boolean, nullable=False, default=True),
            Column("config", JSON, nullable=False),
        )

    def create_schema(self) -> None:
        self.metadata.create_all(self.connection.engine, checkfirst=True)

    def add_events(self, events: Iterable[Union[EventDocument, Mapping[str, Any]]]) -> int:
        """Insert or replace events by id; a repeated id keeps its last document."""
        rows: Dict[str, Dict[str, Any]] = {}
        for event in events:
            if not isinstance(event, EventDocument):
                event = EventDocument.from_dict(event)
            rows[event.event_id] = {
                "id": event.event_id,
                "event_name": event.name,
                "event_date": event.event_date,
                "partner_id": event.partner_id,
                "opponent_id": event.opponent_id,
                "is_home_game": event.is_home_game,
                "hashtags": list(event.hashtags),
                "categorized_hashtags": {k: list(v) for k, v in event.categorized_hashtags.items()},
                "stats": dict(event.stats),
            }
        if not rows:
            return 0
        with self.connection.engine.begin() as conn:
            conn.execute(delete(self.events).where(self.events.c.id.in_(list(rows))))
            conn.execute(insert(self.events), list(rows.values()))
        logger.debug(f"Stored {len(rows)} events")
        return len(rows)

    def add_chart_configurations(self, configs: Iterable[ChartInput]) -> int:
        """Validate and insert or replace chart configurations by chart id; the last of a repeated id wins."""
        rows: Dict[str, Dict[str, Any]] = {}
        for config in configs:
            chart = _to_chart(config)
            rows[chart.chart_id] = {
                "chart_id": chart.chart_id,
                "sort_order": chart.order,
                "is_active": chart.is_active,
                "config": chart.to_dict(),
            }
        if not rows:
            return 0
        with self.connection.engine.begin() as conn:
            conn.execute(delete(self.charts).where(self.charts.c.chart_id.in_(list(rows))))
            conn.execute(insert(self.charts), list(rows.values()))
        logger.debug(f"Stored {len(rows)} chart configurations")
        return len(rows)

    def list_events(self, start: Optional[date] = None, end: Optional[date] = None,
                    partner_id: Optional[str] = None, limit: Optional[int] = None) -> List[EventDocument]:
        query = select(self.events)
        if start is not None:
            query = query.where(self.events.c.event_date >= start)
        if end is not None:
            query = query.where(self.events.c.event_date <= end)
        if partner_id is not None:
            query = query.where(self.events.c.partner_id == partner_id)
        query = query.order_by(self.events.c.event_date.desc(), self.events.c.id.desc())
        if limit is not None:
            query = query.limit(limit)
        with self.connection.engine.connect() as conn:
            rows = conn.execute(query).fetchall()
        return [self._row_to_event(row) for row in rows]

    def get_event(self, event_id: str) -> Optional[EventDocument]:
        query = select(self.events).where(self.events.c.id == event_id)
        with self.connection.engine.connect() as conn:
            row = conn.execute(query).first()
        return self._row_to_event(row) if row is not None else None

    def partner_history(self, partner_id: str, before: date, limit: int = DEFAULT_HISTORY_LIMIT) -> List[EventDocument]:
        query = (
            select(self.events)
            .where(self.events.c.partner_id == partner_id)
            .where(self.events.c.event_date < before)
            .order_by(self.events.c.event_date.desc(), self.events.c.id.desc())
            .limit(limit)
        )
        with self.connection.engine.connect() as conn:
            rows = conn.execute(query).fetchall()
        return [self._row_to_event(row) for row in reversed(rows)]

    def list_chart_configurations(self, active_only: bool = False) -> List[ChartConfiguration]:
        """Stored configurations by order; a document that no longer validates is logged and skipped."""
        query = select(self.charts).order_by(self.charts.c.sort_order, self.charts.c.chart_id)
        with self.connection.engine.connect() as conn:
            rows = conn.execute(query).fetchall()

        configs = []
        for row in rows:
            try:
                configs.append(ChartConfiguration.from_dict(row.config))
            except ChartValidationError as e:
                logger.error(f"Skipping invalid chart configuration {row.chart_id}: {e}", exc_info=True)
        return _ordered_charts(configs, active_only)

    @staticmethod
    def _row_to_event(row: Row) -> EventDocument:
        categorized = row.categorized_hashtags or {}
        return EventDocument(
            event_id=str(row.id),
            name=row.event_name or "",
            event_date=row.event_date,
            hashtags=tuple(row.hashtags or ()),
            categorized_hashtags={k: tuple(v) for k, v in categorized.items()},
            stats=dict(row.stats or {}),
            partner_id=row.partner_id,
            opponent_id=row.opponent_id,
            is_home_game=row.is_home_game,
        )


def build_repository_from_env(config: Optional[ConnectionConfig] = None) -> EventRepository:
    """
    SQL repository when MESSMASS_DATABASE_URL is set, otherwise an empty
    in-memory repository.
    """
    cfg = config or ConnectionConfig.from_env()
    if cfg.database_url:
        repository = SQLEventRepository(DatabaseConnection.from_config(cfg))
        repository.create_schema()
        return repository
    logger.warning("MESSMASS_DATABASE_URL not set; using an empty in-memory repository")
    return InMemoryEventRepository()
