"""
Pytest fixtures for aggregation tests.
"""
from __future__ import annotations

from datetime import date

import pytest

from messmass.metrics.summary import EventSummary
from messmass.records import EventDocument


@pytest.fixture
def make_event():
    """Factory for EventDocuments."""
    def _create_event(event_id: str = "e1", event_date: date = date(2024, 3, 12), hashtags=(),
                      categorized=None, stats=None, **kwargs) -> EventDocument:
        return EventDocument(
            event_id=event_id,
            name=f"Event {event_id}",
            event_date=event_date,
            hashtags=tuple(hashtags),
            categorized_hashtags={k: tuple(v) for k, v in (categorized or {}).items()},
            stats=dict(stats or {}),
            **kwargs,
        )

    return _create_event


@pytest.fixture
def make_summary():
    """Factory for EventSummaries."""
    def _create_summary(event_id: str = "e1", event_date: date = date(2024, 3, 12), **kwargs) -> EventSummary:
        return EventSummary(event_id=event_id, event_date=event_date, **kwargs)

    return _create_summary


class RecordingRepository:
    """Repository double that records list_events calls."""

    def __init__(self, events=()):
        self.events = list(events)
        self.calls = []

    def list_events(self, **kwargs):
        self.calls.append(kwargs)
        return list(self.events)


@pytest.fixture
def recording_repository():
    return RecordingRepository
