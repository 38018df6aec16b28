"""
Pytest fixtures for insight tests.
"""
from __future__ import annotations

from datetime import date, timedelta

import pytest

from messmass.insights import EventSnapshot
from messmass.metrics.summary import EventSummary


@pytest.fixture
def make_snapshot():
    """Factory for EventSnapshots."""
    def _create_snapshot(event_id: str = "current", event_date: date = date(2024, 6, 1), **kwargs) -> EventSnapshot:
        return EventSnapshot(summary=EventSummary(event_id=event_id, event_date=event_date, **kwargs))

    return _create_snapshot


@pytest.fixture
def make_history(make_snapshot):
    """Factory for a history of snapshots, oldest first, one week apart before 2024-06-01."""
    def _create_history(metric: str = "fans", values=(), **kwargs):
        start = date(2024, 6, 1) - timedelta(weeks=len(values))
        return [
            make_snapshot(f"h{i}", start + timedelta(weeks=i), **{metric: value}, **kwargs)
            for i, value in enumerate(values)
        ]

    return _create_history
