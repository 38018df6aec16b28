"""
Pytest fixtures for top-level module tests.
"""
from __future__ import annotations

from datetime import date

import pytest

from messmass.records import EventDocument


@pytest.fixture
def make_event():
    """Factory for EventDocuments."""
    def _create_event(event_id: str = "e1", event_date: date = date(2024, 3, 12), hashtags=(),
                      categorized=None, stats=None, **kwargs) -> EventDocument:
        return EventDocument(
            event_id=event_id,
            name=kwargs.pop("name", f"Event {event_id}"),
            event_date=event_date,
            hashtags=tuple(hashtags),
            categorized_hashtags={k: tuple(v) for k, v in (categorized or {}).items()},
            stats=dict(stats or {}),
            **kwargs,
        )

    return _create_event
