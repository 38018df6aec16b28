"""
Pytest fixtures for API tests.
"""
from __future__ import annotations

from fastapi.testclient import TestClient
import pytest

from messmass.api import create_app
from messmass.storage import InMemoryEventRepository


def _event(event_id, event_date, stadium, hashtags, home=True, partner="p1"):
    return {
        '_id': event_id,
        'eventName': f"Event {event_id}",
        'eventDate': event_date,
        'hashtags': hashtags,
        'categorizedHashtags': {'location': ['budapest']},
        'stats': {'stadium': stadium, 'remoteFans': 50, 'merched': 20, 'eventAttendees': 1000, 'female': 30},
        'partner1Id': partner,
        'isHomeGame': home,
    }


@pytest.fixture
def repository():
    events = [
        _event("e1", "2024-01-10", 100, ['derby', 'cup']),
        _event("e2", "2024-02-10", 120, ['derby'], home=False),
        _event("e3", "2024-03-10", 80, ['league']),
    ]
    charts = [
        {'chartId': 'fans', 'title': 'Fans', 'type': 'kpi', 'order': 1,
         'elements': [{'id': 'total', 'label': 'Total fans', 'formula': '[TOTAL_FANS]'}]},
        {'chartId': 'off', 'title': 'Off', 'type': 'kpi', 'order': 2, 'isActive': False,
         'elements': [{'id': 'v', 'label': 'Value', 'formula': '[stadium]'}]},
    ]
    return InMemoryEventRepository(events, charts)


@pytest.fixture
def client(repository):
    with TestClient(create_app(repository)) as test_client:
        yield test_client
