"""
Pytest fixtures for storage tests.
"""
from __future__ import annotations

import pytest

from messmass.storage import DatabaseConnection, InMemoryEventRepository, SQLEventRepository


def event_doc(event_id, event_date, partner="p1", **kwargs):
    doc = {
        '_id': event_id,
        'eventName': f"Event {event_id}",
        'eventDate': event_date,
        'hashtags': ['Derby'],
        'categorizedHashtags': {'location': ['budapest']},
        'stats': {'stadium': 100, 'merched': 10},
        'partner1Id': partner,
        'isHomeGame': True,
    }
    doc.update(kwargs)
    return doc


def chart_doc(chart_id, order=0, active=True):
    return {
        'chartId': chart_id,
        'title': chart_id.title(),
        'type': 'kpi',
        'order': order,
        'isActive': active,
        'elements': [{'id': 'v', 'label': 'Value', 'formula': '[stadium]'}],
    }


@pytest.fixture
def sample_events():
    return [
        event_doc("e1", "2024-01-10"),
        event_doc("e2", "2024-02-10"),
        event_doc("e3", "2024-03-10"),
        event_doc("x1", "2024-02-20", partner="p2"),
    ]


@pytest.fixture
def sample_charts():
    return [chart_doc("b", order=2), chart_doc("a", order=1), chart_doc("off", order=0, active=False)]


@pytest.fixture
def sql_connection(tmp_path):
    connection = DatabaseConnection(f"sqlite:///{tmp_path / 'events.db'}")
    yield connection
    connection.dispose()


@pytest.fixture(params=["memory", "sql"])
def repository(request, sample_events, sample_charts, tmp_path):
    """Both repository implementations, loaded with the same data."""
    if request.param == "memory":
        yield InMemoryEventRepository(sample_events, sample_charts)
        return
    connection = DatabaseConnection(f"sqlite:///{tmp_path / 'repo.db'}")
    repo = SQLEventRepository(connection)
    repo.create_schema()
    repo.add_events(sample_events)
    repo.add_chart_configurations(sample_charts)
    yield repo
    connection.dispose()
