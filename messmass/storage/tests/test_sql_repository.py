"""
Tests specific to SQLEventRepository and repository construction.
"""
from __future__ import annotations

from datetime import date

from sqlalchemy import insert

from messmass.records import EventDocument
from messmass.storage import ConnectionConfig, InMemoryEventRepository, SQLEventRepository, build_repository_from_env


class TestSQLEventRepository:
    """Tests for SQLEventRepository."""

    def test_replace_by_id(self, sql_connection):
        """Test that adding an event with an existing id replaces it."""
        repo = SQLEventRepository(sql_connection)
        repo.create_schema()
        repo.add_events([EventDocument(event_id="e1", name="Old", event_date=date(2024, 1, 1))])
        repo.add_events([EventDocument(event_id="e1", name="New", event_date=date(2024, 1, 2), stats={'selfies': 3})])
        events = repo.list_events()
        assert len(events) == 1
        assert events[0].name == "New"
        assert events[0].stats == {'selfies': 3}

    def test_empty_add(self, sql_connection):
        """Test that adding nothing stores nothing."""
        repo = SQLEventRepository(sql_connection)
        repo.create_schema()
        assert repo.add_events([]) == 0
        assert repo.add_chart_configurations([]) == 0

    def test_invalid_stored_chart_skipped(self, sql_connection, sample_charts):
        """Test that a stored configuration that fails validation is skipped."""
        repo = SQLEventRepository(sql_connection)
        repo.create_schema()
        repo.add_chart_configurations(sample_charts)
        broken = {'chartId': 'broken', 'type': 'pie', 'elements': []}
        with sql_connection.engine.begin() as conn:
            conn.execute(insert(repo.charts), [{"chart_id": "broken", "sort_order": 5, "is_active": True, "config": broken}])
        assert [c.chart_id for c in repo.list_chart_configurations()] == ["off", "a", "b"]

    def test_schema_is_idempotent(self, sql_connection):
        """Test that create_schema can run twice."""
        repo = SQLEventRepository(sql_connection)
        repo.create_schema()
        repo.create_schema()
        assert repo.list_events() == []


class TestBuildRepository:
    """Tests for build_repository_from_env."""

    def test_in_memory_without_url(self):
        """Test the fallback when no database URL is configured."""
        assert isinstance(build_repository_from_env(ConnectionConfig()), InMemoryEventRepository)

    def test_sql_with_url(self, tmp_path):
        """Test that a configured URL gives a ready SQL repository."""
        repo = build_repository_from_env(ConnectionConfig(database_url=f"sqlite:///{tmp_path / 'env.db'}"))
        assert isinstance(repo, SQLEventRepository)
        assert repo.list_events() == []
        repo.connection.dispose()

    def test_from_environment(self, monkeypatch):
        """Test reading the environment."""
        monkeypatch.delenv("MESSMASS_DATABASE_URL", raising=False)
        assert isinstance(build_repository_from_env(), InMemoryEventRepository)
