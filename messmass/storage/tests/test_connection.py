"""
Tests for database connection handling.
"""
from __future__ import annotations

from messmass.storage import DEFAULT_DATABASE_URL, ConnectionConfig, DatabaseConnection


class TestConnectionConfig:
    """Tests for ConnectionConfig."""

    def test_from_env(self, monkeypatch):
        """Test reading URL and echo flag."""
        monkeypatch.setenv("MESSMASS_DATABASE_URL", "sqlite:///custom.db")
        monkeypatch.setenv("MESSMASS_DATABASE_ECHO", "Yes")
        config = ConnectionConfig.from_env()
        assert config.url == "sqlite:///custom.db"
        assert config.echo is True

    def test_defaults(self, monkeypatch):
        """Test the default URL when nothing is set."""
        monkeypatch.delenv("MESSMASS_DATABASE_URL", raising=False)
        monkeypatch.delenv("MESSMASS_DATABASE_ECHO", raising=False)
        config = ConnectionConfig.from_env()
        assert config.database_url is None
        assert config.url == DEFAULT_DATABASE_URL
        assert config.echo is False


class TestDatabaseConnection:
    """Tests for DatabaseConnection."""

    def test_lazy_engine(self, tmp_path):
        """Test that the engine is created on first use and disposed on exit."""
        with DatabaseConnection(f"sqlite:///{tmp_path / 'lazy.db'}") as connection:
            assert not connection.is_open
            engine = connection.engine
            assert connection.is_open
            assert connection.engine is engine
        assert not connection.is_open

    def test_from_config(self):
        """Test construction from a ConnectionConfig."""
        connection = DatabaseConnection.from_config(ConnectionConfig(database_url="sqlite://", echo=True))
        assert connection.url == "sqlite://"
        assert connection.echo is True
