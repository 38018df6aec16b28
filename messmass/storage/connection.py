"""
Database connection owned by the application.

The SQLAlchemy engine is created on first use and kept for the lifetime of
the DatabaseConnection; there is no module-level engine cache.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///messmass.db"
_TRUE_VALUES = {'1', 'true', 'yes', 'on'}


@dataclass(frozen=True)
class ConnectionConfig:
    database_url: Optional[str] = None
    echo: bool = False

    @classmethod
    def from_env(cls) -> ConnectionConfig:
        """Read MESSMASS_DATABASE_URL and MESSMASS_DATABASE_ECHO."""
        return cls(
            database_url=os.getenv("MESSMASS_DATABASE_URL"),
            echo=os.getenv("MESSMASS_DATABASE_ECHO", "").strip().lower() in _TRUE_VALUES,
        )

    @property
    def url(self) -> str:
        return self.database_url or DEFAULT_DATABASE_URL


class DatabaseConnection:
    """
    Lazily created SQLAlchemy engine.

    Args:
        url: SQLAlchemy database URL.
        echo: Log every SQL statement.
    """
    def __init__(self, url: str = DEFAULT_DATABASE_URL, echo: bool = False) -> None:
        self.url = url
        self.echo = echo
        self._engine: Optional[Engine] = None

    @classmethod
    def from_config(cls, config: ConnectionConfig) -> DatabaseConnection:
        return cls(config.url, echo=config.echo)

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self._engine = create_engine(self.url, echo=self.echo)
            logger.info(f"Created database engine for {self._engine.url.render_as_string(hide_password=True)}")
        return self._engine

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    def dispose(self) -> None:
        """Release pooled connections; the next use of engine creates a new one."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            logger.debug("Disposed database engine")

    def __enter__(self) -> DatabaseConnection:
        return self

    def __exit__(self, *exc_info) -> None:
        self.dispose()
