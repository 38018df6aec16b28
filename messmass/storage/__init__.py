"""Event storage: database connection and repositories."""

from .connection import DEFAULT_DATABASE_URL, ConnectionConfig, DatabaseConnection
from .repository import (
    EventRepository,
    InMemoryEventRepository,
    SQLEventRepository,
    build_repository_from_env,
)

__all__ = [
    'DEFAULT_DATABASE_URL',
    'ConnectionConfig',
    'DatabaseConnection',
    'EventRepository',
    'InMemoryEventRepository',
    'SQLEventRepository',
    'build_repository_from_env',
]
