"""FastAPI application exposing aggregation, charts, benchmarks and insights."""

from .envelope import ApiError, NotFoundError, failure, install_exception_handlers, success
from .server import create_app

__all__ = [
    'ApiError',
    'NotFoundError',
    'failure',
    'install_exception_handlers',
    'success',
    'create_app',
]
