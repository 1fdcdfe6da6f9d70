from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

import psycopg
from psycopg.conninfo import make_conninfo
from psycopg_pool import ConnectionPool

from catalog_ingest.config.settings import Settings
from catalog_ingest.logging.logger import Log

_pool: ConnectionPool | None = None


def build_conninfo(settings: Settings) -> str:
    """libpq connection string; the application name shows up in pg_stat_activity."""
    return make_conninfo(
        host=settings.db_host,
        port=settings.db_port,
        dbname=settings.db_database,
        user=settings.db_username,
        password=settings.db_password,
        application_name="catalog-ingest",
    )


def init_pool(settings: Settings) -> None:
    """Open the process-wide pool.

    Every dispatcher thread holds a connection while it writes, so the pool
    is never smaller than the dispatcher plus one for the request handlers.
    """
    global _pool  # noqa: PLW0603
    max_size = max(settings.db_pool_max_size, settings.dispatch_max_workers + 1)
    _pool = ConnectionPool(
        build_conninfo(settings),
        min_size=settings.db_pool_min_size,
        max_size=max_size,
        name="catalog-ingest",
    )
    Log.debug(f"Connection pool opened (max_size={max_size})")


def close_pool() -> None:
    global _pool  # noqa: PLW0603
    if _pool is not None:
        _pool.close()
        _pool = None


@contextmanager
def get_connection() -> Generator[psycopg.Connection[Any], None, None]:
    """Yield a pooled connection. Callers commit their own writes."""
    if _pool is None:
        raise RuntimeError("Connection pool not initialized. Call init_pool() first.")
    with _pool.connection() as conn:
        yield conn
