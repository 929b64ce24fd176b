"""Database engine construction."""

import ssl
from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from src.hourtracker.core.config import Settings


def is_sqlite_url(database_url: str) -> bool:
    return make_url(database_url).get_backend_name() == "sqlite"


def _get_postgres_connect_args(settings: Settings) -> dict[str, Any]:
    """Get asyncpg connection arguments including SSL configuration."""
    connect_args: dict[str, Any] = {}

    ssl_mode = settings.database_ssl_mode
    if ssl_mode != "disable":
        ssl_context = ssl.create_default_context()
        if ssl_mode == "prefer" or ssl_mode == "require":
            ssl_context.check_hostname = False
            ssl_context.verify_mode = ssl.CERT_NONE
        elif ssl_mode in ("verify-ca", "verify-full"):
            ssl_context.check_hostname = ssl_mode == "verify-full"
            ssl_context.verify_mode = ssl.CERT_REQUIRED
        connect_args["ssl"] = ssl_context

    return connect_args


def _configure_sqlite(engine: AsyncEngine) -> None:
    """Make every SQLite transaction take the write lock up front.

    pysqlite's implicit BEGIN is disabled and replaced with BEGIN IMMEDIATE, so
    two writers can never both read the same state before one of them commits.
    Foreign keys are off by default in SQLite and are switched on per connection.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    """Create the async engine (and with it the connection pool) for ``settings``."""
    if is_sqlite_url(settings.database_url):
        engine = create_async_engine(
            settings.database_url,
            connect_args={"timeout": settings.database_busy_timeout_seconds},
        )
        _configure_sqlite(engine)
        return engine

    return create_async_engine(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_pre_ping=True,
        connect_args=_get_postgres_connect_args(settings),
    )
