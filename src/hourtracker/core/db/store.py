"""Record store - sessions and transactions over the shared connection pool."""

import asyncio
import hashlib
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from src.hourtracker.core.exceptions import StorageError
from src.hourtracker.core.logging import get_logger

logger = get_logger(__name__)


def owner_lock_key(tenant_id: UUID, user_id: UUID) -> int:
    """Derive a stable signed 64-bit advisory lock key for one interval owner."""
    digest = hashlib.blake2b(f"{tenant_id}:{user_id}".encode(), digest_size=8).digest()
    return int.from_bytes(digest, "big", signed=True)


class RecordStore:
    """Executes statements and transactions against the backing database.

    Holds no domain logic and no per-request state: the engine's connection
    pool is the only shared resource, and every operation checks a connection
    out for the duration of one session.
    """

    def __init__(self, engine: AsyncEngine, default_timeout: float | None = None):
        self.engine = engine
        self.default_timeout = default_timeout
        self._session_factory = async_sessionmaker(
            bind=engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @property
    def dialect_name(self) -> str:
        return self.engine.dialect.name

    @asynccontextmanager
    async def _guard(self, timeout: float | None, operation: str) -> AsyncGenerator[None]:
        """Bound the block by a deadline and surface infrastructure failures as StorageError."""
        deadline = timeout if timeout is not None else self.default_timeout
        try:
            async with asyncio.timeout(deadline):
                yield
        except TimeoutError as e:
            logger.error("Storage operation timed out", operation=operation, timeout=deadline)
            raise StorageError("Storage operation timed out") from e
        except SQLAlchemyError as e:
            logger.error("Storage operation failed", operation=operation, error=str(e))
            raise StorageError("Storage operation failed") from e

    @asynccontextmanager
    async def deadline(self, timeout: float | None = None) -> AsyncGenerator[None]:
        """Bound a multi-step operation (several sessions) by one deadline."""
        async with self._guard(timeout, "operation"):
            yield

    @asynccontextmanager
    async def session(self, *, timeout: float | None = None) -> AsyncGenerator[AsyncSession]:
        """Session for read paths. Nothing is committed; the transaction is rolled back on exit."""
        async with self._guard(timeout, "session"):
            async with self._session_factory() as session:
                yield session

    @asynccontextmanager
    async def transaction(self, *, timeout: float | None = None) -> AsyncGenerator[AsyncSession]:
        """Session wrapped in one transaction.

        Commits when the block exits normally; rolls back in full when it raises,
        including when the deadline expires mid-transaction.
        """
        async with self._guard(timeout, "transaction"):
            async with self._session_factory() as session:
                async with session.begin():
                    yield session

    async def lock_owner(self, session: AsyncSession, tenant_id: UUID, user_id: UUID) -> None:
        """Serialise writers for one (tenant, user) until the current transaction ends.

        PostgreSQL takes a transaction-scoped advisory lock. SQLite transactions
        already start with BEGIN IMMEDIATE (see engine setup), which holds the
        database write lock, so there is nothing further to acquire.
        """
        if self.dialect_name == "postgresql":
            await session.execute(
                text("SELECT pg_advisory_xact_lock(:key)"),
                {"key": owner_lock_key(tenant_id, user_id)},
            )

    async def ping(self) -> bool:
        """Return True when a trivial query succeeds."""
        try:
            async with self.session() as session:
                await session.execute(text("SELECT 1"))
        except StorageError:
            return False
        return True

    async def dispose(self) -> None:
        """Close every pooled connection. Call during shutdown."""
        await self.engine.dispose()
