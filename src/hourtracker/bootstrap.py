"""Composition root - builds the store, audit sink and services from settings."""

from collections.abc import AsyncGenerator, Generator
from contextlib import asynccontextmanager, contextmanager
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncEngine

from src.hourtracker.core.config import Settings, get_settings
from src.hourtracker.core.db import RecordStore, create_engine_from_settings, create_schema
from src.hourtracker.core.logging import (
    bind_request_context,
    bind_tenant_context,
    clear_request_context,
    get_logger,
    setup_logging,
)
from src.hourtracker.services.audit_service import AuditService, AuditSink, NullAuditSink
from src.hourtracker.services.time_entry_service import TimeEntryService

logger = get_logger(__name__)


@dataclass
class TimeTrackingCore:
    """Everything a transport layer needs, wired once per process."""

    settings: Settings
    engine: AsyncEngine
    store: RecordStore
    audit_sink: AuditSink
    time_entries: TimeEntryService

    async def create_schema(self) -> None:
        await create_schema(self.engine)

    @contextmanager
    def request_context(
        self,
        request_id: str | None,
        tenant_id: UUID | None = None,
        user_id: UUID | None = None,
    ) -> Generator[None]:
        """Scope log context to one inbound request.

        Transports wrap each request in this so every log line the core emits
        carries the correlation id and tenant. Context is cleared on exit.
        """
        clear_request_context()
        bind_request_context(request_id)
        if tenant_id is not None:
            bind_tenant_context(tenant_id, user_id)
        try:
            yield
        finally:
            clear_request_context()

    async def close(self) -> None:
        logger.info("Closing connections...")
        await self.store.dispose()


def create_time_tracking_core(
    settings: Settings | None = None,
    *,
    configure_logging: bool = True,
) -> TimeTrackingCore:
    """Build the core for ``settings`` (defaults to the cached environment settings).

    The engine and its pool are created here; nothing connects until first use.
    """
    settings = settings or get_settings()
    if configure_logging:
        setup_logging(settings.debug)

    engine = create_engine_from_settings(settings)
    store = RecordStore(engine, default_timeout=settings.operation_timeout_seconds)
    audit_sink: AuditSink = AuditService(store) if settings.audit_enabled else NullAuditSink()

    logger.info(f"Starting {settings.app_name}", env=settings.app_env, dialect=store.dialect_name)
    return TimeTrackingCore(
        settings=settings,
        engine=engine,
        store=store,
        audit_sink=audit_sink,
        time_entries=TimeEntryService(store, audit_sink, settings),
    )


@asynccontextmanager
async def time_tracking_core(
    settings: Settings | None = None,
    *,
    create_tables: bool = False,
    configure_logging: bool = True,
) -> AsyncGenerator[TimeTrackingCore]:
    """Core lifespan: build, optionally create tables, dispose the pool on exit."""
    core = create_time_tracking_core(settings, configure_logging=configure_logging)
    if create_tables:
        await core.create_schema()
    try:
        yield core
    finally:
        await core.close()
