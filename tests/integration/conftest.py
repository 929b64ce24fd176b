"""Integration test fixtures backed by a real database.

Every test gets its own SQLite file so concurrent writers use genuinely
separate connections. Seed data comes from polyfactory via tests/helpers.py.
"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine

from src.hourtracker.core.config import Settings
from src.hourtracker.core.db import RecordStore, create_engine_from_settings, create_schema
from src.hourtracker.services import AuditService, TimeEntryService
from tests.helpers import Workspace, seed_workspace


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings pointing at a fresh SQLite file."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'hourtracker.db'}",
        database_busy_timeout_seconds=30,
        operation_timeout_seconds=30,
    )


@pytest.fixture
async def engine(test_settings: Settings) -> AsyncGenerator[AsyncEngine]:
    """Create test database engine with all tables."""
    test_engine = create_engine_from_settings(test_settings)
    await create_schema(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def store(engine: AsyncEngine, test_settings: Settings) -> RecordStore:
    return RecordStore(engine, default_timeout=test_settings.operation_timeout_seconds)


@pytest.fixture
def service(store: RecordStore, test_settings: Settings) -> TimeEntryService:
    """TimeEntryService with a real, store-backed audit sink."""
    return TimeEntryService(store, AuditService(store), test_settings)


@pytest.fixture
async def workspace(engine: AsyncEngine) -> Workspace:
    """Tenant A with users, client, project and task."""
    return await seed_workspace(engine)


@pytest.fixture
async def other_workspace(engine: AsyncEngine) -> Workspace:
    """Tenant B, fully separate from tenant A."""
    return await seed_workspace(engine)
