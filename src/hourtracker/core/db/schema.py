"""Table creation for the fixed entity set."""

from sqlalchemy.ext.asyncio import AsyncEngine
from sqlmodel import SQLModel

# Registers every table on SQLModel.metadata
import src.hourtracker.models  # noqa: F401


async def create_schema(engine: AsyncEngine) -> None:
    """Create all tables that do not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def drop_schema(engine: AsyncEngine) -> None:
    """Drop all tables. Test and local-reset use only."""
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
