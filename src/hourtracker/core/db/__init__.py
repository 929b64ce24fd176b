"""Database utilities - engine, record store, schema."""

from src.hourtracker.core.db.engine import create_engine_from_settings, is_sqlite_url
from src.hourtracker.core.db.schema import create_schema, drop_schema
from src.hourtracker.core.db.store import RecordStore, owner_lock_key

__all__ = [
    # Engine
    "create_engine_from_settings",
    "is_sqlite_url",
    # Store
    "RecordStore",
    "owner_lock_key",
    # Schema
    "create_schema",
    "drop_schema",
]
