"""Base factory configuration for polyfactory."""

from datetime import UTC, datetime
from uuid import UUID, uuid4

from polyfactory.factories.sqlalchemy_factory import SQLAlchemyFactory


def utc_now() -> datetime:
    """Generate current UTC time (naive, matching the stored representation)."""
    return datetime.now(UTC).replace(tzinfo=None)


def generate_uuid() -> UUID:
    """Generate UUID for primary keys."""
    return uuid4()


class BaseFactory(SQLAlchemyFactory):
    """Base factory with common configuration for all models.

    Provides:
    - UUID generation for primary keys
    - UTC timestamp generation
    - Disabled auto-relationship setting (we control relationships manually)
    """

    __is_base_factory__ = True
    __set_relationships__ = False
    __set_foreign_keys__ = False  # We set FK values explicitly
