"""User factory for test data generation."""

from polyfactory import Use

from src.hourtracker.models import User, UserRole
from tests.factories.base import BaseFactory, generate_uuid, utc_now


class UserFactory(BaseFactory):
    """Factory for generating User test data. Pass tenant_id explicitly."""

    __model__ = User

    id = Use(generate_uuid)
    email = Use(lambda: f"user_{generate_uuid().hex[-8:]}@example.com")
    role = UserRole.USER.value
    created_at = Use(utc_now)
    updated_at = Use(utc_now)

    @classmethod
    def admin(cls, **kwargs):
        """Create a tenant admin."""
        return cls.build(role=UserRole.ADMIN.value, **kwargs)
