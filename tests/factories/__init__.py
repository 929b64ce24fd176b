"""Test factories for generating test data.

Re-exports all factories for convenient imports:
    from tests.factories import UserFactory, TenantFactory, ...
"""

from tests.factories.base import BaseFactory, generate_uuid, utc_now
from tests.factories.catalog import ClientFactory, ProjectFactory, TaskFactory
from tests.factories.tenant import TenantFactory
from tests.factories.user import UserFactory

__all__ = [
    # Base
    "BaseFactory",
    "generate_uuid",
    "utc_now",
    # Tenant
    "TenantFactory",
    # User
    "UserFactory",
    # Catalog
    "ClientFactory",
    "ProjectFactory",
    "TaskFactory",
]
