"""Repository layer - data access abstraction.

Every tenant-owned repository extends TenantScopedRepository and receives its
AsyncSession at construction.
"""

from src.hourtracker.repositories.audit import AuditLogRepository
from src.hourtracker.repositories.base import (
    RepositoryQueryOptions,
    TenantScopedRepository,
)
from src.hourtracker.repositories.client import ClientRepository
from src.hourtracker.repositories.project import ProjectRepository
from src.hourtracker.repositories.task import TaskRepository
from src.hourtracker.repositories.tenant import TenantRepository
from src.hourtracker.repositories.time_entry import TimeEntryRepository
from src.hourtracker.repositories.user import UserRepository

__all__ = [
    # Base
    "RepositoryQueryOptions",
    "TenantScopedRepository",
    # Catalog
    "ClientRepository",
    "ProjectRepository",
    "TaskRepository",
    "TenantRepository",
    "UserRepository",
    # Time tracking
    "AuditLogRepository",
    "TimeEntryRepository",
]
