"""Model exports.

Import from here: `from src.hourtracker.models import TimeEntry, Tenant`
"""

from src.hourtracker.models.audit import AuditLog
from src.hourtracker.models.client import Client
from src.hourtracker.models.enums import AuditAction, EntityType, OrderDirection, UserRole
from src.hourtracker.models.project import Project
from src.hourtracker.models.task import Task
from src.hourtracker.models.tenant import Tenant
from src.hourtracker.models.time_entry import TimeEntry
from src.hourtracker.models.user import User

__all__ = [
    # Enums
    "AuditAction",
    "EntityType",
    "OrderDirection",
    "UserRole",
    # Models
    "AuditLog",
    "Client",
    "Project",
    "Task",
    "Tenant",
    "TimeEntry",
    "User",
]
