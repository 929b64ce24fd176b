"""Shared enums for models."""

from enum import Enum


class UserRole(str, Enum):
    """User role within a tenant."""

    ADMIN = "admin"
    USER = "user"


class AuditAction(str, Enum):
    """Mutation kinds recorded in the audit log."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class EntityType(str, Enum):
    """Entity names used in audit records."""

    CLIENT = "client"
    PROJECT = "project"
    TASK = "task"
    TIME_ENTRY = "time_entry"
    USER = "user"


class OrderDirection(str, Enum):
    """Sort direction for list queries."""

    ASC = "ASC"
    DESC = "DESC"
