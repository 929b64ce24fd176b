"""Task model - tenant-scoped, soft-deletable."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Index
from sqlmodel import Field, SQLModel

from src.hourtracker.models.base import utc_now


class Task(SQLModel, table=True):
    """Unit of work inside a project that time is logged against."""

    __tablename__ = "tasks"
    __table_args__ = (Index("ix_tasks_tenant_deleted", "tenant_id", "deleted_at"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id")
    project_id: UUID = Field(foreign_key="projects.id", index=True)
    name: str = Field(max_length=255)
    deleted_at: datetime | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
