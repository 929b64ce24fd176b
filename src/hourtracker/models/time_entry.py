"""Time entry model - the interval-bearing entity."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Index
from sqlmodel import Field, SQLModel

from src.hourtracker.models.base import utc_now


class TimeEntry(SQLModel, table=True):
    """A logged half-open interval [start_time, end_time) for one user.

    duration is always derived from the bounds (whole minutes, half-up) and
    is never taken from caller input.
    """

    __tablename__ = "time_entries"
    __table_args__ = (
        CheckConstraint("end_time > start_time", name="ck_time_entries_end_after_start"),
        Index("ix_time_entries_tenant_user_start", "tenant_id", "user_id", "start_time"),
        Index("ix_time_entries_tenant_project", "tenant_id", "project_id"),
        Index("ix_time_entries_tenant_deleted", "tenant_id", "deleted_at"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id")
    user_id: UUID = Field(foreign_key="users.id")
    project_id: UUID = Field(foreign_key="projects.id")
    task_id: UUID = Field(foreign_key="tasks.id")
    start_time: datetime
    end_time: datetime
    duration: int  # minutes
    description: str | None = Field(default=None)
    deleted_at: datetime | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
