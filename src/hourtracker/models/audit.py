"""Audit log model for tracking data mutations."""

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column, Index
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel

from src.hourtracker.models.base import utc_now

# JSONB on PostgreSQL, plain JSON elsewhere
SnapshotType = JSON().with_variant(JSONB(), "postgresql")


class AuditLog(SQLModel, table=True):
    """Who changed what, when, with before/after snapshots of the row."""

    __tablename__ = "audit_log"
    __table_args__ = (
        Index("ix_audit_log_tenant_entity", "tenant_id", "entity_type", "entity_id"),
        Index("ix_audit_log_tenant_created", "tenant_id", "created_at"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id")
    user_id: UUID | None = Field(default=None)  # actor; kept after the user is removed
    action: str = Field(max_length=20)  # AuditAction value
    entity_type: str = Field(max_length=50)  # EntityType value
    entity_id: UUID
    before_data: dict[str, Any] | None = Field(
        default=None,
        sa_column=Column(SnapshotType, nullable=True),
    )
    after_data: dict[str, Any] | None = Field(
        default=None,
        sa_column=Column(SnapshotType, nullable=True),
    )
    created_at: datetime = Field(default_factory=utc_now)
