"""Tenant model - the isolation boundary."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.hourtracker.models.base import utc_now


class Tenant(SQLModel, table=True):
    """One customer organisation's data partition. Not soft-deletable."""

    __tablename__ = "tenants"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=255)
    plan: str = Field(default="free", max_length=50)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
