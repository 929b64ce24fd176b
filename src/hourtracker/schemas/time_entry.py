"""Time entry schemas for input validation and read models."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from src.hourtracker.core.intervals import normalize_instant


def _normalize_description(v: str | None) -> str | None:
    if v is not None:
        v = v.strip()
        if not v:
            return None
    return v


class TimeEntryCandidate(BaseModel):
    """Schema for one time entry submitted for creation.

    duration is not an input: it is derived from the bounds.
    """

    model_config = ConfigDict(extra="forbid")

    project_id: UUID
    task_id: UUID
    start_time: datetime
    end_time: datetime
    description: str | None = Field(default=None, max_length=5000)

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_instant(cls, v: datetime) -> datetime:
        return normalize_instant(v)

    @field_validator("end_time")
    @classmethod
    def validate_end_after_start(cls, v: datetime, info: ValidationInfo) -> datetime:
        start = info.data.get("start_time")
        if start is not None and v <= start:
            raise ValueError("end_time must be after start_time")
        return v

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str | None) -> str | None:
        return _normalize_description(v)


class TimeEntryUpdate(BaseModel):
    """Schema for a partial update. Only fields that are set are applied."""

    model_config = ConfigDict(extra="forbid")

    project_id: UUID | None = None
    task_id: UUID | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    description: str | None = Field(default=None, max_length=5000)

    @field_validator("project_id", "task_id", "start_time", "end_time", mode="before")
    @classmethod
    def validate_not_null(cls, v, info: ValidationInfo):
        # Explicit null is only meaningful for description
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_instant(cls, v: datetime | None) -> datetime | None:
        return normalize_instant(v) if v is not None else v

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str | None) -> str | None:
        return _normalize_description(v)

    def changes(self) -> dict:
        """The fields the caller actually supplied."""
        return self.model_dump(exclude_unset=True)


class TimeEntryFilters(BaseModel):
    """Listing filters. Date bounds apply to start_time and are inclusive."""

    user_id: UUID | None = None
    project_id: UUID | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None

    @field_validator("start_date", "end_date")
    @classmethod
    def validate_instant(cls, v: datetime | None) -> datetime | None:
        return normalize_instant(v) if v is not None else v

    @field_validator("end_date")
    @classmethod
    def validate_range(cls, v: datetime | None, info: ValidationInfo) -> datetime | None:
        start = info.data.get("start_date")
        if v is not None and start is not None and v < start:
            raise ValueError("end_date must not be before start_date")
        return v


class TimeEntryRead(BaseModel):
    """Schema for reading a time entry."""

    id: UUID
    tenant_id: UUID
    user_id: UUID
    project_id: UUID
    task_id: UUID
    start_time: datetime
    end_time: datetime
    duration: int
    description: str | None
    deleted_at: datetime | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TimeEntryDetailed(TimeEntryRead):
    """Time entry joined with the display names of its project, task and user."""

    project_name: str
    task_name: str
    user_email: str


class ProjectMinutesSummary(BaseModel):
    """Total logged minutes for one project."""

    project_id: UUID
    total_minutes: int
