"""Schemas for the entities time is logged against: clients, projects, tasks, users."""

from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from src.hourtracker.models.enums import UserRole


def _require_name(v: str, entity: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError(f"{entity} name cannot be empty or whitespace only")
    return v


class TenantCreate(BaseModel):
    """Schema for creating a tenant."""

    name: str = Field(min_length=1, max_length=255)
    plan: str = Field(default="free", max_length=50)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _require_name(v, "Tenant")


class UserCreate(BaseModel):
    """Schema for adding a user to a tenant."""

    email: EmailStr
    role: UserRole = UserRole.USER

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return v.lower()


class ClientCreate(BaseModel):
    """Schema for creating a client."""

    name: str = Field(min_length=1, max_length=255)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _require_name(v, "Client")


class ClientUpdate(BaseModel):
    """Schema for updating a client."""

    name: str | None = Field(default=None, min_length=1, max_length=255)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        return _require_name(v, "Client") if v is not None else v


class ProjectCreate(BaseModel):
    """Schema for creating a project."""

    client_id: UUID
    name: str = Field(min_length=1, max_length=255)
    is_billable: bool = True

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _require_name(v, "Project")


class ProjectUpdate(BaseModel):
    """Schema for updating a project."""

    client_id: UUID | None = None
    name: str | None = Field(default=None, min_length=1, max_length=255)
    is_billable: bool | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        return _require_name(v, "Project") if v is not None else v


class TaskCreate(BaseModel):
    """Schema for creating a task."""

    project_id: UUID
    name: str = Field(min_length=1, max_length=255)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _require_name(v, "Task")


class TaskUpdate(BaseModel):
    """Schema for updating a task."""

    project_id: UUID | None = None
    name: str | None = Field(default=None, min_length=1, max_length=255)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        return _require_name(v, "Task") if v is not None else v
