"""Repository for Tenant entity (the isolation boundary itself, not tenant-scoped)."""

from collections.abc import Mapping
from typing import Any
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from src.hourtracker.core.exceptions import ValidationError
from src.hourtracker.models import Tenant
from src.hourtracker.models.base import utc_now


class TenantRepository:
    """Repository for Tenant entity."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, id: UUID) -> Tenant | None:
        """Get tenant by ID."""
        result = await self.session.execute(select(Tenant).where(Tenant.id == id))
        return result.scalar_one_or_none()

    async def create(self, data: Mapping[str, Any] | BaseModel) -> Tenant:
        """Create a tenant. Only name and plan are taken from the input."""
        fields = data.model_dump() if isinstance(data, BaseModel) else dict(data)
        name = fields.get("name")
        if not name:
            raise ValidationError("name is required", field="name")

        now = utc_now()
        tenant = Tenant(
            name=name,
            plan=fields.get("plan") or "free",
            created_at=now,
            updated_at=now,
        )
        self.session.add(tenant)
        await self.session.flush()
        return tenant
