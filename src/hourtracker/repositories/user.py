"""Repository for User entity (tenant-scoped, no soft delete)."""

from typing import Any
from uuid import UUID

from sqlmodel import select

from src.hourtracker.models import User, UserRole
from src.hourtracker.repositories.base import TenantScopedRepository


def _normalize(fields: dict[str, Any]) -> dict[str, Any]:
    if fields.get("email") is not None:
        fields["email"] = str(fields["email"]).lower()
    if isinstance(fields.get("role"), UserRole):
        fields["role"] = fields["role"].value
    return fields


class UserRepository(TenantScopedRepository[User]):
    """Users are removed with hard_delete; there is no deleted_at column."""

    model = User
    label = "User"
    supports_soft_delete = False
    required_fields = ("email",)
    unique_fields = ("email",)
    mutable_fields = frozenset({"email", "role"})
    sortable_columns = frozenset({"created_at", "updated_at", "email"})

    def _prepare_create(self, fields: dict[str, Any]) -> dict[str, Any]:
        return _normalize(fields)

    def _prepare_update(self, entity: User, fields: dict[str, Any]) -> dict[str, Any]:
        return _normalize(fields)

    async def find_by_email(self, email: str, tenant_id: UUID) -> User | None:
        """Get a user by email within a tenant."""
        result = await self.session.execute(
            self._scoped(select(User).where(User.email == email.lower()), tenant_id)
        )
        return result.scalar_one_or_none()
