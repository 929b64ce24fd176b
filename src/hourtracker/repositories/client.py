"""Repository for Client entity (tenant-scoped)."""

from uuid import UUID

from sqlalchemy import func
from sqlmodel import col, select

from src.hourtracker.models import Client
from src.hourtracker.repositories.base import RepositoryQueryOptions, TenantScopedRepository


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class ClientRepository(TenantScopedRepository[Client]):
    """Repository for Client entity."""

    model = Client
    label = "Client"
    required_fields = ("name",)
    mutable_fields = frozenset({"name"})
    sortable_columns = frozenset({"created_at", "updated_at", "name"})

    async def find_by_name(self, name: str, tenant_id: UUID) -> list[Client]:
        """Active clients whose name matches exactly."""
        query = self._scoped(select(Client).where(Client.name == name), tenant_id)
        result = await self.session.execute(query.order_by(Client.created_at))
        return list(result.scalars().all())

    async def search_by_name(
        self,
        search: str,
        tenant_id: UUID,
        options: RepositoryQueryOptions | None = None,
    ) -> list[Client]:
        """Case-insensitive substring search over active client names, ordered by name."""
        options = options or RepositoryQueryOptions()
        pattern = f"%{_escape_like(search.lower())}%"
        query = self._scoped(
            select(Client).where(func.lower(Client.name).like(pattern, escape="\\")),
            tenant_id,
        )
        query = self._paginate(query.order_by(col(Client.name)), options.limit, options.offset)
        result = await self.session.execute(query)
        return list(result.scalars().all())
