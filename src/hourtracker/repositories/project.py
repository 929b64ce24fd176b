"""Repository for Project entity (tenant-scoped)."""

from uuid import UUID

from sqlmodel import col, select

from src.hourtracker.models import Project
from src.hourtracker.repositories.base import RepositoryQueryOptions, TenantScopedRepository


class ProjectRepository(TenantScopedRepository[Project]):
    """Repository for Project entity."""

    model = Project
    label = "Project"
    required_fields = ("client_id", "name")
    mutable_fields = frozenset({"client_id", "name", "is_billable"})
    sortable_columns = frozenset({"created_at", "updated_at", "name"})

    async def find_by_client(
        self,
        client_id: UUID,
        tenant_id: UUID,
        options: RepositoryQueryOptions | None = None,
    ) -> list[Project]:
        """Active projects that belong to one client."""
        options = options or RepositoryQueryOptions()
        query = self._scoped(select(Project).where(Project.client_id == client_id), tenant_id)
        query = self._paginate(
            query.order_by(col(Project.created_at)), options.limit, options.offset
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def find_billable(self, tenant_id: UUID) -> list[Project]:
        """Active billable projects for a tenant."""
        query = self._scoped(select(Project).where(col(Project.is_billable).is_(True)), tenant_id)
        result = await self.session.execute(query.order_by(col(Project.created_at)))
        return list(result.scalars().all())
