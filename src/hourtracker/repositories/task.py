"""Repository for Task entity (tenant-scoped)."""

from uuid import UUID

from sqlmodel import col, select

from src.hourtracker.models import Task
from src.hourtracker.repositories.base import RepositoryQueryOptions, TenantScopedRepository


class TaskRepository(TenantScopedRepository[Task]):
    """Repository for Task entity."""

    model = Task
    label = "Task"
    required_fields = ("project_id", "name")
    mutable_fields = frozenset({"project_id", "name"})
    sortable_columns = frozenset({"created_at", "updated_at", "name"})

    async def find_by_project(
        self,
        project_id: UUID,
        tenant_id: UUID,
        options: RepositoryQueryOptions | None = None,
    ) -> list[Task]:
        """Active tasks under one project."""
        options = options or RepositoryQueryOptions()
        query = self._scoped(select(Task).where(Task.project_id == project_id), tenant_id)
        query = self._paginate(query.order_by(col(Task.created_at)), options.limit, options.offset)
        result = await self.session.execute(query)
        return list(result.scalars().all())
