"""Existence checks for the rows a time entry references."""

from typing import Protocol
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.hourtracker.core.exceptions import ReferentialError
from src.hourtracker.repositories.project import ProjectRepository
from src.hourtracker.repositories.task import TaskRepository
from src.hourtracker.repositories.user import UserRepository


class ForeignKeyResolver(Protocol):
    """Answers whether a referenced row is active in the caller's tenant."""

    async def project_exists(self, project_id: UUID, tenant_id: UUID) -> bool: ...

    async def task_exists(self, task_id: UUID, tenant_id: UUID) -> bool: ...


class RepositoryForeignKeyResolver:
    """ForeignKeyResolver backed by the project, task and user repositories."""

    def __init__(self, session: AsyncSession):
        self.projects = ProjectRepository(session)
        self.tasks = TaskRepository(session)
        self.users = UserRepository(session)

    async def project_exists(self, project_id: UUID, tenant_id: UUID) -> bool:
        return await self.projects.exists(project_id, tenant_id)

    async def task_exists(self, task_id: UUID, tenant_id: UUID) -> bool:
        return await self.tasks.exists(task_id, tenant_id)

    async def user_exists(self, user_id: UUID, tenant_id: UUID) -> bool:
        return await self.users.exists(user_id, tenant_id)


async def ensure_references(
    resolver: ForeignKeyResolver,
    tenant_id: UUID,
    project_id: UUID | None = None,
    task_id: UUID | None = None,
) -> None:
    """Raise ReferentialError for the first referenced project or task that is not active.

    A project or task in another tenant counts as missing.
    """
    if project_id is not None and not await resolver.project_exists(project_id, tenant_id):
        raise ReferentialError("Project not found in this tenant.", field="project_id")
    if task_id is not None and not await resolver.task_exists(task_id, tenant_id):
        raise ReferentialError("Task not found in this tenant.", field="task_id")
