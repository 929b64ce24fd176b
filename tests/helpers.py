"""Shared helpers for seeding integration test data."""

from dataclasses import dataclass
from typing import Any

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from src.hourtracker.models import Client, Project, Task, Tenant, User
from tests.factories import (
    ClientFactory,
    ProjectFactory,
    TaskFactory,
    TenantFactory,
    UserFactory,
)


@dataclass
class Workspace:
    """One seeded tenant: a user, a second user, and a client/project/task chain."""

    tenant: Tenant
    user: User
    other_user: User
    client: Client
    project: Project
    task: Task


async def persist(engine: AsyncEngine, *rows: Any) -> None:
    """Insert rows in one short-lived session.

    Seeding never keeps a session open: on SQLite an idle open transaction
    would hold the write lock and stall the code under test.
    """
    async with AsyncSession(engine, expire_on_commit=False) as session:
        session.add_all(rows)
        await session.commit()


async def seed_workspace(engine: AsyncEngine) -> Workspace:
    """Create a tenant with two users and a client, project and task."""
    tenant = TenantFactory.build()
    await persist(engine, tenant)

    user = UserFactory.build(tenant_id=tenant.id)
    other_user = UserFactory.build(tenant_id=tenant.id)
    client = ClientFactory.build(tenant_id=tenant.id)
    await persist(engine, user, other_user, client)

    project = ProjectFactory.build(tenant_id=tenant.id, client_id=client.id)
    await persist(engine, project)

    task = TaskFactory.build(tenant_id=tenant.id, project_id=project.id)
    await persist(engine, task)

    return Workspace(
        tenant=tenant,
        user=user,
        other_user=other_user,
        client=client,
        project=project,
        task=task,
    )
