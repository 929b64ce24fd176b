"""Repository for AuditLog entity."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from src.hourtracker.models import AuditLog, EntityType


class AuditLogRepository:
    """Append-only access to the audit log. Rows are never updated or deleted."""

    def __init__(self, session: AsyncSession):
        self.session = session

    def add(self, audit_log: AuditLog) -> AuditLog:
        """Stage an audit row in the current session. The caller commits."""
        self.session.add(audit_log)
        return audit_log

    def add_all(self, audit_logs: list[AuditLog]) -> list[AuditLog]:
        """Stage several audit rows in the current session."""
        self.session.add_all(audit_logs)
        return audit_logs

    async def list_by_entity(
        self,
        tenant_id: UUID,
        entity_type: EntityType | str,
        entity_id: UUID,
        limit: int = 50,
    ) -> list[AuditLog]:
        """List audit records for one entity, oldest first.

        Args:
            tenant_id: Tenant the entity belongs to
            entity_type: Type of entity (e.g., "time_entry")
            entity_id: ID of the entity
            limit: Maximum rows to return

        Returns:
            Audit records in the order the mutations happened
        """
        entity_type = entity_type.value if isinstance(entity_type, EntityType) else entity_type
        query = (
            select(AuditLog)
            .where(
                AuditLog.tenant_id == tenant_id,
                AuditLog.entity_type == entity_type,
                AuditLog.entity_id == entity_id,
            )
            .order_by(col(AuditLog.created_at), col(AuditLog.id))
            .limit(limit)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def list_by_tenant(
        self,
        tenant_id: UUID,
        user_id: UUID | None = None,
        limit: int = 50,
    ) -> list[AuditLog]:
        """List the most recent audit records for a tenant, optionally for one actor."""
        query = select(AuditLog).where(AuditLog.tenant_id == tenant_id)
        if user_id:
            query = query.where(AuditLog.user_id == user_id)
        query = query.order_by(col(AuditLog.created_at).desc()).limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())
