"""Audit logging service - records every committed mutation."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol
from uuid import UUID

from src.hourtracker.core.db.store import RecordStore
from src.hourtracker.core.logging import get_logger
from src.hourtracker.models import AuditAction, AuditLog, EntityType
from src.hourtracker.repositories.audit import AuditLogRepository

logger = get_logger(__name__)


@dataclass(frozen=True)
class AuditChange:
    """One entity's before/after snapshots within a bulk audit record."""

    entity_id: UUID
    before: dict[str, Any] | None = None
    after: dict[str, Any] | None = None


class AuditSink(Protocol):
    """Receives before/after snapshots of committed mutations.

    Implementations must not raise: the mutation being recorded has already
    committed.
    """

    async def record(
        self,
        tenant_id: UUID,
        user_id: UUID | None,
        action: AuditAction,
        entity_type: EntityType,
        entity_id: UUID,
        before: dict[str, Any] | None = None,
        after: dict[str, Any] | None = None,
    ) -> None: ...

    async def record_many(
        self,
        tenant_id: UUID,
        user_id: UUID | None,
        action: AuditAction,
        entity_type: EntityType,
        changes: Sequence[AuditChange],
    ) -> None: ...


class AuditService:
    """Service for recording audit logs.

    Fire-and-forget design: logging failures should not block business operations.
    Each record is written in its own transaction, separate from the mutation's.
    """

    def __init__(self, store: RecordStore):
        self.store = store

    async def record(
        self,
        tenant_id: UUID,
        user_id: UUID | None,
        action: AuditAction,
        entity_type: EntityType,
        entity_id: UUID,
        before: dict[str, Any] | None = None,
        after: dict[str, Any] | None = None,
    ) -> None:
        """Record an audit log entry.

        Failures are logged but do not raise exceptions.

        Args:
            tenant_id: Tenant the entity belongs to
            user_id: ID of the user performing the action
            action: The mutation kind
            entity_type: Type of entity affected
            entity_id: ID of the affected entity
            before: Snapshot prior to the mutation (None for creates)
            after: Snapshot after the mutation (None for deletes)
        """
        try:
            async with self.store.transaction() as session:
                AuditLogRepository(session).add(
                    AuditLog(
                        tenant_id=tenant_id,
                        user_id=user_id,
                        action=action.value,
                        entity_type=entity_type.value,
                        entity_id=entity_id,
                        before_data=before,
                        after_data=after,
                    )
                )

            logger.debug(
                "Audit log recorded",
                action=action.value,
                entity_type=entity_type.value,
                entity_id=str(entity_id),
            )
        except Exception as e:
            # Fire-and-forget: log the failure but don't propagate
            logger.warning(
                "Failed to record audit log",
                action=action.value,
                entity_type=entity_type.value,
                entity_id=str(entity_id),
                error=str(e),
            )

    async def record_many(
        self,
        tenant_id: UUID,
        user_id: UUID | None,
        action: AuditAction,
        entity_type: EntityType,
        changes: Sequence[AuditChange],
    ) -> None:
        """Record one audit entry per change in a single transaction.

        Used after bulk mutations. Failures are logged but do not raise.
        """
        if not changes:
            return

        try:
            async with self.store.transaction() as session:
                AuditLogRepository(session).add_all(
                    [
                        AuditLog(
                            tenant_id=tenant_id,
                            user_id=user_id,
                            action=action.value,
                            entity_type=entity_type.value,
                            entity_id=change.entity_id,
                            before_data=change.before,
                            after_data=change.after,
                        )
                        for change in changes
                    ]
                )

            logger.debug(
                "Audit logs recorded",
                action=action.value,
                entity_type=entity_type.value,
                count=len(changes),
            )
        except Exception as e:
            logger.warning(
                "Failed to record audit logs",
                action=action.value,
                entity_type=entity_type.value,
                count=len(changes),
                error=str(e),
            )

    async def list_entity_history(
        self,
        tenant_id: UUID,
        entity_type: EntityType,
        entity_id: UUID,
        limit: int = 50,
    ) -> list[AuditLog]:
        """List audit logs for a specific entity, oldest first."""
        async with self.store.session() as session:
            return await AuditLogRepository(session).list_by_entity(
                tenant_id, entity_type, entity_id, limit=limit
            )


class NullAuditSink:
    """AuditSink that drops every record. Used when auditing is disabled."""

    async def record(
        self,
        tenant_id: UUID,
        user_id: UUID | None,
        action: AuditAction,
        entity_type: EntityType,
        entity_id: UUID,
        before: dict[str, Any] | None = None,
        after: dict[str, Any] | None = None,
    ) -> None:
        return None

    async def record_many(
        self,
        tenant_id: UUID,
        user_id: UUID | None,
        action: AuditAction,
        entity_type: EntityType,
        changes: Sequence[AuditChange],
    ) -> None:
        return None
