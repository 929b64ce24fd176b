"""Time entry service - the write and read paths other components call."""

from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from src.hourtracker.core.config import Settings
from src.hourtracker.core.db.store import RecordStore
from src.hourtracker.core.exceptions import NotFoundError, ReferentialError, ValidationError
from src.hourtracker.core.logging import get_logger
from src.hourtracker.models import AuditAction, EntityType, TimeEntry
from src.hourtracker.repositories.mappers import time_entry_snapshot
from src.hourtracker.repositories.time_entry import TimeEntryRepository
from src.hourtracker.schemas.pagination import Page, PageRequest
from src.hourtracker.schemas.time_entry import (
    TimeEntryCandidate,
    TimeEntryDetailed,
    TimeEntryFilters,
    TimeEntryUpdate,
)
from src.hourtracker.services.audit_service import AuditChange, AuditSink
from src.hourtracker.services.batch import BatchInput, BatchInsertCoordinator
from src.hourtracker.services.foreign_keys import RepositoryForeignKeyResolver, ensure_references
from src.hourtracker.services.overlap import OverlapValidator

logger = get_logger(__name__)


def _parse[SchemaType: BaseModel](
    schema: type[SchemaType], data: SchemaType | Mapping[str, Any]
) -> SchemaType:
    """Validate caller input into ``schema``, raising the domain ValidationError."""
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e) from e


class TimeEntryService:
    """Creates, updates, deletes and lists time entries.

    Every write runs its reference checks, overlap check and mutation in one
    transaction holding the owner lock for (tenant_id, user_id), so two
    concurrent writers for the same user can never both pass the overlap check.
    Audit records are emitted after commit.
    """

    def __init__(self, store: RecordStore, audit_sink: AuditSink, settings: Settings):
        self.store = store
        self.audit_sink = audit_sink
        self.settings = settings
        self.batch = BatchInsertCoordinator(store, max_entries=settings.batch_max_entries)

    # -- writes ------------------------------------------------------------

    async def create_time_entry(
        self,
        tenant_id: UUID,
        user_id: UUID,
        candidate: TimeEntryCandidate | Mapping[str, Any],
        *,
        timeout: float | None = None,
    ) -> TimeEntry:
        """Create one time entry owned by ``user_id``.

        Raises:
            ValidationError: Malformed candidate
            ReferentialError: Owner, project, or task missing from the tenant
            ConflictError: Overlaps an active entry of the same user
            StorageError: Infrastructure failure or deadline expiry
        """
        candidate = _parse(TimeEntryCandidate, candidate)

        async with self.store.transaction(timeout=timeout) as session:
            await self.store.lock_owner(session, tenant_id, user_id)

            resolver = RepositoryForeignKeyResolver(session)
            if not await resolver.user_exists(user_id, tenant_id):
                raise ReferentialError("User not found in this tenant.", field="user_id")
            await ensure_references(resolver, tenant_id, candidate.project_id, candidate.task_id)

            repo = TimeEntryRepository(session)
            await OverlapValidator(repo).ensure_no_overlap(
                user_id, tenant_id, candidate.start_time, candidate.end_time
            )
            entry = await repo.create({**candidate.model_dump(), "user_id": user_id}, tenant_id)

        logger.debug("Time entry created", entry_id=str(entry.id), user_id=str(user_id))
        await self.audit_sink.record(
            tenant_id,
            user_id,
            AuditAction.CREATE,
            EntityType.TIME_ENTRY,
            entry.id,
            after=time_entry_snapshot(entry),
        )
        return entry

    async def update_time_entry(
        self,
        tenant_id: UUID,
        entry_id: UUID,
        fields: TimeEntryUpdate | Mapping[str, Any],
        *,
        actor_id: UUID | None = None,
        timeout: float | None = None,
    ) -> TimeEntry:
        """Apply a partial update to an active entry.

        When either time bound changes, duration is recomputed and the new
        interval is checked for overlap, ignoring the entry's own prior state.

        Raises:
            NotFoundError: Entry missing, soft-deleted, or in another tenant
            ValidationError: Malformed fields or end_time not after start_time
            ReferentialError: New project or task missing from the tenant
            ConflictError: New interval overlaps another active entry of the owner
            StorageError: Infrastructure failure or deadline expiry
        """
        changes = _parse(TimeEntryUpdate, fields).changes()

        async with self.store.transaction(timeout=timeout) as session:
            repo = TimeEntryRepository(session)
            entry = await repo.find_by_id(entry_id, tenant_id)
            if entry is None:
                raise NotFoundError("Time entry not found.")

            await self.store.lock_owner(session, tenant_id, entry.user_id)
            # Another writer may have changed the row before the lock was granted
            await session.refresh(entry)
            if entry.deleted_at is not None:
                raise NotFoundError("Time entry not found.")
            before = time_entry_snapshot(entry)

            await ensure_references(
                RepositoryForeignKeyResolver(session),
                tenant_id,
                changes.get("project_id"),
                changes.get("task_id"),
            )

            if "start_time" in changes or "end_time" in changes:
                start = changes.get("start_time", entry.start_time)
                end = changes.get("end_time", entry.end_time)
                if end <= start:
                    raise ValidationError("end_time must be after start_time", field="end_time")
                await OverlapValidator(repo).ensure_no_overlap(
                    entry.user_id, tenant_id, start, end, exclude_id=entry_id
                )

            entry = await repo.update(entry_id, changes, tenant_id)
            after = time_entry_snapshot(entry)

        logger.debug("Time entry updated", entry_id=str(entry_id), fields=sorted(changes))
        await self.audit_sink.record(
            tenant_id,
            actor_id,
            AuditAction.UPDATE,
            EntityType.TIME_ENTRY,
            entry_id,
            before=before,
            after=after,
        )
        return entry

    async def soft_delete_time_entry(
        self,
        tenant_id: UUID,
        entry_id: UUID,
        *,
        actor_id: UUID | None = None,
        timeout: float | None = None,
    ) -> None:
        """Soft delete an active entry. Its interval stops blocking new entries.

        Raises:
            NotFoundError: Entry missing, already deleted, or in another tenant
            StorageError: Infrastructure failure or deadline expiry
        """
        async with self.store.transaction(timeout=timeout) as session:
            repo = TimeEntryRepository(session)
            entry = await repo.find_by_id(entry_id, tenant_id)
            if entry is None:
                raise NotFoundError("Time entry not found.")
            before = time_entry_snapshot(entry)
            await repo.soft_delete(entry_id, tenant_id)

        logger.debug("Time entry deleted", entry_id=str(entry_id))
        await self.audit_sink.record(
            tenant_id,
            actor_id,
            AuditAction.DELETE,
            EntityType.TIME_ENTRY,
            entry_id,
            before=before,
        )

    async def create_time_entries_batch(
        self,
        tenant_id: UUID,
        user_id: UUID,
        candidates: Sequence[BatchInput],
        *,
        timeout: float | None = None,
    ) -> list[TimeEntry]:
        """Create every candidate or none. Errors carry the 1-based failing index.

        Raises:
            ValidationError: Empty or oversized batch, or a malformed candidate
            ReferentialError: Owner, project, or task missing from the tenant
            ConflictError: Overlap with a persisted entry or an earlier candidate
            StorageError: Infrastructure failure or deadline expiry; nothing persisted
        """
        entries = await self.batch.run(tenant_id, user_id, candidates, timeout=timeout)

        await self.audit_sink.record_many(
            tenant_id,
            user_id,
            AuditAction.CREATE,
            EntityType.TIME_ENTRY,
            [AuditChange(entry.id, after=time_entry_snapshot(entry)) for entry in entries],
        )
        return entries

    # -- reads -------------------------------------------------------------

    async def get_time_entry(
        self, tenant_id: UUID, entry_id: UUID, *, timeout: float | None = None
    ) -> TimeEntryDetailed | None:
        """Get one active entry with display names, or None."""
        async with self.store.session(timeout=timeout) as session:
            return await TimeEntryRepository(session).find_by_id_detailed(entry_id, tenant_id)

    async def list_time_entries(
        self,
        tenant_id: UUID,
        filters: TimeEntryFilters | Mapping[str, Any] | None = None,
        page: PageRequest | None = None,
        *,
        timeout: float | None = None,
    ) -> Page[TimeEntryDetailed]:
        """One page of active entries, newest first, with the total across all pages."""
        filters = _parse(TimeEntryFilters, filters or {})
        page = (page or PageRequest(page_size=self.settings.default_page_size)).clamp(
            self.settings.max_page_size
        )

        async with self.store.session(timeout=timeout) as session:
            repo = TimeEntryRepository(session)
            items = await repo.find_filtered(
                tenant_id, filters, limit=page.page_size, offset=page.offset
            )
            total = await repo.count_filtered(tenant_id, filters)

        return Page[TimeEntryDetailed].build(items, total, page)

    async def find_overlapping(
        self,
        tenant_id: UUID,
        user_id: UUID,
        start: datetime,
        end: datetime,
        exclude_id: UUID | None = None,
        *,
        timeout: float | None = None,
    ) -> list[TimeEntry]:
        """Active entries of the user that overlap [start, end). Empty when none do."""
        async with self.store.session(timeout=timeout) as session:
            return await OverlapValidator(TimeEntryRepository(session)).find_overlapping(
                user_id, tenant_id, start, end, exclude_id
            )
