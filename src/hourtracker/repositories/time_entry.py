"""Repository for TimeEntry entity (tenant-scoped)."""

from collections.abc import Sequence
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import func
from sqlmodel import col, select

from src.hourtracker.core.exceptions import ValidationError
from src.hourtracker.core.intervals import compute_duration_minutes, normalize_instant
from src.hourtracker.models import Project, Task, TimeEntry, User
from src.hourtracker.models.base import utc_now
from src.hourtracker.repositories.base import RepositoryQueryOptions, TenantScopedRepository
from src.hourtracker.repositories.mappers import time_entry_to_detailed
from src.hourtracker.schemas.time_entry import (
    ProjectMinutesSummary,
    TimeEntryCandidate,
    TimeEntryDetailed,
    TimeEntryFilters,
)


class TimeEntryRepository(TenantScopedRepository[TimeEntry]):
    """Repository for TimeEntry entity.

    duration is derived on every insert and on every update that touches a
    time bound; callers cannot write it.
    """

    model = TimeEntry
    label = "Time entry"
    required_fields = ("user_id", "project_id", "task_id", "start_time", "end_time")
    mutable_fields = frozenset({"project_id", "task_id", "start_time", "end_time", "description"})
    create_only_fields = frozenset({"user_id"})
    sortable_columns = frozenset(
        {"created_at", "updated_at", "start_time", "end_time", "duration"}
    )

    # -- derived columns ---------------------------------------------------

    @staticmethod
    def _checked_bounds(start: datetime, end: datetime) -> tuple[datetime, datetime]:
        start, end = normalize_instant(start), normalize_instant(end)
        if end <= start:
            raise ValidationError("end_time must be after start_time", field="end_time")
        return start, end

    def _prepare_create(self, fields: dict[str, Any]) -> dict[str, Any]:
        start, end = self._checked_bounds(fields["start_time"], fields["end_time"])
        fields["start_time"], fields["end_time"] = start, end
        fields["duration"] = compute_duration_minutes(start, end)
        return fields

    def _prepare_update(self, entry: TimeEntry, fields: dict[str, Any]) -> dict[str, Any]:
        if "start_time" in fields or "end_time" in fields:
            start, end = self._checked_bounds(
                fields.get("start_time", entry.start_time),
                fields.get("end_time", entry.end_time),
            )
            fields["start_time"], fields["end_time"] = start, end
            fields["duration"] = compute_duration_minutes(start, end)
        return fields

    # -- filtered / detailed queries ---------------------------------------

    @staticmethod
    def _filter_conditions(filters: TimeEntryFilters | None) -> list[Any]:
        if filters is None:
            return []
        conditions: list[Any] = []
        if filters.user_id is not None:
            conditions.append(TimeEntry.user_id == filters.user_id)
        if filters.project_id is not None:
            conditions.append(TimeEntry.project_id == filters.project_id)
        if filters.start_date is not None:
            conditions.append(col(TimeEntry.start_time) >= filters.start_date)
        if filters.end_date is not None:
            conditions.append(col(TimeEntry.start_time) <= filters.end_date)
        return conditions

    @staticmethod
    def _detailed_select() -> Any:
        return (
            select(TimeEntry, Project.name, Task.name, User.email)
            .join(Project, col(Project.id) == TimeEntry.project_id)
            .join(Task, col(Task.id) == TimeEntry.task_id)
            .join(User, col(User.id) == TimeEntry.user_id)
        )

    async def find_filtered(
        self,
        tenant_id: UUID,
        filters: TimeEntryFilters | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[TimeEntryDetailed]:
        """List active entries with project, task and user names, newest first.

        Args:
            tenant_id: Tenant to list
            filters: Optional user, project and start_time range filters
            limit: Maximum number of rows
            offset: Rows to skip

        Returns:
            Detailed entries ordered by start_time descending
        """
        query = self._scoped(self._detailed_select(), tenant_id)
        query = query.where(*self._filter_conditions(filters))
        query = query.order_by(col(TimeEntry.start_time).desc(), col(TimeEntry.id))
        query = self._paginate(query, limit, offset)

        result = await self.session.execute(query)
        return [
            time_entry_to_detailed(entry, project_name, task_name, user_email)
            for entry, project_name, task_name, user_email in result.all()
        ]

    async def count_filtered(
        self, tenant_id: UUID, filters: TimeEntryFilters | None = None
    ) -> int:
        """Count active entries matching the same filters as find_filtered."""
        query = self._scoped(select(func.count()).select_from(TimeEntry), tenant_id)
        query = query.where(*self._filter_conditions(filters))
        result = await self.session.execute(query)
        return int(result.scalar_one())

    async def find_by_id_detailed(self, id: UUID, tenant_id: UUID) -> TimeEntryDetailed | None:
        """Get one active entry with project, task and user names, or None."""
        query = self._scoped(self._detailed_select().where(TimeEntry.id == id), tenant_id)
        result = await self.session.execute(query)
        row = result.first()
        if row is None:
            return None
        entry, project_name, task_name, user_email = row
        return time_entry_to_detailed(entry, project_name, task_name, user_email)

    # -- overlap -----------------------------------------------------------

    async def find_overlapping(
        self,
        user_id: UUID,
        tenant_id: UUID,
        start: datetime,
        end: datetime,
        exclude_id: UUID | None = None,
    ) -> list[TimeEntry]:
        """Active entries of one user whose interval overlaps [start, end).

        Args:
            user_id: Owner of the intervals
            tenant_id: Tenant scope
            start: Inclusive start of the candidate interval
            end: Exclusive end of the candidate interval
            exclude_id: Entry to ignore (the entry being updated)

        Returns:
            Every conflicting entry, ordered by start_time
        """
        start, end = normalize_instant(start), normalize_instant(end)
        query = self._scoped(select(TimeEntry), tenant_id).where(
            TimeEntry.user_id == user_id,
            col(TimeEntry.start_time) < end,
            col(TimeEntry.end_time) > start,
        )
        if exclude_id is not None:
            query = query.where(TimeEntry.id != exclude_id)

        result = await self.session.execute(query.order_by(col(TimeEntry.start_time)))
        return list(result.scalars().all())

    # -- convenience queries -----------------------------------------------

    async def find_by_user(
        self,
        user_id: UUID,
        tenant_id: UUID,
        options: RepositoryQueryOptions | None = None,
    ) -> list[TimeEntry]:
        """Active entries logged by one user, newest first."""
        options = options or RepositoryQueryOptions()
        query = self._scoped(select(TimeEntry), tenant_id).where(TimeEntry.user_id == user_id)
        query = query.order_by(col(TimeEntry.start_time).desc())
        result = await self.session.execute(
            self._paginate(query, options.limit, options.offset)
        )
        return list(result.scalars().all())

    async def find_by_project(
        self,
        project_id: UUID,
        tenant_id: UUID,
        options: RepositoryQueryOptions | None = None,
    ) -> list[TimeEntry]:
        """Active entries logged against one project, newest first."""
        options = options or RepositoryQueryOptions()
        query = self._scoped(select(TimeEntry), tenant_id).where(
            TimeEntry.project_id == project_id
        )
        query = query.order_by(col(TimeEntry.start_time).desc())
        result = await self.session.execute(
            self._paginate(query, options.limit, options.offset)
        )
        return list(result.scalars().all())

    async def find_by_date_range(
        self,
        start_date: datetime,
        end_date: datetime,
        tenant_id: UUID,
        options: RepositoryQueryOptions | None = None,
    ) -> list[TimeEntry]:
        """Active entries whose start_time falls in [start_date, end_date], oldest first."""
        options = options or RepositoryQueryOptions()
        query = self._scoped(select(TimeEntry), tenant_id).where(
            col(TimeEntry.start_time) >= normalize_instant(start_date),
            col(TimeEntry.start_time) <= normalize_instant(end_date),
        )
        query = query.order_by(col(TimeEntry.start_time))
        result = await self.session.execute(
            self._paginate(query, options.limit, options.offset)
        )
        return list(result.scalars().all())

    async def sum_minutes_by_project(
        self,
        tenant_id: UUID,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> list[ProjectMinutesSummary]:
        """Total logged minutes per project, largest first. Feeds the reporting views."""
        total = func.coalesce(func.sum(TimeEntry.duration), 0).label("total_minutes")
        query = self._scoped(select(TimeEntry.project_id, total), tenant_id)
        if start_date is not None:
            query = query.where(col(TimeEntry.start_time) >= normalize_instant(start_date))
        if end_date is not None:
            query = query.where(col(TimeEntry.start_time) <= normalize_instant(end_date))
        query = query.group_by(TimeEntry.project_id).order_by(total.desc())

        result = await self.session.execute(query)
        return [
            ProjectMinutesSummary(project_id=project_id, total_minutes=int(minutes))
            for project_id, minutes in result.all()
        ]

    # -- batch insert ------------------------------------------------------

    async def insert_many(
        self,
        candidates: Sequence[TimeEntryCandidate],
        tenant_id: UUID,
        user_id: UUID,
    ) -> list[TimeEntry]:
        """Insert already-validated candidates in submission order.

        No validation happens here beyond deriving duration; the caller owns
        the transaction and has already checked references and overlap.
        """
        now = utc_now()
        entries = [
            TimeEntry(
                tenant_id=tenant_id,
                user_id=user_id,
                project_id=candidate.project_id,
                task_id=candidate.task_id,
                start_time=candidate.start_time,
                end_time=candidate.end_time,
                duration=compute_duration_minutes(candidate.start_time, candidate.end_time),
                description=candidate.description,
                created_at=now,
                updated_at=now,
            )
            for candidate in candidates
        ]
        self.session.add_all(entries)
        await self._flush()
        return entries
