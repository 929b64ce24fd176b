"""Explicit row-to-read-model mapping for time entries."""

from typing import Any

from src.hourtracker.models import TimeEntry
from src.hourtracker.schemas.time_entry import TimeEntryDetailed, TimeEntryRead


def time_entry_to_read(entry: TimeEntry) -> TimeEntryRead:
    """Convert a TimeEntry row to its read model."""
    return TimeEntryRead(
        id=entry.id,
        tenant_id=entry.tenant_id,
        user_id=entry.user_id,
        project_id=entry.project_id,
        task_id=entry.task_id,
        start_time=entry.start_time,
        end_time=entry.end_time,
        duration=entry.duration,
        description=entry.description,
        deleted_at=entry.deleted_at,
        created_at=entry.created_at,
        updated_at=entry.updated_at,
    )


def time_entry_to_detailed(
    entry: TimeEntry, project_name: str, task_name: str, user_email: str
) -> TimeEntryDetailed:
    """Convert a TimeEntry row plus its joined display names to the detailed read model."""
    return TimeEntryDetailed(
        id=entry.id,
        tenant_id=entry.tenant_id,
        user_id=entry.user_id,
        project_id=entry.project_id,
        task_id=entry.task_id,
        start_time=entry.start_time,
        end_time=entry.end_time,
        duration=entry.duration,
        description=entry.description,
        deleted_at=entry.deleted_at,
        created_at=entry.created_at,
        updated_at=entry.updated_at,
        project_name=project_name,
        task_name=task_name,
        user_email=user_email,
    )


def time_entry_snapshot(entry: TimeEntry) -> dict[str, Any]:
    """JSON-safe snapshot of a row for the audit log."""
    return time_entry_to_read(entry).model_dump(mode="json")
