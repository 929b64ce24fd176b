"""Overlap detection for per-user time intervals."""

from collections.abc import Sequence
from datetime import datetime
from uuid import UUID

from src.hourtracker.core.exceptions import ConflictError
from src.hourtracker.core.intervals import intervals_overlap
from src.hourtracker.core.logging import get_logger
from src.hourtracker.models import TimeEntry
from src.hourtracker.repositories.time_entry import TimeEntryRepository
from src.hourtracker.schemas.time_entry import TimeEntryCandidate

logger = get_logger(__name__)

__all__ = ["OverlapValidator", "intervals_overlap"]


class OverlapValidator:
    """Checks candidate intervals against persisted entries and against each other."""

    def __init__(self, repo: TimeEntryRepository):
        self.repo = repo

    async def find_overlapping(
        self,
        user_id: UUID,
        tenant_id: UUID,
        start: datetime,
        end: datetime,
        exclude_id: UUID | None = None,
    ) -> list[TimeEntry]:
        """Every active entry of the user that overlaps [start, end)."""
        return await self.repo.find_overlapping(user_id, tenant_id, start, end, exclude_id)

    async def ensure_no_overlap(
        self,
        user_id: UUID,
        tenant_id: UUID,
        start: datetime,
        end: datetime,
        exclude_id: UUID | None = None,
    ) -> None:
        """Raise ConflictError when [start, end) overlaps an active entry of the user.

        The message stays generic; the conflicting ids travel on the error for
        callers that want them.
        """
        conflicts = await self.find_overlapping(user_id, tenant_id, start, end, exclude_id)
        if conflicts:
            logger.warning(
                "Time entry overlap rejected",
                user_id=str(user_id),
                conflicts=len(conflicts),
            )
            raise ConflictError(conflicting_ids=[entry.id for entry in conflicts])

    @staticmethod
    def first_conflict_in_batch(
        candidates: Sequence[TimeEntryCandidate],
    ) -> tuple[int, int] | None:
        """Find the first candidate that overlaps an earlier one in the same batch.

        Quadratic in batch size; callers cap the batch before calling.

        Returns:
            (index, conflicting_index) as 1-based positions, or None
        """
        for i, candidate in enumerate(candidates):
            for j in range(i):
                earlier = candidates[j]
                if intervals_overlap(
                    candidate.start_time,
                    candidate.end_time,
                    earlier.start_time,
                    earlier.end_time,
                ):
                    return i + 1, j + 1
        return None
