"""All-or-nothing creation of several time entries for one user."""

from collections.abc import Mapping, Sequence
from typing import Any
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError

from src.hourtracker.core.db.store import RecordStore
from src.hourtracker.core.exceptions import ConflictError, ReferentialError, ValidationError
from src.hourtracker.core.intervals import intervals_overlap
from src.hourtracker.core.logging import get_logger
from src.hourtracker.models import TimeEntry
from src.hourtracker.repositories.time_entry import TimeEntryRepository
from src.hourtracker.schemas.time_entry import TimeEntryCandidate
from src.hourtracker.services.foreign_keys import RepositoryForeignKeyResolver, ensure_references
from src.hourtracker.services.overlap import OverlapValidator

logger = get_logger(__name__)

BatchInput = TimeEntryCandidate | Mapping[str, Any]


class BatchInsertCoordinator:
    """Validates a batch in cheap-to-expensive passes, then inserts it in one transaction.

    Passes, each over the whole batch in submission order:
        1. structure (no I/O)
        2. project and task references
        3. overlap with persisted entries
        4. overlap with earlier candidates in the batch
        5. commit

    The first failure aborts the batch. Errors carry the 1-based index of the
    failing candidate. Nothing is written unless every candidate passes.
    """

    def __init__(self, store: RecordStore, max_entries: int = 100):
        self.store = store
        self.max_entries = max_entries

    async def run(
        self,
        tenant_id: UUID,
        user_id: UUID,
        candidates: Sequence[BatchInput],
        *,
        timeout: float | None = None,
    ) -> list[TimeEntry]:
        """Validate and insert every candidate, or none of them.

        Raises:
            ValidationError: Batch empty, too large, or a candidate is malformed
            ReferentialError: Owner, project, or task missing from the tenant
            ConflictError: A candidate overlaps a persisted entry or an earlier candidate
            StorageError: Infrastructure failure or deadline expiry; nothing persisted
        """
        validated = self.validate_structure(candidates)

        async with self.store.deadline(timeout):
            async with self.store.session(timeout=timeout) as session:
                resolver = RepositoryForeignKeyResolver(session)
                if not await resolver.user_exists(user_id, tenant_id):
                    raise ReferentialError("User not found in this tenant.", field="user_id")
                await self._check_references(resolver, tenant_id, validated)
                await self._check_persisted_overlap(
                    OverlapValidator(TimeEntryRepository(session)), tenant_id, user_id, validated
                )

            self._check_intra_batch(validated)

            async with self.store.transaction(timeout=timeout) as session:
                await self.store.lock_owner(session, tenant_id, user_id)
                repo = TimeEntryRepository(session)
                await self._recheck_persisted_overlap(repo, tenant_id, user_id, validated)
                entries = await repo.insert_many(validated, tenant_id, user_id)

        logger.info("Time entry batch committed", user_id=str(user_id), count=len(entries))
        return entries

    # -- pass 1 ------------------------------------------------------------

    def validate_structure(self, candidates: Sequence[BatchInput]) -> list[TimeEntryCandidate]:
        """Check batch size and parse every candidate. Touches no storage."""
        if not candidates:
            raise ValidationError("entries must be a non-empty array.", field="entries")
        if len(candidates) > self.max_entries:
            raise ValidationError(
                f"Maximum {self.max_entries} entries per batch.", field="entries"
            )

        validated: list[TimeEntryCandidate] = []
        for index, raw in enumerate(candidates, start=1):
            try:
                validated.append(TimeEntryCandidate.model_validate(raw))
            except PydanticValidationError as e:
                raise ValidationError.from_pydantic(e).at_index(index) from e
        return validated

    # -- pass 2 ------------------------------------------------------------

    @staticmethod
    async def _check_references(
        resolver: RepositoryForeignKeyResolver,
        tenant_id: UUID,
        validated: Sequence[TimeEntryCandidate],
    ) -> None:
        for index, candidate in enumerate(validated, start=1):
            try:
                await ensure_references(
                    resolver, tenant_id, candidate.project_id, candidate.task_id
                )
            except ReferentialError as e:
                raise e.at_index(index)

    # -- pass 3 ------------------------------------------------------------

    @staticmethod
    async def _check_persisted_overlap(
        validator: OverlapValidator,
        tenant_id: UUID,
        user_id: UUID,
        validated: Sequence[TimeEntryCandidate],
    ) -> None:
        for index, candidate in enumerate(validated, start=1):
            conflicts = await validator.find_overlapping(
                user_id, tenant_id, candidate.start_time, candidate.end_time
            )
            if conflicts:
                logger.warning("Batch overlap rejected", user_id=str(user_id), index=index)
                raise ConflictError(
                    "overlaps with an existing time entry.",
                    index=index,
                    conflicting_ids=[entry.id for entry in conflicts],
                )

    # -- pass 4 ------------------------------------------------------------

    @staticmethod
    def _check_intra_batch(validated: Sequence[TimeEntryCandidate]) -> None:
        conflict = OverlapValidator.first_conflict_in_batch(validated)
        if conflict is not None:
            index, conflicting_index = conflict
            logger.warning("Batch overlap rejected", index=index, conflicting_index=conflicting_index)
            raise ConflictError(
                f"overlaps with entry {conflicting_index} in this batch.",
                index=index,
                conflicting_index=conflicting_index,
            )

    # -- pass 5 ------------------------------------------------------------

    @staticmethod
    async def _recheck_persisted_overlap(
        repo: TimeEntryRepository,
        tenant_id: UUID,
        user_id: UUID,
        validated: Sequence[TimeEntryCandidate],
    ) -> None:
        """Repeat pass 3 under the owner lock with one query over the batch's span.

        Another writer may have committed between pass 3 and the lock.
        """
        window_start = min(candidate.start_time for candidate in validated)
        window_end = max(candidate.end_time for candidate in validated)
        persisted = await repo.find_overlapping(user_id, tenant_id, window_start, window_end)
        if not persisted:
            return

        for index, candidate in enumerate(validated, start=1):
            conflicts = [
                entry
                for entry in persisted
                if intervals_overlap(
                    candidate.start_time, candidate.end_time, entry.start_time, entry.end_time
                )
            ]
            if conflicts:
                logger.warning(
                    "Batch overlap rejected at commit", user_id=str(user_id), index=index
                )
                raise ConflictError(
                    "overlaps with an existing time entry.",
                    index=index,
                    conflicting_ids=[entry.id for entry in conflicts],
                )
