"""Unit tests for AuditService."""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest

from src.hourtracker.core.exceptions import StorageError
from src.hourtracker.models import AuditAction, AuditLog, EntityType
from src.hourtracker.services import AuditChange, AuditService, NullAuditSink

pytestmark = pytest.mark.unit


@pytest.fixture
def mock_session() -> AsyncMock:
    """Create mock database session."""
    session = AsyncMock()
    session.add = MagicMock()
    session.add_all = MagicMock()
    return session


@pytest.fixture
def mock_store(mock_session) -> MagicMock:
    """Store whose transaction() yields the mock session."""
    store = MagicMock()
    store.transactions_opened = 0

    @asynccontextmanager
    async def transaction(**kwargs):
        store.transactions_opened += 1
        yield mock_session

    store.transaction = transaction
    return store


@pytest.fixture
def audit_service(mock_store) -> AuditService:
    return AuditService(mock_store)


class TestRecord:
    async def test_record_adds_audit_log(self, audit_service, mock_session):
        tenant_id, user_id, entity_id = uuid4(), uuid4(), uuid4()

        await audit_service.record(
            tenant_id,
            user_id,
            AuditAction.UPDATE,
            EntityType.TIME_ENTRY,
            entity_id,
            before={"duration": 60},
            after={"duration": 90},
        )

        mock_session.add.assert_called_once()
        log = mock_session.add.call_args.args[0]
        assert isinstance(log, AuditLog)
        assert log.tenant_id == tenant_id
        assert log.user_id == user_id
        assert log.action == "update"
        assert log.entity_type == "time_entry"
        assert log.entity_id == entity_id
        assert log.before_data == {"duration": 60}
        assert log.after_data == {"duration": 90}

    async def test_record_allows_missing_actor(self, audit_service, mock_session):
        await audit_service.record(
            uuid4(), None, AuditAction.DELETE, EntityType.TIME_ENTRY, uuid4(), before={}
        )

        log = mock_session.add.call_args.args[0]
        assert log.user_id is None
        assert log.after_data is None

    async def test_record_logs_success_at_debug(self, audit_service, capturing_logger):
        await audit_service.record(
            uuid4(), uuid4(), AuditAction.CREATE, EntityType.TIME_ENTRY, uuid4()
        )

        debug_calls = [c for c in capturing_logger.calls if c.method_name == "debug"]
        assert debug_calls[0].kwargs["event"] == "Audit log recorded"
        assert debug_calls[0].kwargs["action"] == "create"


class TestRecordMany:
    async def test_stages_every_change_in_one_transaction(
        self, audit_service, mock_store, mock_session
    ):
        tenant_id, user_id = uuid4(), uuid4()
        changes = [AuditChange(uuid4(), after={"duration": n}) for n in (30, 45, 60)]

        await audit_service.record_many(
            tenant_id, user_id, AuditAction.CREATE, EntityType.TIME_ENTRY, changes
        )

        assert mock_store.transactions_opened == 1
        logs = mock_session.add_all.call_args.args[0]
        assert [log.entity_id for log in logs] == [c.entity_id for c in changes]
        assert [log.after_data["duration"] for log in logs] == [30, 45, 60]
        assert all(log.tenant_id == tenant_id and log.action == "create" for log in logs)

    async def test_empty_changes_open_no_transaction(self, audit_service, mock_store):
        await audit_service.record_many(
            uuid4(), uuid4(), AuditAction.CREATE, EntityType.TIME_ENTRY, []
        )

        assert mock_store.transactions_opened == 0

    async def test_failure_is_swallowed(self, audit_service, mock_session, capturing_logger):
        mock_session.add_all.side_effect = RuntimeError("disk full")

        await audit_service.record_many(
            uuid4(), uuid4(), AuditAction.CREATE, EntityType.TIME_ENTRY, [AuditChange(uuid4())]
        )

        warnings = [c for c in capturing_logger.calls if c.method_name == "warning"]
        assert warnings[0].kwargs["event"] == "Failed to record audit logs"
        assert warnings[0].kwargs["count"] == 1


class TestFireAndForget:
    async def test_storage_failure_is_swallowed(self, capturing_logger):
        store = MagicMock()

        @asynccontextmanager
        async def failing_transaction(**kwargs):
            raise StorageError("Storage operation failed")
            yield  # pragma: no cover

        store.transaction = failing_transaction
        service = AuditService(store)

        # Must not raise
        await service.record(uuid4(), uuid4(), AuditAction.CREATE, EntityType.TIME_ENTRY, uuid4())

        warnings = [c for c in capturing_logger.calls if c.method_name == "warning"]
        assert len(warnings) == 1
        assert warnings[0].kwargs["event"] == "Failed to record audit log"
        assert warnings[0].kwargs["error"] == "Storage operation failed"

    async def test_repository_failure_is_swallowed(self, audit_service, capturing_logger):
        with patch(
            "src.hourtracker.services.audit_service.AuditLogRepository.add",
            side_effect=RuntimeError("disk full"),
        ):
            await audit_service.record(
                uuid4(), uuid4(), AuditAction.DELETE, EntityType.TIME_ENTRY, uuid4()
            )

        warnings = [c for c in capturing_logger.calls if c.method_name == "warning"]
        assert warnings[0].kwargs["error"] == "disk full"


class TestNullAuditSink:
    async def test_record_is_a_no_op(self):
        assert (
            await NullAuditSink().record(
                uuid4(), uuid4(), AuditAction.CREATE, EntityType.TIME_ENTRY, uuid4()
            )
            is None
        )

    async def test_record_many_is_a_no_op(self):
        assert (
            await NullAuditSink().record_many(
                uuid4(), uuid4(), AuditAction.CREATE, EntityType.TIME_ENTRY, [AuditChange(uuid4())]
            )
            is None
        )
