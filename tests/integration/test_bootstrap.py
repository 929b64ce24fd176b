"""Integration tests for wiring the core from settings."""

from datetime import datetime

import pytest

from src.hourtracker.bootstrap import time_tracking_core
from src.hourtracker.core.config import Settings
from src.hourtracker.services import AuditService, NullAuditSink
from tests.helpers import seed_workspace

pytestmark = pytest.mark.integration


async def test_core_round_trip(test_settings: Settings):
    async with time_tracking_core(
        test_settings, create_tables=True, configure_logging=False
    ) as core:
        assert isinstance(core.audit_sink, AuditService)
        assert await core.store.ping() is True

        workspace = await seed_workspace(core.engine)
        entry = await core.time_entries.create_time_entry(
            workspace.tenant.id,
            workspace.user.id,
            {
                "project_id": workspace.project.id,
                "task_id": workspace.task.id,
                "start_time": datetime(2024, 3, 1, 9),
                "end_time": datetime(2024, 3, 1, 10),
            },
        )

        assert entry.duration == 60


async def test_audit_disabled_uses_null_sink(test_settings: Settings):
    settings = test_settings.model_copy(update={"audit_enabled": False})

    async with time_tracking_core(settings, configure_logging=False) as core:
        assert isinstance(core.audit_sink, NullAuditSink)
        assert core.time_entries.batch.max_entries == settings.batch_max_entries


async def test_request_context_tags_core_logs(test_settings: Settings, capturing_logger):
    async with time_tracking_core(
        test_settings, create_tables=True, configure_logging=False
    ) as core:
        workspace = await seed_workspace(core.engine)

        with core.request_context("req-42", workspace.tenant.id, workspace.user.id):
            await core.time_entries.create_time_entry(
                workspace.tenant.id,
                workspace.user.id,
                {
                    "project_id": workspace.project.id,
                    "task_id": workspace.task.id,
                    "start_time": datetime(2024, 3, 1, 9),
                    "end_time": datetime(2024, 3, 1, 10),
                },
            )

    created = [c for c in capturing_logger.calls if c.kwargs["event"] == "Time entry created"]
    assert created[0].kwargs["request_id"] == "req-42"
    assert created[0].kwargs["tenant_id"] == str(workspace.tenant.id)
    assert created[0].kwargs["user_id"] == str(workspace.user.id)

    closing = [c for c in capturing_logger.calls if c.kwargs["event"] == "Closing connections..."]
    assert "request_id" not in closing[0].kwargs
