"""Tests for structured logging context."""

from uuid import uuid4

import pytest
import structlog

from src.hourtracker.core.logging import (
    bind_request_context,
    bind_tenant_context,
    clear_request_context,
    get_logger,
)

pytestmark = pytest.mark.unit


def test_bind_request_context(capturing_logger):
    """Test binding request_id to log context."""
    request_id = "test-request-123"

    bind_request_context(request_id)
    logger = structlog.get_logger()
    logger.info("test message")

    entries = capturing_logger.calls
    assert len(entries) == 1
    assert entries[0].kwargs["request_id"] == request_id


def test_bind_request_context_with_none(capturing_logger):
    """Test that None request_id is not bound."""
    bind_request_context(None)
    logger = structlog.get_logger()
    logger.info("test message")

    entries = capturing_logger.calls
    assert len(entries) == 1
    assert "request_id" not in entries[0].kwargs


def test_bind_tenant_context(capturing_logger):
    """Tenant and acting user are attached as strings."""
    tenant_id = uuid4()
    user_id = uuid4()

    bind_tenant_context(tenant_id, user_id)
    get_logger(__name__).info("test message")

    entry = capturing_logger.calls[0]
    assert entry.kwargs["tenant_id"] == str(tenant_id)
    assert entry.kwargs["user_id"] == str(user_id)


def test_bind_tenant_context_without_user(capturing_logger):
    bind_tenant_context(uuid4())
    get_logger(__name__).info("test message")

    assert "user_id" not in capturing_logger.calls[0].kwargs


def test_clear_request_context(capturing_logger):
    """Test clearing all request context."""
    bind_request_context("req-123")
    bind_tenant_context(uuid4(), uuid4())

    clear_request_context()
    structlog.get_logger().info("test message")

    entry = capturing_logger.calls[0]
    assert "request_id" not in entry.kwargs
    assert "tenant_id" not in entry.kwargs
    assert "user_id" not in entry.kwargs
