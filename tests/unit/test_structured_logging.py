"""Tests for structured logging context."""

from uuid import uuid4

import pytest
import structlog
from structlog.testing import CapturingLogger

from src.facilities.core.logging import (
    bind_request_context,
    bind_tenant_context,
    clear_request_context,
    get_logger,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def capturing_logger():
    """Create a capturing logger for tests."""
    cap_logger = CapturingLogger()

    # Save original configuration to restore later
    old_config = structlog.get_config()

    structlog.configure(
        processors=[structlog.contextvars.merge_contextvars],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=lambda *args, **kwargs: cap_logger,
        cache_logger_on_first_use=False,
    )

    clear_request_context()
    yield cap_logger
    clear_request_context()
    structlog.configure(**old_config)


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
    """Test binding the resolved tenant to logs as a string."""
    tenant_id = uuid4()

    bind_tenant_context(tenant_id)
    get_logger(__name__).info("test message")

    entries = capturing_logger.calls
    assert len(entries) == 1
    assert entries[0].kwargs["tenant_id"] == str(tenant_id)


def test_request_and_tenant_context_combine(capturing_logger):
    """Test that request and tenant context appear on the same entry."""
    tenant_id = uuid4()

    bind_request_context("req-1")
    bind_tenant_context(tenant_id)
    get_logger(__name__).info("PM schedule created", schedule_id="abc")

    kwargs = capturing_logger.calls[0].kwargs
    assert kwargs["request_id"] == "req-1"
    assert kwargs["tenant_id"] == str(tenant_id)
    assert kwargs["schedule_id"] == "abc"


def test_clear_request_context(capturing_logger):
    """Test clearing all request context."""
    bind_request_context("test-request")
    bind_tenant_context(uuid4())

    clear_request_context()

    logger = structlog.get_logger()
    logger.info("test message")

    entries = capturing_logger.calls
    assert len(entries) == 1
    assert "request_id" not in entries[0].kwargs
    assert "tenant_id" not in entries[0].kwargs


def test_log_level_and_event(capturing_logger):
    """Test that the method name and event are captured."""
    get_logger(__name__).warning("PM ticket generation failed", error="boom")

    entry = capturing_logger.calls[0]
    assert entry.method_name == "warning"
    assert entry.kwargs["event"] == "PM ticket generation failed"
    assert entry.kwargs["error"] == "boom"


def test_bind_request_method_and_path(capturing_logger):
    """Test that method and path are bound next to request_id."""
    bind_request_context("req-2", "POST", "/api/v1/pm-schedules")
    get_logger(__name__).info("test message")

    kwargs = capturing_logger.calls[0].kwargs
    assert kwargs["request_id"] == "req-2"
    assert kwargs["method"] == "POST"
    assert kwargs["path"] == "/api/v1/pm-schedules"
