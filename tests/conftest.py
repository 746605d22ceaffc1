"""Root test fixtures shared across all test types.

Database-specific fixtures are in tests/integration/conftest.py.
"""

import os

# Set env before any app imports so Settings picks it up
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("TICKET_SERVICE_URL", "")

# ruff: noqa: E402 - Imports must be after env var setup
from uuid import uuid4

import pytest

from src.facilities.core.config import get_settings
from src.facilities.core.tenant_context import TenantContext
from tests.helpers import FakeWorkOrderCreator

# Clear settings cache to ensure test environment variables are picked up
get_settings.cache_clear()


@pytest.fixture
def tenant_a() -> TenantContext:
    return TenantContext(tenant_id=uuid4())


@pytest.fixture
def tenant_b() -> TenantContext:
    return TenantContext(tenant_id=uuid4())


@pytest.fixture
def work_orders() -> FakeWorkOrderCreator:
    return FakeWorkOrderCreator()
