"""Integration test fixtures for database and HTTP client operations.

Runs against an in-memory SQLite database (aiosqlite) with the SQLModel
metadata created directly, so no PostgreSQL server is needed. Each test
gets a fresh database.
"""

from collections.abc import AsyncGenerator, Awaitable, Callable, Generator
from typing import Any

import pytest
import structlog
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from structlog.testing import CapturingLogger

from src.facilities.api.dependencies import get_db_session
from src.facilities.core.db import get_session
from src.facilities.core.logging import clear_request_context
from src.facilities.core.shutdown import request_tracker
from src.facilities.core.tenant_context import TenantContext
from src.facilities.main import create_app
from src.facilities.models import PMSchedule, PMTemplate
from src.facilities.repositories import (
    PMCompletionRepository,
    PMScheduleRepository,
    PMTemplateRepository,
)
from src.facilities.services import PMScheduleService, PMTemplateService, get_work_order_creator
from tests.factories import PMScheduleFactory, PMTemplateFactory
from tests.helpers import FakeWorkOrderCreator

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(scope="function")
async def engine() -> AsyncGenerator[AsyncEngine]:
    """Create a fresh in-memory database with all tables."""
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield test_engine
    await test_engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Provide a session configured exactly like the application's."""
    async with get_session(engine) as session:
        yield session


@pytest.fixture
def schedule_repo(db_session: AsyncSession) -> PMScheduleRepository:
    return PMScheduleRepository(db_session)


@pytest.fixture
def completion_repo(db_session: AsyncSession) -> PMCompletionRepository:
    return PMCompletionRepository(db_session)


@pytest.fixture
def template_repo(db_session: AsyncSession) -> PMTemplateRepository:
    return PMTemplateRepository(db_session)


@pytest.fixture
def schedule_service(
    schedule_repo: PMScheduleRepository,
    completion_repo: PMCompletionRepository,
    template_repo: PMTemplateRepository,
    work_orders: FakeWorkOrderCreator,
    db_session: AsyncSession,
) -> PMScheduleService:
    return PMScheduleService(
        schedule_repo=schedule_repo,
        completion_repo=completion_repo,
        template_repo=template_repo,
        work_orders=work_orders,
        session=db_session,
    )


@pytest.fixture
def template_service(template_repo: PMTemplateRepository, db_session: AsyncSession) -> PMTemplateService:
    return PMTemplateService(template_repo=template_repo, session=db_session)


@pytest.fixture
def make_schedule(
    schedule_repo: PMScheduleRepository, db_session: AsyncSession
) -> Callable[..., Awaitable[PMSchedule]]:
    """Persist a schedule for a tenant, bypassing the service.

    next_due_date is stored as given, which lets tests place occurrences
    relative to a pinned "today".
    """

    async def _make(ctx: TenantContext, **overrides: Any) -> PMSchedule:
        schedule = await schedule_repo.create(ctx, PMScheduleFactory.build(**overrides))
        await db_session.commit()
        return schedule

    return _make


@pytest.fixture
def make_template(
    template_repo: PMTemplateRepository, db_session: AsyncSession
) -> Callable[..., Awaitable[PMTemplate]]:
    async def _make(ctx: TenantContext, **overrides: Any) -> PMTemplate:
        template = await template_repo.create(ctx, PMTemplateFactory.build(**overrides))
        await db_session.commit()
        return template

    return _make


@pytest.fixture
def captured_logs() -> Generator[CapturingLogger]:
    """Route structlog output into a CapturingLogger for assertions."""
    cap_logger = CapturingLogger()
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


@pytest.fixture
async def client(
    engine: AsyncEngine, work_orders: FakeWorkOrderCreator
) -> AsyncGenerator[AsyncClient]:
    """HTTP client against the app, wired to the test database and ticket fake."""
    request_tracker.reset()
    app = create_app()

    async def override_db_session() -> AsyncGenerator[AsyncSession]:
        async with get_session(engine) as session:
            yield session

    app.dependency_overrides[get_db_session] = override_db_session
    app.dependency_overrides[get_work_order_creator] = lambda: work_orders

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
    request_tracker.reset()
