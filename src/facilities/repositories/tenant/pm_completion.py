"""Repository for PM completions (append-only, scoped via schedule)."""

from datetime import date
from uuid import UUID

from sqlalchemy import func
from sqlmodel import select
from sqlmodel.sql.expression import SelectOfScalar

from src.facilities.core.errors import NotFoundError
from src.facilities.core.tenant_context import TenantContext, require_tenant
from src.facilities.models.tenant import PMCompletion, PMSchedule
from src.facilities.repositories.base import AuditRecordRepository


class PMCompletionRepository(AuditRecordRepository[PMCompletion]):
    """Completions carry no tenant_id; every read joins the owning schedule."""

    model = PMCompletion
    entity_name = "PM completion"

    def scoped_query(self, ctx: TenantContext) -> SelectOfScalar[PMCompletion]:
        tenant_id = require_tenant(ctx)
        return (
            select(PMCompletion)
            .join(PMSchedule, PMCompletion.schedule_id == PMSchedule.id)  # type: ignore[arg-type]
            .where(PMSchedule.tenant_id == tenant_id)
        )

    async def ensure_in_scope(self, ctx: TenantContext, record: PMCompletion) -> None:
        tenant_id = require_tenant(ctx)
        query = select(PMSchedule.id).where(
            PMSchedule.id == record.schedule_id,
            PMSchedule.tenant_id == tenant_id,
            PMSchedule.deleted_at.is_(None),  # type: ignore[union-attr]
        )
        result = await self._execute(query, "check PM completion scope")
        if result.scalar_one_or_none() is None:
            raise NotFoundError("PM schedule", record.schedule_id)

    async def list_by_schedule(
        self,
        ctx: TenantContext,
        schedule_id: UUID,
        limit: int | None = None,
    ) -> list[PMCompletion]:
        """Completion history for a schedule, newest occurrence first."""
        query = (
            self.scoped_query(ctx)
            .where(PMCompletion.schedule_id == schedule_id)
            .order_by(PMCompletion.scheduled_date.desc())  # type: ignore[attr-defined]
        )
        if limit is not None:
            query = query.limit(limit)
        result = await self._execute(query, "list PM completions")
        return list(result.scalars().all())

    async def get_for_occurrence(
        self,
        ctx: TenantContext,
        schedule_id: UUID,
        scheduled_date: date,
    ) -> PMCompletion | None:
        query = self.scoped_query(ctx).where(
            PMCompletion.schedule_id == schedule_id,
            PMCompletion.scheduled_date == scheduled_date,
        )
        result = await self._execute(query, "get PM completion")
        return result.scalar_one_or_none()

    async def count_completed_between(self, ctx: TenantContext, start: date, end: date) -> int:
        """Completions whose completed_date falls in [start, end]."""
        tenant_id = require_tenant(ctx)
        query = (
            select(func.count())
            .select_from(PMCompletion)
            .join(PMSchedule, PMCompletion.schedule_id == PMSchedule.id)  # type: ignore[arg-type]
            .where(
                PMSchedule.tenant_id == tenant_id,
                PMCompletion.completed_date >= start,
                PMCompletion.completed_date <= end,
            )
        )
        result = await self._execute(query, "count PM completions")
        return int(result.scalar_one())
