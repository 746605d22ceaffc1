"""Repository for PM schedules (tenant-scoped)."""

from datetime import date
from uuid import UUID

from src.facilities.core.tenant_context import TenantContext
from src.facilities.scheduling.enums import PMFrequency
from src.facilities.models.tenant import PMSchedule
from src.facilities.repositories.base import TenantScopedRepository


class PMScheduleRepository(TenantScopedRepository[PMSchedule]):
    """Repository for PMSchedule entity.

    Due-state filtering happens in the service against the recurrence
    engine; queries here only narrow by stored columns.
    """

    model = PMSchedule
    entity_name = "PM schedule"

    async def list_active(self, ctx: TenantContext) -> list[PMSchedule]:
        """Active schedules ordered by next due date."""
        query = (
            self.scoped_query(ctx)
            .where(PMSchedule.is_active.is_(True))  # type: ignore[attr-defined]
            .order_by(PMSchedule.next_due_date, PMSchedule.name)
        )
        result = await self._execute(query, "list active PM schedules")
        return list(result.scalars().all())

    async def list_due_by(self, ctx: TenantContext, day: date) -> list[PMSchedule]:
        """Active schedules whose next occurrence is on or before ``day``."""
        query = (
            self.scoped_query(ctx)
            .where(
                PMSchedule.is_active.is_(True),  # type: ignore[attr-defined]
                PMSchedule.next_due_date <= day,
            )
            .order_by(PMSchedule.next_due_date, PMSchedule.name)
        )
        result = await self._execute(query, "list due PM schedules")
        return list(result.scalars().all())

    async def list_page(
        self,
        ctx: TenantContext,
        *,
        asset_id: UUID | None = None,
        location_id: UUID | None = None,
        template_id: UUID | None = None,
        frequency: PMFrequency | None = None,
        is_active: bool | None = None,
        cursor: str | None = None,
        limit: int = 100,
    ) -> tuple[list[PMSchedule], str | None, bool]:
        """List schedules, newest first, with optional column filters."""
        query = self.scoped_query(ctx)
        if asset_id is not None:
            query = query.where(PMSchedule.asset_id == asset_id)
        if location_id is not None:
            query = query.where(PMSchedule.location_id == location_id)
        if template_id is not None:
            query = query.where(PMSchedule.template_id == template_id)
        if frequency is not None:
            query = query.where(PMSchedule.frequency == frequency.value)
        if is_active is not None:
            query = query.where(PMSchedule.is_active.is_(is_active))  # type: ignore[attr-defined]
        return await self.paginate(query, cursor, limit, PMSchedule.created_at)

    async def count_active(self, ctx: TenantContext) -> int:
        query = self.scoped_query(ctx).where(PMSchedule.is_active.is_(True))  # type: ignore[attr-defined]
        return await self.count_matching(query)

    async def count_for_template(self, ctx: TenantContext, template_id: UUID) -> int:
        query = self.scoped_query(ctx).where(PMSchedule.template_id == template_id)
        return await self.count_matching(query)
