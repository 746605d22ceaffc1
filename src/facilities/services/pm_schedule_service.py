"""Preventive maintenance scheduling service."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import date
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.facilities.core.errors import ConflictError, FieldViolation, NotFoundError, ValidationError
from src.facilities.core.logging import get_logger
from src.facilities.core.tenant_context import TenantContext
from src.facilities.models import DueStatus, PMCompletion, PMFrequency, PMSchedule, utc_now, utc_today
from src.facilities.repositories import (
    PMCompletionRepository,
    PMScheduleRepository,
    PMTemplateRepository,
    storage_boundary,
)
from src.facilities.scheduling import (
    RecurrenceRule,
    classify,
    month_window,
    next_occurrence,
    occurrences_in_window,
    rule_violations,
)
from src.facilities.schemas.pm_schedule import (
    PMCompletionCreate,
    PMScheduleCreate,
    PMScheduleUpdate,
)
from src.facilities.services.work_orders import (
    WorkOrderCreationError,
    WorkOrderCreator,
    WorkOrderRequest,
)

logger = get_logger(__name__)

RECURRENCE_FIELDS = ("frequency", "day_of_week", "day_of_month", "month_of_year")


@dataclass(frozen=True)
class DueSchedules:
    as_of: date
    due: list[PMSchedule]
    overdue: list[PMSchedule]


@dataclass(frozen=True)
class CalendarEntry:
    schedule_id: UUID
    schedule_name: str
    due_date: date
    frequency: str
    asset_id: UUID | None
    location_id: UUID | None
    status: DueStatus


@dataclass(frozen=True)
class Calendar:
    year: int
    month: int
    entries: list[CalendarEntry]


@dataclass(frozen=True)
class GeneratedTicket:
    schedule_id: UUID
    ticket_id: UUID
    scheduled_date: date


@dataclass(frozen=True)
class GenerationError:
    schedule_id: UUID
    message: str


@dataclass
class TicketGenerationResult:
    generated: list[GeneratedTicket] = field(default_factory=list)
    skipped: list[UUID] = field(default_factory=list)
    errors: list[GenerationError] = field(default_factory=list)


@dataclass(frozen=True)
class PMStats:
    total: int
    active: int
    due_today: int
    overdue: int
    completed_this_month: int


@dataclass(frozen=True)
class CompletionOutcome:
    completion: PMCompletion
    schedule: PMSchedule


class PMScheduleService:
    """PM schedule business logic.

    Every public method takes the caller's TenantContext and an optional
    ``today`` so date-dependent results can be pinned in tests.
    """

    def __init__(
        self,
        schedule_repo: PMScheduleRepository,
        completion_repo: PMCompletionRepository,
        template_repo: PMTemplateRepository,
        work_orders: WorkOrderCreator,
        session: AsyncSession,
    ):
        self.schedule_repo = schedule_repo
        self.completion_repo = completion_repo
        self.template_repo = template_repo
        self.work_orders = work_orders
        self.session = session

    @asynccontextmanager
    async def _unit_of_work(self, operation: str) -> AsyncGenerator[None]:
        """Commit on success; roll back and re-raise on any failure."""
        try:
            yield
            async with storage_boundary(self.schedule_repo.timeout_seconds, operation):
                await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

    async def _require_template(self, ctx: TenantContext, template_id: UUID | None) -> None:
        if template_id is not None:
            await self.template_repo.require(ctx, template_id)

    # --- CRUD ---

    async def create_schedule(
        self,
        ctx: TenantContext,
        data: PMScheduleCreate,
        today: date | None = None,
    ) -> PMSchedule:
        """Create a schedule whose first occurrence follows start_date (or today).

        Raises:
            ValidationError: With every violated field
            NotFoundError: If template_id is not a live template of the tenant
        """
        start = data.start_date or today or utc_today()
        schedule = PMSchedule(
            template_id=data.template_id,
            name=data.name,
            description=data.description,
            asset_id=data.asset_id,
            location_id=data.location_id,
            frequency=data.frequency,
            day_of_week=data.day_of_week,
            day_of_month=data.day_of_month,
            month_of_year=data.month_of_year,
            assigned_to=data.assigned_to,
            vendor_id=data.vendor_id,
            estimated_cost=data.estimated_cost,
            next_due_date=start,
        )
        violations = schedule.invariant_violations()
        if violations:
            raise ValidationError(violations)

        await self._require_template(ctx, data.template_id)
        schedule.next_due_date = next_occurrence(schedule.rule, start)

        async with self._unit_of_work("create PM schedule"):
            await self.schedule_repo.create(ctx, schedule)

        logger.info(
            "PM schedule created",
            schedule_id=str(schedule.id),
            frequency=schedule.frequency,
            next_due_date=schedule.next_due_date.isoformat(),
        )
        return schedule

    async def get_schedule(self, ctx: TenantContext, schedule_id: UUID) -> PMSchedule:
        return await self.schedule_repo.require(ctx, schedule_id)

    async def list_schedules(
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
        return await self.schedule_repo.list_page(
            ctx,
            asset_id=asset_id,
            location_id=location_id,
            template_id=template_id,
            frequency=frequency,
            is_active=is_active,
            cursor=cursor,
            limit=limit,
        )

    async def update_schedule(
        self,
        ctx: TenantContext,
        schedule_id: UUID,
        data: PMScheduleUpdate,
        today: date | None = None,
    ) -> PMSchedule:
        """Patch a schedule; the merged state is re-validated.

        Changing any recurrence field recomputes next_due_date from today,
        unless next_due_date is part of the patch.
        """
        patch: dict[str, Any] = data.model_dump(exclude_unset=True)

        await self._require_template(ctx, patch.get("template_id"))

        if any(f in patch for f in RECURRENCE_FIELDS) and "next_due_date" not in patch:
            current = await self.schedule_repo.require(ctx, schedule_id)
            merged = {
                f: patch[f] if f in patch else getattr(current, f) for f in RECURRENCE_FIELDS
            }
            if not rule_violations(**merged):
                rule = RecurrenceRule(
                    frequency=PMFrequency(merged["frequency"]),
                    day_of_week=merged["day_of_week"],
                    day_of_month=merged["day_of_month"],
                    month_of_year=merged["month_of_year"],
                )
                patch["next_due_date"] = next_occurrence(rule, today or utc_today())

        async with self._unit_of_work("update PM schedule"):
            schedule = await self.schedule_repo.update(ctx, schedule_id, patch)

        logger.info("PM schedule updated", schedule_id=str(schedule_id), fields=sorted(patch))
        return schedule

    async def delete_schedule(self, ctx: TenantContext, schedule_id: UUID) -> None:
        """Soft-delete a schedule. Its completion history is kept."""
        async with self._unit_of_work("delete PM schedule"):
            await self.schedule_repo.soft_delete(ctx, schedule_id)
        logger.info("PM schedule deleted", schedule_id=str(schedule_id))

    async def activate_schedule(self, ctx: TenantContext, schedule_id: UUID) -> PMSchedule:
        return await self._set_active(ctx, schedule_id, True)

    async def deactivate_schedule(self, ctx: TenantContext, schedule_id: UUID) -> PMSchedule:
        return await self._set_active(ctx, schedule_id, False)

    async def _set_active(self, ctx: TenantContext, schedule_id: UUID, active: bool) -> PMSchedule:
        async with self._unit_of_work("toggle PM schedule"):
            schedule = await self.schedule_repo.update(ctx, schedule_id, {"is_active": active})
        logger.info("PM schedule active state changed", schedule_id=str(schedule_id), is_active=active)
        return schedule

    # --- Due state and projection ---

    async def list_due(self, ctx: TenantContext, today: date | None = None) -> DueSchedules:
        """Active schedules due today and overdue. Overdue never expires."""
        today = today or utc_today()
        candidates = await self.schedule_repo.list_due_by(ctx, today)
        due: list[PMSchedule] = []
        overdue: list[PMSchedule] = []
        for schedule in candidates:
            status = classify(schedule.next_due_date, today)
            if status is DueStatus.DUE:
                due.append(schedule)
            elif status is DueStatus.OVERDUE:
                overdue.append(schedule)
        return DueSchedules(as_of=today, due=due, overdue=overdue)

    async def calendar(
        self,
        ctx: TenantContext,
        year: int,
        month: int,
        today: date | None = None,
    ) -> Calendar:
        """Every active schedule's occurrences in a month, sorted by date."""
        violations = []
        if not 1 <= month <= 12:
            violations.append(FieldViolation("month", "Must be between 1 and 12"))
        if not 1 <= year <= 9998:
            violations.append(FieldViolation("year", "Must be between 1 and 9998"))
        if violations:
            raise ValidationError(violations)

        today = today or utc_today()
        window_start, window_end = month_window(year, month)
        entries = [
            CalendarEntry(
                schedule_id=schedule.id,
                schedule_name=schedule.name,
                due_date=occurrence,
                frequency=schedule.frequency,
                asset_id=schedule.asset_id,
                location_id=schedule.location_id,
                status=classify(occurrence, today),
            )
            for schedule in await self.schedule_repo.list_active(ctx)
            for occurrence in occurrences_in_window(
                schedule.rule, schedule.next_due_date, window_start, window_end
            )
        ]
        entries.sort(key=lambda e: (e.due_date, e.schedule_name))
        return Calendar(year=year, month=month, entries=entries)

    async def get_stats(self, ctx: TenantContext, today: date | None = None) -> PMStats:
        today = today or utc_today()
        due = await self.list_due(ctx, today)
        month_start, month_end = month_window(today.year, today.month)
        return PMStats(
            total=await self.schedule_repo.count(ctx),
            active=await self.schedule_repo.count_active(ctx),
            due_today=len(due.due),
            overdue=len(due.overdue),
            completed_this_month=await self.completion_repo.count_completed_between(
                ctx, month_start, month_end
            ),
        )

    # --- Work orders and completion ---

    @staticmethod
    def _work_order_request(schedule: PMSchedule) -> WorkOrderRequest:
        return WorkOrderRequest(
            schedule_id=schedule.id,
            title=f"PM: {schedule.name}",
            description=schedule.description or f"Preventive maintenance: {schedule.name}",
            scheduled_date=schedule.next_due_date,
            asset_id=schedule.asset_id,
            location_id=schedule.location_id,
            assigned_to=schedule.assigned_to,
            vendor_id=schedule.vendor_id,
            estimated_cost=schedule.estimated_cost,
        )

    async def generate_tickets(
        self,
        ctx: TenantContext,
        today: date | None = None,
    ) -> TicketGenerationResult:
        """Request a work order for every due or overdue occurrence.

        Occurrences that already have a completion or a generated ticket are
        skipped, so repeated runs create nothing new. Work-order failures are
        collected per schedule; storage failures propagate.
        """
        today = today or utc_today()
        result = TicketGenerationResult()

        for schedule in await self.schedule_repo.list_due_by(ctx, today):
            occurrence = schedule.next_due_date
            if schedule.has_open_ticket or await self.completion_repo.get_for_occurrence(
                ctx, schedule.id, occurrence
            ):
                result.skipped.append(schedule.id)
                continue

            try:
                ticket_id = await self.work_orders.create_work_order(
                    ctx, self._work_order_request(schedule)
                )
            except WorkOrderCreationError as e:
                logger.warning(
                    "PM ticket generation failed",
                    schedule_id=str(schedule.id),
                    scheduled_date=occurrence.isoformat(),
                    error=e.message,
                )
                result.errors.append(GenerationError(schedule_id=schedule.id, message=e.message))
                continue

            async with self._unit_of_work("record generated ticket"):
                await self.schedule_repo.update(
                    ctx,
                    schedule.id,
                    {
                        "generated_ticket_id": ticket_id,
                        "generated_for_date": occurrence,
                        "last_generated_at": utc_now(),
                    },
                )
            result.generated.append(
                GeneratedTicket(schedule_id=schedule.id, ticket_id=ticket_id, scheduled_date=occurrence)
            )

        logger.info(
            "PM tickets generated",
            generated=len(result.generated),
            skipped=len(result.skipped),
            failed=len(result.errors),
        )
        return result

    async def mark_completed(
        self,
        ctx: TenantContext,
        schedule_id: UUID,
        data: PMCompletionCreate,
        today: date | None = None,
    ) -> CompletionOutcome:
        """Record completion of the current occurrence and advance the schedule.

        The completion insert and the schedule advance commit together or
        not at all.

        Raises:
            NotFoundError: If the schedule is missing, deleted, or foreign
            ConflictError: If the occurrence is already completed, or
                scheduled_date is not the current occurrence
        """
        today = today or utc_today()

        async with self._unit_of_work("complete PM schedule"):
            schedule = await self.schedule_repo.get_for_update(ctx, schedule_id)
            if schedule is None:
                raise NotFoundError(self.schedule_repo.entity_name, schedule_id)

            occurrence = schedule.next_due_date
            if data.scheduled_date is not None and data.scheduled_date != occurrence:
                raise ConflictError(
                    f"Occurrence {data.scheduled_date.isoformat()} is not the current "
                    f"occurrence of PM schedule {schedule_id} ({occurrence.isoformat()})"
                )
            if await self.completion_repo.get_for_occurrence(ctx, schedule_id, occurrence):
                raise ConflictError(
                    f"Occurrence {occurrence.isoformat()} of PM schedule {schedule_id} "
                    "is already completed"
                )

            ticket_id = data.ticket_id
            if ticket_id is None and schedule.has_open_ticket:
                ticket_id = schedule.generated_ticket_id
            if ticket_id is None:
                ticket_id = await self.work_orders.create_work_order(
                    ctx, self._work_order_request(schedule)
                )

            completion = await self.completion_repo.add(
                ctx,
                PMCompletion(
                    schedule_id=schedule_id,
                    ticket_id=ticket_id,
                    scheduled_date=occurrence,
                    completed_date=data.completed_date or today,
                    completed_by=data.completed_by,
                    checklist_results=data.checklist_results,
                    notes=data.notes,
                ),
            )
            schedule = await self.schedule_repo.update(
                ctx,
                schedule_id,
                {
                    "next_due_date": next_occurrence(schedule.rule, occurrence),
                    "generated_ticket_id": None,
                    "generated_for_date": None,
                },
            )

        logger.info(
            "PM completion recorded",
            schedule_id=str(schedule_id),
            scheduled_date=occurrence.isoformat(),
            ticket_id=str(ticket_id),
            next_due_date=schedule.next_due_date.isoformat(),
        )
        return CompletionOutcome(completion=completion, schedule=schedule)

    async def list_completions(
        self,
        ctx: TenantContext,
        schedule_id: UUID,
        limit: int | None = None,
    ) -> list[PMCompletion]:
        """Completion history of a live schedule, newest occurrence first."""
        await self.schedule_repo.require(ctx, schedule_id)
        return await self.completion_repo.list_by_schedule(ctx, schedule_id, limit=limit)
