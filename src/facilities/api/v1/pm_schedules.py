"""PM schedule endpoints - tenant-scoped via the X-Tenant-ID header."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, Response, status

from src.facilities.api.dependencies import PMScheduleServiceDep, Tenant
from src.facilities.scheduling.enums import PMFrequency
from src.facilities.schemas.pagination import PaginatedResponse
from src.facilities.schemas.pm_schedule import (
    CalendarRead,
    DueSchedulesRead,
    PMCompletionCreate,
    PMCompletionRead,
    PMCompletionResult,
    PMScheduleCreate,
    PMScheduleRead,
    PMScheduleUpdate,
    PMStatsRead,
    TicketGenerationRead,
)

router = APIRouter(prefix="/pm-schedules", tags=["pm-schedules"])


@router.get(
    "",
    response_model=PaginatedResponse[PMScheduleRead],
    summary="List PM schedules",
    description="List schedules of the current tenant with optional filters and cursor pagination.",
)
async def list_schedules(
    service: PMScheduleServiceDep,
    ctx: Tenant,
    asset_id: Annotated[UUID | None, Query()] = None,
    location_id: Annotated[UUID | None, Query()] = None,
    template_id: Annotated[UUID | None, Query()] = None,
    frequency: Annotated[PMFrequency | None, Query()] = None,
    is_active: Annotated[bool | None, Query()] = None,
    cursor: Annotated[str | None, Query(description="Cursor for pagination")] = None,
    limit: Annotated[int, Query(ge=1, le=100, description="Max items to return")] = 50,
) -> PaginatedResponse[PMScheduleRead]:
    schedules, next_cursor, has_more = await service.list_schedules(
        ctx,
        asset_id=asset_id,
        location_id=location_id,
        template_id=template_id,
        frequency=frequency,
        is_active=is_active,
        cursor=cursor,
        limit=limit,
    )
    return PaginatedResponse(
        items=[PMScheduleRead.model_validate(s) for s in schedules],
        next_cursor=next_cursor,
        has_more=has_more,
    )


@router.post(
    "",
    response_model=PMScheduleRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create PM schedule",
    responses={
        201: {"description": "Schedule created"},
        404: {"description": "Template not found"},
        422: {"description": "Validation failed"},
    },
)
async def create_schedule(
    request: PMScheduleCreate,
    service: PMScheduleServiceDep,
    ctx: Tenant,
) -> PMScheduleRead:
    schedule = await service.create_schedule(ctx, request)
    return PMScheduleRead.model_validate(schedule)


@router.get(
    "/due",
    response_model=DueSchedulesRead,
    summary="List due and overdue schedules",
)
async def list_due(service: PMScheduleServiceDep, ctx: Tenant) -> DueSchedulesRead:
    return DueSchedulesRead.model_validate(await service.list_due(ctx))


@router.get(
    "/calendar",
    response_model=CalendarRead,
    summary="PM calendar",
    description="Every occurrence of every active schedule within a calendar month.",
)
async def get_calendar(
    service: PMScheduleServiceDep,
    ctx: Tenant,
    month: Annotated[int, Query(ge=1, le=12)],
    year: Annotated[int, Query(ge=1, le=9998)],
) -> CalendarRead:
    return CalendarRead.model_validate(await service.calendar(ctx, year=year, month=month))


@router.get("/stats", response_model=PMStatsRead, summary="PM statistics")
async def get_stats(service: PMScheduleServiceDep, ctx: Tenant) -> PMStatsRead:
    return PMStatsRead.model_validate(await service.get_stats(ctx))


@router.post(
    "/generate",
    response_model=TicketGenerationRead,
    summary="Generate work orders",
    description=(
        "Request a work order for every due or overdue occurrence that has none yet. "
        "Per-schedule failures are reported in the response body."
    ),
)
async def generate_tickets(service: PMScheduleServiceDep, ctx: Tenant) -> TicketGenerationRead:
    return TicketGenerationRead.model_validate(await service.generate_tickets(ctx))


@router.get(
    "/{schedule_id}",
    response_model=PMScheduleRead,
    summary="Get PM schedule",
    responses={404: {"description": "Schedule not found"}},
)
async def get_schedule(
    schedule_id: UUID,
    service: PMScheduleServiceDep,
    ctx: Tenant,
) -> PMScheduleRead:
    return PMScheduleRead.model_validate(await service.get_schedule(ctx, schedule_id))


@router.patch(
    "/{schedule_id}",
    response_model=PMScheduleRead,
    summary="Update PM schedule",
    responses={
        404: {"description": "Schedule or template not found"},
        422: {"description": "Validation failed"},
    },
)
async def update_schedule(
    schedule_id: UUID,
    request: PMScheduleUpdate,
    service: PMScheduleServiceDep,
    ctx: Tenant,
) -> PMScheduleRead:
    schedule = await service.update_schedule(ctx, schedule_id, request)
    return PMScheduleRead.model_validate(schedule)


@router.delete(
    "/{schedule_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete PM schedule",
    responses={404: {"description": "Schedule not found"}},
)
async def delete_schedule(
    schedule_id: UUID,
    service: PMScheduleServiceDep,
    ctx: Tenant,
) -> Response:
    await service.delete_schedule(ctx, schedule_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{schedule_id}/activate", response_model=PMScheduleRead, summary="Activate schedule")
async def activate_schedule(
    schedule_id: UUID,
    service: PMScheduleServiceDep,
    ctx: Tenant,
) -> PMScheduleRead:
    return PMScheduleRead.model_validate(await service.activate_schedule(ctx, schedule_id))


@router.post(
    "/{schedule_id}/deactivate", response_model=PMScheduleRead, summary="Deactivate schedule"
)
async def deactivate_schedule(
    schedule_id: UUID,
    service: PMScheduleServiceDep,
    ctx: Tenant,
) -> PMScheduleRead:
    return PMScheduleRead.model_validate(await service.deactivate_schedule(ctx, schedule_id))


@router.post(
    "/{schedule_id}/complete",
    response_model=PMCompletionResult,
    status_code=status.HTTP_201_CREATED,
    summary="Mark current occurrence completed",
    responses={
        404: {"description": "Schedule not found"},
        409: {"description": "Occurrence already completed or not current"},
        503: {"description": "Ticket service or storage unavailable"},
    },
)
async def complete_schedule(
    schedule_id: UUID,
    request: PMCompletionCreate,
    service: PMScheduleServiceDep,
    ctx: Tenant,
) -> PMCompletionResult:
    outcome = await service.mark_completed(ctx, schedule_id, request)
    return PMCompletionResult.model_validate(outcome)


@router.get(
    "/{schedule_id}/completions",
    response_model=list[PMCompletionRead],
    summary="Completion history",
    description="Completions of a schedule, newest occurrence first.",
)
async def list_completions(
    schedule_id: UUID,
    service: PMScheduleServiceDep,
    ctx: Tenant,
    limit: Annotated[int | None, Query(ge=1, le=500)] = None,
) -> list[PMCompletionRead]:
    completions = await service.list_completions(ctx, schedule_id, limit=limit)
    return [PMCompletionRead.model_validate(c) for c in completions]
