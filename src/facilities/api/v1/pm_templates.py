"""PM template endpoints - tenant-scoped via the X-Tenant-ID header."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, Response, status

from src.facilities.api.dependencies import PMTemplateServiceDep, Tenant
from src.facilities.schemas.pagination import PaginatedResponse
from src.facilities.schemas.pm_template import PMTemplateCreate, PMTemplateRead, PMTemplateUpdate

router = APIRouter(prefix="/pm-templates", tags=["pm-templates"])


@router.get("", response_model=PaginatedResponse[PMTemplateRead], summary="List PM templates")
async def list_templates(
    service: PMTemplateServiceDep,
    ctx: Tenant,
    category: Annotated[str | None, Query(max_length=100)] = None,
    cursor: Annotated[str | None, Query(description="Cursor for pagination")] = None,
    limit: Annotated[int, Query(ge=1, le=100, description="Max items to return")] = 50,
) -> PaginatedResponse[PMTemplateRead]:
    templates, next_cursor, has_more = await service.list_templates(
        ctx, category=category, cursor=cursor, limit=limit
    )
    return PaginatedResponse(
        items=[PMTemplateRead.model_validate(t) for t in templates],
        next_cursor=next_cursor,
        has_more=has_more,
    )


@router.post(
    "",
    response_model=PMTemplateRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create PM template",
    responses={422: {"description": "Validation failed"}},
)
async def create_template(
    request: PMTemplateCreate,
    service: PMTemplateServiceDep,
    ctx: Tenant,
) -> PMTemplateRead:
    return PMTemplateRead.model_validate(await service.create_template(ctx, request))


@router.get(
    "/{template_id}",
    response_model=PMTemplateRead,
    summary="Get PM template",
    responses={404: {"description": "Template not found"}},
)
async def get_template(
    template_id: UUID,
    service: PMTemplateServiceDep,
    ctx: Tenant,
) -> PMTemplateRead:
    return PMTemplateRead.model_validate(await service.get_template(ctx, template_id))


@router.patch(
    "/{template_id}",
    response_model=PMTemplateRead,
    summary="Update PM template",
    responses={
        404: {"description": "Template not found"},
        422: {"description": "Validation failed"},
    },
)
async def update_template(
    template_id: UUID,
    request: PMTemplateUpdate,
    service: PMTemplateServiceDep,
    ctx: Tenant,
) -> PMTemplateRead:
    return PMTemplateRead.model_validate(await service.update_template(ctx, template_id, request))


@router.delete(
    "/{template_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete PM template",
    responses={404: {"description": "Template not found"}},
)
async def delete_template(
    template_id: UUID,
    service: PMTemplateServiceDep,
    ctx: Tenant,
) -> Response:
    await service.delete_template(ctx, template_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
