"""Service factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.facilities.api.dependencies.db import DBSession
from src.facilities.api.dependencies.repositories import (
    PMCompletionRepo,
    PMScheduleRepo,
    PMTemplateRepo,
)
from src.facilities.services import (
    PMScheduleService,
    PMTemplateService,
    WorkOrderCreator,
    get_work_order_creator,
)

WorkOrders = Annotated[WorkOrderCreator, Depends(get_work_order_creator)]


def get_pm_schedule_service(
    schedule_repo: PMScheduleRepo,
    completion_repo: PMCompletionRepo,
    template_repo: PMTemplateRepo,
    work_orders: WorkOrders,
    session: DBSession,
) -> PMScheduleService:
    """Get PM schedule service with its repositories and ticket collaborator."""
    return PMScheduleService(
        schedule_repo=schedule_repo,
        completion_repo=completion_repo,
        template_repo=template_repo,
        work_orders=work_orders,
        session=session,
    )


def get_pm_template_service(template_repo: PMTemplateRepo, session: DBSession) -> PMTemplateService:
    return PMTemplateService(template_repo=template_repo, session=session)


PMScheduleServiceDep = Annotated[PMScheduleService, Depends(get_pm_schedule_service)]
PMTemplateServiceDep = Annotated[PMTemplateService, Depends(get_pm_template_service)]
