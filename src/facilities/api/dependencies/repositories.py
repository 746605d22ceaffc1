"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.facilities.api.dependencies.db import DBSession
from src.facilities.repositories import (
    PMCompletionRepository,
    PMScheduleRepository,
    PMTemplateRepository,
)


def get_pm_schedule_repository(session: DBSession) -> PMScheduleRepository:
    return PMScheduleRepository(session)


def get_pm_completion_repository(session: DBSession) -> PMCompletionRepository:
    return PMCompletionRepository(session)


def get_pm_template_repository(session: DBSession) -> PMTemplateRepository:
    return PMTemplateRepository(session)


PMScheduleRepo = Annotated[PMScheduleRepository, Depends(get_pm_schedule_repository)]
PMCompletionRepo = Annotated[PMCompletionRepository, Depends(get_pm_completion_repository)]
PMTemplateRepo = Annotated[PMTemplateRepository, Depends(get_pm_template_repository)]
