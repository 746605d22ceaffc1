"""FastAPI dependency injection definitions.

Re-exports all dependencies for convenience.
"""

# Database
from src.facilities.api.dependencies.db import DBSession, get_db_session

# Repositories
from src.facilities.api.dependencies.repositories import (
    PMCompletionRepo,
    PMScheduleRepo,
    PMTemplateRepo,
    get_pm_completion_repository,
    get_pm_schedule_repository,
    get_pm_template_repository,
)

# Services
from src.facilities.api.dependencies.services import (
    PMScheduleServiceDep,
    PMTemplateServiceDep,
    WorkOrders,
    get_pm_schedule_service,
    get_pm_template_service,
)

# Tenant
from src.facilities.api.dependencies.tenant import Tenant, get_tenant_context

__all__ = [
    # Database
    "DBSession",
    "get_db_session",
    # Tenant
    "Tenant",
    "get_tenant_context",
    # Repositories
    "PMCompletionRepo",
    "PMScheduleRepo",
    "PMTemplateRepo",
    "get_pm_completion_repository",
    "get_pm_schedule_repository",
    "get_pm_template_repository",
    # Services
    "PMScheduleServiceDep",
    "PMTemplateServiceDep",
    "WorkOrders",
    "get_pm_schedule_service",
    "get_pm_template_service",
]
