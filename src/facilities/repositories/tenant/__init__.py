"""Tenant-scoped repositories."""

from src.facilities.repositories.tenant.pm_completion import PMCompletionRepository
from src.facilities.repositories.tenant.pm_schedule import PMScheduleRepository
from src.facilities.repositories.tenant.pm_template import PMTemplateRepository

__all__ = ["PMCompletionRepository", "PMScheduleRepository", "PMTemplateRepository"]
