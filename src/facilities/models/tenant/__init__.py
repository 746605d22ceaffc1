"""Tenant-scoped models.

Tables live in the shared store; every mutable row carries tenant_id and
completions inherit scope through their schedule.
"""

from src.facilities.models.tenant.pm_completion import PMCompletion
from src.facilities.models.tenant.pm_schedule import PMSchedule
from src.facilities.models.tenant.pm_template import PMTemplate

__all__ = ["PMCompletion", "PMSchedule", "PMTemplate"]
