"""Model exports.

Import from here: `from src.facilities.models import PMSchedule, PMCompletion`
"""

from src.facilities.models.base import (
    AuditRecordModel,
    TenantScopedModel,
    utc_now,
    utc_today,
)
from src.facilities.scheduling.enums import DueStatus, PMFrequency
from src.facilities.models.tenant import PMCompletion, PMSchedule, PMTemplate

__all__ = [
    # Base
    "AuditRecordModel",
    "TenantScopedModel",
    "utc_now",
    "utc_today",
    # Enums
    "DueStatus",
    "PMFrequency",
    # Tenant-scoped models
    "PMCompletion",
    "PMSchedule",
    "PMTemplate",
]
