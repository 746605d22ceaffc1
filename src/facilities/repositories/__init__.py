"""Repository layer - tenant-isolated data access.

Every method takes a TenantContext; there is no unscoped read path.
"""

from src.facilities.repositories.base import (
    AuditRecordRepository,
    TenantScopedRepository,
    storage_boundary,
)
from src.facilities.repositories.tenant import (
    PMCompletionRepository,
    PMScheduleRepository,
    PMTemplateRepository,
)

__all__ = [
    # Base
    "AuditRecordRepository",
    "TenantScopedRepository",
    "storage_boundary",
    # Tenant-scoped
    "PMCompletionRepository",
    "PMScheduleRepository",
    "PMTemplateRepository",
]
