from src.facilities.schemas.pagination import PaginatedResponse
from src.facilities.schemas.pm_schedule import (
    CalendarEntryRead,
    CalendarRead,
    DueSchedulesRead,
    GeneratedTicketRead,
    GenerationErrorRead,
    PMCompletionCreate,
    PMCompletionRead,
    PMCompletionResult,
    PMScheduleCreate,
    PMScheduleRead,
    PMScheduleUpdate,
    PMStatsRead,
    TicketGenerationRead,
)
from src.facilities.schemas.pm_template import PMTemplateCreate, PMTemplateRead, PMTemplateUpdate

__all__ = [
    # Pagination
    "PaginatedResponse",
    # PM schedules
    "CalendarEntryRead",
    "CalendarRead",
    "DueSchedulesRead",
    "GeneratedTicketRead",
    "GenerationErrorRead",
    "PMCompletionCreate",
    "PMCompletionRead",
    "PMCompletionResult",
    "PMScheduleCreate",
    "PMScheduleRead",
    "PMScheduleUpdate",
    "PMStatsRead",
    "TicketGenerationRead",
    # PM templates
    "PMTemplateCreate",
    "PMTemplateRead",
    "PMTemplateUpdate",
]
