"""Service layer - business logic and transaction boundaries."""

from src.facilities.services.pm_schedule_service import (
    Calendar,
    CalendarEntry,
    CompletionOutcome,
    DueSchedules,
    GeneratedTicket,
    GenerationError,
    PMScheduleService,
    PMStats,
    TicketGenerationResult,
)
from src.facilities.services.pm_template_service import PMTemplateService
from src.facilities.services.work_orders import (
    HttpWorkOrderClient,
    UnavailableWorkOrderCreator,
    WorkOrderCreationError,
    WorkOrderCreator,
    WorkOrderRequest,
    get_work_order_creator,
)

__all__ = [
    "Calendar",
    "CalendarEntry",
    "CompletionOutcome",
    "DueSchedules",
    "GeneratedTicket",
    "GenerationError",
    "HttpWorkOrderClient",
    "PMScheduleService",
    "PMStats",
    "PMTemplateService",
    "TicketGenerationResult",
    "UnavailableWorkOrderCreator",
    "WorkOrderCreationError",
    "WorkOrderCreator",
    "WorkOrderRequest",
    "get_work_order_creator",
]
