"""Test helpers shared by unit and integration tests."""

from uuid import UUID, uuid4

from src.facilities.core.tenant_context import TenantContext
from src.facilities.services.work_orders import WorkOrderCreationError, WorkOrderRequest


class FakeWorkOrderCreator:
    """In-memory ticket service.

    Records every request. A repeated idempotency key returns the ticket
    already issued for it; otherwise a fresh ticket id is issued, unless the
    schedule id is listed in ``failing`` in which case it raises.
    """

    def __init__(self) -> None:
        self.requests: list[tuple[TenantContext, WorkOrderRequest]] = []
        self.issued: list[UUID] = []
        self.failing: set[UUID] = set()
        self.by_key: dict[str, UUID] = {}

    async def create_work_order(self, ctx: TenantContext, request: WorkOrderRequest) -> UUID:
        self.requests.append((ctx, request))
        if request.schedule_id in self.failing:
            raise WorkOrderCreationError("Ticket service returned 502")
        if request.idempotency_key in self.by_key:
            return self.by_key[request.idempotency_key]
        ticket_id = uuid4()
        self.issued.append(ticket_id)
        self.by_key[request.idempotency_key] = ticket_id
        return ticket_id


def tenant_headers(ctx: TenantContext) -> dict[str, str]:
    """Headers that resolve to the given tenant."""
    return {"X-Tenant-ID": str(ctx.tenant_id)}
