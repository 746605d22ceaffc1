"""Ticket Creation collaborator: turns a due PM occurrence into a work order."""

from dataclasses import asdict, dataclass
from datetime import date
from decimal import Decimal
from typing import Protocol
from uuid import UUID

import httpx

from src.facilities.core.config import get_settings
from src.facilities.core.errors import InfrastructureError
from src.facilities.core.logging import get_logger
from src.facilities.core.tenant_context import TenantContext, require_tenant

logger = get_logger(__name__)


class WorkOrderCreationError(InfrastructureError):
    """The ticket service could not create a work order. Retryable."""


@dataclass(frozen=True)
class WorkOrderRequest:
    """Everything the ticket service needs to open a PM work order."""

    schedule_id: UUID
    title: str
    description: str
    scheduled_date: date
    asset_id: UUID | None = None
    location_id: UUID | None = None
    assigned_to: UUID | None = None
    vendor_id: UUID | None = None
    estimated_cost: Decimal | None = None

    @property
    def idempotency_key(self) -> str:
        """Same for every request about one occurrence of a schedule."""
        return f"pm-{self.schedule_id}-{self.scheduled_date.isoformat()}"

    def to_payload(self) -> dict[str, object]:
        payload: dict[str, object] = {}
        for key, value in asdict(self).items():
            if value is None:
                continue
            if isinstance(value, date):
                value = value.isoformat()
            elif isinstance(value, (UUID, Decimal)):
                value = str(value)
            payload[key] = value
        payload["source"] = "preventive_maintenance"
        payload["idempotency_key"] = self.idempotency_key
        return payload


class WorkOrderCreator(Protocol):
    async def create_work_order(self, ctx: TenantContext, request: WorkOrderRequest) -> UUID: ...


class HttpWorkOrderClient:
    """WorkOrderCreator backed by the ticket service HTTP API.

    Posts to ``{base_url}/work-orders`` with the tenant in ``X-Tenant-ID``
    and expects ``{"id": "<uuid>"}`` back. Each request carries an
    ``Idempotency-Key`` derived from the schedule and occurrence date.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = httpx.Timeout(timeout_seconds)
        self._transport = transport

    def _headers(self, tenant_id: UUID, request: WorkOrderRequest) -> dict[str, str]:
        headers = {
            "X-Tenant-ID": str(tenant_id),
            "Idempotency-Key": request.idempotency_key,
        }
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def create_work_order(self, ctx: TenantContext, request: WorkOrderRequest) -> UUID:
        """Create a work order and return its ticket id.

        Raises:
            WorkOrderCreationError: On timeout, transport failure, a non-2xx
                response, or a response without a valid id
        """
        tenant_id = require_tenant(ctx)
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    "/work-orders",
                    json=request.to_payload(),
                    headers=self._headers(tenant_id, request),
                )
                response.raise_for_status()
                body = response.json()
        except httpx.TimeoutException as e:
            logger.warning("Work order request timed out", schedule_id=str(request.schedule_id))
            raise WorkOrderCreationError("Ticket service timed out") from e
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Work order request rejected",
                schedule_id=str(request.schedule_id),
                status_code=e.response.status_code,
            )
            raise WorkOrderCreationError(
                f"Ticket service returned {e.response.status_code}"
            ) from e
        except httpx.RequestError as e:
            logger.warning(
                "Work order request failed",
                schedule_id=str(request.schedule_id),
                error=str(e),
            )
            raise WorkOrderCreationError("Ticket service unavailable") from e
        except ValueError as e:
            raise WorkOrderCreationError("Ticket service returned invalid JSON") from e

        try:
            return UUID(str(body["id"]))
        except (KeyError, TypeError, ValueError) as e:
            raise WorkOrderCreationError("Ticket service response has no valid id") from e


class UnavailableWorkOrderCreator:
    """Stands in when no ticket service URL is configured."""

    async def create_work_order(self, ctx: TenantContext, request: WorkOrderRequest) -> UUID:
        raise WorkOrderCreationError("Ticket service is not configured")


def get_work_order_creator() -> WorkOrderCreator:
    """Build the work-order collaborator from settings."""
    settings = get_settings()
    if not settings.ticket_service_url:
        return UnavailableWorkOrderCreator()
    return HttpWorkOrderClient(
        base_url=settings.ticket_service_url,
        api_key=settings.ticket_service_api_key,
        timeout_seconds=settings.ticket_service_timeout_seconds,
    )
