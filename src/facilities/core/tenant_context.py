"""Explicit tenant context passed into every persistence and service call."""

from dataclasses import dataclass
from uuid import UUID

from src.facilities.core.errors import TenantContextMissing


@dataclass(frozen=True)
class TenantContext:
    """Immutable tenant scope for a single request or job.

    Attributes:
        tenant_id: The tenant every read and write is restricted to
    """

    tenant_id: UUID


def require_tenant(ctx: TenantContext | None) -> UUID:
    """Return the tenant id or fail the precondition.

    Raises:
        TenantContextMissing: If no context or no tenant id is available
    """
    if ctx is None or ctx.tenant_id is None:
        raise TenantContextMissing()
    return ctx.tenant_id


def resolve_tenant(raw_tenant_id: str | None) -> TenantContext:
    """Build a TenantContext from an externally supplied tenant identifier.

    Raises:
        TenantContextMissing: If the identifier is absent or not a UUID
    """
    if not raw_tenant_id:
        raise TenantContextMissing("Tenant identifier is required")
    try:
        return TenantContext(tenant_id=UUID(raw_tenant_id.strip()))
    except ValueError as e:
        raise TenantContextMissing("Tenant identifier is invalid") from e
