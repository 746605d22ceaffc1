"""Tenant header extraction dependencies."""

from typing import Annotated

from fastapi import Depends, Header

from src.facilities.core.logging import bind_tenant_context
from src.facilities.core.tenant_context import TenantContext, resolve_tenant


async def get_tenant_context(
    x_tenant_id: Annotated[str | None, Header()] = None,
) -> TenantContext:
    """Resolve the X-Tenant-ID header into an explicit TenantContext.

    A missing or malformed header raises TenantContextMissing (401).
    """
    ctx = resolve_tenant(x_tenant_id)
    bind_tenant_context(ctx.tenant_id)
    return ctx


Tenant = Annotated[TenantContext, Depends(get_tenant_context)]
