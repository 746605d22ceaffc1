"""Tests for explicit tenant context resolution."""

from uuid import uuid4

import pytest

from src.facilities.core.errors import TenantContextMissing
from src.facilities.core.tenant_context import TenantContext, require_tenant, resolve_tenant

pytestmark = pytest.mark.unit


class TestResolveTenant:
    """Tests for turning the tenant header into a TenantContext."""

    def test_valid_uuid(self):
        tenant_id = uuid4()
        assert resolve_tenant(str(tenant_id)) == TenantContext(tenant_id=tenant_id)

    def test_surrounding_whitespace_is_ignored(self):
        tenant_id = uuid4()
        assert resolve_tenant(f"  {tenant_id} ").tenant_id == tenant_id

    @pytest.mark.parametrize("raw", [None, ""])
    def test_missing_identifier(self, raw):
        with pytest.raises(TenantContextMissing, match="required"):
            resolve_tenant(raw)

    @pytest.mark.parametrize("raw", ["acme", "1234", "not-a-uuid-at-all"])
    def test_malformed_identifier(self, raw):
        with pytest.raises(TenantContextMissing, match="invalid"):
            resolve_tenant(raw)


class TestRequireTenant:
    """Tests for the tenant precondition every repository call checks."""

    def test_returns_tenant_id(self):
        ctx = TenantContext(tenant_id=uuid4())
        assert require_tenant(ctx) == ctx.tenant_id

    def test_none_context(self):
        with pytest.raises(TenantContextMissing):
            require_tenant(None)

    def test_context_without_tenant(self):
        with pytest.raises(TenantContextMissing):
            require_tenant(TenantContext(tenant_id=None))  # type: ignore[arg-type]

    def test_context_is_immutable(self):
        ctx = TenantContext(tenant_id=uuid4())
        with pytest.raises(AttributeError):
            ctx.tenant_id = uuid4()  # type: ignore[misc]
