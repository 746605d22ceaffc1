"""Repository for PM templates (tenant-scoped)."""

from src.facilities.core.tenant_context import TenantContext
from src.facilities.models.tenant import PMTemplate
from src.facilities.repositories.base import TenantScopedRepository


class PMTemplateRepository(TenantScopedRepository[PMTemplate]):
    """Repository for PMTemplate entity."""

    model = PMTemplate
    entity_name = "PM template"

    async def list_page(
        self,
        ctx: TenantContext,
        category: str | None = None,
        cursor: str | None = None,
        limit: int = 100,
    ) -> tuple[list[PMTemplate], str | None, bool]:
        """List templates, newest first, optionally filtered by category."""
        query = self.scoped_query(ctx)
        if category is not None:
            query = query.where(PMTemplate.category == category)
        return await self.paginate(query, cursor, limit, PMTemplate.created_at)

    async def get_by_name(self, ctx: TenantContext, name: str) -> PMTemplate | None:
        query = self.scoped_query(ctx).where(PMTemplate.name == name)
        result = await self._execute(query, "get PM template by name")
        return result.scalars().first()
