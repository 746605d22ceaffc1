"""PM template service."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.facilities.core.logging import get_logger
from src.facilities.core.tenant_context import TenantContext
from src.facilities.models import PMTemplate
from src.facilities.repositories import PMTemplateRepository, storage_boundary
from src.facilities.schemas.pm_template import PMTemplateCreate, PMTemplateUpdate

logger = get_logger(__name__)


class PMTemplateService:
    """PM template business logic - validation lives on the model."""

    def __init__(self, template_repo: PMTemplateRepository, session: AsyncSession):
        self.template_repo = template_repo
        self.session = session

    async def _commit(self, operation: str) -> None:
        async with storage_boundary(self.template_repo.timeout_seconds, operation):
            await self.session.commit()

    async def create_template(self, ctx: TenantContext, data: PMTemplateCreate) -> PMTemplate:
        """Create a template.

        Raises:
            ValidationError: If name or estimated duration are out of range
        """
        template = PMTemplate(**data.model_dump())
        try:
            await self.template_repo.create(ctx, template)
            await self._commit("create PM template")
        except Exception:
            await self.session.rollback()
            raise

        logger.info("PM template created", template_id=str(template.id), name=template.name)
        return template

    async def get_template(self, ctx: TenantContext, template_id: UUID) -> PMTemplate:
        return await self.template_repo.require(ctx, template_id)

    async def list_templates(
        self,
        ctx: TenantContext,
        category: str | None = None,
        cursor: str | None = None,
        limit: int = 100,
    ) -> tuple[list[PMTemplate], str | None, bool]:
        return await self.template_repo.list_page(ctx, category=category, cursor=cursor, limit=limit)

    async def update_template(
        self, ctx: TenantContext, template_id: UUID, data: PMTemplateUpdate
    ) -> PMTemplate:
        patch = data.model_dump(exclude_unset=True)
        try:
            template = await self.template_repo.update(ctx, template_id, patch)
            await self._commit("update PM template")
        except Exception:
            await self.session.rollback()
            raise

        logger.info("PM template updated", template_id=str(template_id), fields=sorted(patch))
        return template

    async def delete_template(self, ctx: TenantContext, template_id: UUID) -> None:
        try:
            await self.template_repo.soft_delete(ctx, template_id)
            await self._commit("delete PM template")
        except Exception:
            await self.session.rollback()
            raise

        logger.info("PM template deleted", template_id=str(template_id))
