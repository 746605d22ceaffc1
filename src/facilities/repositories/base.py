"""Base repositories enforcing tenant isolation and soft-delete visibility.

Every statement a repository issues starts from scoped_query(), which
filters on the caller's tenant and on live rows. There is no unscoped read
path and no hard delete.
"""

import asyncio
from collections.abc import AsyncGenerator, Mapping
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select
from sqlmodel.sql.expression import SelectOfScalar

from src.facilities.core.config import get_settings
from src.facilities.core.errors import (
    ConflictError,
    FieldViolation,
    InfrastructureError,
    NotFoundError,
    ValidationError,
)
from src.facilities.core.logging import get_logger
from src.facilities.core.tenant_context import TenantContext, require_tenant
from src.facilities.models.base import AuditRecordModel, TenantScopedModel, utc_now
from src.facilities.schemas.pagination import decode_cursor, encode_cursor

logger = get_logger(__name__)

ModelType = TypeVar("ModelType", bound=TenantScopedModel)
AuditModelType = TypeVar("AuditModelType", bound=AuditRecordModel)


@asynccontextmanager
async def storage_boundary(timeout_seconds: float, operation: str) -> AsyncGenerator[None]:
    """Bound a storage round-trip in time and translate driver errors.

    IntegrityError becomes ConflictError; timeouts and other DBAPI errors
    become InfrastructureError (retryable).
    """
    try:
        async with asyncio.timeout(timeout_seconds):
            yield
    except IntegrityError as e:
        raise ConflictError(f"Uniqueness violation during {operation}") from e
    except TimeoutError as e:
        logger.warning("Storage operation timed out", operation=operation, timeout=timeout_seconds)
        raise InfrastructureError(f"Storage timed out during {operation}") from e
    except DBAPIError as e:
        logger.error("Storage operation failed", operation=operation, error=str(e))
        raise InfrastructureError(f"Storage unavailable during {operation}") from e


class _RepositoryIO:
    """Timeout-bound execute/flush shared by both repository kinds."""

    def __init__(self, session: AsyncSession, timeout_seconds: float | None = None):
        self.session = session
        self.timeout_seconds = timeout_seconds or get_settings().db_operation_timeout_seconds

    async def _execute(self, statement: Any, operation: str) -> Any:
        async with storage_boundary(self.timeout_seconds, operation):
            return await self.session.execute(statement)

    async def _flush(self, operation: str) -> None:
        async with storage_boundary(self.timeout_seconds, operation):
            await self.session.flush()


class TenantScopedRepository(_RepositoryIO, Generic[ModelType]):
    """Generic repository for mutable tenant-scoped entities.

    Repositories handle data access only. Transaction control (commit)
    should be done in the service layer.
    """

    model: type[ModelType]
    entity_name: str = "Entity"

    def scoped_query(self, ctx: TenantContext) -> SelectOfScalar[ModelType]:
        """Live rows of the caller's tenant. Raises TenantContextMissing."""
        tenant_id = require_tenant(ctx)
        return select(self.model).where(
            self.model.tenant_id == tenant_id,
            self.model.deleted_at.is_(None),  # type: ignore[union-attr]
        )

    def _order_column(self, order_by: str) -> Any:
        column = self.model.__table__.c.get(order_by)  # type: ignore[attr-defined]
        if column is None:
            raise ValueError(f"Unknown order column '{order_by}' for {self.entity_name}")
        return column

    async def find_all(
        self,
        ctx: TenantContext,
        order_by: str = "created_at",
        descending: bool = False,
    ) -> list[ModelType]:
        """All live rows for the tenant, ordered by ``order_by``."""
        column = self._order_column(order_by)
        query = self.scoped_query(ctx).order_by(column.desc() if descending else column.asc())
        result = await self._execute(query, f"list {self.entity_name}")
        return list(result.scalars().all())

    async def find_by_id(self, ctx: TenantContext, id: UUID) -> ModelType | None:
        """Get a live row owned by the tenant, or None."""
        query = self.scoped_query(ctx).where(self.model.id == id)
        result = await self._execute(query, f"get {self.entity_name}")
        return result.scalar_one_or_none()

    async def get_for_update(self, ctx: TenantContext, id: UUID) -> ModelType | None:
        """Like find_by_id, but locks the row until the transaction ends."""
        query = self.scoped_query(ctx).where(self.model.id == id).with_for_update()
        result = await self._execute(query, f"lock {self.entity_name}")
        return result.scalar_one_or_none()

    async def require(self, ctx: TenantContext, id: UUID) -> ModelType:
        """Get a live row owned by the tenant or raise NotFoundError."""
        entity = await self.find_by_id(ctx, id)
        if entity is None:
            raise NotFoundError(self.entity_name, id)
        return entity

    async def exists(self, ctx: TenantContext, id: UUID) -> bool:
        """Check if a live row with this id exists for the tenant."""
        return await self.find_by_id(ctx, id) is not None

    async def count(self, ctx: TenantContext) -> int:
        """Count live rows for the tenant."""
        return await self.count_matching(self.scoped_query(ctx))

    async def count_matching(self, query: SelectOfScalar[ModelType]) -> int:
        """Count rows of a query derived from scoped_query()."""
        counted = select(func.count()).select_from(query.subquery())
        result = await self._execute(counted, f"count {self.entity_name}")
        return int(result.scalar_one())

    async def create(self, ctx: TenantContext, entity: ModelType) -> ModelType:
        """Insert a new live row owned by the caller's tenant (no commit).

        Whatever tenant_id the caller put on the entity is overwritten.

        Raises:
            ValidationError: If the entity's structural invariants fail
        """
        entity.tenant_id = require_tenant(ctx)
        now = utc_now()
        entity.created_at = now
        entity.updated_at = now
        entity.deleted_at = None

        violations = entity.invariant_violations()
        if violations:
            raise ValidationError(violations)

        self.session.add(entity)
        await self._flush(f"create {self.entity_name}")
        return entity

    async def update(
        self,
        ctx: TenantContext,
        id: UUID,
        patch: Mapping[str, Any],
    ) -> ModelType:
        """Apply a field patch to a live row owned by the tenant (no commit).

        Raises:
            ValidationError: If the patch touches protected or unknown columns,
                or leaves the entity violating its invariants
            NotFoundError: If the row is missing, deleted, or foreign
        """
        require_tenant(ctx)
        columns = self.model.__table__.c  # type: ignore[attr-defined]
        bad_fields = [
            FieldViolation(field, "Field cannot be modified")
            for field in patch
            if field in self.model.PROTECTED_FIELDS
        ] + [
            FieldViolation(field, "Unknown field")
            for field in patch
            if field not in self.model.PROTECTED_FIELDS and field not in columns
        ]
        if bad_fields:
            raise ValidationError(bad_fields)

        entity = await self.get_for_update(ctx, id)
        if entity is None:
            raise NotFoundError(self.entity_name, id)

        previous = {field: getattr(entity, field) for field in patch}
        for field, value in patch.items():
            setattr(entity, field, value)

        violations = entity.invariant_violations()
        if violations:
            for field, value in previous.items():
                setattr(entity, field, value)
            raise ValidationError(violations)

        entity.updated_at = utc_now()
        await self._flush(f"update {self.entity_name}")
        return entity

    async def soft_delete(self, ctx: TenantContext, id: UUID) -> ModelType:
        """Mark a live row owned by the tenant as deleted (no commit).

        Raises:
            NotFoundError: If the row is missing, already deleted, or foreign
        """
        entity = await self.get_for_update(ctx, id)
        if entity is None:
            raise NotFoundError(self.entity_name, id)

        now = utc_now()
        entity.deleted_at = now
        entity.updated_at = now
        await self._flush(f"delete {self.entity_name}")
        return entity

    async def paginate(
        self,
        query: Any,  # SelectOfScalar built from scoped_query()
        cursor: str | None,
        limit: int,
        cursor_field: Any,
    ) -> tuple[list[ModelType], str | None, bool]:
        """Execute cursor-based pagination on a scoped query.

        Args:
            query: A query derived from scoped_query()
            cursor: Optional cursor from previous page (base64-encoded)
            limit: Maximum number of items to return
            cursor_field: The field to use for cursor (e.g., created_at, id)

        Returns:
            Tuple of (items, next_cursor, has_more)
        """
        if cursor:
            try:
                cursor_str = decode_cursor(cursor)
                cursor_value: datetime | UUID | str
                try:
                    cursor_value = datetime.fromisoformat(cursor_str)
                except ValueError:
                    try:
                        cursor_value = UUID(cursor_str)
                    except ValueError:
                        cursor_value = cursor_str
                query = query.where(cursor_field < cursor_value)
            except (ValueError, TypeError):
                # Invalid cursor - ignore and start from beginning
                pass

        query = query.order_by(cursor_field.desc()).limit(limit + 1)

        result = await self._execute(query, f"page {self.entity_name}")
        items = list(result.scalars().all())

        has_more = len(items) > limit
        if has_more:
            items = items[:limit]

        next_cursor = None
        if has_more and items:
            value = getattr(items[-1], cursor_field.key)
            if isinstance(value, datetime):
                next_cursor = encode_cursor(value.isoformat())
            elif value is not None:
                next_cursor = encode_cursor(str(value))

        return items, next_cursor, has_more


class AuditRecordRepository(_RepositoryIO, Generic[AuditModelType]):
    """Append-only repository for immutable audit records.

    Exposes no update or delete. Subclasses define how a record is scoped
    to a tenant, since audit tables may carry tenant scope transitively.
    """

    model: type[AuditModelType]
    entity_name: str = "Record"

    def scoped_query(self, ctx: TenantContext) -> SelectOfScalar[AuditModelType]:
        """Records visible to the caller's tenant."""
        raise NotImplementedError

    async def find_by_id(self, ctx: TenantContext, id: UUID) -> AuditModelType | None:
        query = self.scoped_query(ctx).where(self.model.id == id)
        result = await self._execute(query, f"get {self.entity_name}")
        return result.scalar_one_or_none()

    async def ensure_in_scope(self, ctx: TenantContext, record: AuditModelType) -> None:
        """Raise NotFoundError if the record's owner is not visible to the tenant."""
        raise NotImplementedError

    async def add(self, ctx: TenantContext, record: AuditModelType) -> AuditModelType:
        """Insert a record once (no commit).

        Raises:
            ConflictError: If a uniqueness constraint rejects the record
        """
        require_tenant(ctx)
        await self.ensure_in_scope(ctx, record)
        record.created_at = utc_now()
        self.session.add(record)
        await self._flush(f"record {self.entity_name}")
        return record


__all__ = [
    "AuditRecordRepository",
    "TenantScopedRepository",
    "storage_boundary",
]
