"""Process-wide async engine."""

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from src.facilities.core.config import Settings, get_settings

_engine: AsyncEngine | None = None


def build_engine(settings: Settings) -> AsyncEngine:
    """Create an engine for ``settings.database_url`` without connecting.

    Server databases get a sized pool whose checkout wait is capped at the
    per-call storage timeout. SQLite keeps the driver's default pool.
    """
    url = make_url(settings.database_url)
    options: dict[str, object] = {"pool_pre_ping": True}
    if url.get_backend_name() != "sqlite":
        options.update(
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            pool_timeout=settings.db_operation_timeout_seconds,
        )
    return create_async_engine(url, **options)


def get_engine() -> AsyncEngine:
    global _engine
    if _engine is None:
        _engine = build_engine(get_settings())
    return _engine


async def dispose_engine() -> None:
    """Close pooled connections; the next get_engine() builds a fresh engine."""
    global _engine
    engine, _engine = _engine, None
    if engine is not None:
        await engine.dispose()
