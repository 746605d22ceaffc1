"""structlog setup and the request-scoped log context.

Everything logged during a request carries request_id, the HTTP method and
path, and (once resolved) tenant_id. Data access never reads the tenant from
the log context; it is always passed explicitly as a TenantContext.
"""

import logging
import sys
from uuid import UUID

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars
from structlog.typing import Processor

# Library loggers that only report warnings and errors
QUIET_LOGGERS = ("sqlalchemy.engine", "httpx", "httpcore", "alembic.runtime.migration")


def _processor_chain(debug: bool) -> list[Processor]:
    chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]
    if debug:
        return chain + [structlog.dev.ConsoleRenderer(colors=True)]
    return chain + [
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(),
    ]


def setup_logging(debug: bool = False) -> None:
    """Route structlog through stdlib logging.

    Args:
        debug: Colored console lines at DEBUG level. Otherwise one JSON
            object per line at INFO level.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if debug else logging.INFO,
        force=True,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=_processor_chain(debug),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_request_context(
    request_id: str | None,
    method: str | None = None,
    path: str | None = None,
) -> None:
    """Attach request correlation fields to every later log call.

    Fields passed as None are left out.
    """
    fields = {"request_id": request_id, "method": method, "path": path}
    bind_contextvars(**{key: value for key, value in fields.items() if value})


def bind_tenant_context(tenant_id: UUID) -> None:
    bind_contextvars(tenant_id=str(tenant_id))


def clear_request_context() -> None:
    clear_contextvars()
