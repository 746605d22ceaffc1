"""Command-line entry point: optionally migrate, then serve the API."""

import argparse
import asyncio

import uvicorn

from src.facilities.core.config import get_settings
from src.facilities.core.db import run_migrations_async
from src.facilities.core.logging import get_logger, setup_logging

logger = get_logger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Facilities PM API server")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument(
        "--migrate",
        action="store_true",
        help="Apply Alembic migrations to head before serving",
    )
    return parser.parse_args(argv)


async def serve(host: str, port: int, migrate: bool) -> None:
    settings = get_settings()
    setup_logging(settings.debug)

    if migrate:
        logger.info("Applying migrations")
        await run_migrations_async()

    config = uvicorn.Config(
        "src.facilities.main:app",
        host=host,
        port=port,
        log_level="debug" if settings.debug else "info",
    )
    server = uvicorn.Server(config)
    logger.info("Starting API server", host=host, port=port)
    await server.serve()


def main() -> None:
    args = parse_args()
    asyncio.run(serve(args.host, args.port, args.migrate))


if __name__ == "__main__":
    main()
