"""Tests for the command-line entry point."""

from unittest.mock import AsyncMock

import pytest

from src.facilities import server

pytestmark = [pytest.mark.unit, pytest.mark.asyncio]


class TestParseArgs:
    def test_defaults(self):
        args = server.parse_args([])
        assert (args.host, args.port, args.migrate) == ("0.0.0.0", 8000, False)

    def test_overrides(self):
        args = server.parse_args(["--host", "127.0.0.1", "--port", "9000", "--migrate"])
        assert (args.host, args.port, args.migrate) == ("127.0.0.1", 9000, True)


class TestServe:
    """serve() migrates only when asked, then hands off to uvicorn."""

    @pytest.fixture
    def patched(self, monkeypatch):
        migrate = AsyncMock()
        serve = AsyncMock()
        monkeypatch.setattr(server, "run_migrations_async", migrate)
        monkeypatch.setattr(server, "setup_logging", lambda debug: None)
        monkeypatch.setattr(server.uvicorn.Server, "serve", serve)
        return migrate, serve

    async def test_serve_without_migrations(self, patched):
        migrate, serve = patched

        await server.serve("127.0.0.1", 8001, migrate=False)

        migrate.assert_not_awaited()
        serve.assert_awaited_once()

    async def test_serve_with_migrations(self, patched):
        migrate, serve = patched

        await server.serve("127.0.0.1", 8001, migrate=True)

        migrate.assert_awaited_once()
        serve.assert_awaited_once()
