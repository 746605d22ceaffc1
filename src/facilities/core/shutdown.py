"""In-flight request tracking so shutdown can drain before closing the engine."""

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from src.facilities.core.logging import get_logger

logger = get_logger(__name__)


class RequestTracker:
    """Counts requests in flight and signals once they reach zero during shutdown."""

    def __init__(self) -> None:
        self._in_flight = 0
        self._shutting_down = False
        self._drained = asyncio.Event()

    @property
    def is_shutting_down(self) -> bool:
        return self._shutting_down

    @property
    def in_flight_count(self) -> int:
        return self._in_flight

    @asynccontextmanager
    async def track_request(self) -> AsyncGenerator[None]:
        self._in_flight += 1
        try:
            yield
        finally:
            self._in_flight -= 1
            if self._shutting_down and self._in_flight == 0:
                self._drained.set()

    def start_shutdown(self) -> None:
        self._shutting_down = True
        if self._in_flight == 0:
            self._drained.set()
        logger.info("Shutdown started", in_flight=self._in_flight)

    async def wait_for_drain(self, timeout: float) -> bool:
        """Wait up to ``timeout`` seconds; True if every request finished."""
        try:
            async with asyncio.timeout(timeout):
                await self._drained.wait()
        except TimeoutError:
            logger.warning("Shutdown drain timed out", timeout=timeout, in_flight=self._in_flight)
            return False
        return True

    def reset(self) -> None:
        """Reset tracker state. For testing only."""
        self._in_flight = 0
        self._shutting_down = False
        self._drained = asyncio.Event()


request_tracker = RequestTracker()
