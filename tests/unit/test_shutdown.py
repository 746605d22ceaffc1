"""Tests for graceful shutdown functionality."""

import asyncio
import contextlib

import pytest

from src.facilities.core.shutdown import RequestTracker

pytestmark = [pytest.mark.unit, pytest.mark.asyncio]


class TestRequestTracker:
    """Test the RequestTracker class."""

    async def test_request_tracking(self):
        """Test that requests are tracked correctly."""
        tracker = RequestTracker()

        assert tracker.in_flight_count == 0
        assert not tracker.is_shutting_down

        async with tracker.track_request():
            assert tracker.in_flight_count == 1

        assert tracker.in_flight_count == 0

    async def test_multiple_concurrent_requests(self):
        """Test tracking multiple concurrent requests."""
        tracker = RequestTracker()
        release = asyncio.Event()

        async def mock_request():
            async with tracker.track_request():
                await release.wait()

        tasks = [asyncio.create_task(mock_request()) for _ in range(3)]
        await asyncio.sleep(0.01)
        assert tracker.in_flight_count == 3

        release.set()
        await asyncio.gather(*tasks)
        assert tracker.in_flight_count == 0

    async def test_shutdown_with_no_requests(self):
        """Test shutdown when there are no in-flight requests."""
        tracker = RequestTracker()

        tracker.start_shutdown()
        assert tracker.is_shutting_down

        assert await tracker.wait_for_drain(timeout=1.0) is True

    async def test_shutdown_waits_for_in_flight_requests(self):
        """Test shutdown waits for in-flight requests to complete."""
        tracker = RequestTracker()
        release = asyncio.Event()

        async def long_request():
            async with tracker.track_request():
                await release.wait()

        task = asyncio.create_task(long_request())
        await asyncio.sleep(0.01)
        assert tracker.in_flight_count == 1

        tracker.start_shutdown()
        waiter = asyncio.create_task(tracker.wait_for_drain(timeout=5.0))
        await asyncio.sleep(0.01)
        assert not waiter.done()

        release.set()
        assert await waiter is True
        await task
        assert tracker.in_flight_count == 0

    async def test_shutdown_timeout(self):
        """Test that drain returns False when requests outlive the timeout."""
        tracker = RequestTracker()
        release = asyncio.Event()

        async def stuck_request():
            async with tracker.track_request():
                await release.wait()

        task = asyncio.create_task(stuck_request())
        await asyncio.sleep(0.01)

        tracker.start_shutdown()
        assert await tracker.wait_for_drain(timeout=0.05) is False
        assert tracker.in_flight_count == 1

        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def test_reset(self):
        """Test resetting tracker state."""
        tracker = RequestTracker()
        tracker.start_shutdown()

        tracker.reset()

        assert not tracker.is_shutting_down
        assert tracker.in_flight_count == 0
