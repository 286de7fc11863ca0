"""Unit tests for the retrying notification job runner."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from tatvivah.notifications import NotificationDispatcher

pytestmark = pytest.mark.asyncio


class TestNotificationDispatcher:
    async def test_submit_without_handler(self):
        dispatcher = NotificationDispatcher()
        with pytest.raises(RuntimeError, match="no handler"):
            dispatcher.submit("n1")

    async def test_successful_job(self):
        handler = AsyncMock()
        dispatcher = NotificationDispatcher(handler)

        assert await dispatcher.submit("n1") is True
        handler.assert_awaited_once_with("n1")
        assert dispatcher.pending == 0

    async def test_retries_until_success(self):
        handler = AsyncMock(side_effect=[ValueError("smtp down"), ValueError("still down"), None])
        dispatcher = NotificationDispatcher(handler, max_attempts=5, base_delay=0)

        assert await dispatcher.submit("n1") is True
        assert handler.await_count == 3

    async def test_gives_up_after_max_attempts(self):
        handler = AsyncMock(side_effect=ValueError("bounced"))
        dispatcher = NotificationDispatcher(handler, max_attempts=3, base_delay=0)

        assert await dispatcher.submit("n1") is False
        assert handler.await_count == 3

    async def test_backoff_delays(self, monkeypatch: pytest.MonkeyPatch):
        delays = []

        async def fake_sleep(seconds):
            delays.append(seconds)

        monkeypatch.setattr(asyncio, "sleep", fake_sleep)
        handler = AsyncMock(side_effect=ValueError("nope"))
        dispatcher = NotificationDispatcher(handler, max_attempts=4, base_delay=5, factor=2)

        await dispatcher._run("n1")
        assert delays == [5, 10, 20]

    async def test_concurrency_is_bounded(self):
        running = 0
        peak = 0

        async def handler(_):
            nonlocal running, peak
            running += 1
            peak = max(peak, running)
            await asyncio.sleep(0.01)
            running -= 1

        dispatcher = NotificationDispatcher(handler, concurrency=2)
        for i in range(6):
            dispatcher.submit(f"n{i}")
        await dispatcher.drain()

        assert peak == 2
        assert dispatcher.pending == 0

    async def test_shutdown_cancels_pending_jobs(self):
        started = asyncio.Event()

        async def handler(_):
            started.set()
            await asyncio.sleep(60)

        dispatcher = NotificationDispatcher(handler)
        task = dispatcher.submit("n1")
        await started.wait()

        await dispatcher.shutdown()
        assert task.cancelled()
        assert dispatcher.pending == 0
