"""In-process notification job runner.

Jobs are notification ids handed to an async handler. Each job runs as an
``asyncio`` task, at most ``concurrency`` at a time, and is retried with
exponential backoff (``base_delay * factor**attempt``) until it succeeds or
``max_attempts`` is reached.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional, Set

from tatvivah.core.logging_config import get_logger

logger = get_logger(__name__)

Handler = Callable[[str], Awaitable[None]]


class NotificationDispatcher:
    """Bounded-concurrency retrying runner for notification deliveries.

    Attributes:
        concurrency: Maximum deliveries in flight
        max_attempts: Attempts per job, including the first one
        base_delay: Seconds to wait before the first retry
        factor: Backoff multiplier between retries
    """

    def __init__(
        self,
        handler: Optional[Handler] = None,
        *,
        concurrency: int = 5,
        max_attempts: int = 5,
        base_delay: float = 5.0,
        factor: float = 2.0,
    ) -> None:
        self.handler = handler
        self.concurrency = concurrency
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.factor = factor
        self._semaphore: Optional[asyncio.Semaphore] = None
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def _get_semaphore(self) -> asyncio.Semaphore:
        if self._semaphore is None:
            self._semaphore = asyncio.Semaphore(self.concurrency)
        return self._semaphore

    def submit(self, notification_id: str) -> asyncio.Task:
        """Schedule delivery of a notification on the running loop."""
        if self.handler is None:
            raise RuntimeError("NotificationDispatcher has no handler configured")
        task = asyncio.create_task(self._run(notification_id), name=f"notification:{notification_id}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run(self, notification_id: str) -> bool:
        for attempt in range(self.max_attempts):
            try:
                async with self._get_semaphore():
                    await self.handler(notification_id)
                return True
            except asyncio.CancelledError:
                raise
            except Exception as e:
                if attempt + 1 >= self.max_attempts:
                    logger.error(
                        f"Notification {notification_id} failed after {self.max_attempts} attempts: {e}", exc_info=True
                    )
                    return False
                delay = self.base_delay * (self.factor**attempt)
                logger.warning(
                    f"Notification {notification_id} failed; retrying in {delay}s "
                    f"(attempt {attempt + 1}/{self.max_attempts}): {e}"
                )
                await asyncio.sleep(delay)
        return False

    async def drain(self) -> None:
        """Wait for every scheduled job to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def shutdown(self) -> None:
        """Cancel outstanding jobs (used on application shutdown)."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        if tasks:
            logger.info(f"Cancelled {len(tasks)} pending notification jobs")
