"""Bounded background queue for fire-and-forget writes.

ACL fan-out saves, media destroys and CLP propagation are not awaited by
the hook that issues them. They run here on a fixed pool of workers so
concurrency stays bounded and every failure is logged and counted.
There is no retry: a failed job is reported once and dropped.
"""

from __future__ import annotations

import asyncio
import logging

from cloudcode.application.interfaces.services import JobFactory

logger = logging.getLogger(__name__)


class BackgroundTaskQueue:
    """Implements ITaskQueue with an asyncio.Queue drained by N worker tasks.

    Workers start lazily on first submit (or explicitly via start()).
    submit() waits for room when the queue is full.
    """

    def __init__(self, workers: int = 8, maxsize: int = 10_000) -> None:
        self._worker_count = workers
        self._queue: asyncio.Queue[tuple[JobFactory, str]] = asyncio.Queue(maxsize=maxsize)
        self._workers: list[asyncio.Task] = []
        self.completed = 0
        self.failed = 0

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    @property
    def running(self) -> bool:
        return bool(self._workers)

    def start(self) -> None:
        """Spawn the worker tasks; idempotent. Needs a running event loop."""
        if self._workers:
            return
        self._workers = [
            asyncio.create_task(self._worker(i), name=f"background-worker-{i}")
            for i in range(self._worker_count)
        ]
        logger.info("Background queue started with %s workers", self._worker_count)

    async def submit(self, factory: JobFactory, description: str) -> None:
        self.start()
        await self._queue.put((factory, description))

    async def join(self) -> None:
        """Wait until every job submitted so far has finished (success or failure)."""
        await self._queue.join()

    async def stop(self) -> None:
        """Drain outstanding jobs, then cancel the workers."""
        if not self._workers:
            return
        await self.join()
        for task in self._workers:
            task.cancel()
        await asyncio.gather(*self._workers, return_exceptions=True)
        self._workers = []
        logger.info(
            "Background queue stopped (completed=%s, failed=%s)",
            self.completed,
            self.failed,
        )

    async def _worker(self, index: int) -> None:
        while True:
            factory, description = await self._queue.get()
            try:
                await factory()
            except Exception:
                self.failed += 1
                logger.exception("Background job failed (worker %s): %s", index, description)
            else:
                self.completed += 1
            finally:
                self._queue.task_done()
