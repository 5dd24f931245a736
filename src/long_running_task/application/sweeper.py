from __future__ import annotations

import asyncio
import contextlib
import logging

from long_running_task.application.registry import TaskRegistry

logger = logging.getLogger(__name__)


class ExpirySweeper:
    """
    Periodically purge expired tasks from a registry.

    Bound to the application lifecycle: ``start`` on startup, ``stop`` on
    shutdown. A failing sweep is logged and the loop keeps running.
    """

    def __init__(self, registry: TaskRegistry, interval_seconds: float = 5.0) -> None:
        self._registry = registry
        self._interval = max(0.1, float(interval_seconds))
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="task-expiry-sweeper")
        logger.info("Expiry sweeper started", extra={"interval": self._interval})

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Expiry sweeper stopped")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                self._registry.sweep()
            except Exception:
                logger.exception("Expiry sweep failed")
