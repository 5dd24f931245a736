from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta
from typing import Generic

from long_running_task.domain.clock import Clock, SystemClock
from long_running_task.domain.exceptions import (
    TaskAlreadyCompletedError,
    TaskNotFoundError,
    TaskStillPendingError,
)
from long_running_task.domain.models.task_id import TaskId
from long_running_task.domain.models.task_state import (
    Done,
    Pending,
    R,
    TaskProgress,
    TaskStateView,
)

logger = logging.getLogger(__name__)


class TaskRegistry(Generic[R]):
    """
    Thread-safe in-memory registry of long-running tasks.

    Tasks start out ``Pending`` and move to ``Done`` exactly once. Done entries
    expire ``lifespan`` after completion; ``None`` disables expiry. Expired
    entries are dropped by ``sweep`` and also by any call that looks them up,
    so an expired result is never handed out.
    """

    def __init__(self, lifespan: timedelta | None = None, clock: Clock | None = None) -> None:
        if lifespan is not None and lifespan <= timedelta(0):
            raise ValueError("lifespan must be positive or None")
        self._lifespan = lifespan
        self._clock = clock or SystemClock()
        self._entries: dict[TaskId, Pending | Done[R]] = {}
        self._lock = threading.Lock()

    @property
    def lifespan(self) -> timedelta | None:
        return self._lifespan

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, task_id: object) -> bool:
        if not isinstance(task_id, TaskId):
            return False
        with self._lock:
            return self._lookup(task_id, self._clock.now()) is not None

    def start(self) -> TaskId:
        """Register a new pending task and return its id."""
        with self._lock:
            task_id = TaskId.new()
            while task_id in self._entries:
                task_id = TaskId.new()
            self._entries[task_id] = Pending()
        logger.debug("Task started", extra={"task_id": str(task_id)})
        return task_id

    def report_progress(self, task_id: TaskId, progress: TaskProgress) -> None:
        with self._lock:
            entry = self._require(task_id, self._clock.now())
            if isinstance(entry, Done):
                raise TaskAlreadyCompletedError(task_id)
            self._entries[task_id] = Pending(progress=progress)

    def complete(self, task_id: TaskId, result: R) -> None:
        """
        Mark a pending task as done with ``result``.

        Raises ``TaskNotFoundError`` for unknown or expired ids and
        ``TaskAlreadyCompletedError`` if the task already has a result.
        """
        with self._lock:
            now = self._clock.now()
            entry = self._require(task_id, now)
            if isinstance(entry, Done):
                raise TaskAlreadyCompletedError(task_id)
            self._entries[task_id] = Done(result=result, completed_at=now)
            purged = self._purge_expired(now)
        logger.info("Task completed", extra={"task_id": str(task_id), "purged": purged})

    def status(self, task_id: TaskId) -> TaskStateView[R]:
        """Return the current state of a task without removing it."""
        with self._lock:
            return self._require(task_id, self._clock.now())

    def take(self, task_id: TaskId) -> R:
        """Remove a done task and return its result."""
        with self._lock:
            entry = self._require(task_id, self._clock.now())
            if isinstance(entry, Pending):
                raise TaskStillPendingError(task_id)
            del self._entries[task_id]
        logger.debug("Task result taken", extra={"task_id": str(task_id)})
        return entry.result

    def remove(self, task_id: TaskId) -> None:
        with self._lock:
            self._require(task_id, self._clock.now())
            del self._entries[task_id]
        logger.debug("Task removed", extra={"task_id": str(task_id)})

    def sweep(self, now: datetime | None = None) -> int:
        """
        Drop done tasks whose lifespan has elapsed. Pending tasks never expire.

        ``now`` defaults to the registry clock and must be timezone-aware.
        """
        if now is not None and now.utcoffset() is None:
            raise ValueError("now must be a timezone-aware datetime")
        with self._lock:
            purged = self._purge_expired(now or self._clock.now())
        if purged:
            logger.info("Expired tasks purged", extra={"count": purged})
        return purged

    # Callers must hold self._lock.

    def _lookup(self, task_id: TaskId, now: datetime) -> Pending | Done[R] | None:
        entry = self._entries.get(task_id)
        if isinstance(entry, Done) and entry.is_expired(now, self._lifespan):
            del self._entries[task_id]
            logger.debug("Expired task dropped on access", extra={"task_id": str(task_id)})
            return None
        return entry

    def _require(self, task_id: TaskId, now: datetime) -> Pending | Done[R]:
        entry = self._lookup(task_id, now)
        if entry is None:
            raise TaskNotFoundError(task_id)
        return entry

    def _purge_expired(self, now: datetime) -> int:
        if self._lifespan is None:
            return 0
        expired = [
            task_id
            for task_id, entry in self._entries.items()
            if isinstance(entry, Done) and entry.is_expired(now, self._lifespan)
        ]
        for task_id in expired:
            del self._entries[task_id]
        return len(expired)
