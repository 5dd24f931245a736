from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any

from long_running_task.application.registry import TaskRegistry
from long_running_task.domain.exceptions import TaskError
from long_running_task.domain.models.task_id import TaskId
from long_running_task.domain.models.task_result import TaskResult
from long_running_task.domain.models.task_state import TaskProgress

logger = logging.getLogger(__name__)


class ProgressReporter:
    """Forward progress of one running job to the registry."""

    def __init__(self, registry: TaskRegistry[TaskResult], task_id: TaskId) -> None:
        self._registry = registry
        self.task_id = task_id

    def report(self, current: int, total: int) -> None:
        try:
            self._registry.report_progress(self.task_id, TaskProgress.of(current, total))
        except TaskError:
            logger.warning("Progress for unknown task dropped", extra={"task_id": str(self.task_id)})


Job = Callable[..., Any]


class TaskExecutor:
    """
    Run jobs on a thread pool and record their outcome in the registry.

    A job is called as ``fn(reporter, *args, **kwargs)``. Its return value is
    stored as ``TaskResult(data=...)``; an exception is stored as
    ``TaskResult(error=...)``. Nothing is retried.
    """

    def __init__(self, registry: TaskRegistry[TaskResult], max_workers: int = 4) -> None:
        self._registry = registry
        self._pool = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="task-worker")

    @property
    def registry(self) -> TaskRegistry[TaskResult]:
        return self._registry

    def submit(self, fn: Job, *args: Any, **kwargs: Any) -> TaskId:
        task_id = self._registry.start()
        reporter = ProgressReporter(self._registry, task_id)
        try:
            future = self._pool.submit(self._run, task_id, fn, reporter, args, kwargs)
        except RuntimeError:
            # Pool is shut down; a pending entry would never be completed.
            self._registry.remove(task_id)
            raise
        future.add_done_callback(_log_unexpected)
        logger.info("Job submitted", extra={"task_id": str(task_id), "job": _job_name(fn)})
        return task_id

    def shutdown(self, wait: bool = True) -> None:
        self._pool.shutdown(wait=wait)

    def _run(
        self,
        task_id: TaskId,
        fn: Job,
        reporter: ProgressReporter,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> None:
        try:
            outcome = TaskResult(data=fn(reporter, *args, **kwargs))
        except Exception as exc:
            logger.exception("Job failed", extra={"task_id": str(task_id), "job": _job_name(fn)})
            outcome = TaskResult(error=str(exc) or type(exc).__name__)

        try:
            self._registry.complete(task_id, outcome)
        except TaskError as exc:
            # Task was removed or expired while the job was running.
            logger.warning("Job outcome dropped: %s", exc, extra={"task_id": str(task_id)})


def _job_name(fn: Job) -> str:
    return getattr(fn, "__name__", repr(fn))


def _log_unexpected(future: Future[None]) -> None:
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        logger.error("Task worker crashed", exc_info=exc)
