from typing import Any, cast

import inject

from long_running_task.application.registry import TaskRegistry
from long_running_task.domain.exceptions import TaskNotFoundError
from long_running_task.domain.models import Done, Pending, TaskId, TaskResult
from long_running_task.worker.executor import TaskExecutor
from long_running_task.worker.tasks.compute_pi import compute_pi


class TaskService:
    """Starts background jobs and exposes their state to the API layer."""

    def __init__(self) -> None:
        self._registry = cast(TaskRegistry, inject.instance(TaskRegistry))
        self._executor = cast(TaskExecutor, inject.instance(TaskExecutor))

    def start_compute_pi(self, digits: int) -> TaskId:
        """Queue a pi computation and return its task id."""
        return self._executor.submit(compute_pi, digits)

    def get_status(self, task_id: str) -> Pending | Done[Any]:
        """Return the current state for the task identified by ``task_id``."""
        return self._registry.status(self._parse(task_id))

    def take_result(self, task_id: str) -> TaskResult:
        """Return the result of a finished task and forget the task."""
        return self._registry.take(self._parse(task_id))

    def discard(self, task_id: str) -> None:
        self._registry.remove(self._parse(task_id))

    @staticmethod
    def _parse(task_id: str) -> TaskId:
        # A malformed id can never have been issued.
        try:
            return TaskId.parse(task_id)
        except ValueError:
            raise TaskNotFoundError(task_id) from None
