"""In-process registry for long-running tasks behind a request/poll API."""

from long_running_task.application.registry import TaskRegistry
from long_running_task.domain.exceptions import (
    TaskAlreadyCompletedError,
    TaskError,
    TaskNotFoundError,
    TaskStillPendingError,
)
from long_running_task.domain.models import Done, Pending, TaskId, TaskProgress, TaskState

__all__ = [
    "TaskRegistry",
    "TaskId",
    "TaskState",
    "TaskProgress",
    "Pending",
    "Done",
    "TaskError",
    "TaskNotFoundError",
    "TaskAlreadyCompletedError",
    "TaskStillPendingError",
]
