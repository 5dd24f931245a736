from long_running_task.domain.models.task_id import TaskId
from long_running_task.domain.models.task_result import TaskResult
from long_running_task.domain.models.task_state import (
    Done,
    Pending,
    TaskProgress,
    TaskState,
    TaskStateView,
    state_view_type,
)

__all__ = [
    "TaskId",
    "TaskState",
    "TaskProgress",
    "TaskStateView",
    "Pending",
    "Done",
    "TaskResult",
    "state_view_type",
]
