class TaskError(Exception):
    """Base class for recoverable task registry errors."""

    def __init__(self, task_id: object, message: str) -> None:
        super().__init__(message)
        self.task_id = task_id


class TaskNotFoundError(TaskError):
    """Raised when a task identifier does not exist in the registry."""

    def __init__(self, task_id: object) -> None:
        super().__init__(task_id, f"Task with id '{task_id}' was not found.")


class TaskAlreadyCompletedError(TaskError):
    """Raised when a task that is already done is completed again."""

    def __init__(self, task_id: object) -> None:
        super().__init__(task_id, f"Task with id '{task_id}' is already completed.")


class TaskStillPendingError(TaskError):
    """Raised when the result of a pending task is requested."""

    def __init__(self, task_id: object) -> None:
        super().__init__(task_id, f"Task with id '{task_id}' is still pending.")
