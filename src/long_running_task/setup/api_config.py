from datetime import timedelta

import inject
from pydantic import ConfigDict, field_validator
from pydantic_settings import BaseSettings

from long_running_task.application.registry import TaskRegistry
from long_running_task.application.sweeper import ExpirySweeper
from long_running_task.setup.worker_config import get_worker_settings
from long_running_task.worker.executor import TaskExecutor


class ApiSettings(BaseSettings):
    MAX_DIGITS: int = 2000
    APP_NAME: str = "long-running-task"
    APP_VERSION: str = "0.1.0"
    TASK_LIFESPAN_SECONDS: float | None = 60.0
    SWEEP_INTERVAL_SECONDS: float = 5.0
    LOG_LEVEL: str = "INFO"

    model_config = ConfigDict(env_file=".env", extra="ignore")

    @field_validator("TASK_LIFESPAN_SECONDS", mode="before")
    @classmethod
    def _empty_means_never(cls, value: object) -> object:
        if isinstance(value, str) and value.strip().lower() in {"", "none", "never"}:
            return None
        return value

    @property
    def task_lifespan(self) -> timedelta | None:
        if self.TASK_LIFESPAN_SECONDS is None:
            return None
        return timedelta(seconds=self.TASK_LIFESPAN_SECONDS)


def get_api_settings() -> ApiSettings:
    return ApiSettings() # type: ignore[call-arg]


def build_registry(settings: ApiSettings | None = None) -> TaskRegistry:
    if settings is None:
        settings = get_api_settings()
    return TaskRegistry(lifespan=settings.task_lifespan)


def configure_di(settings: ApiSettings | None = None) -> None:
    """Bind one registry, executor and sweeper into the DI container."""
    if settings is None:
        settings = get_api_settings()
    registry = build_registry(settings)
    executor = TaskExecutor(registry, max_workers=get_worker_settings().WORKER_THREADS)
    sweeper = ExpirySweeper(registry, interval_seconds=settings.SWEEP_INTERVAL_SECONDS)

    def _config(binder: inject.Binder) -> None:
        binder.bind(TaskRegistry, registry)
        binder.bind(TaskExecutor, executor)
        binder.bind(ExpirySweeper, sweeper)

    inject.clear_and_configure(_config)
