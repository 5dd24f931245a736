from datetime import timedelta

import inject
import pytest

from long_running_task.application.registry import TaskRegistry
from long_running_task.application.sweeper import ExpirySweeper
from long_running_task.setup.api_config import ApiSettings, build_registry, configure_di
from long_running_task.worker.executor import TaskExecutor


def test_lifespan_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TASK_LIFESPAN_SECONDS", "2.5")

    settings = ApiSettings()

    assert settings.task_lifespan == timedelta(seconds=2.5)
    assert build_registry(settings).lifespan == timedelta(seconds=2.5)


@pytest.mark.parametrize("raw", ["", "none", "never"])
def test_empty_lifespan_means_never(monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    monkeypatch.setenv("TASK_LIFESPAN_SECONDS", raw)

    assert ApiSettings().task_lifespan is None


def test_configure_di_binds_shared_instances(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TASK_LIFESPAN_SECONDS", "30")
    try:
        configure_di()

        registry = inject.instance(TaskRegistry)
        executor = inject.instance(TaskExecutor)

        assert registry.lifespan == timedelta(seconds=30)
        assert executor.registry is registry
        assert isinstance(inject.instance(ExpirySweeper), ExpirySweeper)
        assert inject.instance(TaskRegistry) is registry
    finally:
        inject.instance(TaskExecutor).shutdown(wait=False)
        inject.clear()
