from __future__ import annotations

import importlib
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from long_running_task.application.registry import TaskRegistry
from long_running_task.domain.models.task_id import TaskId
from long_running_task.worker.executor import TaskExecutor

EPOCH = datetime(2024, 1, 1, tzinfo=UTC)


class FakeClock:
    """Manually advanced clock for deterministic expiry tests."""

    def __init__(self, start: datetime = EPOCH) -> None:
        self.current = start

    def now(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)


class StubExecutor(TaskExecutor):
    """Registers tasks without running them; tests complete them by hand."""

    def __init__(self, registry: TaskRegistry) -> None:
        self._registry = registry
        self.submitted: list[tuple[TaskId, object, tuple]] = []

    def submit(self, fn, *args, **kwargs) -> TaskId:
        task_id = self._registry.start()
        self.submitted.append((task_id, fn, args))
        return task_id

    def shutdown(self, wait: bool = True) -> None:
        return None


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def registry(clock: FakeClock) -> TaskRegistry:
    return TaskRegistry(lifespan=timedelta(seconds=10), clock=clock)


@pytest.fixture
def env_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Provide environment variables for ApiSettings."""
    monkeypatch.setenv("MAX_DIGITS", "5")
    monkeypatch.setenv("APP_NAME", "Test API")
    monkeypatch.setenv("APP_VERSION", "0.1.0")
    monkeypatch.setenv("SLEEP_PER_DIGIT_SEC", "0")


def _patch_inject_instance(
    monkeypatch: pytest.MonkeyPatch,
    registry: TaskRegistry,
    executor: TaskExecutor,
) -> Callable[[object], object]:
    """Patch `inject.instance` to return the test registry and executor."""
    import inject

    def fake_instance(interface: object) -> object:
        if interface is TaskRegistry:
            return registry
        if interface is TaskExecutor:
            return executor
        raise RuntimeError(f"Unexpected dependency request: {interface}")

    monkeypatch.setattr(inject, "instance", fake_instance)
    return fake_instance


@pytest.fixture
def api_client(env_settings: None, registry: TaskRegistry, monkeypatch: pytest.MonkeyPatch):
    """FastAPI test client with services wired to a stub executor."""
    executor = StubExecutor(registry)
    _patch_inject_instance(monkeypatch, registry, executor)

    # Reload modules so module-level singletons pick up the patched injector.
    importlib.reload(importlib.import_module("long_running_task.application.services"))
    routes_module = importlib.reload(importlib.import_module("long_running_task.presentation.routes"))

    app = FastAPI()
    app.include_router(routes_module.router)
    client = TestClient(app)
    return client, registry, executor
