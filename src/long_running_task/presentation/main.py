from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

import inject

from long_running_task.application.sweeper import ExpirySweeper
from long_running_task.setup.api_config import configure_di, get_api_settings
from long_running_task.setup.logging_config import configure_logging
from long_running_task.worker.executor import TaskExecutor

settings = get_api_settings()
configure_logging(settings.LOG_LEVEL)
configure_di(settings)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    sweeper = inject.instance(ExpirySweeper)
    await sweeper.start()
    try:
        yield
    finally:
        await sweeper.stop()
        inject.instance(TaskExecutor).shutdown(wait=False)


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Long-running task API with progress polling",
    lifespan=lifespan,
)

# Routes resolve their services at import time, so import them after configure_di().
from long_running_task.presentation.routes import router as api_router  # noqa: E402

app.include_router(api_router, prefix="")
