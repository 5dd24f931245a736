from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Query, Response, status
from pydantic import BaseModel, Field

from long_running_task.application.services import TaskService
from long_running_task.domain.exceptions import TaskNotFoundError, TaskStillPendingError
from long_running_task.infrastructure.serializers import encode_state
from long_running_task.setup.api_config import get_api_settings

router = APIRouter(tags=["tasks"])
logger = logging.getLogger(__name__)

# Instantiate services once (simple DI)
_settings = get_api_settings()
_task_service = TaskService()


class EnqueueResponse(BaseModel):
    task_id: str = Field(..., description="Task id to poll.")


class ResultResponse(BaseModel):
    task_id: str = Field(..., description="Task id the result belongs to.")
    result: Any | None = Field(default=None, description="Value produced by the job.")
    error: str | None = Field(default=None, description="Error message if the job failed.")


@router.post(
    "/calculate_pi",
    response_model=EnqueueResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Start π calculation",
    description="Starts a background computation of n digits of π. Returns the task id.",
)
def calculate_pi(
    digits: int = Query(..., ge=1, le=_settings.MAX_DIGITS, description="Number of digits"),
):
    task_id = _task_service.start_compute_pi(digits)
    return EnqueueResponse(task_id=str(task_id))


@router.get(
    "/tasks/{task_id}",
    summary="Poll task state",
    description=(
        "Returns the task state without consuming it:\n"
        "- {'state': 'pending', 'progress': {...}} while running\n"
        "- {'state': 'done', 'result': {...}, 'completed_at': '...'} when finished\n"
    ),
    responses={404: {"description": "Unknown or expired task."}},
)
def get_task(task_id: str):
    try:
        view = _task_service.get_status(task_id)
    except TaskNotFoundError:
        logger.info("Status for unknown task", extra={"task_id": task_id})
        raise HTTPException(status_code=404, detail="Task not found")  # noqa: B904
    return encode_state(view)


@router.get(
    "/tasks/{task_id}/result",
    response_model=ResultResponse,
    summary="Take task result",
    description="Returns the result of a finished task and removes it from the registry.",
    responses={
        404: {"description": "Unknown or expired task."},
        409: {"description": "Task is still pending."},
    },
)
def take_result(task_id: str):
    try:
        outcome = _task_service.take_result(task_id)
    except TaskNotFoundError:
        raise HTTPException(status_code=404, detail="Task not found")  # noqa: B904
    except TaskStillPendingError:
        raise HTTPException(status_code=409, detail="Task is still pending")  # noqa: B904
    return ResultResponse(task_id=task_id, result=outcome.data, error=outcome.error)


@router.delete(
    "/tasks/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Discard a task",
    responses={404: {"description": "Unknown or expired task."}},
)
def discard_task(task_id: str):
    try:
        _task_service.discard(task_id)
    except TaskNotFoundError:
        raise HTTPException(status_code=404, detail="Task not found")  # noqa: B904
    return Response(status_code=status.HTTP_204_NO_CONTENT)
