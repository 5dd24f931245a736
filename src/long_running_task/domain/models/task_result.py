from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class TaskResult(BaseModel):
    """Outcome of a background job as stored by the executor."""

    data: Any | None = Field(default=None, description="Result payload.")
    error: str | None = Field(default=None, description="Error message if the job failed.")

    @property
    def succeeded(self) -> bool:
        return self.error is None
