from __future__ import annotations

from datetime import datetime, timedelta
from enum import Enum
from typing import Annotated, Any, Generic, Literal, TypeVar, Union

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field

R = TypeVar("R")


class TaskState(str, Enum):
    PENDING = "pending"
    DONE = "done"


class TaskProgress(BaseModel):
    model_config = ConfigDict(frozen=True)

    current: int | None = Field(default=None, ge=0, description="Completed work units.")
    total: int | None = Field(default=None, ge=0, description="Total work units.")
    percentage: float = Field(default=0.0, ge=0.0, le=1.0, description="Progress in [0, 1].")

    @classmethod
    def of(cls, current: int, total: int) -> TaskProgress:
        total = max(total, 0)
        current = min(max(current, 0), total)
        percentage = current / total if total else 1.0
        return cls(current=current, total=total, percentage=percentage)


class Pending(BaseModel):
    """The operation is still running."""

    model_config = ConfigDict(frozen=True)

    state: Literal["pending"] = TaskState.PENDING.value
    progress: TaskProgress | None = Field(
        default=None, description="Last progress reported by the worker, if any."
    )


class Done(BaseModel, Generic[R]):
    """The operation finished with ``result`` at ``completed_at``."""

    model_config = ConfigDict(frozen=True)

    state: Literal["done"] = TaskState.DONE.value
    result: R = Field(description="Caller-supplied result payload.")
    completed_at: AwareDatetime = Field(description="When the task was completed.")

    def expires_at(self, lifespan: timedelta | None) -> datetime | None:
        if lifespan is None:
            return None
        return self.completed_at + lifespan

    def is_expired(self, now: datetime, lifespan: timedelta | None) -> bool:
        expires_at = self.expires_at(lifespan)
        return expires_at is not None and expires_at <= now


TaskStateView = Union[Pending, Done[R]]


def state_view_type(result_type: Any = Any) -> Any:
    """Discriminated union type for validating a state view with a concrete result type."""
    return Annotated[Union[Pending, Done[result_type]], Field(discriminator="state")]
