from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID, uuid4


@dataclass(frozen=True, slots=True)
class TaskId:
    """Opaque handle to a task. Only the registry mints new ids."""

    value: UUID

    @classmethod
    def new(cls) -> TaskId:
        return cls(uuid4())

    @classmethod
    def parse(cls, raw: str) -> TaskId:
        """Rebuild an id from its external string form."""
        try:
            return cls(UUID(raw))
        except (TypeError, ValueError, AttributeError) as exc:
            raise ValueError(f"Malformed task id {raw!r}") from exc

    def __str__(self) -> str:
        return self.value.hex
