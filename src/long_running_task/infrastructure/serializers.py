from __future__ import annotations

from typing import Any

from pydantic import TypeAdapter, ValidationError

from long_running_task.domain.models.task_state import Done, Pending, state_view_type


def encode_state(view: Pending | Done[Any]) -> dict[str, Any]:
    """Render a state view as a JSON-compatible dict."""
    return view.model_dump(mode="json", exclude_none=isinstance(view, Pending))


def decode_state(data: dict[str, Any], result_type: Any = Any) -> Pending | Done[Any]:
    """Rebuild a state view, validating the result against ``result_type``."""
    adapter: TypeAdapter[Any] = TypeAdapter(state_view_type(result_type))
    try:
        return adapter.validate_python(data)
    except ValidationError as exc:
        raise ValueError("Invalid task state payload") from exc
