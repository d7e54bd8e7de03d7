"""Parse raw orchestrator messages into pipeline actions."""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, TypeAdapter, ValidationError

from ragtrace.domain.entities.pipeline_actions import PipelineAction

_ACTION_ADAPTER: TypeAdapter[PipelineAction] = TypeAdapter(PipelineAction)


def parse_action(raw: Any) -> PipelineAction | None:
    """Validate a mapping like {"type": "STEP_START", "stepId": "search"}.

    Returns None for unknown action types and malformed payloads.
    """
    if isinstance(raw, BaseModel):
        raw = raw.model_dump(by_alias=True)
    if not isinstance(raw, Mapping):
        return None
    try:
        return _ACTION_ADAPTER.validate_python(dict(raw))
    except ValidationError:
        return None
