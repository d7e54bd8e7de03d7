"""Actions dispatched by the orchestrator into the pipeline reducer."""

from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ragtrace.domain.entities.pipeline_state import step_id_value


def _require_step_id(value: Any) -> str:
    if not isinstance(value, (str, Enum)):
        raise ValueError(f"step id must be a string, got {type(value).__name__}")
    return step_id_value(value)


class _Action(BaseModel):
    # stepId is the key used by the dashboard's event payloads
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class _StepAction(_Action):
    step_id: str = Field(..., alias="stepId")

    @field_validator("step_id", mode="before")
    @classmethod
    def _normalize_step_id(cls, value: Any) -> str:
        return _require_step_id(value)


class ResetAction(_Action):
    """Drop the current run and return to idle."""

    type: Literal["RESET"] = "RESET"


class StartAction(_Action):
    """Begin a run with the given steps enabled (order is ignored)."""

    type: Literal["START"] = "START"
    enabled_steps: tuple[str, ...] = Field((), alias="enabledSteps")

    @field_validator("enabled_steps", mode="before")
    @classmethod
    def _normalize_enabled(cls, value: Any) -> tuple[str, ...]:
        if isinstance(value, (str, Enum)):
            value = [value]
        if not isinstance(value, (list, tuple, set, frozenset)):
            raise ValueError(f"enabledSteps must be a list of step ids, got {type(value).__name__}")
        return tuple(_require_step_id(v) for v in value)


class StepStartAction(_StepAction):
    """Mark a step as running."""

    type: Literal["STEP_START"] = "STEP_START"


class StepCompleteAction(_StepAction):
    """Mark a step as complete; None data keeps what the step already holds."""

    type: Literal["STEP_COMPLETE"] = "STEP_COMPLETE"
    data: Any = None


class StepErrorAction(_StepAction):
    """Mark a step as failed; error replaces the step data."""

    type: Literal["STEP_ERROR"] = "STEP_ERROR"
    error: str | None = None


class StepUpdateAction(_StepAction):
    """Replace a step's data without touching status or timestamps."""

    type: Literal["STEP_UPDATE"] = "STEP_UPDATE"
    data: Any


class CompleteAction(_Action):
    """Mark the whole run as complete."""

    type: Literal["COMPLETE"] = "COMPLETE"


class ErrorAction(_Action):
    """Mark the whole run as failed."""

    type: Literal["ERROR"] = "ERROR"
    error: str | None = None


PipelineAction = Annotated[
    ResetAction
    | StartAction
    | StepStartAction
    | StepCompleteAction
    | StepErrorAction
    | StepUpdateAction
    | CompleteAction
    | ErrorAction,
    Field(discriminator="type"),
]

STEP_ACTIONS = (StepStartAction, StepCompleteAction, StepErrorAction, StepUpdateAction)
