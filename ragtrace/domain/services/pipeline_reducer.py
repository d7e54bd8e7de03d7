"""Pipeline reducer - pure (state, action) -> state transition function.

The reducer is total: it never raises, unknown actions return the state
unchanged, and actions naming a step that is not part of the current run are
ignored. Out-of-sequence actions (e.g. STEP_COMPLETE before STEP_START) are
accepted as-is.
"""

import time
from collections.abc import Callable, Iterable
from typing import Any

from ragtrace.domain.entities.pipeline_actions import (
    CompleteAction,
    ErrorAction,
    ResetAction,
    StartAction,
    StepCompleteAction,
    StepErrorAction,
    StepStartAction,
    StepUpdateAction,
)
from ragtrace.domain.entities.pipeline_state import (
    INITIAL_PIPELINE_STATE,
    STEP_DEFINITIONS,
    OverallStatus,
    PipelineState,
    PipelineStep,
    StepDefinition,
    StepStatus,
)

Clock = Callable[[], int]


def now_ms() -> int:
    """Current wall-clock time in milliseconds since epoch."""
    return int(time.time() * 1000)


def _replace_step(
    state: PipelineState,
    step_id: str,
    changes: Callable[[PipelineStep], dict[str, Any]],
) -> PipelineState:
    """Return state with the matching step updated; same state if none matches."""
    if state.get_step(step_id) is None:
        return state
    steps = tuple(
        step.model_copy(update=changes(step)) if step.id.value == step_id else step
        for step in state.steps
    )
    return state.model_copy(update={"steps": steps})


def _start_steps(definitions: Iterable[StepDefinition], enabled: tuple[str, ...]) -> tuple[PipelineStep, ...]:
    wanted = set(enabled)
    return tuple(
        PipelineStep(id=definition.id, label=definition.label)
        for definition in definitions
        if definition.id.value in wanted
    )


def pipeline_reducer(
    state: PipelineState,
    action: object,
    *,
    definitions: Iterable[StepDefinition] = STEP_DEFINITIONS,
    clock: Clock = now_ms,
) -> PipelineState:
    """Apply one action to the pipeline state and return the new state."""
    match action:
        case ResetAction():
            return INITIAL_PIPELINE_STATE

        case StartAction(enabled_steps=enabled):
            return PipelineState(
                steps=_start_steps(definitions, enabled),
                overall_status=OverallStatus.RUNNING,
            )

        case StepStartAction(step_id=step_id):
            return _replace_step(
                state,
                step_id,
                lambda step: {"status": StepStatus.RUNNING, "start_time": clock()},
            )

        case StepCompleteAction(step_id=step_id, data=data):
            return _replace_step(
                state,
                step_id,
                lambda step: {
                    "status": StepStatus.COMPLETE,
                    "end_time": clock(),
                    "data": data if data is not None else step.data,
                },
            )

        case StepErrorAction(step_id=step_id, error=error):
            return _replace_step(
                state,
                step_id,
                lambda step: {"status": StepStatus.ERROR, "end_time": clock(), "data": error},
            )

        case StepUpdateAction(step_id=step_id, data=data):
            return _replace_step(state, step_id, lambda step: {"data": data})

        case CompleteAction():
            return state.model_copy(update={"overall_status": OverallStatus.COMPLETE})

        case ErrorAction():
            return state.model_copy(update={"overall_status": OverallStatus.ERROR})

        case _:
            return state
