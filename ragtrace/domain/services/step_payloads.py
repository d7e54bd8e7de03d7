"""Step payload parsing - turns opaque step data into typed models."""

from pydantic import BaseModel, ValidationError

from ragtrace.domain.entities.pipeline_state import PipelineStep, StepId, StepStatus, step_id_value
from ragtrace.domain.entities.step_data import (
    ClassificationStepData,
    ConfidenceLevel,
    ConfidenceStepData,
    FollowupStepData,
    GenerationStepData,
    SearchStepData,
    StepData,
)

HIGH_CONFIDENCE_THRESHOLD = 0.7
MEDIUM_CONFIDENCE_THRESHOLD = 0.4

_PAYLOAD_MODELS: dict[str, type[BaseModel]] = {
    StepId.CLASSIFICATION.value: ClassificationStepData,
    StepId.SEARCH.value: SearchStepData,
    StepId.GENERATION.value: GenerationStepData,
    StepId.CONFIDENCE.value: ConfidenceStepData,
    StepId.FOLLOWUP.value: FollowupStepData,
}


def parse_step_data(step_id: StepId | str, data: object) -> StepData | None:
    """Validate raw step data against the payload model for step_id.

    Returns None when there is no data, when data is an error message,
    or when it does not fit the model. Never raises.
    """
    model = _PAYLOAD_MODELS.get(step_id_value(step_id))
    if model is None or data is None or isinstance(data, str):
        return None
    if isinstance(data, model):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump(by_alias=True)
    try:
        return model.model_validate(data)
    except ValidationError:
        return None


def step_payload(step: PipelineStep) -> StepData | None:
    """Typed payload of a step, or None for failed/empty steps."""
    if step.status == StepStatus.ERROR:
        return None
    return parse_step_data(step.id, step.data)


def step_error_message(step: PipelineStep) -> str | None:
    """Error message recorded on a failed step."""
    if step.status == StepStatus.ERROR and isinstance(step.data, str):
        return step.data
    return None


def confidence_level(score: float) -> ConfidenceLevel:
    """Classify a [0, 1] score: above 0.7 is high, above 0.4 medium, else low."""
    if score > HIGH_CONFIDENCE_THRESHOLD:
        return ConfidenceLevel.HIGH
    if score > MEDIUM_CONFIDENCE_THRESHOLD:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW
