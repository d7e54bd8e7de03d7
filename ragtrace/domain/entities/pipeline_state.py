"""Pipeline trace state: step ids, statuses, canonical definitions and run state."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class StepId(str, Enum):
    """Canonical pipeline step identifiers."""

    CLASSIFICATION = "classification"
    SEARCH = "search"
    GENERATION = "generation"
    CONFIDENCE = "confidence"
    FOLLOWUP = "followup"


class StepStatus(str, Enum):
    """Status of a single step within a run."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETE = "complete"
    ERROR = "error"
    SKIPPED = "skipped"


class OverallStatus(str, Enum):
    """Status of the whole run."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETE = "complete"
    ERROR = "error"


class StepDefinition(BaseModel):
    """Static step declaration: id plus display label."""

    model_config = ConfigDict(frozen=True)

    id: StepId
    label: str


# Declaration order is the order steps appear in every run.
STEP_DEFINITIONS: tuple[StepDefinition, ...] = (
    StepDefinition(id=StepId.CLASSIFICATION, label="Classification"),
    StepDefinition(id=StepId.SEARCH, label="Search"),
    StepDefinition(id=StepId.GENERATION, label="Generation"),
    StepDefinition(id=StepId.CONFIDENCE, label="Confidence"),
    StepDefinition(id=StepId.FOLLOWUP, label="Follow-up Questions"),
)


class PipelineStep(BaseModel):
    """One step of a run. Timestamps are milliseconds since epoch.

    When status is ERROR, data holds the error message (or None).
    """

    model_config = ConfigDict(frozen=True)

    id: StepId
    label: str
    status: StepStatus = StepStatus.PENDING
    start_time: int | None = None
    end_time: int | None = None
    data: Any = None

    @property
    def duration_ms(self) -> int | None:
        """Elapsed time between start and end, if both were recorded."""
        if self.start_time is None or self.end_time is None:
            return None
        return self.end_time - self.start_time


class PipelineState(BaseModel):
    """Snapshot of a run. Never mutated: every action yields a new value."""

    model_config = ConfigDict(frozen=True)

    steps: tuple[PipelineStep, ...] = ()
    overall_status: OverallStatus = OverallStatus.IDLE

    def get_step(self, step_id: StepId | str) -> PipelineStep | None:
        """Return the step with the given id, or None if it is not part of the run."""
        wanted = step_id_value(step_id)
        for step in self.steps:
            if step.id.value == wanted:
                return step
        return None


INITIAL_PIPELINE_STATE = PipelineState()


def step_id_value(step_id: StepId | str) -> str:
    """Plain string form of a step id (enum member or raw string)."""
    if isinstance(step_id, Enum):
        return str(step_id.value)
    return str(step_id)


def format_duration(step: PipelineStep) -> str | None:
    """Duration label shown next to a finished step, e.g. '1250ms'."""
    duration = step.duration_ms
    if duration is None:
        return None
    return f"{duration:.0f}ms"
