"""Config Port - interface for configuration access."""

from typing import Protocol

from pydantic import BaseModel, ConfigDict, field_validator

from ragtrace.domain.entities.pipeline_state import STEP_DEFINITIONS, StepDefinition, StepId


class PipelineConfig(BaseModel):
    """Step table and the steps enabled for new runs."""

    model_config = ConfigDict(extra="ignore")

    # Declaration order is the run order; ids must be known and unique.
    steps: list[StepDefinition] = list(STEP_DEFINITIONS)
    enabled_steps: list[StepId] = [d.id for d in STEP_DEFINITIONS]

    @field_validator("steps")
    @classmethod
    def _unique_step_ids(cls, steps: list[StepDefinition]) -> list[StepDefinition]:
        seen: set[str] = set()
        for step in steps:
            if step.id.value in seen:
                raise ValueError(f"duplicate step id '{step.id.value}'")
            seen.add(step.id.value)
        return steps

    @property
    def definitions(self) -> tuple[StepDefinition, ...]:
        """Step table as an immutable tuple."""
        return tuple(self.steps)


class AppConfig(BaseModel):
    """Full application configuration."""

    pipeline: PipelineConfig = PipelineConfig()
    log_level: str = "INFO"
    # Log file: path relative to cwd or absolute. Empty = only stdout. Rotation when file exceeds max_mb.
    log_file: str = ""
    log_rotation_max_mb: int = 5
    log_rotation_backups: int = 3


class ConfigPort(Protocol):
    """Interface for configuration providers."""

    def get_config(self) -> AppConfig:
        """Get the full application configuration."""
        ...
