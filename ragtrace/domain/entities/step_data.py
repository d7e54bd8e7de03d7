"""Typed payloads carried by each pipeline step."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ClassificationResult(BaseModel):
    """Query classification produced by the retrieval agent."""

    model_config = ConfigDict(extra="allow")

    strategy: str | None = None
    semantic_mode: str | None = None
    semantic_query: str | None = None
    reasoning: str | None = None


class ClassificationStepData(BaseModel):
    """Payload of the classification step."""

    classification: ClassificationResult


class SearchHit(BaseModel):
    """Single retrieved document. Accepts the backend's _id/_score/_source keys."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field("", alias="_id")
    score: float | None = Field(None, alias="_score")
    source: dict[str, Any] | None = Field(None, alias="_source")


class SearchStepData(BaseModel):
    """Payload of the search step."""

    model_config = ConfigDict(populate_by_name=True)

    hits: list[SearchHit]
    filter_applied: str | None = Field(None, alias="filterApplied")
    query_executed: str | None = Field(None, alias="queryExecuted")


class GenerationStepData(BaseModel):
    """Payload of the generation step; answer grows while streaming."""

    answer: str
    provider: str | None = None
    model: str | None = None


class ConfidenceStepData(BaseModel):
    """Generation confidence and context relevance, both in [0, 1]."""

    generation: float
    context: float


class FollowupStepData(BaseModel):
    """Suggested follow-up questions."""

    questions: list[str]


StepData = (
    ClassificationStepData
    | SearchStepData
    | GenerationStepData
    | ConfidenceStepData
    | FollowupStepData
)


class ConfidenceLevel(str, Enum):
    """Coarse band for a confidence score."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
