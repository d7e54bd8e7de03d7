"""Trace graph DTOs - layout geometry joined with live step status."""

from typing import Any

from pydantic import BaseModel

from ragtrace.domain.entities.pipeline_state import OverallStatus, StepId, StepStatus
from ragtrace.domain.services.edge_state import EdgeState


class TraceNode(BaseModel):
    """A step placed on the graph."""

    index: int
    step_id: StepId
    label: str
    status: StepStatus
    row: int
    col: int
    x: int
    y: int
    duration: str | None = None  # e.g. "120ms", once the step has finished
    selected: bool = False
    interactive: bool = False  # pending/skipped nodes cannot be selected
    data: Any = None


class TraceEdge(BaseModel):
    """A connector between two consecutive steps."""

    from_index: int
    to_index: int
    path: str
    path_id: str
    state: EdgeState


class TraceGraph(BaseModel):
    """Everything a view needs to draw the trace."""

    overall_status: OverallStatus
    nodes: list[TraceNode] = []
    edges: list[TraceEdge] = []
    width: int = 0
    height: int = 0
