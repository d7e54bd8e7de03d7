"""Connector state derived from the statuses of the two steps it joins."""

from enum import Enum

from ragtrace.domain.entities.pipeline_state import StepStatus


class EdgeState(str, Enum):
    """How a connector between two steps should be drawn."""

    PENDING = "pending"
    ACTIVE = "active"
    COMPLETE = "complete"
    ERROR = "error"


def edge_state(source: StepStatus, target: StepStatus) -> EdgeState:
    """Derive connector state; an error on either end wins."""
    if StepStatus.ERROR in (source, target):
        return EdgeState.ERROR
    if source == StepStatus.COMPLETE and target == StepStatus.COMPLETE:
        return EdgeState.COMPLETE
    if source == StepStatus.COMPLETE and target == StepStatus.RUNNING:
        return EdgeState.ACTIVE
    return EdgeState.PENDING
