"""Pipeline trace session - holds the current run state for a view.

The session is the single writer of its PipelineState: the orchestrator
dispatches actions one at a time, the view reads `state`, `graph()` and the
current selection. It adds no locking; a multi-threaded host must serialize
dispatch itself.
"""

from collections.abc import Iterable, Mapping
from typing import Any

import structlog

from ragtrace.application.trace.dto import TraceEdge, TraceGraph, TraceNode
from ragtrace.domain.entities.pipeline_actions import (
    STEP_ACTIONS,
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
    StepId,
    StepStatus,
    format_duration,
    step_id_value,
)
from ragtrace.domain.ports.config import AppConfig
from ragtrace.domain.services.action_parser import parse_action
from ragtrace.domain.services.edge_state import edge_state
from ragtrace.domain.services.pipeline_layout import GraphLayout, compute_layout
from ragtrace.domain.services.pipeline_reducer import Clock, now_ms, pipeline_reducer

log = structlog.get_logger()

_NON_INTERACTIVE = (StepStatus.PENDING, StepStatus.SKIPPED)


class PipelineTraceSession:
    """Current pipeline run plus the step selected in the view."""

    def __init__(
        self,
        definitions: Iterable[StepDefinition] = STEP_DEFINITIONS,
        enabled_steps: Iterable[StepId | str] | None = None,
        clock: Clock = now_ms,
    ) -> None:
        self._definitions = tuple(definitions)
        if enabled_steps is None:
            enabled_steps = [d.id for d in self._definitions]
        self._enabled_steps = tuple(step_id_value(s) for s in enabled_steps)
        self._clock = clock
        self._state: PipelineState = INITIAL_PIPELINE_STATE
        self._selected_step_id: str | None = None

    @classmethod
    def from_config(cls, config: AppConfig, clock: Clock = now_ms) -> "PipelineTraceSession":
        """Build a session from the [pipeline] config section."""
        return cls(
            definitions=config.pipeline.definitions,
            enabled_steps=config.pipeline.enabled_steps,
            clock=clock,
        )

    @property
    def state(self) -> PipelineState:
        """Current pipeline state snapshot."""
        return self._state

    @property
    def enabled_steps(self) -> tuple[str, ...]:
        """Steps enabled by default when start() gets no explicit list."""
        return self._enabled_steps

    def dispatch(self, action: object) -> PipelineState:
        """Apply an action and return the new state."""
        action_type = getattr(action, "type", type(action).__name__)
        log.debug("pipeline_dispatch", action=action_type)

        if isinstance(action, STEP_ACTIONS) and self._state.get_step(action.step_id) is None:
            log.debug("pipeline_step_not_in_run", action=action_type, step_id=action.step_id)
        if isinstance(action, (ResetAction, StartAction)):
            self._selected_step_id = None

        self._state = pipeline_reducer(
            self._state,
            action,
            definitions=self._definitions,
            clock=self._clock,
        )
        return self._state

    def dispatch_raw(self, raw: Mapping[str, Any]) -> PipelineState:
        """Parse and apply a raw action mapping; malformed actions are ignored."""
        action = parse_action(raw)
        if action is None:
            raw_type = raw.get("type") if isinstance(raw, Mapping) else None
            log.warning("pipeline_action_rejected", raw_type=raw_type)
            return self._state
        return self.dispatch(action)

    def reset(self) -> PipelineState:
        return self.dispatch(ResetAction())

    def start(self, enabled_steps: Iterable[StepId | str] | None = None) -> PipelineState:
        steps = self._enabled_steps if enabled_steps is None else tuple(enabled_steps)
        return self.dispatch(StartAction(enabled_steps=steps))

    def step_start(self, step_id: StepId | str) -> PipelineState:
        return self.dispatch(StepStartAction(step_id=step_id))

    def step_complete(self, step_id: StepId | str, data: Any = None) -> PipelineState:
        return self.dispatch(StepCompleteAction(step_id=step_id, data=data))

    def step_error(self, step_id: StepId | str, error: str | None = None) -> PipelineState:
        return self.dispatch(StepErrorAction(step_id=step_id, error=error))

    def step_update(self, step_id: StepId | str, data: Any) -> PipelineState:
        return self.dispatch(StepUpdateAction(step_id=step_id, data=data))

    def complete(self) -> PipelineState:
        return self.dispatch(CompleteAction())

    def fail(self, error: str | None = None) -> PipelineState:
        return self.dispatch(ErrorAction(error=error))

    @property
    def selected_step_id(self) -> str | None:
        return self._selected_step_id

    @property
    def selected_step(self) -> PipelineStep | None:
        """Selected step resolved against the current run."""
        if self._selected_step_id is None:
            return None
        return self._state.get_step(self._selected_step_id)

    def select_step(self, step_id: StepId | str) -> str | None:
        """Toggle selection of a step; selecting the selected step clears it.

        Steps outside the run and pending/skipped steps cannot be selected.
        """
        wanted = step_id_value(step_id)
        if self._selected_step_id == wanted:
            self._selected_step_id = None
            return None
        step = self._state.get_step(wanted)
        if step is None or step.status in _NON_INTERACTIVE:
            return self._selected_step_id
        self._selected_step_id = wanted
        return wanted

    def clear_selection(self) -> None:
        self._selected_step_id = None

    def layout(self) -> GraphLayout:
        """Geometry for the current number of steps."""
        return compute_layout(len(self._state.steps))

    def graph(self) -> TraceGraph:
        """Layout joined with live step status, ready for a view to draw."""
        state = self._state
        if state.overall_status == OverallStatus.IDLE or not state.steps:
            return TraceGraph(overall_status=state.overall_status)

        layout = self.layout()
        nodes = []
        for node in layout.nodes:
            step = state.steps[node.index]
            nodes.append(
                TraceNode(
                    index=node.index,
                    step_id=step.id,
                    label=step.label,
                    status=step.status,
                    row=node.row,
                    col=node.col,
                    x=node.x,
                    y=node.y,
                    duration=format_duration(step),
                    selected=step.id.value == self._selected_step_id,
                    interactive=step.status not in _NON_INTERACTIVE,
                    data=step.data,
                )
            )
        edges = [
            TraceEdge(
                from_index=edge.from_index,
                to_index=edge.to_index,
                path=edge.path,
                path_id=edge.path_id,
                state=edge_state(state.steps[edge.from_index].status, state.steps[edge.to_index].status),
            )
            for edge in layout.edges
        ]
        return TraceGraph(
            overall_status=state.overall_status,
            nodes=nodes,
            edges=edges,
            width=layout.width,
            height=layout.height,
        )
