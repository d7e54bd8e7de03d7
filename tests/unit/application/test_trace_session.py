"""Tests for PipelineTraceSession."""

import pytest

from ragtrace.application.trace import PipelineTraceSession
from ragtrace.domain.entities.pipeline_actions import StepStartAction
from ragtrace.domain.entities.pipeline_state import (
    INITIAL_PIPELINE_STATE,
    OverallStatus,
    StepDefinition,
    StepId,
    StepStatus,
)
from ragtrace.domain.ports.config import AppConfig, PipelineConfig
from ragtrace.domain.services.edge_state import EdgeState


@pytest.fixture
def session(clock):
    """Session with the canonical step table and a fake clock."""
    return PipelineTraceSession(clock=clock)


class TestDispatch:
    """Commands route through the reducer."""

    def test_initial_state(self, session):
        assert session.state == INITIAL_PIPELINE_STATE

    def test_start_uses_default_enabled_steps(self, session):
        state = session.start()
        assert len(state.steps) == 5
        assert state.overall_status == OverallStatus.RUNNING

    def test_start_with_explicit_steps(self, session):
        state = session.start(["search", "classification"])
        assert [s.id for s in state.steps] == [StepId.CLASSIFICATION, StepId.SEARCH]

    def test_full_run(self, session):
        session.start(["classification", "search", "generation"])
        session.step_start("classification")
        session.step_complete("classification", {"classification": {"strategy": "semantic"}})
        session.step_start(StepId.SEARCH)
        session.step_error(StepId.SEARCH, "timeout")
        session.step_start("generation")
        session.step_update("generation", {"answer": "Par"})
        session.step_update("generation", {"answer": "Paris"})
        session.step_complete("generation")
        state = session.complete()

        assert state.overall_status == OverallStatus.COMPLETE
        assert [s.status for s in state.steps] == [
            StepStatus.COMPLETE,
            StepStatus.ERROR,
            StepStatus.COMPLETE,
        ]
        assert state.get_step("search").data == "timeout"
        assert state.get_step("generation").data == {"answer": "Paris"}

    def test_fail(self, session):
        session.start(["search"])
        assert session.fail("backend unavailable").overall_status == OverallStatus.ERROR

    def test_dispatch_unknown_step_is_ignored(self, session):
        before = session.start(["search"])
        assert session.dispatch(StepStartAction(step_id="followup")) is before

    def test_dispatch_raw(self, session):
        session.dispatch_raw({"type": "START", "enabledSteps": ["search"]})
        state = session.dispatch_raw({"type": "STEP_START", "stepId": "search"})
        assert state.get_step("search").status == StepStatus.RUNNING

    def test_dispatch_raw_rejects_malformed(self, session):
        before = session.start(["search"])
        assert session.dispatch_raw({"type": "TELEPORT"}) is before
        assert session.dispatch_raw({"type": "STEP_START"}) is before

    @pytest.mark.parametrize(
        "raw",
        [
            {"type": "START", "enabledSteps": None},
            {"type": "START", "enabledSteps": 5},
            {"type": "STEP_START", "stepId": None},
        ],
    )
    def test_dispatch_raw_ignores_bad_field_types(self, session, raw):
        before = session.start(["search"])
        assert session.dispatch_raw(raw) is before
        assert [s.id.value for s in session.state.steps] == ["search"]

    def test_reset(self, session):
        session.start()
        assert session.reset() == INITIAL_PIPELINE_STATE


class TestSelection:
    """Selecting a node toggles it; pending nodes are not selectable."""

    def test_toggle(self, session):
        session.start(["search"])
        session.step_start("search")
        assert session.select_step("search") == "search"
        assert session.selected_step.id == StepId.SEARCH
        assert session.select_step("search") is None
        assert session.selected_step is None

    def test_switch_selection(self, session):
        session.start(["classification", "search"])
        session.step_complete("classification")
        session.step_start("search")
        session.select_step("classification")
        assert session.select_step("search") == "search"

    def test_pending_step_not_selectable(self, session):
        session.start(["search"])
        assert session.select_step("search") is None

    def test_step_outside_run_not_selectable(self, session):
        session.start(["search"])
        session.step_start("search")
        assert session.select_step("followup") is None

    def test_start_and_reset_clear_selection(self, session):
        session.start(["search"])
        session.step_start("search")
        session.select_step("search")
        session.start(["search"])
        assert session.selected_step_id is None

        session.step_start("search")
        session.select_step("search")
        session.reset()
        assert session.selected_step is None

    def test_selected_step_tracks_updates(self, session):
        session.start(["generation"])
        session.step_start("generation")
        session.select_step("generation")
        session.step_update("generation", {"answer": "streaming"})
        assert session.selected_step.data == {"answer": "streaming"}


class TestGraph:
    """Layout joined with step status."""

    def test_idle_graph_is_empty(self, session):
        graph = session.graph()
        assert graph.overall_status == OverallStatus.IDLE
        assert graph.nodes == []
        assert graph.edges == []
        assert (graph.width, graph.height) == (0, 0)

    def test_layout_follows_step_count(self, session):
        session.start(["classification", "search", "generation", "confidence"])
        layout = session.layout()
        assert len(layout.nodes) == 4
        assert {n.row for n in layout.nodes} == {0, 1}

    def test_graph_nodes_and_edges(self, session, clock):
        session.start(["classification", "search", "generation"])
        session.step_start("classification")
        session.step_complete("classification")
        session.step_start("search")
        session.select_step("classification")

        graph = session.graph()
        assert graph.overall_status == OverallStatus.RUNNING
        assert [n.step_id for n in graph.nodes] == [
            StepId.CLASSIFICATION,
            StepId.SEARCH,
            StepId.GENERATION,
        ]
        first, second, third = graph.nodes
        assert first.duration == "250ms"
        assert first.selected is True
        assert first.interactive is True
        assert second.duration is None
        assert third.interactive is False
        assert [n.x for n in graph.nodes] == [0, 190, 380]
        assert [e.state for e in graph.edges] == [EdgeState.ACTIVE, EdgeState.PENDING]
        assert (graph.width, graph.height) == (540, 56)

    def test_graph_error_edge(self, session):
        session.start(["search", "generation"])
        session.step_start("search")
        session.step_error("search", "timeout")
        graph = session.graph()
        assert graph.edges[0].state == EdgeState.ERROR
        assert graph.nodes[0].data == "timeout"


class TestFromConfig:
    """Sessions built from configuration."""

    def test_custom_table_and_enabled_steps(self, clock):
        config = AppConfig(
            pipeline=PipelineConfig(
                steps=[
                    StepDefinition(id=StepId.SEARCH, label="Retrieve"),
                    StepDefinition(id=StepId.GENERATION, label="Answer"),
                ],
                enabled_steps=[StepId.GENERATION],
            )
        )
        session = PipelineTraceSession.from_config(config, clock=clock)
        assert session.enabled_steps == ("generation",)
        state = session.start()
        assert [(s.id, s.label) for s in state.steps] == [(StepId.GENERATION, "Answer")]
