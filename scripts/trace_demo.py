#!/usr/bin/env python3
"""Demo: drive a pipeline trace session the way an orchestrator would.

Dispatches a canned retrieval run (classification -> search -> streamed
generation -> confidence -> follow-ups) and prints the resulting graph.

Usage:
  python3 scripts/trace_demo.py
  PIPELINE_ENABLED_STEPS=classification,search python3 scripts/trace_demo.py

Uses config/default.toml (+ development.toml) for logging and the step table.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import structlog


def main() -> None:
    from ragtrace.application.trace import PipelineTraceSession
    from ragtrace.infrastructure.config import load_config
    from ragtrace.shared.logging import setup_logging_from_config

    config = load_config()
    setup_logging_from_config(config)
    log = structlog.get_logger()

    session = PipelineTraceSession.from_config(config)
    session.start()

    answer = "Retrieval-augmented generation grounds answers in retrieved documents."
    canned = {
        "classification": {"classification": {"strategy": "hybrid", "semantic_mode": "rewrite"}},
        "search": {"hits": [{"_id": "doc-1", "_score": 0.92}, {"_id": "doc-7", "_score": 0.61}]},
        "confidence": {"generation": 0.84, "context": 0.57},
        "followup": {"questions": ["What is a reranker?", "How are chunks embedded?"]},
    }
    for step in session.state.steps:
        step_id = step.id.value
        session.step_start(step_id)
        if step_id == "generation":
            words = answer.split()
            for i in range(1, len(words) + 1):
                session.step_update(step_id, {"answer": " ".join(words[:i])})
            session.step_complete(step_id)
        else:
            session.step_complete(step_id, canned.get(step_id))
    session.complete()

    graph = session.graph()
    log.info("trace_demo_done", steps=len(graph.nodes), width=graph.width, height=graph.height)
    print(graph.model_dump_json(indent=2))


if __name__ == "__main__":
    main()
