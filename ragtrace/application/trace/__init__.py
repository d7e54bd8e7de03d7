"""Pipeline trace application layer."""

from ragtrace.application.trace.dto import TraceEdge, TraceGraph, TraceNode
from ragtrace.application.trace.session import PipelineTraceSession

__all__ = ["PipelineTraceSession", "TraceEdge", "TraceGraph", "TraceNode"]
