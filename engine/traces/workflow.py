"""
Workflow execution traces built from tracing payloads, plus duration and error aggregates.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Mapping
from typing import Any, Dict, List, Optional

import numpy as np

from api.responses import Span, WorkflowAggregate, WorkflowTrace
from config import settings
from engine.enums import RootSpanPolicy, TraceStatus
from engine.normalize.fields import RawRecord, as_record, has_any
from engine.traces.hierarchy import build_hierarchy
from engine.traces.spans import SPAN_KEYS, span
from engine.traces.stages import map_stages

TRACE_LIST_KEYS = ("traces",)


def _raw_spans(trace: RawRecord) -> List[Any]:
    raw = list(trace.items_list(*SPAN_KEYS))
    span_sets = []
    if isinstance(trace.get("spanSet"), Mapping):
        span_sets.append(trace["spanSet"])
    span_sets.extend(s for s in trace.items_list("spanSets") if isinstance(s, Mapping))
    for span_set in span_sets:
        raw.extend(RawRecord(span_set).items_list(*SPAN_KEYS))
    return [s for s in raw if isinstance(s, Mapping)]


def _find(spans: List[Span], fragment: str, tag: Optional[str] = None) -> Optional[Span]:
    for s in spans:
        if fragment in s.span_name.lower() or (tag is not None and tag in s.tags):
            return s
    return None


def routing_type(spans: List[Span]) -> str:
    router = _find(spans, "router", tag="routing.type")
    if router is not None and router.tags.get("routing.type"):
        return router.tags["routing.type"]
    return settings.default_routing_type


def query_text(spans: List[Span]) -> Optional[str]:
    source = _find(spans, "input")
    if source is None:
        return None
    return source.tags.get("query") or source.tags.get("user.query")


def response_text(spans: List[Span]) -> Optional[str]:
    source = _find(spans, "output")
    if source is None or not source.tags.get("response"):
        return None
    return source.tags["response"][: settings.response_excerpt_length]


def trace_status(spans: List[Span]) -> TraceStatus:
    if not spans:
        return TraceStatus.pending
    if any(s.is_error for s in spans):
        return TraceStatus.error
    return TraceStatus.success


def workflow_trace(raw: Any, policy: Optional[RootSpanPolicy | str] = None) -> WorkflowTrace:
    trace = as_record(raw)
    spans = [span(s) for s in _raw_spans(trace)]
    hierarchy = build_hierarchy(spans, policy)

    start = trace.timestamp("startTime", "start_time", "timeStarted", "startTimeUnixNano")
    end = trace.timestamp("endTime", "end_time", "timeEnded", "endTimeUnixNano")
    duration = trace.optional_number("totalDurationMs", "durationMs", "duration_ms")
    if duration is None:
        duration = hierarchy.duration_ms()

    return WorkflowTrace(
        trace_key=trace.text("traceKey", "traceId", "trace_key", "trace_id", "traceID"),
        total_duration_ms=duration,
        start_time=start if start is not None else hierarchy.start,
        end_time=end if end is not None else hierarchy.end,
        status=trace_status(spans),
        routing_type=routing_type(spans),
        stages=map_stages(spans),
        query=query_text(spans),
        response=response_text(spans),
        span_count=len(spans),
        root_span_key=hierarchy.root.span_key if hierarchy.root is not None else None,
        root_candidates=hierarchy.root_candidates,
    )


def build_workflow_traces(payload: Any, policy: Optional[RootSpanPolicy | str] = None) -> Optional[List[WorkflowTrace]]:
    """Workflow traces from a trace list or a single trace.

    Returns ``None`` when the payload carries neither a ``traces`` list nor a
    ``spans`` list.
    """
    rec = as_record(payload)
    if has_any(rec, *TRACE_LIST_KEYS):
        items = [t for t in rec.items_list(*TRACE_LIST_KEYS) if isinstance(t, Mapping)]
        return [workflow_trace(t, policy) for t in items]
    if has_any(rec, *SPAN_KEYS):
        return [workflow_trace(rec, policy)]
    return None


def aggregate(traces: List[WorkflowTrace]) -> WorkflowAggregate:
    if not traces:
        return WorkflowAggregate()

    durations = np.array([t.total_duration_ms for t in traces], dtype=float)
    errors = sum(1 for t in traces if t.status == TraceStatus.error)
    p50, p95 = np.percentile(durations, settings.workflow_percentiles[:2]).astype(float)

    per_stage: Dict[str, List[float]] = defaultdict(list)
    for t in traces:
        for stage in t.stages:
            per_stage[stage.stage_id].append(stage.duration_ms)

    return WorkflowAggregate(
        trace_count=len(traces),
        error_count=errors,
        error_rate=round(errors / len(traces), 4),
        mean_duration_ms=round(float(durations.mean()), 2),
        p50_duration_ms=round(p50, 2),
        p95_duration_ms=round(p95, 2),
        stage_mean_duration_ms={k: round(float(np.mean(v)), 2) for k, v in per_stage.items()},
    )
