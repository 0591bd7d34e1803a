"""
Tests for workflow trace construction, aggregates and demo traces.
"""

from __future__ import annotations

import pytest

from api.responses import WorkflowTrace
from engine.enums import TraceStatus
from engine.traces import aggregate, build_workflow_traces, demo_traces


def _trace(key, error=False):
    return {
        "traceKey": key,
        "spans": [
            {"spanKey": "r", "spanName": "coordinator_request", "timeStarted": 100.0, "timeEnded": 102.0, "durationInMs": 2000},
            {"spanKey": "i", "parentSpanKey": "r", "spanName": "input_node", "timeStarted": 100.0, "timeEnded": 100.1,
             "durationInMs": 100, "tags": {"user.query": "why is my db slow"}},
            {"spanKey": "t", "parentSpanKey": "r", "spanName": "router_node", "timeStarted": 100.1, "timeEnded": 100.2,
             "durationInMs": 100, "tags": {"routing.type": "AGENT"}},
            {"spanKey": "a", "parentSpanKey": "r", "spanName": "agent_node", "timeStarted": 100.2, "timeEnded": 101.8,
             "durationInMs": 1600, "isError": error},
            {"spanKey": "o", "parentSpanKey": "r", "spanName": "output_node", "timeStarted": 101.8, "timeEnded": 102.0,
             "durationInMs": 200, "tags": {"response": "x" * 500}},
        ],
    }


def test_trace_list_payload():
    traces = build_workflow_traces({"traces": [_trace("t1"), _trace("t2", error=True)]})
    assert [t.trace_key for t in traces] == ["t1", "t2"]

    t1 = traces[0]
    assert t1.status == TraceStatus.success
    assert t1.routing_type == "AGENT"
    assert t1.query == "why is my db slow"
    assert len(t1.response) == 200
    assert t1.total_duration_ms == 2000
    assert t1.root_span_key == "r"
    assert t1.root_candidates == 1
    assert t1.span_count == 5
    assert [s.stage_id for s in t1.stages] == ["input", "router", "agent", "output"]
    assert traces[1].status == TraceStatus.error


def test_single_trace_payload_and_explicit_duration():
    raw = _trace("solo")
    raw["totalDurationMs"] = 1234
    traces = build_workflow_traces(raw)
    assert len(traces) == 1
    assert traces[0].total_duration_ms == 1234


def test_tempo_span_sets_are_read():
    raw = {"traces": [{"traceID": "abc", "spanSets": [{"spans": [{"spanID": "s", "name": "llm_invocation"}]}]}]}
    traces = build_workflow_traces(raw)
    assert traces[0].trace_key == "abc"
    assert traces[0].span_count == 1
    assert traces[0].routing_type == "WORKFLOW"


def test_unrecognised_payload_and_empty_trace():
    assert build_workflow_traces({"data": 1}) is None
    traces = build_workflow_traces({"traces": [{"traceKey": "empty", "spans": []}]})
    assert traces[0].status == TraceStatus.pending
    assert traces[0].stages == []


def test_aggregate_percentiles_and_error_rate():
    traces = [
        WorkflowTrace(trace_key=str(i), total_duration_ms=float(d), status=TraceStatus.error if i == 0 else TraceStatus.success)
        for i, d in enumerate([100, 200, 300, 400])
    ]
    agg = aggregate(traces)
    assert agg.trace_count == 4
    assert agg.error_count == 1
    assert agg.error_rate == 0.25
    assert agg.mean_duration_ms == 250
    assert agg.p50_duration_ms == 250
    assert agg.p95_duration_ms == pytest.approx(385)


def test_aggregate_empty():
    agg = aggregate([])
    assert agg.trace_count == 0
    assert agg.p95_duration_ms == 0.0


def test_demo_traces_are_seeded_and_shaped():
    a = demo_traces(6, seed=7, now=1_700_000_000)
    b = demo_traces(6, seed=7, now=1_700_000_000)
    assert [t.model_dump() for t in a] == [t.model_dump() for t in b]
    assert [t.routing_type for t in a] == ["WORKFLOW", "AGENT", "PARALLEL", "WORKFLOW", "WORKFLOW", "AGENT"]
    for t in a:
        assert t.stages[0].stage_id == "input"
        assert t.stages[-1].stage_id == "output"
    assert demo_traces(0) == []
