"""
Labelled demo workflow traces served when the tracing backend cannot be reached.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import time
from typing import List, Optional, Tuple

import numpy as np

from api.responses import StageExecution, ToolCall, WorkflowTrace
from config import settings
from engine.enums import StageStatus, TraceStatus

ROUTING_TYPES = ("WORKFLOW", "AGENT", "PARALLEL", "WORKFLOW", "WORKFLOW", "AGENT")
BASE_LATENCY_MS = {"WORKFLOW": 500.0, "AGENT": 3000.0, "PARALLEL": 8000.0}
QUERIES = (
    "List all compartments in my tenancy",
    "Why is my database slow today?",
    "Show cost summary for November",
    "Check blocking sessions",
    "Analyze database performance and compare with costs",
    "What are the current security alerts?",
)


def _stage(
    stage_id: str,
    start: float,
    duration_ms: float,
    tools: Optional[List[Tuple[str, float]]] = None,
) -> StageExecution:
    return StageExecution(
        stage_id=stage_id,
        stage_name=stage_id.capitalize(),
        span_keys=[],
        start_time=start,
        end_time=start + duration_ms / 1000.0,
        duration_ms=round(duration_ms),
        status=StageStatus.success,
        tool_calls=[
            ToolCall(tool_name=name, duration_ms=round(ms), status=StageStatus.success)
            for name, ms in (tools or [])
        ],
    )


def _stages(rng: np.random.Generator, routing: str, start: float, total_ms: float) -> List[StageExecution]:
    stages: List[StageExecution] = []
    clock = start

    def push(stage_id: str, duration_ms: float, tools: Optional[List[Tuple[str, float]]] = None) -> None:
        nonlocal clock
        stages.append(_stage(stage_id, clock, duration_ms, tools))
        clock += duration_ms / 1000.0

    input_ms = 50 + rng.random() * 100
    classifier_ms = 100 + rng.random() * 300
    router_ms = 20 + rng.random() * 30
    push("input", input_ms)
    push("classifier", classifier_ms)
    push("router", router_ms)

    remaining = max(0.0, total_ms - (input_ms + classifier_ms + router_ms + 50))
    if routing == "WORKFLOW":
        push("workflow", remaining, [("oci_identity_list_compartments", remaining * 0.8)])
    elif routing == "AGENT":
        iterations = 2 + int(rng.integers(0, 3))
        per_iteration = remaining / iterations
        for j in range(iterations):
            push("agent", per_iteration * 0.6)
            if j < iterations - 1:
                action_ms = per_iteration * 0.4
                push("action", action_ms, [("oci_database_execute_sql", action_ms * 0.9)])
    else:
        push("parallel", remaining, [
            ("DbTroubleshootAgent", remaining * 0.8),
            ("FinOpsAgent", remaining * 0.7),
        ])

    push("output", 30 + rng.random() * 50)
    return stages


def demo_traces(count: Optional[int] = None, seed: Optional[int] = None, now: Optional[float] = None) -> List[WorkflowTrace]:
    count = settings.demo_trace_limit if count is None else max(0, count)
    rng = np.random.default_rng(settings.demo_seed if seed is None else seed)
    now = time.time() if now is None else now
    stamp = int(now * 1000)

    traces: List[WorkflowTrace] = []
    for i in range(count):
        routing = ROUTING_TYPES[i % len(ROUTING_TYPES)]
        start = now - (count - i) * 60
        base = BASE_LATENCY_MS[routing]
        total_ms = base + rng.random() * base
        stages = _stages(rng, routing, start, total_ms)
        traces.append(
            WorkflowTrace(
                trace_key=f"trace-{stamp}-{i}",
                total_duration_ms=round(total_ms),
                start_time=start,
                end_time=start + total_ms / 1000.0,
                status=TraceStatus.error if rng.random() > 0.9 else TraceStatus.success,
                routing_type=routing,
                stages=stages,
                query=QUERIES[i % len(QUERIES)],
                span_count=0,
            )
        )
    return traces
