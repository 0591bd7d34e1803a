"""
Workflow traces resolved from the APM backend, with labelled demo traces as fallback.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""
from __future__ import annotations

from typing import Any, Optional

from api.responses import WorkflowReport
from config import CACHE_TRACES, settings
from datasources.provider import DataSourceProvider
from engine.traces import aggregate, build_workflow_traces, demo_traces
from services.resilience import Payload, QueryResult, resolve
from store.registry import CacheRegistry

SOURCE_APM = "apm"
SOURCE_MOCK = "mock"


async def workflow_traces(
    provider: DataSourceProvider,
    caches: CacheRegistry,
    limit: Optional[int] = None,
    skip_cache: bool = False,
    root_policy: Optional[str] = None,
) -> QueryResult:
    limit = limit or settings.demo_trace_limit
    policy = root_policy or settings.root_span_policy

    def derive(raw: Any) -> Optional[Payload]:
        traces = build_workflow_traces(raw, policy)
        if traces is None:
            return None
        return WorkflowReport(source=SOURCE_APM, traces=traces, aggregate=aggregate(traces)).model_dump(mode="json")

    def fallback() -> Payload:
        traces = demo_traces(limit)
        return WorkflowReport(source=SOURCE_MOCK, traces=traces, aggregate=aggregate(traces)).model_dump(mode="json")

    return await resolve(
        caches.get(CACHE_TRACES),
        {"kind": "workflow_traces", "limit": limit, "policy": policy},
        fetch=lambda: provider.query_traces(limit),
        derive=derive,
        fallback=fallback,
        skip_cache=skip_cache,
        timeout=provider.settings.tracing_timeout,
        require=provider.require_tracing,
        fallback_message="APM not connected; serving demo trace data",
    )


async def workflow_trace(
    provider: DataSourceProvider,
    caches: CacheRegistry,
    trace_key: str,
    skip_cache: bool = False,
    root_policy: Optional[str] = None,
) -> QueryResult:
    policy = root_policy or settings.root_span_policy

    def derive(raw: Any) -> Optional[Payload]:
        traces = build_workflow_traces(raw, policy)
        if not traces:
            return None
        match = next((t for t in traces if t.trace_key == trace_key), None)
        if match is None:
            # a lone trace without its own key is the one that was asked for
            if len(traces) != 1 or traces[0].trace_key:
                return None
            match = traces[0].model_copy(update={"trace_key": trace_key})
        return {"source": SOURCE_APM, "trace": match.model_dump(mode="json")}

    return await resolve(
        caches.get(CACHE_TRACES),
        {"kind": "workflow_trace", "trace_key": trace_key, "policy": policy},
        fetch=lambda: provider.query_trace(trace_key),
        derive=derive,
        skip_cache=skip_cache,
        timeout=provider.settings.tracing_timeout,
        require=provider.require_tracing,
        error_payload={"trace_key": trace_key},
    )
