"""
Dispatch of logical queries (kind + string parameters + options) to the query services.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""
from __future__ import annotations

from pydantic import ValidationError

from api.requests import Query, QualityQuery, SecurityQuery, TraceQuery
from datasources.provider import DataSourceProvider
from engine.enums import QueryStatus
from services import checks_service, coordinator_service, diagnostics_service, traces_service
from services.resilience import QueryResult
from store.registry import CacheRegistry

QUERY_KINDS = (
    *diagnostics_service.REPORT_BUILDERS,
    "workflow_traces",
    "workflow_trace",
    "quality_checks",
    "security_checks",
    "coordinator_status",
)


async def dispatch(provider: DataSourceProvider, caches: CacheRegistry, query: Query) -> QueryResult:
    params = query.parameters
    opts = query.options

    if query.kind in diagnostics_service.REPORT_BUILDERS:
        return await diagnostics_service.query_diagnostics(
            provider, caches, query.kind, params.get("database"), skip_cache=opts.skip_cache
        )
    if query.kind in ("workflow_traces", "workflow_trace"):
        try:
            root_policy = TraceQuery(root_policy=params.get("root_policy")).root_policy
        except ValidationError:
            return QueryResult(
                status=QueryStatus.error,
                message=f"Invalid root_policy: {params.get('root_policy')!r} (expected first, earliest or none)",
            )
        if query.kind == "workflow_traces":
            return await traces_service.workflow_traces(
                provider, caches, limit=opts.limit, skip_cache=opts.skip_cache, root_policy=root_policy
            )
        trace_key = params.get("trace_key")
        if not trace_key:
            return QueryResult(status=QueryStatus.error, message="trace_key parameter is required")
        return await traces_service.workflow_trace(
            provider, caches, trace_key, skip_cache=opts.skip_cache, root_policy=root_policy
        )
    if query.kind in ("quality_checks", "security_checks"):
        model = QualityQuery if query.kind == "quality_checks" else SecurityQuery
        fields = {**params, "offset": opts.offset, "skip_cache": opts.skip_cache}
        if opts.limit is not None:
            fields["limit"] = opts.limit
        try:
            check_query = model(**fields)
        except ValidationError as exc:
            return QueryResult(status=QueryStatus.error, message=f"Invalid check filters: {exc.error_count()} error(s)")
        if query.kind == "quality_checks":
            return await checks_service.quality(provider, caches, check_query)
        return await checks_service.security(provider, caches, check_query)
    if query.kind == "coordinator_status":
        return await coordinator_service.coordinator_status(provider, caches, skip_cache=opts.skip_cache)
    return QueryResult(status=QueryStatus.error, message=f"Unknown query kind: {query.kind}")
