"""
Workflow trace routes correlating APM spans with agent workflow stages.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends

from api.requests import TraceQuery
from api.routes.common import envelope, get_caches, get_provider
from api.routes.exception import handle_exceptions
from datasources.provider import DataSourceProvider
from services.traces_service import workflow_trace, workflow_traces
from store.registry import CacheRegistry

router = APIRouter(prefix="/traces", tags=["Traces"])


@router.get("/workflows")
@handle_exceptions
async def list_workflows(
    query: TraceQuery = Depends(),
    provider: DataSourceProvider = Depends(get_provider),
    caches: CacheRegistry = Depends(get_caches),
) -> Dict[str, Any]:
    result = await workflow_traces(
        provider, caches, limit=query.limit, skip_cache=query.skip_cache, root_policy=query.root_policy
    )
    return envelope(result)


@router.get("/workflows/{trace_key}")
@handle_exceptions
async def get_workflow(
    trace_key: str,
    query: TraceQuery = Depends(),
    provider: DataSourceProvider = Depends(get_provider),
    caches: CacheRegistry = Depends(get_caches),
) -> Dict[str, Any]:
    result = await workflow_trace(
        provider, caches, trace_key, skip_cache=query.skip_cache, root_policy=query.root_policy
    )
    return envelope(result)
