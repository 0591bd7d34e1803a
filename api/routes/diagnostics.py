"""
Database session diagnostics routes: blocking chains, parallel execution, SQL monitor and wait events.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends

from api.requests import DiagnosticsQuery
from api.routes.common import envelope, get_caches, get_provider
from api.routes.exception import handle_exceptions
from datasources.provider import DataSourceProvider
from services.diagnostics_service import query_diagnostics
from store.registry import CacheRegistry

router = APIRouter(prefix="/diagnostics", tags=["Diagnostics"])


async def _diagnose(kind: str, query: DiagnosticsQuery, provider: DataSourceProvider, caches: CacheRegistry) -> Dict[str, Any]:
    result = await query_diagnostics(provider, caches, kind, query.database, skip_cache=query.skip_cache)
    return envelope(result)


@router.get("/blocking")
@handle_exceptions
async def blocking(
    query: DiagnosticsQuery = Depends(),
    provider: DataSourceProvider = Depends(get_provider),
    caches: CacheRegistry = Depends(get_caches),
) -> Dict[str, Any]:
    return await _diagnose("blocking", query, provider, caches)


@router.get("/parallel")
@handle_exceptions
async def parallel(
    query: DiagnosticsQuery = Depends(),
    provider: DataSourceProvider = Depends(get_provider),
    caches: CacheRegistry = Depends(get_caches),
) -> Dict[str, Any]:
    return await _diagnose("parallel", query, provider, caches)


@router.get("/sql-monitor")
@handle_exceptions
async def sql_monitor(
    query: DiagnosticsQuery = Depends(),
    provider: DataSourceProvider = Depends(get_provider),
    caches: CacheRegistry = Depends(get_caches),
) -> Dict[str, Any]:
    return await _diagnose("sql_monitor", query, provider, caches)


@router.get("/wait-events")
@handle_exceptions
async def wait_events(
    query: DiagnosticsQuery = Depends(),
    provider: DataSourceProvider = Depends(get_provider),
    caches: CacheRegistry = Depends(get_caches),
) -> Dict[str, Any]:
    return await _diagnose("wait_events", query, provider, caches)
