"""
Generic query route accepting a query kind, string parameters and options.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends

from api.requests import Query
from api.routes.common import envelope, get_caches, get_provider
from api.routes.exception import handle_exceptions
from datasources.provider import DataSourceProvider
from services.query_service import dispatch
from store.registry import CacheRegistry

router = APIRouter(tags=["Query"])


@router.post("/query")
@handle_exceptions
async def run_query(
    query: Query,
    provider: DataSourceProvider = Depends(get_provider),
    caches: CacheRegistry = Depends(get_caches),
) -> Dict[str, Any]:
    return envelope(await dispatch(provider, caches, query))
