"""
LLM quality and security check routes.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends

from api.requests import QualityQuery, SecurityQuery
from api.routes.common import envelope, get_caches, get_provider
from api.routes.exception import handle_exceptions
from datasources.provider import DataSourceProvider
from services import checks_service
from store.registry import CacheRegistry

router = APIRouter(prefix="/checks", tags=["Checks"])


@router.get("/quality")
@handle_exceptions
async def quality(
    query: QualityQuery = Depends(),
    provider: DataSourceProvider = Depends(get_provider),
    caches: CacheRegistry = Depends(get_caches),
) -> Dict[str, Any]:
    return envelope(await checks_service.quality(provider, caches, query))


@router.get("/security")
@handle_exceptions
async def security(
    query: SecurityQuery = Depends(),
    provider: DataSourceProvider = Depends(get_provider),
    caches: CacheRegistry = Depends(get_caches),
) -> Dict[str, Any]:
    return envelope(await checks_service.security(provider, caches, query))
