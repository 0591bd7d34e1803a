"""
Coordinator status route.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends

from api.routes.common import envelope, get_caches, get_provider
from api.routes.exception import handle_exceptions
from datasources.provider import DataSourceProvider
from services.coordinator_service import coordinator_status
from store.registry import CacheRegistry

router = APIRouter(prefix="/coordinator", tags=["Coordinator"])


@router.get("/status")
@handle_exceptions
async def status(
    skip_cache: bool = False,
    provider: DataSourceProvider = Depends(get_provider),
    caches: CacheRegistry = Depends(get_caches),
) -> Dict[str, Any]:
    return envelope(await coordinator_status(provider, caches, skip_cache=skip_cache))
