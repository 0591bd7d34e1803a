"""
Health check route reporting response cache state.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends

from api.routes.common import get_caches
from api.routes.exception import handle_exceptions
from store.registry import CacheRegistry

router = APIRouter(tags=["Health"])


@router.get("/health")
@handle_exceptions
async def health(caches: CacheRegistry = Depends(get_caches)) -> Dict[str, Any]:
    return {
        "status": "ok",
        "store": "memory",
        "caches": caches.stats(),
    }
