"""
Shared dependencies for API route modules.

The data source provider and the response cache registry live on
``app.state`` (created in the application lifespan) and are handed to route
handlers through FastAPI dependencies, so tests can swap either one.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import Request

from datasources.data_config import DataSourceSettings
from datasources.provider import DataSourceProvider
from services.resilience import QueryResult
from store.registry import CacheRegistry


def get_provider(request: Request) -> DataSourceProvider:
    provider = getattr(request.app.state, "provider", None)
    if provider is None:
        provider = DataSourceProvider(settings=DataSourceSettings())
        request.app.state.provider = provider
    return provider


def get_caches(request: Request) -> CacheRegistry:
    caches = getattr(request.app.state, "caches", None)
    if caches is None:
        caches = CacheRegistry()
        request.app.state.caches = caches
    return caches


def envelope(result: QueryResult) -> Dict[str, Any]:
    return result.to_envelope()
