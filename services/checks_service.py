"""
LLM quality and security check summaries, served from the check results service or demo data.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""
from __future__ import annotations

from typing import Any, Awaitable, Callable, Optional

from api.requests import CheckQuery, QualityQuery, SecurityQuery
from config import CACHE_QUALITY, CACHE_SECURITY, settings
from datasources.exceptions import DataSourceUnavailable, MalformedPayload
from datasources.provider import DataSourceProvider
from engine.checks import (
    build_quality_report,
    build_security_report,
    demo_quality_checks,
    demo_security_checks,
    quality_checks,
    security_checks,
)
from engine.checks.records import CHECK_KEYS
from engine.normalize.fields import has_any
from services.resilience import Payload, QueryResult, resolve
from store.registry import CacheRegistry

KIND_QUALITY = "quality"
KIND_SECURITY = "security"


def _fetcher(provider: DataSourceProvider, kind: str, query: CheckQuery) -> Callable[[], Awaitable[Any]]:
    async def fetch() -> Any:
        if provider.checks is None:
            raise DataSourceUnavailable("TRACELENS_CHECKS_URL not configured")
        return await provider.query_checks(kind, query.upstream_params())

    return fetch


def _with_time_range(payload: Payload, query: CheckQuery) -> Payload:
    payload["filters"]["time_range"] = query.time_range
    return payload


async def quality(
    provider: DataSourceProvider,
    caches: CacheRegistry,
    query: Optional[QualityQuery] = None,
) -> QueryResult:
    query = query or QualityQuery()

    def report(checks: list) -> Payload:
        built = build_quality_report(checks, query.limit, query.offset, query.filters())
        return _with_time_range(built.model_dump(mode="json"), query)

    def derive(raw: Any) -> Optional[Payload]:
        if not has_any(raw, *CHECK_KEYS):
            raise MalformedPayload("quality check payload carries no check list")
        return report(quality_checks(raw))

    return await resolve(
        caches.get(CACHE_QUALITY),
        {"kind": KIND_QUALITY, **query.cache_params()},
        fetch=_fetcher(provider, KIND_QUALITY, query),
        derive=derive,
        fallback=lambda: report(demo_quality_checks(settings.checks_demo_count)),
        skip_cache=query.skip_cache,
        timeout=provider.settings.checks_timeout,
        fallback_message="Check results service not connected; serving demo quality checks",
    )


async def security(
    provider: DataSourceProvider,
    caches: CacheRegistry,
    query: Optional[SecurityQuery] = None,
) -> QueryResult:
    query = query or SecurityQuery()

    def report(checks: list) -> Payload:
        built = build_security_report(checks, query.limit, query.offset, query.filters())
        return _with_time_range(built.model_dump(mode="json"), query)

    def derive(raw: Any) -> Optional[Payload]:
        if not has_any(raw, *CHECK_KEYS):
            raise MalformedPayload("security check payload carries no check list")
        return report(security_checks(raw))

    return await resolve(
        caches.get(CACHE_SECURITY),
        {"kind": KIND_SECURITY, **query.cache_params()},
        fetch=_fetcher(provider, KIND_SECURITY, query),
        derive=derive,
        fallback=lambda: report(demo_security_checks(settings.checks_demo_count)),
        skip_cache=query.skip_cache,
        timeout=provider.settings.checks_timeout,
        fallback_message="Check results service not connected; serving demo security checks",
    )
