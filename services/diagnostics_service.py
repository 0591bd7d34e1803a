"""
Database session diagnostics resolved through the coordinator's diagnostic agents.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""
from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from config import CACHE_SESSIONS, settings
from datasources.provider import DataSourceProvider
from engine.enums import QueryStatus
from engine.sessions import (
    build_blocking_report,
    build_parallel_report,
    build_sql_monitor_report,
    build_wait_event_report,
)
from services.resilience import Payload, QueryResult, resolve
from store.registry import CacheRegistry

REPORT_BUILDERS: Dict[str, Callable[[Any, str], Any]] = {
    "blocking": build_blocking_report,
    "parallel": build_parallel_report,
    "sql_monitor": build_sql_monitor_report,
    "wait_events": build_wait_event_report,
}


async def query_diagnostics(
    provider: DataSourceProvider,
    caches: CacheRegistry,
    kind: str,
    database: Optional[str] = None,
    skip_cache: bool = False,
) -> QueryResult:
    database = database or settings.default_database
    builder = REPORT_BUILDERS.get(kind)
    if builder is None:
        return QueryResult(
            status=QueryStatus.error,
            payload={"database": database},
            message=f"Unknown diagnostic kind: {kind}",
        )

    def derive(raw: Any) -> Optional[Payload]:
        report = builder(raw, database)
        return None if report is None else report.model_dump(mode="json")

    return await resolve(
        caches.get(CACHE_SESSIONS),
        {"kind": kind, "database": database},
        fetch=lambda: provider.query_diagnostics(kind, database),
        derive=derive,
        skip_cache=skip_cache,
        timeout=provider.settings.diagnostics_timeout,
        error_payload={"database": database},
    )
