"""
Coordinator status merged with its tool catalogue.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from api.responses import CoordinatorStatus
from config import CACHE_COORDINATOR
from datasources.provider import DataSourceProvider
from engine.normalize.fields import as_record
from services.resilience import Payload, QueryResult, resolve
from store.registry import CacheRegistry

OFFLINE = CoordinatorStatus(state="offline")


def coordinator_status_from(raw: Any) -> Optional[CoordinatorStatus]:
    status, tools = raw
    if not isinstance(status, Mapping):
        return None
    rec = as_record(status)
    return CoordinatorStatus(
        state=rec.text("status", "state", default="online"),
        uptime_seconds=rec.number("uptime_seconds", "uptime"),
        agents=rec.mapping("agents"),
        mcp_servers=rec.mapping("mcp_servers", "mcpServers"),
        tools_count=len(tools),
        detailed_tools=list(tools),
    )


async def coordinator_status(
    provider: DataSourceProvider,
    caches: CacheRegistry,
    skip_cache: bool = False,
) -> QueryResult:
    def derive(raw: Any) -> Optional[Payload]:
        status = coordinator_status_from(raw)
        return None if status is None else status.model_dump(mode="json")

    return await resolve(
        caches.get(CACHE_COORDINATOR),
        {"kind": "coordinator_status"},
        fetch=provider.coordinator_status,
        derive=derive,
        skip_cache=skip_cache,
        # status and tool listing run one after the other
        timeout=provider.settings.status_timeout * 2,
        error_payload=OFFLINE.model_dump(mode="json"),
    )
