"""
Provider bundling the upstream connectors behind query-shaped methods.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import logging
from typing import Any, Dict, List, Tuple

from config import DIAGNOSTIC_COMMANDS
from .data_config import DataSourceSettings
from .exceptions import ConfigurationMissing, DataSourceError, InvalidQuery
from .factory import DataSourceFactory

log = logging.getLogger(__name__)


class DataSourceProvider:
    def __init__(self, settings: DataSourceSettings):
        self.settings = settings
        self.coordinator = DataSourceFactory.create_coordinator(settings)
        self.tracing = DataSourceFactory.create_tracing(settings)
        self.checks = DataSourceFactory.create_checks(settings)

    def require_tracing(self) -> None:
        if not self.settings.apm_domain_id:
            raise ConfigurationMissing("TRACELENS_APM_DOMAIN_ID")

    def require_checks(self) -> None:
        if self.checks is None:
            raise ConfigurationMissing("TRACELENS_CHECKS_URL")

    async def query_diagnostics(self, kind: str, database: str) -> Dict[str, Any]:
        template = DIAGNOSTIC_COMMANDS.get(kind)
        if template is None:
            raise InvalidQuery(f"Unknown diagnostic kind: {kind!r}")
        return await self.coordinator.chat(template.format(database=database))

    async def query_traces(self, limit: int) -> Dict[str, Any]:
        self.require_tracing()
        return await self.tracing.list_traces(limit)

    async def query_trace(self, trace_key: str) -> Dict[str, Any]:
        self.require_tracing()
        return await self.tracing.get_trace(trace_key)

    async def query_checks(self, kind: str, params: Dict[str, Any]) -> Dict[str, Any]:
        self.require_checks()
        return await self.checks.query_checks(kind, params)

    async def coordinator_status(self) -> Tuple[Dict[str, Any], List[Dict[str, Any]]]:
        status = await self.coordinator.status()
        try:
            tools = await self.coordinator.tools()
        except DataSourceError as exc:
            log.warning("coordinator tools listing failed: %s", exc)
            tools = []
        return status, tools

    async def aclose(self) -> None:
        await self.coordinator.aclose()
        await self.tracing.aclose()
        if self.checks is not None:
            await self.checks.aclose()
