"""
Factory for creating upstream connectors based on configuration.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from connectors.checks import HttpChecksConnector
from connectors.coordinator import HttpCoordinatorConnector
from connectors.tracing import ApmTracingConnector


class DataSourceFactory:

    @staticmethod
    def create_coordinator(config):
        return HttpCoordinatorConnector(
            config.coordinator_url,
            config.coordinator_chat_url,
            timeout=config.diagnostics_timeout,
            status_timeout=config.status_timeout,
        )

    @staticmethod
    def create_tracing(config):
        return ApmTracingConnector(
            config.tracing_url,
            config.apm_domain_id,
            timeout=config.tracing_timeout,
        )

    @staticmethod
    def create_checks(config):
        if not config.checks_url:
            return None
        return HttpChecksConnector(config.checks_url, timeout=config.checks_timeout)
