"""
Tests for datasource factory connector construction and provider configuration checks.
"""

from __future__ import annotations

import pytest

from connectors.checks import HttpChecksConnector
from connectors.coordinator import HttpCoordinatorConnector
from connectors.tracing import ApmTracingConnector
from datasources.data_config import DataSourceSettings
from datasources.exceptions import ConfigurationMissing, InvalidQuery
from datasources.factory import DataSourceFactory
from datasources.provider import DataSourceProvider


def _settings(**overrides):
    base = dict(
        coordinator_url="http://coord:3001/",
        coordinator_chat_url="http://coord:3001/api/",
        tracing_url="http://apm",
        apm_domain_id=None,
        checks_url="  ",
        diagnostics_timeout=11,
        tracing_timeout=12,
        status_timeout=3,
        checks_timeout=13,
    )
    base.update(overrides)
    return DataSourceSettings(**base)


def test_settings_normalise_urls_and_blank_identifiers():
    cfg = _settings(apm_domain_id="")
    assert cfg.coordinator_url == "http://coord:3001"
    assert cfg.coordinator_chat_url == "http://coord:3001/api"
    assert cfg.apm_domain_id is None
    assert cfg.checks_url is None


def test_factory_passes_timeouts_to_connectors():
    cfg = _settings(checks_url="http://checks/")
    coordinator = DataSourceFactory.create_coordinator(cfg)
    assert isinstance(coordinator, HttpCoordinatorConnector)
    assert coordinator.timeout == 11
    assert coordinator.status_timeout == 3
    assert coordinator.health_url == "http://coord:3001/status"

    tracing = DataSourceFactory.create_tracing(cfg)
    assert isinstance(tracing, ApmTracingConnector)
    assert tracing.timeout == 12

    checks = DataSourceFactory.create_checks(cfg)
    assert isinstance(checks, HttpChecksConnector)
    assert checks.base_url == "http://checks"
    assert checks.timeout == 13


def test_checks_connector_is_optional():
    assert DataSourceFactory.create_checks(_settings()) is None


def test_provider_requires_tracing_and_checks_configuration():
    provider = DataSourceProvider(_settings())
    with pytest.raises(ConfigurationMissing, match="APM_DOMAIN_ID"):
        provider.require_tracing()
    with pytest.raises(ConfigurationMissing, match="CHECKS_URL"):
        provider.require_checks()

    configured = DataSourceProvider(_settings(apm_domain_id="ocid1.apmdomain", checks_url="http://checks"))
    configured.require_tracing()
    configured.require_checks()


@pytest.mark.asyncio
async def test_provider_rejects_unknown_diagnostic_kind():
    provider = DataSourceProvider(_settings())
    with pytest.raises(InvalidQuery):
        await provider.query_diagnostics("vacuum", "PROD")


@pytest.mark.asyncio
async def test_provider_sends_diagnostic_command(monkeypatch):
    provider = DataSourceProvider(_settings())
    sent = []

    async def chat(message):
        sent.append(message)
        return {"sessions": []}

    monkeypatch.setattr(provider.coordinator, "chat", chat)
    assert await provider.query_diagnostics("blocking", "PROD") == {"sessions": []}
    assert sent == ["check blocking sessions on PROD"]
