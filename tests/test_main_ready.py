"""
Readiness behavior tests for API health endpoint.
"""

from __future__ import annotations

import json
from types import SimpleNamespace

import pytest

import main as app_main


class DummyConnector:
    def __init__(self, url):
        self.health_url = url


def _provider(apm_domain_id=None, checks=False):
    return SimpleNamespace(
        settings=SimpleNamespace(apm_domain_id=apm_domain_id, startup_timeout=1),
        coordinator=DummyConnector("http://coord/status"),
        tracing=DummyConnector("http://apm/apm/traces?limit=1"),
        checks=DummyConnector("http://checks/quality?limit=1") if checks else None,
    )


@pytest.mark.asyncio
async def test_ready_endpoint_returns_503_with_backend_details_when_not_ready():
    app_main._backend_ready = False
    app_main._backend_status = {"coordinator": "waiting"}
    response = await app_main.ready()
    payload = json.loads(response.body.decode("utf-8"))
    assert response.status_code == 503
    assert payload["ready"] is False
    assert payload["backends"]["coordinator"] == "waiting"


@pytest.mark.asyncio
async def test_wait_for_all_bg_records_failures_and_unconfigured_backends(monkeypatch):
    probed = []

    async def fake_wait_for(name, url, timeout, headers=None, accept_status=(200,)):
        probed.append(name)
        if name == "coordinator":
            raise RuntimeError("coordinator down")
        return None

    monkeypatch.setattr(app_main, "wait_for", fake_wait_for)
    app_main._backend_ready = False
    app_main._backend_status = {}

    await app_main._wait_for_all_bg(_provider())

    assert probed == ["coordinator"]
    assert app_main._backend_ready is True
    assert app_main._backend_status["coordinator"].startswith("failed:")
    assert app_main._backend_status["tracing"] == "pending_config"
    assert app_main._backend_status["checks"] == "demo"


@pytest.mark.asyncio
async def test_wait_for_all_bg_probes_configured_backends(monkeypatch):
    probed = []

    async def fake_wait_for(name, url, timeout, headers=None, accept_status=(200,)):
        probed.append((name, url))
        return None

    monkeypatch.setattr(app_main, "wait_for", fake_wait_for)
    app_main._backend_status = {}

    await app_main._wait_for_all_bg(_provider(apm_domain_id="dom", checks=True))

    assert [n for n, _ in probed] == ["coordinator", "tracing", "checks"]
    assert set(app_main._backend_status.values()) == {"ready"}
