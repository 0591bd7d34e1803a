"""
Tests for upstream connector payload handling.
"""

from __future__ import annotations

import pytest

import connectors.checks as checks_mod
import connectors.coordinator as coordinator_mod
import connectors.tracing as tracing_mod
from connectors.checks import HttpChecksConnector
from connectors.coordinator import HttpCoordinatorConnector
from connectors.tracing import ApmTracingConnector
from datasources.data_config import DataSourceSettings
from datasources.exceptions import MalformedPayload
from datasources.provider import DataSourceProvider
from engine.enums import QueryStatus
from services.coordinator_service import coordinator_status


@pytest.mark.parametrize(
    "body, expected",
    [
        ({"data": {"sessions": [1]}}, {"sessions": [1]}),
        ({"result": {"executions": []}, "data": None}, {"executions": []}),
        ({"sessions": []}, {"sessions": []}),
        ({"data": [1, 2]}, {"data": [1, 2]}),
        ([1, 2], {"data": [1, 2]}),
    ],
)
@pytest.mark.asyncio
async def test_coordinator_chat_unwraps_reply(monkeypatch, body, expected):
    calls = []

    async def fake_post(url, payload, **kwargs):
        calls.append((url, payload))
        return body

    monkeypatch.setattr(coordinator_mod, "post_json", fake_post)
    conn = HttpCoordinatorConnector("http://coord", "http://coord/api/")
    assert await conn.chat("hello") == expected
    assert calls == [("http://coord/api/chat", {"message": "hello"})]


@pytest.mark.asyncio
async def test_coordinator_tools_accepts_list_or_wrapped(monkeypatch):
    async def fake_fetch(url, **kwargs):
        return {"tools": [{"name": "a"}, "junk"]}

    monkeypatch.setattr(coordinator_mod, "fetch_json", fake_fetch)
    conn = HttpCoordinatorConnector("http://coord", "http://coord")
    assert await conn.tools() == [{"name": "a"}]


@pytest.mark.asyncio
async def test_tracing_passes_domain_id(monkeypatch):
    seen = {}

    async def fake_fetch(url, params=None, **kwargs):
        seen["url"] = url
        seen["params"] = params
        return {"traces": []}

    monkeypatch.setattr(tracing_mod, "fetch_json", fake_fetch)
    conn = ApmTracingConnector("http://apm", "dom-1")
    await conn.get_trace("abc")
    assert seen == {"url": "http://apm/apm/trace/abc", "params": {"domainId": "dom-1"}}


@pytest.mark.asyncio
async def test_checks_wraps_bare_lists_and_drops_none_params(monkeypatch):
    seen = {}

    async def fake_fetch(url, params=None, **kwargs):
        seen["params"] = params
        return [{"id": 1}]

    monkeypatch.setattr(checks_mod, "fetch_json", fake_fetch)
    conn = HttpChecksConnector("http://checks")
    assert await conn.query_checks("quality", {"limit": 5, "type": None}) == {"checks": [{"id": 1}]}
    assert seen["params"] == {"limit": 5}


@pytest.mark.asyncio
async def test_coordinator_tools_rejects_non_list(monkeypatch):
    async def fake_fetch(url, **kwargs):
        return {"tools": 5}

    monkeypatch.setattr(coordinator_mod, "fetch_json", fake_fetch)
    conn = HttpCoordinatorConnector("http://coord", "http://coord")
    with pytest.raises(MalformedPayload):
        await conn.tools()


@pytest.mark.asyncio
async def test_coordinator_status_survives_bad_tools_listing(monkeypatch, caches):
    async def fake_fetch(url, **kwargs):
        if url.endswith("/status"):
            return {"status": "online"}
        return {"tools": 5}

    monkeypatch.setattr(coordinator_mod, "fetch_json", fake_fetch)
    provider = DataSourceProvider(DataSourceSettings(coordinator_url="http://coord", coordinator_chat_url="http://coord"))
    result = await coordinator_status(provider, caches)
    assert result.status == QueryStatus.connected
    assert result.payload["state"] == "online"
    assert result.payload["tools_count"] == 0
