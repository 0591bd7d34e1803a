"""
Test Suite for Upstream HTTP Helpers

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import pytest
import httpx

from datasources.helpers import fetch_json, post_json
from datasources.exceptions import DataSourceUnavailable, InvalidQuery, MalformedPayload, QueryTimeout


class DummyResponse:
    def __init__(self, status_code=200, text="", json_data=None, bad_json=False):
        self.status_code = status_code
        self.text = text
        self._json = json_data or {}
        self._bad_json = bad_json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise httpx.HTTPStatusError("err", request=None, response=self)

    def json(self):
        if self._bad_json:
            raise ValueError("Expecting value")
        return self._json


class DummyClient:
    def __init__(self, resp: DummyResponse):
        self.resp = resp
        self.posted = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def get(self, url, params=None, headers=None):
        return self.resp

    async def post(self, url, json=None, headers=None):
        self.posted = json
        return self.resp


@pytest.mark.asyncio
async def test_fetch_json_success(monkeypatch):
    resp = DummyResponse(status_code=200, json_data={"foo": "bar"})
    monkeypatch.setattr(httpx, "AsyncClient", lambda timeout: DummyClient(resp))
    got = await fetch_json("url", params={"a": 1}, headers={})
    assert got == {"foo": "bar"}


@pytest.mark.asyncio
async def test_fetch_json_http_error(monkeypatch):
    resp = DummyResponse(status_code=404, text="not found")
    monkeypatch.setattr(httpx, "AsyncClient", lambda timeout: DummyClient(resp))
    with pytest.raises(InvalidQuery, match="404"):
        await fetch_json("url")


@pytest.mark.asyncio
async def test_fetch_json_timeout(monkeypatch):
    async def get(*args, **kwargs):
        raise httpx.TimeoutException("timeout")
    client = DummyClient(DummyResponse())
    client.get = get
    monkeypatch.setattr(httpx, "AsyncClient", lambda timeout: client)
    with pytest.raises(QueryTimeout):
        await fetch_json("url")


@pytest.mark.asyncio
async def test_fetch_json_unreachable(monkeypatch):
    async def get(*args, **kwargs):
        raise httpx.ConnectError("refused")
    client = DummyClient(DummyResponse())
    client.get = get
    monkeypatch.setattr(httpx, "AsyncClient", lambda timeout: client)
    with pytest.raises(DataSourceUnavailable, match="http://db"):
        await fetch_json("http://db")


@pytest.mark.asyncio
async def test_fetch_json_non_json_body(monkeypatch):
    resp = DummyResponse(status_code=200, text="<html>", bad_json=True)
    monkeypatch.setattr(httpx, "AsyncClient", lambda timeout: DummyClient(resp))
    with pytest.raises(MalformedPayload):
        await fetch_json("url")


@pytest.mark.asyncio
async def test_post_json_sends_body(monkeypatch):
    resp = DummyResponse(status_code=200, json_data={"response": "ok"})
    client = DummyClient(resp)
    monkeypatch.setattr(httpx, "AsyncClient", lambda timeout: client)
    got = await post_json("url", {"message": "hi"})
    assert got == {"response": "ok"}
    assert client.posted == {"message": "hi"}
