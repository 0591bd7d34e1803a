"""
Entry point for the Tracelens telemetry correlation API server.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import sys
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional

import httpx
import uvicorn
from fastapi import FastAPI
from fastapi.responses import JSONResponse

from api.routes import router
from datasources.data_config import DataSourceSettings
from datasources.exceptions import BackendStartupTimeout
from datasources.provider import DataSourceProvider
from store.registry import CacheRegistry

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    stream=sys.stdout,
)
log = logging.getLogger(__name__)

_backend_ready = False
_backend_status: Dict[str, str] = {}


async def wait_for(
    name: str,
    url: str,
    timeout: float,
    headers: Optional[Dict[str, str]] = None,
    accept_status: tuple = (200, 204, 404),
) -> None:
    deadline = time.monotonic() + timeout
    attempt = 0
    async with httpx.AsyncClient() as client:
        while time.monotonic() < deadline:
            attempt += 1
            try:
                resp = await client.get(url, headers=headers or {}, timeout=3.0)
                if resp.status_code in accept_status:
                    log.info("%s ready (attempt %d, status %d)", name, attempt, resp.status_code)
                    return
                log.debug("%s probe returned %d (attempt %d)", name, resp.status_code, attempt)
            except httpx.HTTPError as exc:
                log.debug("%s not reachable (attempt %d): %s", name, attempt, exc)
            await asyncio.sleep(2)
    raise BackendStartupTimeout(f"{name} did not become ready within {timeout}s")


async def _wait_for_all_bg(provider: DataSourceProvider) -> None:
    global _backend_ready

    settings = provider.settings
    checks: list[tuple[str, str, tuple[int, ...]]] = [
        ("coordinator", provider.coordinator.health_url, (200,)),
    ]
    if settings.apm_domain_id:
        checks.append(("tracing", provider.tracing.health_url, (200, 204, 404)))
    else:
        _backend_status["tracing"] = "pending_config"
    if provider.checks is not None:
        checks.append(("checks", provider.checks.health_url, (200, 204, 404)))
    else:
        _backend_status["checks"] = "demo"

    log.info("Backend readiness check starting (timeout=%ds) ...", settings.startup_timeout)

    for name, _, _ in checks:
        _backend_status[name] = "waiting"

    results = await asyncio.gather(
        *[wait_for(name, url, settings.startup_timeout, accept_status=ok) for name, url, ok in checks],
        return_exceptions=True,
    )

    all_ok = True
    for (name, *_), result in zip(checks, results):
        if isinstance(result, Exception):
            log.error("%s failed readiness: %s", name, result)
            _backend_status[name] = f"failed: {result}"
            all_ok = False
        else:
            _backend_status[name] = "ready"

    if all_ok:
        log.info("All backends ready; engine fully operational")
    else:
        log.warning("Some backends failed readiness; responses will degrade to mock or error")
    # queries degrade per request, so the API is usable either way
    _backend_ready = True


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    app.state.caches = CacheRegistry()
    app.state.provider = DataSourceProvider(settings=DataSourceSettings())
    readiness_task = asyncio.create_task(_wait_for_all_bg(app.state.provider))
    try:
        yield
    finally:
        readiness_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await readiness_task
        await app.state.provider.aclose()
        app.state.caches.clear()


app = FastAPI(
    title="Tracelens",
    description="Telemetry correlation and derivation over database diagnostics, APM traces and LLM check results.",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(router, prefix="/api/v1")


@app.get("/api/v1/ready", tags=["health"], summary="Backend readiness probe")
async def ready() -> JSONResponse:
    code = 200 if _backend_ready else 503
    return JSONResponse(
        status_code=code,
        content={"ready": _backend_ready, "backends": _backend_status},
    )


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=4322,
        log_level="info",
        access_log=True,
    )
