"""
Query resolution with caching and four-state availability reporting.

Every query path goes through :func:`resolve`: configuration is verified
first, then the cache is consulted, then the upstream is fetched and the raw
payload derived. Failures map onto ``pending_config``, ``mock`` or ``error``;
partial data is never reported as ``connected``.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

from datasources.exceptions import (
    ConfigurationMissing,
    DataSourceError,
    DataSourceUnavailable,
    QueryTimeout,
)
from engine.enums import QueryStatus
from store.cache import ResponseCache
from store.keys import canonical

log = logging.getLogger(__name__)

Payload = Dict[str, Any]

CACHEABLE = (QueryStatus.connected, QueryStatus.mock)


@dataclass(frozen=True)
class QueryResult:
    status: QueryStatus
    payload: Payload = field(default_factory=dict)
    message: Optional[str] = None
    cached: bool = False
    cache_age: Optional[float] = None

    def to_envelope(self) -> Dict[str, Any]:
        envelope: Dict[str, Any] = {"status": self.status.value}
        if self.cached:
            envelope["cached"] = True
            envelope["cacheAge"] = self.cache_age
        if self.message:
            envelope["message"] = self.message
        envelope.update(self.payload)
        envelope["timestamp"] = datetime.now(timezone.utc).isoformat()
        return envelope


async def resolve(
    cache: ResponseCache,
    key_params: Mapping[str, Any],
    fetch: Callable[[], Awaitable[Any]],
    derive: Callable[[Any], Optional[Payload]],
    fallback: Optional[Callable[[], Payload]] = None,
    skip_cache: bool = False,
    timeout: Optional[float] = None,
    require: Optional[Callable[[], None]] = None,
    fallback_message: str = "Upstream unavailable; serving demo data",
    error_payload: Optional[Payload] = None,
) -> QueryResult:
    """Resolve one query.

    ``require`` raises :class:`ConfigurationMissing` when the query cannot run
    at all. ``derive`` turns the raw upstream body into the response payload
    and returns ``None`` when it recognises no structure. ``fallback``
    produces the labelled demo payload used when the upstream is slow or down.
    ``error_payload`` is attached to ``error`` results.
    """
    try:
        if require is not None:
            require()
    except ConfigurationMissing as exc:
        log.info("%s query pending configuration: %s", cache.name, exc)
        return QueryResult(status=QueryStatus.pending_config, message=str(exc))

    key = canonical(key_params)
    if not skip_cache:
        hit = cache.get(key)
        if hit is not None:
            status, payload, message = hit.payload
            return QueryResult(
                status=status,
                payload=payload,
                message=message,
                cached=True,
                cache_age=round(hit.age_seconds, 1),
            )

    result = await _run(cache.name, fetch, derive, fallback, timeout, fallback_message, error_payload or {})
    if result.status in CACHEABLE:
        cache.put(key, (result.status, result.payload, result.message))
    return result


async def _run(
    name: str,
    fetch: Callable[[], Awaitable[Any]],
    derive: Callable[[Any], Optional[Payload]],
    fallback: Optional[Callable[[], Payload]],
    timeout: Optional[float],
    fallback_message: str,
    error_payload: Payload,
) -> QueryResult:
    try:
        try:
            if timeout is not None:
                raw = await asyncio.wait_for(fetch(), timeout=timeout)
            else:
                raw = await fetch()
        except asyncio.TimeoutError as exc:
            raise QueryTimeout(f"{name} query exceeded {timeout}s") from exc
        payload = derive(raw)
    except ConfigurationMissing as exc:
        log.info("%s query pending configuration: %s", name, exc)
        return QueryResult(status=QueryStatus.pending_config, message=str(exc))
    except (QueryTimeout, DataSourceUnavailable) as exc:
        log.warning("%s upstream unavailable: %s", name, exc)
        if fallback is not None:
            return QueryResult(status=QueryStatus.mock, payload=fallback(), message=fallback_message)
        return QueryResult(status=QueryStatus.error, payload=error_payload, message=str(exc))
    except DataSourceError as exc:
        log.warning("%s query failed: %s", name, exc)
        return QueryResult(status=QueryStatus.error, payload=error_payload, message=str(exc))
    except Exception as exc:
        log.exception("%s query could not be derived", name)
        return QueryResult(
            status=QueryStatus.error,
            payload=error_payload,
            message=f"Upstream payload could not be processed: {exc}",
        )

    if payload is None:
        log.warning("%s upstream payload carried no recognisable structure", name)
        return QueryResult(
            status=QueryStatus.error,
            payload=error_payload,
            message="Upstream returned an unrecognised payload",
        )
    return QueryResult(status=QueryStatus.connected, payload=payload)
