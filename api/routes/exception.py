"""
Route decorator translating uncaught errors into HTTP responses.

Query failures are normally reported inside the status envelope; anything
that escapes a handler is mapped here. :class:`InvalidQuery` becomes a 400,
other upstream errors a 502, and everything else a 500.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import inspect
import logging
from functools import wraps
from typing import Any, Callable, TypeVar, cast

from fastapi import HTTPException

from datasources.exceptions import DataSourceError, InvalidQuery

F = TypeVar("F", bound=Callable[..., Any])

log = logging.getLogger(__name__)


def to_http(exc: Exception) -> HTTPException:
    if isinstance(exc, InvalidQuery):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, DataSourceError):
        return HTTPException(status_code=502, detail=str(exc))
    return HTTPException(status_code=500, detail=str(exc))


def handle_exceptions(func: F) -> F:
    """Wrap a sync or async handler; :class:`HTTPException` passes through untouched."""

    if inspect.iscoroutinefunction(func):
        @wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await func(*args, **kwargs)
            except HTTPException:
                raise
            except Exception as exc:
                log.exception("unhandled error in %s", func.__name__)
                raise to_http(exc) from exc

        return cast(F, async_wrapper)

    @wraps(func)
    def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except HTTPException:
            raise
        except Exception as exc:
            log.exception("unhandled error in %s", func.__name__)
            raise to_http(exc) from exc

    return cast(F, sync_wrapper)
