"""
Span normalization for tracing payloads.

Accepts APM-style spans (``spanKey``, ``timeStarted``, ``tags`` map) as well as
Tempo/OTLP-style spans (``spanId``, ``startTimeUnixNano``, ``attributes`` list).

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, List

from api.responses import Span
from engine.normalize.fields import RawRecord, as_record, collection

SPAN_KEYS = ("spans",)
ERROR_STATUS_CODES = {"ERROR", "STATUS_CODE_ERROR"}

_ATTRIBUTE_VALUE_KEYS = ("stringValue", "intValue", "doubleValue", "boolValue")


def _attribute_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        for key in _ATTRIBUTE_VALUE_KEYS:
            if key in value:
                return value[key]
        return None
    return value


def span_tags(rec: RawRecord) -> Dict[str, str]:
    tags: Dict[str, str] = {}
    for key, value in rec.mapping("tags").items():
        if value is not None:
            tags[key] = str(value)
    for item in rec.items_list("attributes"):
        if not isinstance(item, Mapping) or "key" not in item:
            continue
        value = _attribute_value(item.get("value"))
        if value is not None:
            tags.setdefault(str(item["key"]), str(value))
    return tags


def _status_code(rec: RawRecord, tags: Dict[str, str]) -> str:
    status = rec.get("status")
    if isinstance(status, Mapping):
        code = RawRecord(status).text("code", "statusCode")
    else:
        code = rec.text("status", "statusCode")
    return (code or tags.get("status.code", "")).strip().upper()


def span(raw: Any) -> Span:
    rec = as_record(raw)
    tags = span_tags(rec)
    start = rec.timestamp("timeStarted", "startTime", "start_time", "startTimeUnixNano")
    end = rec.timestamp("timeEnded", "endTime", "end_time", "endTimeUnixNano")

    duration = rec.optional_number("durationInMs", "duration_ms", "durationMs")
    if duration is None and start is not None and end is not None:
        duration = max(0.0, (end - start) * 1000.0)
    if end is None and start is not None and duration is not None:
        end = start + duration / 1000.0

    is_error = rec.flag("isError", "is_error", "error") or _status_code(rec, tags) in ERROR_STATUS_CODES

    return Span(
        span_key=rec.text("spanKey", "span_key", "spanId", "span_id", "id"),
        parent_span_key=rec.optional_text("parentSpanKey", "parent_span_key", "parentSpanId", "parent_span_id", "parentId"),
        span_name=rec.text("spanName", "span_name", "name"),
        operation_name=rec.text("operationName", "operation_name", "operation"),
        service_name=rec.text("serviceName", "service_name", "service"),
        start=start,
        end=end,
        duration_ms=duration or 0.0,
        is_error=is_error,
        tags=tags,
    )


def spans(payload: Any) -> List[Span]:
    return [span(r) for r in collection(payload, *SPAN_KEYS)]
